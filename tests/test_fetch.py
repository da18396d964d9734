import http.client
import io
import json
import os
import urllib.error
import urllib.request
from pathlib import Path

import pytest

from kubernetes2simple.io import fetch
from kubernetes2simple.pacts.errors import ToolAcquisitionError

from conftest import make_tarball


@pytest.fixture
def requests(monkeypatch):
    """Replace urlopen; each test sets ``responses`` (url → bytes, response or exception)."""
    seen = []
    responses = {}

    def fake_urlopen(req):
        seen.append(req)
        outcome = responses[req.full_url]
        if isinstance(outcome, Exception):
            raise outcome
        if isinstance(outcome, bytes):
            return io.BytesIO(outcome)
        return outcome

    monkeypatch.setattr(urllib.request, "urlopen", fake_urlopen)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    return seen, responses


LATEST = "https://api.github.com/repos/helm/helm/releases/latest"


class TruncatedBody(io.BytesIO):
    """Response whose connection drops mid-body."""

    def read(self, *args):
        raise http.client.IncompleteRead(b"{\"tag_na", 120)


def test_latest_release_tag_reads_tag_name(requests) -> None:
    seen, responses = requests
    responses[LATEST] = json.dumps({"tag_name": "v3.16.2", "name": "Helm"}).encode()
    assert fetch.latest_release_tag("helm/helm") == "v3.16.2"
    assert len(seen) == 1
    assert "Authorization" not in seen[0].headers


def test_github_token_is_sent_to_api(requests, monkeypatch) -> None:
    seen, responses = requests
    monkeypatch.setenv("GITHUB_TOKEN", "s3cret")
    responses[LATEST] = json.dumps({"tag_name": "v3.16.2"}).encode()
    fetch.latest_release_tag("helm/helm")
    assert seen[0].headers["Authorization"] == "Bearer s3cret"


def test_latest_release_tag_http_error(requests) -> None:
    _, responses = requests
    responses[LATEST] = urllib.error.HTTPError(LATEST, 403, "rate limited", None, None)
    with pytest.raises(ToolAcquisitionError, match="403"):
        fetch.latest_release_tag("helm/helm")


def test_latest_release_tag_network_error(requests) -> None:
    _, responses = requests
    responses[LATEST] = urllib.error.URLError("no route to host")
    with pytest.raises(ToolAcquisitionError, match="helm/helm"):
        fetch.latest_release_tag("helm/helm")


def test_latest_release_tag_missing_field(requests) -> None:
    _, responses = requests
    responses[LATEST] = json.dumps({"message": "Not Found"}).encode()
    with pytest.raises(ToolAcquisitionError, match="Unexpected release metadata"):
        fetch.latest_release_tag("helm/helm")


def test_latest_release_tag_not_utf8(requests) -> None:
    _, responses = requests
    responses[LATEST] = b"\xff\xfe\x00garbage"
    with pytest.raises(ToolAcquisitionError, match="Unexpected release metadata"):
        fetch.latest_release_tag("helm/helm")


def test_latest_release_tag_truncated_body(requests) -> None:
    _, responses = requests
    responses[LATEST] = TruncatedBody()
    with pytest.raises(ToolAcquisitionError, match="Could not resolve latest helm/helm"):
        fetch.latest_release_tag("helm/helm")


def test_truncated_download_leaves_nothing_behind(requests, tmp_path: Path) -> None:
    _, responses = requests
    url = "https://get.helm.sh/helm-v3.16.2-linux-amd64.tar.gz"
    responses[url] = TruncatedBody()
    with pytest.raises(ToolAcquisitionError, match="Download failed"):
        fetch.download_file(url, tmp_path / "helm.tar.gz")
    assert list(tmp_path.iterdir()) == []


def test_download_file_writes_complete_file(requests, tmp_path: Path) -> None:
    _, responses = requests
    url = "https://example.invalid/kubernetes2simple.py"
    responses[url] = b"print('hi')\n"
    dest = fetch.download_file(url, tmp_path / "cache" / "kubernetes2simple.py")
    assert dest.read_bytes() == b"print('hi')\n"
    assert sorted(p.name for p in dest.parent.iterdir()) == ["kubernetes2simple.py"]


def test_download_404_leaves_nothing_behind(requests, tmp_path: Path) -> None:
    _, responses = requests
    url = "https://example.invalid/missing.tar.gz"
    responses[url] = urllib.error.HTTPError(url, 404, "Not Found", None, None)
    with pytest.raises(ToolAcquisitionError, match="404"):
        fetch.download_file(url, tmp_path / "tool")
    assert not (tmp_path / "tool").exists()


def test_extract_members_only_writes_requested_files(tmp_path: Path) -> None:
    archive = make_tarball({
        "linux-amd64/helm": b"#!helm",
        "linux-amd64/README.md": b"docs",
    })
    written = fetch.extract_members(archive, {"linux-amd64/helm": "helm"}, tmp_path / "bin")
    assert written == [tmp_path / "bin" / "helm"]
    assert sorted(p.name for p in (tmp_path / "bin").iterdir()) == ["helm"]
    assert (tmp_path / "bin" / "helm").read_bytes() == b"#!helm"
    assert os.access(tmp_path / "bin" / "helm", os.X_OK)


def test_extract_missing_member(tmp_path: Path) -> None:
    archive = make_tarball({"darwin-arm64/helm": b"#!helm"})
    with pytest.raises(ToolAcquisitionError, match="linux-amd64/helm not found"):
        fetch.extract_members(archive, {"linux-amd64/helm": "helm"}, tmp_path)


def test_extract_corrupt_archive(tmp_path: Path) -> None:
    with pytest.raises(ToolAcquisitionError, match="extraction failed"):
        fetch.extract_members(b"not a tarball", {"helm": "helm"}, tmp_path)


def test_download_support_present() -> None:
    fetch.ensure_download_support()
