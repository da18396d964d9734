"""Network helpers — release-index lookup, downloads, archive extraction.

One attempt per request. Any failure raises ``ToolAcquisitionError``.
"""

import http.client
import io
import json
import os
import tarfile
import urllib.error
import urllib.request
from pathlib import Path

from kubernetes2simple.pacts.errors import MissingPrerequisiteError, ToolAcquisitionError
from kubernetes2simple.core.constants import GITHUB_API, USER_AGENT


def ensure_download_support() -> None:
    """HTTPS downloads need the ssl module; some minimal Python builds lack it."""
    try:
        import ssl  # noqa: F401  pylint: disable=import-outside-toplevel,unused-import
    except ImportError as exc:
        raise MissingPrerequisiteError(
            "Python was built without SSL support, HTTPS downloads are unavailable. "
            "Install a Python with the ssl module and try again.") from exc


def _request(url: str, accept: str | None = None) -> urllib.request.Request:
    headers = {"User-Agent": USER_AGENT}
    if accept:
        headers["Accept"] = accept
    token = os.environ.get("GITHUB_TOKEN")
    if token and url.startswith(GITHUB_API):
        headers["Authorization"] = f"Bearer {token}"
    return urllib.request.Request(url, headers=headers)


def fetch_bytes(url: str) -> bytes:
    """GET *url* and return the body."""
    try:
        with urllib.request.urlopen(_request(url)) as resp:
            return resp.read()
    except urllib.error.HTTPError as exc:
        raise ToolAcquisitionError(f"Download failed ({exc.code}): {url}") from exc
    except (urllib.error.URLError, OSError, http.client.HTTPException) as exc:
        raise ToolAcquisitionError(f"Download failed: {url} ({exc})") from exc


def latest_release_tag(repo: str) -> str:
    """Return the ``tag_name`` of the latest GitHub release of *repo*."""
    url = f"{GITHUB_API}/repos/{repo}/releases/latest"
    try:
        with urllib.request.urlopen(
                _request(url, accept="application/vnd.github+json")) as resp:
            data = json.loads(resp.read().decode("utf-8"))
        tag = data["tag_name"]
    except urllib.error.HTTPError as exc:
        raise ToolAcquisitionError(
            f"Could not resolve latest {repo} release ({exc.code})") from exc
    except (urllib.error.URLError, OSError, http.client.HTTPException) as exc:
        raise ToolAcquisitionError(
            f"Could not resolve latest {repo} release ({exc})") from exc
    except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError) as exc:
        raise ToolAcquisitionError(
            f"Unexpected release metadata for {repo} ({exc.__class__.__name__})") from exc
    if not isinstance(tag, str) or not tag:
        raise ToolAcquisitionError(f"Empty release tag for {repo}")
    return tag


def download_file(url: str, dest: Path) -> Path:
    """Download *url* to *dest*. The file only appears once complete."""
    data = fetch_bytes(url)
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_name(dest.name + ".part")
    partial.write_bytes(data)
    partial.replace(dest)
    return dest


def extract_members(archive: bytes, members: dict[str, str], dest_dir: Path) -> list[Path]:
    """Extract selected files from a .tar.gz into *dest_dir*, mode 0755.

    *members* maps archive member path → destination filename.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    written = []
    try:
        with tarfile.open(fileobj=io.BytesIO(archive), mode="r:gz") as tf:
            for member_name, dest_name in members.items():
                try:
                    member = tf.getmember(member_name)
                except KeyError as exc:
                    raise ToolAcquisitionError(
                        f"{member_name} not found in archive") from exc
                src = tf.extractfile(member)
                if src is None:
                    raise ToolAcquisitionError(f"{member_name} is not a regular file")
                dest = dest_dir / dest_name
                with src, open(dest, "wb") as out:
                    out.write(src.read())
                dest.chmod(0o755)
                written.append(dest)
    except (tarfile.TarError, EOFError, OSError) as exc:
        raise ToolAcquisitionError(f"Archive extraction failed ({exc})") from exc
    return written
