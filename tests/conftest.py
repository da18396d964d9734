import io
import os
import shutil
import tarfile
from pathlib import Path

import pytest

from kubernetes2simple import cli
from kubernetes2simple.core import convert, deps, render
from kubernetes2simple.pacts.types import PlatformTag, ToolResult


def make_tarball(files: dict[str, bytes]) -> bytes:
    """Build an in-memory .tar.gz from member name → content."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name, data in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tf.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def _value_after(cmd: list[str], flag: str) -> str | None:
    if flag in cmd:
        return cmd[cmd.index(flag) + 1]
    return None


class FakeWorld:
    """Stands in for subprocesses, PATH lookups and the network.

    ``calls`` records every tool command (as strings), ``network`` every
    URL or repo that would have been fetched.
    """

    def __init__(self, monkeypatch):
        self.calls: list[list[str]] = []
        self.network: list[str] = []
        self.which: dict[str, str] = {"python3": "/usr/bin/python3"}
        self.system_packages = False
        self.failures: dict[str, ToolResult] = {}
        self.platform = PlatformTag(os="linux", arch="amd64")

        for module in (deps, render, convert):
            monkeypatch.setattr(module, "run_tool", self.run_tool)
        monkeypatch.setattr(shutil, "which", lambda name, *a, **kw: self.which.get(name))
        monkeypatch.setattr(deps, "latest_release_tag", self.latest_release_tag)
        monkeypatch.setattr(deps, "fetch_bytes", self.fetch_bytes)
        monkeypatch.setattr(deps, "download_file", self.download_file)
        monkeypatch.setattr(cli, "detect_platform", lambda: self.platform)

    # -- network ---------------------------------------------------------
    def latest_release_tag(self, repo):
        self.network.append(f"tag:{repo}")
        return "v1.2.3"

    def fetch_bytes(self, url):
        self.network.append(url)
        tag = f"{self.platform.os}-{self.platform.arch}"
        return make_tarball({f"{tag}/helm": b"#!helm", "helmfile": b"#!helmfile",
                             "LICENSE": b"license"})

    def download_file(self, url, dest):
        self.network.append(url)
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_text("# converter\n", encoding="utf-8")
        return dest

    # -- processes -------------------------------------------------------
    def run_tool(self, cmd, cwd=None, extra_path=None, capture=True):
        cmd = [str(c) for c in cmd]
        self.calls.append(cmd)
        prog = os.path.basename(cmd[0])
        for key, result in self.failures.items():
            if key in " ".join(cmd):
                return ToolResult(cmd=cmd, returncode=result.returncode,
                                  stdout=result.stdout, stderr=result.stderr)
        if cmd[1:2] == ["-c"]:
            if "version_info" in cmd[2]:
                return ToolResult(cmd=cmd, returncode=0, stdout="3.12\n")
            if cmd[0].endswith(os.path.join("venv", "bin", "python")):
                return ToolResult(cmd=cmd, returncode=0 if Path(cmd[0]).is_file() else 1)
            return ToolResult(cmd=cmd, returncode=0 if self.system_packages else 1)
        if cmd[1:3] == ["-m", "venv"]:
            venv_bin = Path(cmd[3]) / "bin"
            venv_bin.mkdir(parents=True)
            (venv_bin / "python").write_text("", encoding="utf-8")
            (venv_bin / "pip").write_text("", encoding="utf-8")
        if prog in ("helm", "helmfile"):
            out = _value_after(cmd, "--output-dir")
            if out:
                (Path(out) / "release").mkdir(parents=True, exist_ok=True)
                (Path(out) / "release" / "deployment.yaml").write_text(
                    "kind: Deployment\n", encoding="utf-8")
        return ToolResult(cmd=cmd, returncode=0)

    # -- queries ---------------------------------------------------------
    def commands(self, program: str) -> list[list[str]]:
        return [c for c in self.calls if os.path.basename(c[0]) == program]

    def converter_calls(self) -> list[list[str]]:
        return [c for c in self.calls
                if len(c) > 1 and c[1].endswith("kubernetes2simple.py")]


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def world(monkeypatch) -> FakeWorld:
    return FakeWorld(monkeypatch)
