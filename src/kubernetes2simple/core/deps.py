"""Dependency resolution — system, then local cache, then fresh install.

Every external requirement (Python runtime, the converter's Python packages,
the converter script, helm, helmfile) goes through ``resolve_dependency``.
A tier that finds a usable copy stops the search, so a warm cache never
touches the network.
"""

import os
import shutil
import sys
from dataclasses import replace

from kubernetes2simple.pacts.types import Dependency, ResolvedTool
from kubernetes2simple.pacts.errors import MissingPrerequisiteError, ToolAcquisitionError
from kubernetes2simple.core.constants import (
    MIN_PYTHON, PYTHON_PACKAGES, PYTHON_PROBE, MODE_TOOLS, SUPPORTED_OS,
)
from kubernetes2simple.io.fetch import (
    ensure_download_support, latest_release_tag, fetch_bytes, download_file,
    extract_members,
)
from kubernetes2simple.io.process import run_tool
from kubernetes2simple.io.output import info

_VERSION_PROBE = "import sys; print('%d.%d' % sys.version_info[:2])"


def _fmt_version(version: tuple) -> str:
    return ".".join(str(v) for v in version)


class PythonRuntime(Dependency):
    """Interpreter that runs the converter. Never installed, only checked."""
    name = "python"

    def __init__(self, minimum: tuple = MIN_PYTHON):
        self.minimum = minimum

    def _candidates(self) -> list[str]:
        seen = []
        for candidate in (shutil.which("python3"), sys.executable):
            if candidate and candidate not in seen:
                seen.append(candidate)
        return seen

    def _version(self, python: str) -> tuple | None:
        result = run_tool([python, "-c", _VERSION_PROBE])
        if not result.ok:
            return None
        try:
            major, minor = result.stdout.strip().split(".")
            return int(major), int(minor)
        except ValueError:
            return None

    def probe_system(self):
        too_old = []
        for candidate in self._candidates():
            version = self._version(candidate)
            if version is None:
                continue
            if version >= self.minimum:
                return ResolvedTool(self.name, candidate, "system", _fmt_version(version))
            too_old.append(version)
        if too_old:
            raise MissingPrerequisiteError(
                f"Python {_fmt_version(self.minimum)}+ required "
                f"(found {_fmt_version(too_old[0])})")
        return None

    def install(self, cache, platform):
        raise MissingPrerequisiteError(
            f"Python 3 not found. Install Python {_fmt_version(self.minimum)}+ "
            "and try again.")


class PythonPackages(Dependency):
    """Packages the converter imports, in the runtime or a cache-local venv.

    Cache hits are re-probed for importability: a venv left behind by an
    older package list does not count.
    """
    name = "python packages"

    def __init__(self, runtime: str, packages: tuple = PYTHON_PACKAGES,
                 probe: str = PYTHON_PROBE):
        self.runtime = runtime
        self.packages = packages
        self.probe = probe

    def _importable(self, python) -> bool:
        return run_tool([python, "-c", self.probe]).ok

    def probe_system(self):
        if self._importable(self.runtime):
            return ResolvedTool(self.name, self.runtime, "system")
        return None

    def probe_cache(self, cache):
        python = cache.venv_python
        if python.is_file() and self._importable(python):
            return ResolvedTool(self.name, str(python), "cache")
        return None

    def _install_steps(self, cache) -> list[list]:
        venv = cache.venv_dir
        uv = shutil.which("uv")
        if uv:
            return [
                [uv, "venv", venv, "--quiet", "--python", self.runtime],
                [uv, "pip", "install", "--python", cache.venv_python, "--quiet",
                 *self.packages],
            ]
        return [
            [self.runtime, "-m", "venv", venv],
            [venv / "bin" / "pip", "install", "--quiet", *self.packages],
        ]

    def install(self, cache, platform):
        # A stale venv is rebuilt from scratch
        if cache.venv_dir.exists():
            shutil.rmtree(cache.venv_dir)
        for cmd in self._install_steps(cache):
            result = run_tool(cmd)
            if result.ok:
                continue
            if "ensurepip" in result.stderr:
                raise MissingPrerequisiteError(
                    "Python venv support is missing (ensurepip not available). "
                    "Install your distribution's python3-venv package or uv.")
            raise ToolAcquisitionError(
                f"Python dependency install failed: {' '.join(result.cmd)}\n{result.tail()}")
        if not self._importable(cache.venv_python):
            raise ToolAcquisitionError(
                f"Installed {', '.join(self.packages)} but '{self.probe}' still fails")
        return ResolvedTool(self.name, str(cache.venv_python), "installed")


class ConverterScript(Dependency):
    """The converter engine, downloaded once into the cache root."""
    name = "kubernetes2simple.py"

    def __init__(self, url: str):
        self.url = url

    def probe_cache(self, cache):
        if cache.converter_script.is_file():
            return ResolvedTool(self.name, str(cache.converter_script), "cache")
        return None

    def install(self, cache, platform):
        download_file(self.url, cache.converter_script)
        return ResolvedTool(self.name, str(cache.converter_script), "installed")


class ReleaseBinary(Dependency):
    """A CLI tool shipped as a per-platform .tar.gz on its release page.

    ``url_template`` and the keys of ``members`` are formatted with ``tag``,
    ``version`` (tag without the leading ``v``), ``os`` and ``arch``.
    """
    repo: str = ""
    url_template: str = ""
    members: dict = {}
    platforms: tuple = tuple(
        (os_name, arch) for os_name in SUPPORTED_OS for arch in ("amd64", "arm64"))

    def probe_system(self):
        path = shutil.which(self.name)
        if path:
            return ResolvedTool(self.name, path, "system")
        return None

    def probe_cache(self, cache):
        path = cache.bin_dir / self.name
        if path.is_file() and os.access(path, os.X_OK):
            return ResolvedTool(self.name, str(path), "cache")
        return None

    def _fields(self, tag: str, platform) -> dict:
        return {"tag": tag, "version": tag.removeprefix("v"),
                "os": platform.os, "arch": platform.arch}

    def archive_url(self, tag: str, platform) -> str:
        return self.url_template.format(**self._fields(tag, platform))

    def install(self, cache, platform):
        if (platform.os, platform.arch) not in self.platforms:
            raise ToolAcquisitionError(f"No {self.name} release for {platform}")
        tag = latest_release_tag(self.repo)
        fields = self._fields(tag, platform)
        archive = fetch_bytes(self.archive_url(tag, platform))
        members = {src.format(**fields): dest for src, dest in self.members.items()}
        extract_members(archive, members, cache.bin_dir)
        return ResolvedTool(self.name, str(cache.bin_dir / self.name), "installed", tag)


class Helm(ReleaseBinary):
    name = "helm"
    repo = "helm/helm"
    url_template = "https://get.helm.sh/helm-{tag}-{os}-{arch}.tar.gz"
    members = {"{os}-{arch}/helm": "helm"}


class Helmfile(ReleaseBinary):
    name = "helmfile"
    repo = "helmfile/helmfile"
    url_template = (
        "https://github.com/helmfile/helmfile/releases/download/"
        "{tag}/helmfile_{version}_{os}_{arch}.tar.gz"
    )
    members = {"helmfile": "helmfile"}


RELEASE_BINARIES = {cls.name: cls for cls in (Helm, Helmfile)}


def resolve_dependency(dep: Dependency, cache, platform) -> ResolvedTool:
    """Probe system, then cache, then install. First success wins."""
    tool = dep.probe_system()
    if tool is None:
        tool = dep.probe_cache(cache)
    if tool is None:
        info(f"Installing {dep.name}...")
        tool = dep.install(cache, platform)
    return tool


def report_tool(tool: ResolvedTool) -> None:
    """One status line per resolved dependency."""
    if tool.origin == "installed":
        info(f"Installed {tool.name}" + (f" {tool.version}" if tool.version else ""))
    elif tool.origin == "cache":
        info(f"{tool.name} (local install)")
    elif tool.version:
        info(f"{tool.name} {tool.version}")
    else:
        info(f"{tool.name} (found)")


def bootstrap(ctx):
    """Make every tool the detected source kind needs usable.

    Returns a new context whose ``tools`` maps logical names to
    ``ResolvedTool``: ``python``, ``packages``, ``converter``, plus ``helm``
    and/or ``helmfile`` depending on the mode.
    """
    ensure_download_support()
    ctx.cache.root.mkdir(parents=True, exist_ok=True)

    def _resolve(dep):
        tool = resolve_dependency(dep, ctx.cache, ctx.platform)
        report_tool(tool)
        return tool

    tools = {}
    tools["python"] = _resolve(PythonRuntime())
    tools["packages"] = _resolve(PythonPackages(tools["python"].path))
    tools["converter"] = _resolve(ConverterScript(ctx.config["converter_url"]))
    for name in MODE_TOOLS[ctx.mode]:
        tools[name] = _resolve(RELEASE_BINARIES[name]())
    return replace(ctx, tools=tools)
