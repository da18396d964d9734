"""Public data types — the contracts passed between pipeline stages."""

import enum
from dataclasses import dataclass, field
from pathlib import Path

from kubernetes2simple.pacts.errors import MissingPrerequisiteError


class SourceMode(enum.Enum):
    """Kind of Kubernetes source found in the working directory."""
    HELMFILE = "helmfile"
    CHART = "chart"
    MANIFESTS = "manifests"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PlatformTag:
    """Host platform in release-artifact vocabulary (e.g. linux/amd64)."""
    os: str
    arch: str

    def __str__(self):
        return f"{self.os}/{self.arch}"


@dataclass(frozen=True)
class CacheLayout:
    """Private cache root and its fixed sub-paths.

    Deleting ``root`` resets everything to first-run state.
    """
    root: Path

    @property
    def bin_dir(self) -> Path:
        return self.root / "bin"

    @property
    def venv_dir(self) -> Path:
        return self.root / "venv"

    @property
    def venv_python(self) -> Path:
        return self.venv_dir / "bin" / "python"

    @property
    def converter_script(self) -> Path:
        return self.root / "kubernetes2simple.py"

    @property
    def render_dir(self) -> Path:
        return self.root / "rendered"


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one external tool invocation."""
    cmd: list
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def tail(self, lines: int = 20) -> str:
        """Last lines of stderr (or stdout when stderr is empty)."""
        text = (self.stderr or self.stdout).strip()
        return "\n".join(text.splitlines()[-lines:])


@dataclass(frozen=True)
class ResolvedTool:
    """A usable dependency: where it lives and which tier provided it."""
    name: str
    path: str
    origin: str  # "system", "cache" or "installed"
    version: str | None = None


@dataclass(frozen=True)
class RunOptions:
    """Parsed command-line options."""
    workdir: Path
    output_dir: str = "."
    environment: str | None = None
    clean: bool = False


@dataclass(frozen=True)
class ConversionRequest:
    """Everything the converter needs for one run. Consumed once."""
    source_dir: Path
    output_dir: str
    environment: str | None = None


@dataclass(frozen=True)
class RunContext:
    """Run state threaded through the pipeline.

    Stages never mutate it; they return a copy via ``dataclasses.replace``.
    """
    options: RunOptions
    cache: CacheLayout
    config: dict = field(default_factory=dict)
    platform: PlatformTag | None = None
    mode: SourceMode | None = None
    tools: dict = field(default_factory=dict)

    def tool_path(self, name: str) -> str:
        return self.tools[name].path


class Dependency:
    """Base class for every external requirement of the bootstrapper.

    Subclasses override the three discovery tiers. A tier returns a
    ``ResolvedTool`` on success and ``None`` to fall through to the next one.
    """
    name: str = ""

    def probe_system(self):
        """Look for a usable copy outside the cache root."""
        return None

    def probe_cache(self, cache):
        """Look for a previously installed copy inside the cache root."""
        return None

    def install(self, cache, platform):
        """Install into the cache root. Override in installable dependencies."""
        raise MissingPrerequisiteError(
            f"{self.name} not found. Install {self.name} and try again.")
