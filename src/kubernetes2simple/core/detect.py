"""Source classification — which kind of Kubernetes source is in a directory."""

from pathlib import Path

from kubernetes2simple.pacts.types import SourceMode
from kubernetes2simple.core.constants import (
    HELMFILE_NAMES, CHART_NAME, MANIFEST_GLOBS, _KIND_LINE_RE,
)


def find_helmfile(workdir: Path) -> Path | None:
    """Return the first helmfile descriptor present in *workdir*."""
    for name in HELMFILE_NAMES:
        candidate = workdir / name
        if candidate.is_file():
            return candidate
    return None


def _has_manifest(workdir: Path) -> bool:
    """Shallow scan: any top-level YAML file with a ``kind:`` line."""
    for pattern in MANIFEST_GLOBS:
        for path in sorted(workdir.glob(pattern)):
            if not path.is_file():
                continue
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError:
                continue
            if _KIND_LINE_RE.search(text):
                return True
    return False


def detect_source(workdir: Path) -> SourceMode:
    """Classify *workdir*. First match wins.

    A helmfile project may vendor a chart in its tree, so the helmfile
    descriptor is checked before ``Chart.yaml``.
    """
    if find_helmfile(workdir):
        return SourceMode.HELMFILE
    if (workdir / CHART_NAME).is_file():
        return SourceMode.CHART
    if _has_manifest(workdir):
        return SourceMode.MANIFESTS
    return SourceMode.UNKNOWN
