"""Rendering — expand a helmfile project or a Helm chart into flat manifests."""

import os
import shutil
from pathlib import Path

from kubernetes2simple.pacts.types import SourceMode
from kubernetes2simple.pacts.errors import RenderFailureError, UnsupportedSourceError
from kubernetes2simple.core.constants import (
    CHART_DEPENDENCY_FILES, VALUES_FILES, NESTED_RENDER_DIRNAME,
)
from kubernetes2simple.core.detect import find_helmfile
from kubernetes2simple.io.process import run_tool
from kubernetes2simple.io.output import info


def recreate_dir(path: Path) -> Path:
    """Empty *path*: previous render output never mixes with the new one."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)
    return path


def _run_render_step(cmd: list, ctx, what: str):
    # Cache-installed helm must be visible to helmfile
    result = run_tool(cmd, cwd=ctx.options.workdir, extra_path=ctx.cache.bin_dir.resolve())
    if not result.ok:
        raise RenderFailureError(f"{what} failed (exit {result.returncode})", result)
    return result


def _nested_render_dirs(workdir: Path, cache_root: Path) -> set[Path]:
    """Nested ``.helmfile-rendered`` dirs under *workdir*, outside the cache root."""
    skip = cache_root.resolve()
    found = set()
    for dirpath, dirnames, _ in os.walk(workdir.resolve()):
        here = Path(dirpath)
        dirnames[:] = [d for d in dirnames if here / d != skip]
        if NESTED_RENDER_DIRNAME in dirnames:
            found.add(here / NESTED_RENDER_DIRNAME)
            dirnames.remove(NESTED_RENDER_DIRNAME)
    return found


def _consolidate_nested(nested_dirs: set[Path], render_dir: Path) -> None:
    """Nested helmfiles write to their own .helmfile-rendered dirs. Merge them in.

    Only pass dirs created by the current render; older ones belong to the user.
    """
    main_rendered = render_dir.resolve()
    for nested in sorted(nested_dirs):
        for yaml_file in nested.rglob("*.yaml"):
            dest = main_rendered / yaml_file.relative_to(nested)
            dest.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(yaml_file, dest)
        shutil.rmtree(nested)


def render_helmfile(ctx) -> Path:
    """Run ``helmfile template`` into the render directory."""
    workdir = ctx.options.workdir
    helmfile_path = find_helmfile(workdir)
    if helmfile_path is None:
        raise UnsupportedSourceError(f"No helmfile descriptor in {workdir}")
    render_dir = recreate_dir(ctx.cache.render_dir)

    cmd = [ctx.tool_path("helmfile"), "--file", helmfile_path.name]
    if ctx.options.environment:
        cmd.extend(["--environment", ctx.options.environment])
    cmd.extend(["template", "--output-dir", render_dir.resolve()])
    info("Rendering helmfile...")
    pre_existing = _nested_render_dirs(workdir, ctx.cache.root)
    _run_render_step(cmd, ctx, "helmfile template")
    created = _nested_render_dirs(workdir, ctx.cache.root) - pre_existing
    _consolidate_nested(created, render_dir)
    return render_dir


def values_files(workdir: Path, config: dict) -> list[str]:
    """Values files to pass to helm, in override order."""
    found = [name for name in VALUES_FILES if (workdir / name).is_file()]
    for extra in config.get("values_files", []):
        if not (workdir / extra).is_file():
            raise RenderFailureError(f"Values file not found: {extra}")
        found.append(extra)
    return found


def render_chart(ctx) -> Path:
    """Run ``helm dependency build`` (when locked) and ``helm template``."""
    workdir = ctx.options.workdir
    helm = ctx.tool_path("helm")
    render_dir = recreate_dir(ctx.cache.render_dir)

    # Sub-chart resources are silently dropped without this step
    if any((workdir / name).is_file() for name in CHART_DEPENDENCY_FILES):
        info("Building chart dependencies...")
        _run_render_step([helm, "dependency", "build", "."], ctx, "helm dependency build")

    cmd = [helm, "template", ctx.config.get("release_name", "release"), "."]
    for vf in values_files(workdir, ctx.config):
        cmd.extend(["-f", vf])
    cmd.extend(["--output-dir", render_dir.resolve()])
    info("Rendering chart...")
    _run_render_step(cmd, ctx, "helm template")
    return render_dir


def render(ctx) -> Path:
    """Produce the directory of flat manifests the converter will read."""
    mode = ctx.mode
    if mode is SourceMode.HELMFILE:
        return render_helmfile(ctx)
    if mode is SourceMode.CHART:
        return render_chart(ctx)
    if mode is SourceMode.MANIFESTS:
        # The converter walks the workdir, cache root included
        if ctx.cache.render_dir.exists():
            shutil.rmtree(ctx.cache.render_dir)
        return ctx.options.workdir
    raise UnsupportedSourceError(f"Cannot render source kind '{mode.value}'")
