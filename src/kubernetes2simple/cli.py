"""CLI entry point — argument parsing, orchestration."""

import argparse
import shutil
import sys
from pathlib import Path

from kubernetes2simple.pacts.types import (
    CacheLayout, RunContext, RunOptions, SourceMode,
)
from kubernetes2simple.pacts.errors import K2SError, UnsupportedSourceError
from kubernetes2simple.core.constants import (
    CACHE_DIRNAME, CONFIG_FILENAME, ISSUES_URL, MODE_LABELS,
)
from kubernetes2simple.core.platform import detect_platform
from kubernetes2simple.core.detect import detect_source
from kubernetes2simple.core.deps import bootstrap
from kubernetes2simple.core.render import render
from kubernetes2simple.core.convert import build_request, run_converter
from kubernetes2simple.io.config import load_config
from kubernetes2simple.io.output import info, error, section, emit_warnings

_NO_SOURCE_HELP = f"""No Kubernetes source found in current directory.

  kubernetes2simple needs one of:
    - helmfile.yaml (helmfile project)
    - Chart.yaml (Helm chart)
    - *.yaml with K8s manifests (raw manifests)

  Please open an issue: {ISSUES_URL}"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kubernetes2simple",
        description="Detects your K8s source format and converts to docker compose.",
    )
    parser.add_argument(
        "--output-dir", default=".",
        help="Output directory (default: current directory)",
    )
    parser.add_argument(
        "-e", "--env", dest="environment",
        help="Helmfile environment (helmfile mode only)",
    )
    parser.add_argument(
        "--clean", action="store_true",
        help=f"Remove {CACHE_DIRNAME}/ and start fresh",
    )
    return parser


def parse_args(argv=None, workdir: Path | None = None) -> RunOptions:
    """Parse flags into ``RunOptions``. Unknown flags exit with status 2."""
    args = build_parser().parse_args(argv)
    return RunOptions(
        workdir=workdir if workdir is not None else Path.cwd(),
        output_dir=args.output_dir,
        environment=args.environment,
        clean=args.clean,
    )


def clean_cache(cache: CacheLayout) -> None:
    """Delete the private cache root; the next run starts from scratch."""
    if cache.root.exists():
        shutil.rmtree(cache.root)
    info(f"Cleaned {CACHE_DIRNAME}")


def run(options: RunOptions) -> RunContext:
    """Run the whole pipeline once. Raises ``K2SError`` on any failure."""
    workdir = options.workdir
    cache = CacheLayout(workdir / CACHE_DIRNAME)
    if options.clean:
        clean_cache(cache)

    # Step 1: platform (needed by every install URL)
    platform = detect_platform()

    # Step 2: classify — nothing is written before this succeeds
    mode = detect_source(workdir)
    if mode is SourceMode.UNKNOWN:
        raise UnsupportedSourceError(_NO_SOURCE_HELP)
    info(f"Detected: {MODE_LABELS[mode]}")

    warnings: list[str] = []
    config = load_config(str(workdir / CONFIG_FILENAME), warnings)
    if options.environment and mode is not SourceMode.HELMFILE:
        warnings.append(f"--env only applies to helmfile projects — "
                        f"'{options.environment}' ignored")
    emit_warnings(warnings)

    ctx = RunContext(options=options, cache=cache, config=config,
                     platform=platform, mode=mode)

    # Step 3: tools for this mode only
    section("Bootstrap")
    ctx = bootstrap(ctx)

    # Step 4: render, then convert
    section("Convert")
    source_dir = render(ctx)
    request = build_request(source_dir, options)
    run_converter(request, ctx.tool_path("packages"), ctx.tool_path("converter"),
                  cwd=workdir)

    print(file=sys.stderr)
    if options.output_dir in (".", ""):
        info("Done! Run: docker compose up -d")
    else:
        info(f"Done! Run: cd {options.output_dir} && docker compose up -d")
    return ctx


def main(argv=None):
    """CLI entry point."""
    options = parse_args(argv)
    try:
        run(options)
    except K2SError as exc:
        error(str(exc))
        sys.exit(1)
