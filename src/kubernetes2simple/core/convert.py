"""Converter invocation — hand the flat manifests to kubernetes2simple.py."""

import os
from pathlib import Path

from kubernetes2simple.pacts.types import ConversionRequest
from kubernetes2simple.pacts.errors import ConversionFailureError
from kubernetes2simple.io.process import run_tool
from kubernetes2simple.io.output import info


def build_request(source_dir: Path, options) -> ConversionRequest:
    """Freeze what the converter gets for this run."""
    return ConversionRequest(
        source_dir=source_dir,
        output_dir=options.output_dir,
        environment=options.environment,
    )


def converter_command(request: ConversionRequest, python: str, script: str) -> list:
    # environment is already baked into the rendered manifests
    return [python, script,
            "--from-dir", str(request.source_dir),
            "--output-dir", request.output_dir]


def run_converter(request: ConversionRequest, python: str, script: str, cwd=None) -> None:
    """Run the converter with its output going straight to the terminal.

    Only the exit status is checked.
    """
    out_dir = os.path.join(cwd, request.output_dir) if cwd else request.output_dir
    os.makedirs(out_dir, exist_ok=True)
    info("Converting to docker compose...")
    result = run_tool(converter_command(request, python, script), cwd=cwd, capture=False)
    if not result.ok:
        raise ConversionFailureError(
            f"Conversion failed (exit {result.returncode}): {' '.join(result.cmd)}")
