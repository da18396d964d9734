"""kubernetes2simple — detect a K8s source, bootstrap its tools, convert to compose.

Re-exports the pipeline stages and contracts.
Callers can import directly from here or from kubernetes2simple.pacts.
"""

from kubernetes2simple.pacts.types import (
    SourceMode, PlatformTag, CacheLayout, ToolResult, ResolvedTool,
    RunOptions, ConversionRequest, RunContext, Dependency,
)
from kubernetes2simple.pacts.errors import (
    K2SError, UnsupportedPlatformError, MissingPrerequisiteError,
    UnsupportedSourceError, ToolAcquisitionError, ConfigError,
    RenderFailureError, ConversionFailureError,
)
from kubernetes2simple.core.platform import detect_platform
from kubernetes2simple.core.detect import detect_source
from kubernetes2simple.core.deps import resolve_dependency, bootstrap
from kubernetes2simple.core.render import render
from kubernetes2simple.core.convert import build_request, run_converter

__all__ = [
    # Contracts
    "SourceMode",
    "PlatformTag",
    "CacheLayout",
    "ToolResult",
    "ResolvedTool",
    "RunOptions",
    "ConversionRequest",
    "RunContext",
    "Dependency",
    # Errors
    "K2SError",
    "UnsupportedPlatformError",
    "MissingPrerequisiteError",
    "UnsupportedSourceError",
    "ToolAcquisitionError",
    "ConfigError",
    "RenderFailureError",
    "ConversionFailureError",
    # Pipeline stages
    "detect_platform",
    "detect_source",
    "resolve_dependency",
    "bootstrap",
    "render",
    "build_request",
    "run_converter",
]
