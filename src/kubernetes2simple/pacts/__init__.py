"""Public contracts — data types and the error taxonomy."""

from kubernetes2simple.pacts.types import (
    SourceMode, PlatformTag, CacheLayout, ToolResult, ResolvedTool,
    RunOptions, ConversionRequest, RunContext, Dependency,
)
from kubernetes2simple.pacts.errors import (
    K2SError, UnsupportedPlatformError, MissingPrerequisiteError,
    UnsupportedSourceError, ToolAcquisitionError, ConfigError,
    RenderFailureError, ConversionFailureError,
)

__all__ = [
    "SourceMode",
    "PlatformTag",
    "CacheLayout",
    "ToolResult",
    "ResolvedTool",
    "RunOptions",
    "ConversionRequest",
    "RunContext",
    "Dependency",
    "K2SError",
    "UnsupportedPlatformError",
    "MissingPrerequisiteError",
    "UnsupportedSourceError",
    "ToolAcquisitionError",
    "ConfigError",
    "RenderFailureError",
    "ConversionFailureError",
]
