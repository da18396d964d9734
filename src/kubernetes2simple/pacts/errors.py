"""Error taxonomy. Every error is fatal for the run."""


class K2SError(Exception):
    """Base class for all pipeline errors reported to the operator."""


class UnsupportedPlatformError(K2SError):
    """Host OS or CPU architecture has no matching release artifacts."""


class MissingPrerequisiteError(K2SError):
    """A prerequisite this tool cannot install itself is absent."""


class UnsupportedSourceError(K2SError):
    """No recognised Kubernetes source in the working directory."""


class ToolAcquisitionError(K2SError):
    """Version lookup, download, extraction or package install failed."""


class ConfigError(K2SError):
    """k2s.yaml is malformed."""


class RenderFailureError(K2SError):
    """helm or helmfile exited non-zero while rendering."""

    def __init__(self, message, result=None):
        self.result = result
        if result is not None and result.tail():
            message = f"{message}\n{result.tail()}"
        super().__init__(message)


class ConversionFailureError(K2SError):
    """The external converter exited non-zero."""
