"""Host platform detection."""

import platform

from kubernetes2simple.pacts.types import PlatformTag
from kubernetes2simple.pacts.errors import UnsupportedPlatformError
from kubernetes2simple.core.constants import ARCH_ALIASES, SUPPORTED_OS


def detect_platform(system: str | None = None,
                    machine: str | None = None) -> PlatformTag:
    """Map the host OS/CPU to the names used in release archives."""
    os_name = (system if system is not None else platform.system()).lower()
    raw_arch = machine if machine is not None else platform.machine()
    arch = ARCH_ALIASES.get(raw_arch.lower())
    if arch is None:
        raise UnsupportedPlatformError(f"Unsupported architecture: {raw_arch}")
    if os_name not in SUPPORTED_OS:
        raise UnsupportedPlatformError(f"Unsupported OS: {os_name}")
    return PlatformTag(os=os_name, arch=arch)
