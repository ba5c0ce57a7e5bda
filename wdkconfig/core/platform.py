"""
Host platform detection for wdkconfig.

The engine runs on the build host, which is not necessarily the target of the
driver being built. Host information decides which configuration store can be
queried and which architecture is the default target.

Usage:
    from wdkconfig.core.platform import detect_platform

    host = detect_platform()
    if host.is_windows():
        ...
"""

import functools
import platform
from dataclasses import dataclass


@dataclass(frozen=True)
class PlatformInfo:
    """
    Build host information.

    Attributes:
        os: Operating system ('windows', 'linux', 'macos')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm')
        os_version: OS version string (e.g., '10.0.22631')
    """

    os: str
    arch: str
    os_version: str

    def is_windows(self) -> bool:
        return self.os == "windows"

    def platform_string(self) -> str:
        """
        Get canonical platform string.

        Example:
            >>> PlatformInfo('windows', 'x64', '10.0.22631').platform_string()
            'windows-x64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return f"{self.platform_string()} v{self.os_version}"


@functools.lru_cache(maxsize=1)
def detect_platform() -> PlatformInfo:
    """
    Detect current host platform.

    This function is cached - it only runs detection once per process.
    """
    return PlatformInfo(
        os=_detect_os(),
        arch=_detect_architecture(),
        os_version=platform.version() or platform.release(),
    )


def _detect_os() -> str:
    system = platform.system().lower()
    if system == "darwin":
        return "macos"
    return system


def _detect_architecture() -> str:
    """
    Detect CPU architecture.

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm'
    """
    machine = platform.machine().lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    return machine


def clear_platform_cache():
    """Clear the platform detection cache (used by tests)."""
    detect_platform.cache_clear()


__all__ = [
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
