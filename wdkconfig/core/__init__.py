"""
Core functionality for wdkconfig.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    WdkConfigError,
    KitNotFound,
    ProbeFailure,
    VersionMismatch,
    InvalidDriverConfig,
    OptionsError,
    BindingGenerationFailed,
    CacheIoFailure,
)
from .filesystem import atomic_write
from .interfaces import ConfigurationStore
from .platform import PlatformInfo, detect_platform, clear_platform_cache

__all__ = [
    "WdkConfigError",
    "KitNotFound",
    "ProbeFailure",
    "VersionMismatch",
    "InvalidDriverConfig",
    "OptionsError",
    "BindingGenerationFailed",
    "CacheIoFailure",
    "atomic_write",
    "ConfigurationStore",
    "PlatformInfo",
    "detect_platform",
    "clear_platform_cache",
]
