"""
Kit discovery for wdkconfig.

This module provides the kit version type, the installation directory layout
and the locator that finds installed kits on the build host.
"""

from wdkconfig.kit.version import KitVersion, InvalidKitVersion
from wdkconfig.kit.targets import (
    DriverClass,
    DriverConfig,
    FrameworkVersion,
    TargetArch,
)
from wdkconfig.kit.layout import KitLayout, LayoutTier
from wdkconfig.kit.locator import KitInstallation, KitLocator
from wdkconfig.kit.registry import InMemoryStore, WindowsRegistryStore

__all__ = [
    "KitVersion",
    "InvalidKitVersion",
    "DriverClass",
    "DriverConfig",
    "FrameworkVersion",
    "TargetArch",
    "KitLayout",
    "LayoutTier",
    "KitInstallation",
    "KitLocator",
    "InMemoryStore",
    "WindowsRegistryStore",
]
