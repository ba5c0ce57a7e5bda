"""
Configuration store implementations.

WindowsRegistryStore reads HKEY_LOCAL_MACHINE through winreg. InMemoryStore
holds a fixed mapping and stands in for the registry on other hosts and in
tests.
"""

import logging
from typing import Dict, Optional, Tuple

from ..core.interfaces import ConfigurationStore
from ..core.platform import detect_platform

logger = logging.getLogger(__name__)


class WindowsRegistryStore(ConfigurationStore):
    """Read-only view of HKEY_LOCAL_MACHINE."""

    def is_available(self) -> bool:
        try:
            import winreg  # noqa: F401
        except ImportError:
            return False
        return True

    def read_value(self, key: str, value_name: str) -> Optional[str]:
        import winreg

        try:
            with winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, key) as handle:
                value, _ = winreg.QueryValueEx(handle, value_name)
        except FileNotFoundError:
            logger.debug(f"Registry value not found: HKLM\\{key}\\{value_name}")
            return None

        logger.debug(f"Registry value HKLM\\{key}\\{value_name} = {value}")
        return str(value)


class InMemoryStore(ConfigurationStore):
    """
    Configuration store backed by a dictionary.

    Example:
        >>> store = InMemoryStore({
        ...     (r"SOFTWARE\\Microsoft\\Windows Kits\\Installed Roots", "KitsRoot10"):
        ...         r"C:\\Program Files (x86)\\Windows Kits\\10",
        ... })
    """

    def __init__(
        self,
        values: Optional[Dict[Tuple[str, str], str]] = None,
        available: bool = True,
        error: Optional[OSError] = None,
    ):
        self.values = dict(values or {})
        self.available = available
        self.error = error

    def is_available(self) -> bool:
        return self.available

    def read_value(self, key: str, value_name: str) -> Optional[str]:
        if self.error is not None:
            raise self.error
        return self.values.get((key, value_name))


def default_store() -> ConfigurationStore:
    """Return the configuration store for the current host."""
    if detect_platform().is_windows():
        return WindowsRegistryStore()
    return InMemoryStore(available=False)
