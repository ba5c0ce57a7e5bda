"""
Core interfaces for wdkconfig.

Host-specific lookups are isolated behind these interfaces so the kit locator
can run against a fake store in tests and on hosts without a registry.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ConfigurationStore(ABC):
    """
    Read-only structured configuration store of the build host.

    On Windows this is the registry. Implementations never write.
    """

    @abstractmethod
    def read_value(self, key: str, value_name: str) -> Optional[str]:
        """
        Read a string value.

        Args:
            key: Key path below the machine hive
                 (e.g., r"SOFTWARE\\Microsoft\\Windows Kits\\Installed Roots")
            value_name: Name of the value within the key (e.g., "KitsRoot10")

        Returns:
            The value, or None if the key or value does not exist

        Raises:
            PermissionError: If the store denies access
            OSError: On any other store fault
        """
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """
        Check whether this store exists on the current host.

        Returns:
            True if lookups can be attempted, False otherwise
        """
        pass


__all__ = [
    "ConfigurationStore",
]
