"""
Pytest configuration and shared fixtures for wdkconfig tests.
"""

from pathlib import Path

import pytest

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.kits import kit_root, single_kit_root

from wdkconfig.kit.locator import KitInstallation
from wdkconfig.kit.registry import InMemoryStore
from wdkconfig.kit.version import KitVersion


@pytest.fixture
def no_store() -> InMemoryStore:
    """Configuration store that does not exist on this host."""
    return InMemoryStore(available=False)


@pytest.fixture
def installations(kit_root) -> list:
    """Installations matching the kit_root fixture, newest first."""
    return [
        KitInstallation(kit_root, KitVersion.parse("10.0.26100.0"), "environment"),
        KitInstallation(kit_root, KitVersion.parse("10.0.22000.0"), "environment"),
    ]


@pytest.fixture
def fake_installations() -> list:
    """Installations that only exist on paper (for pure resolution tests)."""
    root = Path("C:/Program Files (x86)/Windows Kits/10")
    return [
        KitInstallation(root, KitVersion.parse("10.0.22000"), "registry"),
        KitInstallation(root, KitVersion.parse("10.0.26100"), "registry"),
    ]
