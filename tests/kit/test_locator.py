"""
Tests for kit discovery.
"""

import logging
from pathlib import Path
from unittest.mock import patch

import pytest

from tests.fixtures.kits import create_kit_tree
from wdkconfig.core.exceptions import KitNotFound, ProbeFailure
from wdkconfig.kit.locator import (
    ENV_CONTENT_ROOT,
    INSTALLED_ROOTS_KEY,
    INSTALLED_ROOTS_VALUE,
    KitLocator,
    RegistrySearcher,
)
from wdkconfig.kit.registry import InMemoryStore
from wdkconfig.kit.version import KitVersion


def registry_with(root: Path) -> InMemoryStore:
    return InMemoryStore({(INSTALLED_ROOTS_KEY, INSTALLED_ROOTS_VALUE): str(root)})


def versions(installations):
    return [str(i.version) for i in installations]


class TestEnvironmentOverride:
    def test_override_used(self, kit_root, no_store):
        locator = KitLocator(store=no_store, environ={ENV_CONTENT_ROOT: str(kit_root)})

        found = locator.discover()

        assert versions(found) == ["10.0.26100.0", "10.0.22000.0"]
        assert all(i.discovery_method == "environment" for i in found)
        assert all(i.root_path == kit_root for i in found)

    def test_override_is_exclusive(self, tmp_path, kit_root):
        other = create_kit_tree(tmp_path / "other", versions=("10.0.99999.0",))
        locator = KitLocator(
            store=registry_with(other),
            environ={ENV_CONTENT_ROOT: str(kit_root)},
            standard_locations=[other],
        )

        assert versions(locator.discover()) == ["10.0.26100.0", "10.0.22000.0"]

    def test_override_without_kit(self, tmp_path, kit_root):
        empty = tmp_path / "empty"
        empty.mkdir()
        locator = KitLocator(
            store=registry_with(kit_root), environ={ENV_CONTENT_ROOT: str(empty)}
        )

        with pytest.raises(KitNotFound) as exc_info:
            locator.discover()
        assert exc_info.value.attempted_paths == [empty]

    def test_blank_override_ignored(self, kit_root):
        locator = KitLocator(
            store=registry_with(kit_root), environ={ENV_CONTENT_ROOT: "  "}
        )

        found = locator.discover()
        assert found[0].discovery_method == "registry"


class TestRegistry:
    def test_registry_root(self, kit_root):
        locator = KitLocator(
            store=registry_with(kit_root), environ={}, standard_locations=[]
        )

        found = locator.discover()

        assert versions(found) == ["10.0.26100.0", "10.0.22000.0"]
        assert found[0].discovery_method == "registry"

    def test_registry_suppresses_standard_locations(self, tmp_path, kit_root):
        other = create_kit_tree(tmp_path / "other", versions=("10.0.99999.0",))
        locator = KitLocator(
            store=registry_with(kit_root), environ={}, standard_locations=[other]
        )

        assert "10.0.99999.0" not in versions(locator.discover())

    def test_permission_fault_falls_back(self, kit_root, caplog):
        store = InMemoryStore(error=PermissionError("Access is denied"))
        locator = KitLocator(store=store, environ={}, standard_locations=[kit_root])

        with caplog.at_level(logging.WARNING):
            found = locator.discover()

        assert found[0].discovery_method == "standard_location"
        assert "Access is denied" in caplog.text

    def test_missing_value_yields_nothing(self):
        assert RegistrySearcher(InMemoryStore()).search() == []

    def test_unavailable_store_yields_nothing(self, no_store):
        assert RegistrySearcher(no_store).search() == []


class TestStandardLocations:
    def test_first_existing_location(self, tmp_path, kit_root):
        missing = tmp_path / "missing"
        locator = KitLocator(
            store=InMemoryStore(), environ={}, standard_locations=[missing, kit_root]
        )

        found = locator.discover()
        assert versions(found) == ["10.0.26100.0", "10.0.22000.0"]
        assert found[0].discovery_method == "standard_location"

    def test_versions_from_several_roots_merged(self, tmp_path, kit_root):
        second = create_kit_tree(tmp_path / "second", versions=("10.0.22621.0",))
        locator = KitLocator(
            store=InMemoryStore(), environ={}, standard_locations=[kit_root, second]
        )

        found = locator.discover()
        assert versions(found) == ["10.0.26100.0", "10.0.22621.0", "10.0.22000.0"]
        assert found[1].root_path == second

    def test_duplicate_roots_probed_once(self, kit_root):
        locator = KitLocator(
            store=InMemoryStore(), environ={}, standard_locations=[kit_root, kit_root]
        )

        assert len(locator.discover()) == 2
        assert locator.consulted_paths == [kit_root / "Lib"]


class TestNothingFound:
    def test_kit_not_found_lists_attempted_paths(self, tmp_path):
        first = tmp_path / "a"
        second = tmp_path / "b"
        locator = KitLocator(
            store=InMemoryStore(), environ={}, standard_locations=[first, second]
        )

        with pytest.raises(KitNotFound) as exc_info:
            locator.discover()

        assert exc_info.value.attempted_paths == [first, second]
        assert str(first) in str(exc_info.value)

    def test_root_with_empty_version_dir(self, tmp_path):
        root = tmp_path / "kit"
        (root / "Lib").mkdir(parents=True)
        locator = KitLocator(store=InMemoryStore(), environ={}, standard_locations=[root])

        with pytest.raises(KitNotFound):
            locator.discover()


class TestProbing:
    def test_wdf_directory_skipped_silently(self, kit_root, no_store, caplog):
        locator = KitLocator(store=no_store, environ={ENV_CONTENT_ROOT: str(kit_root)})

        with caplog.at_level(logging.WARNING):
            found = locator.discover()

        assert "wdf" not in versions(found)
        assert "wdf" not in caplog.text

    def test_unparsable_directory_warned(self, kit_root, no_store, caplog):
        (kit_root / "Lib" / "winv6.3").mkdir()
        locator = KitLocator(store=no_store, environ={ENV_CONTENT_ROOT: str(kit_root)})

        with caplog.at_level(logging.WARNING):
            found = locator.discover()

        assert versions(found) == ["10.0.26100.0", "10.0.22000.0"]
        assert "winv6.3" in caplog.text

    def test_files_ignored(self, kit_root, no_store):
        (kit_root / "Lib" / "10.0.99999.0").write_text("not a directory")
        locator = KitLocator(store=no_store, environ={ENV_CONTENT_ROOT: str(kit_root)})

        assert "10.0.99999.0" not in versions(locator.discover())

    def test_listing_failure_raises_probe_failure(self, kit_root, no_store):
        locator = KitLocator(store=no_store, environ={ENV_CONTENT_ROOT: str(kit_root)})

        with patch(
            "wdkconfig.kit.locator.list_subdirectories",
            side_effect=PermissionError("Access is denied"),
        ):
            with pytest.raises(ProbeFailure) as exc_info:
                locator.discover()

        assert exc_info.value.path == kit_root / "Lib"
        assert "Access is denied" in exc_info.value.reason

    def test_equal_versions_keep_discovery_order(self, tmp_path):
        first = create_kit_tree(tmp_path / "first", versions=("10.0.22621.0",))
        second = create_kit_tree(tmp_path / "second", versions=("10.0.22621.0",))
        locator = KitLocator(
            store=InMemoryStore(), environ={}, standard_locations=[first, second]
        )

        found = locator.discover()

        assert [i.root_path for i in found] == [first, second]
        assert found[0].version == found[1].version == KitVersion.parse("10.0.22621")

    def test_discovery_is_repeatable(self, kit_root, no_store):
        locator = KitLocator(store=no_store, environ={ENV_CONTENT_ROOT: str(kit_root)})

        assert locator.discover() == locator.discover()
