"""Reusable kit fixtures for testing.

This module provides pytest fixtures that create fake Windows Driver Kit
directory trees so discovery and resolution can be tested on any host.
"""

from pathlib import Path
from typing import Iterable

import pytest

ARCH_FOLDERS = ("x86", "x64", "arm", "arm64")


def create_kit_tree(
    root: Path,
    versions: Iterable[str] = ("10.0.22621.0",),
    kmdf_versions: Iterable[str] = ("1.33",),
    umdf_versions: Iterable[str] = ("2.33",),
) -> Path:
    """
    Create a fake kit installation.

    Layout::

        <root>/Include/<version>/{km,km/crt,um,shared,ucrt}
        <root>/Include/wdf/{kmdf,umdf}/<M.m>
        <root>/Lib/<version>/{km,um}/<arch>
        <root>/Lib/wdf/{kmdf,umdf}/<arch>/<M.m>

    Returns:
        The kit root
    """
    for version in versions:
        for sub in ("km", "km/crt", "um", "shared", "ucrt"):
            (root / "Include" / version / sub).mkdir(parents=True, exist_ok=True)
        for sub in ("km", "um"):
            for arch in ARCH_FOLDERS:
                (root / "Lib" / version / sub / arch).mkdir(parents=True, exist_ok=True)

    for framework, framework_versions in (("kmdf", kmdf_versions), ("umdf", umdf_versions)):
        for fv in framework_versions:
            (root / "Include" / "wdf" / framework / fv).mkdir(parents=True, exist_ok=True)
            for arch in ARCH_FOLDERS:
                (root / "Lib" / "wdf" / framework / arch / fv).mkdir(
                    parents=True, exist_ok=True
                )

    return root


@pytest.fixture
def kit_root(tmp_path) -> Path:
    """
    Create a kit with two versions installed (10.0.22000.0, 10.0.26100.0).

    Example:
        def test_discovery(kit_root):
            assert (kit_root / "Lib" / "10.0.26100.0" / "km" / "x64").is_dir()
    """
    return create_kit_tree(
        tmp_path / "Windows Kits" / "10",
        versions=("10.0.22000.0", "10.0.26100.0"),
    )


@pytest.fixture
def single_kit_root(tmp_path) -> Path:
    """Create a kit with only 10.0.22621.0 installed."""
    return create_kit_tree(tmp_path / "wdk", versions=("10.0.22621.0",))
