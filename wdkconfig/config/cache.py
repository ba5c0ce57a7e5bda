"""
Resolved configuration cache.

The configuration resolved in a build step is persisted to
``<out_dir>/wdk-config.yaml`` so later steps (binding generation, code
generation) can reuse it without probing the host again.

Writes go to a temporary file that atomically replaces the cache, so a reader
sees either the previous document or the new one, never a partial file.
Staleness is not checked here; the orchestrator re-runs the build step when
a re-run trigger path changes.

Example:
    >>> cache = ConfigCache(Path(os.environ['OUT_DIR']))
    >>> cache.save(config)
    >>> cache.load() == config
    True
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from ..core.exceptions import CacheIoFailure, InvalidDriverConfig
from ..core.filesystem import atomic_write
from ..kit.targets import DriverConfig, TargetArch
from ..kit.version import InvalidKitVersion, KitVersion
from .resolver import ConfigKey, ResolvedBuildConfig

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "wdk-config.yaml"
CACHE_FORMAT_VERSION = 1


def config_to_dict(config: ResolvedBuildConfig) -> dict:
    """Convert to a plain mapping for YAML serialization."""
    framework = config.driver_config.framework_version
    return {
        "format_version": CACHE_FORMAT_VERSION,
        "driver_class": config.driver_config.driver_class.value,
        "framework_version": str(framework) if framework else None,
        "target_arch": config.target_arch.value,
        "kit_version": str(config.kit_version),
        "kit_root": str(config.kit_root),
        "include_dirs": [str(p) for p in config.include_dirs],
        "lib_dirs": [str(p) for p in config.lib_dirs],
        "defines": dict(config.defines),
        "link_libs": list(config.link_libs),
        "rerun_paths": [str(p) for p in config.rerun_paths],
    }


def config_from_dict(data: dict) -> ResolvedBuildConfig:
    """
    Create from a mapping loaded from YAML.

    Raises:
        KeyError, TypeError, ValueError: If the mapping is malformed
    """
    version = data.get("format_version")
    if version != CACHE_FORMAT_VERSION:
        raise ValueError(f"unsupported cache format version {version!r}")

    key = ConfigKey(
        kit_version=KitVersion.parse(data["kit_version"]),
        driver_config=DriverConfig(data["driver_class"], data["framework_version"]),
        target_arch=TargetArch.parse(data["target_arch"]),
    )
    defines = data.get("defines") or {}
    return ResolvedBuildConfig(
        key=key,
        kit_root=Path(data["kit_root"]),
        include_dirs=tuple(Path(p) for p in data["include_dirs"]),
        lib_dirs=tuple(Path(p) for p in data["lib_dirs"]),
        defines={
            str(name): None if value is None else str(value)
            for name, value in defines.items()
        },
        link_libs=tuple(str(name) for name in data["link_libs"]),
        rerun_paths=tuple(Path(p) for p in data.get("rerun_paths") or ()),
    )


class ConfigCache:
    """
    Persists one resolved configuration per output directory.

    Attributes:
        cache_file: Path to the cache document
    """

    def __init__(self, out_dir: Path, file_name: str = CACHE_FILE_NAME):
        self.cache_file = Path(out_dir) / file_name

    def save(self, config: ResolvedBuildConfig) -> Path:
        """
        Write the configuration atomically.

        Raises:
            CacheIoFailure: If the temp write or replace fails
        """
        content = yaml.safe_dump(
            config_to_dict(config), default_flow_style=False, sort_keys=False
        )
        try:
            atomic_write(self.cache_file, content)
        except OSError as e:
            raise CacheIoFailure(self.cache_file, str(e)) from e

        logger.info(f"Configuration cache saved: {self.cache_file}")
        return self.cache_file

    def load(self) -> Optional[ResolvedBuildConfig]:
        """
        Load the cached configuration.

        Returns:
            The stored configuration, or None if no cache exists

        Raises:
            CacheIoFailure: If the cache exists but cannot be read or parsed
        """
        if not self.cache_file.exists():
            logger.debug(f"Configuration cache not found: {self.cache_file}")
            return None

        try:
            with open(self.cache_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise CacheIoFailure(self.cache_file, str(e)) from e

        if not isinstance(data, dict):
            raise CacheIoFailure(self.cache_file, "cache document is not a mapping")

        try:
            config = config_from_dict(data)
        except (
            KeyError,
            TypeError,
            ValueError,
            InvalidDriverConfig,
            InvalidKitVersion,
        ) as e:
            raise CacheIoFailure(
                self.cache_file, f"malformed cache document: {e}"
            ) from e

        logger.debug(f"Loaded configuration cache: {self.cache_file}")
        return config
