"""
Directory layout of a kit installation.

A kit root holds version-specific trees (``Include/<version>/...`` and
``Lib/<version>/...``) next to framework trees that are versioned by the
framework instead of the kit (``Include/wdf/kmdf/1.33``). This module maps a
driver configuration onto those trees.

Header and library directories are grouped in tiers. Headers with identical
names exist in several tiers, so tiers are listed highest precedence first
and the first match wins for both the compiler and the binding generator:

1. driver-class headers (framework specific)
2. shared driver headers (kernel-mode ``km`` or user-mode ``um``)
3. general SDK shared headers
4. low-level runtime headers

The tier tables are plain data. A project can override them from its options
file when a kit ships a different layout.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.exceptions import InvalidDriverConfig
from .targets import DriverClass, DriverConfig, TargetArch
from .version import KitVersion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LayoutTier:
    """
    One directory tier.

    Attributes:
        name: Tier name (e.g., 'driver_class', 'runtime')
        template: Path relative to the kit root with placeholders
                  {version}, {major}, {minor} and {arch}
    """

    name: str
    template: str

    def expand(
        self,
        root: Path,
        version: KitVersion,
        driver_config: DriverConfig,
        arch: Optional[TargetArch] = None,
    ) -> Path:
        framework = driver_config.framework_version
        relative = self.template.format(
            version=version,
            major=framework.major if framework else "",
            minor=framework.minor if framework else "",
            arch=arch.lib_folder if arch else "",
        )
        return root.joinpath(*relative.split("/"))


def _tiers(*pairs) -> List[LayoutTier]:
    return [LayoutTier(name, template) for name, template in pairs]


DEFAULT_INCLUDE_TIERS: Dict[DriverClass, List[LayoutTier]] = {
    DriverClass.KMDF: _tiers(
        ("driver_class", "Include/wdf/kmdf/{major}.{minor}"),
        ("driver_shared", "Include/{version}/km"),
        ("sdk_shared", "Include/{version}/shared"),
        ("runtime", "Include/{version}/km/crt"),
    ),
    DriverClass.UMDF: _tiers(
        ("driver_class", "Include/wdf/umdf/{major}.{minor}"),
        ("driver_shared", "Include/{version}/um"),
        ("sdk_shared", "Include/{version}/shared"),
        ("runtime", "Include/{version}/ucrt"),
    ),
    DriverClass.WDM: _tiers(
        ("driver_shared", "Include/{version}/km"),
        ("sdk_shared", "Include/{version}/shared"),
        ("runtime", "Include/{version}/km/crt"),
    ),
}

DEFAULT_LIB_TIERS: Dict[DriverClass, List[LayoutTier]] = {
    DriverClass.KMDF: _tiers(
        ("driver_class", "Lib/wdf/kmdf/{arch}/{major}.{minor}"),
        ("driver_shared", "Lib/{version}/km/{arch}"),
    ),
    DriverClass.UMDF: _tiers(
        ("driver_class", "Lib/wdf/umdf/{arch}/{major}.{minor}"),
        ("driver_shared", "Lib/{version}/um/{arch}"),
    ),
    DriverClass.WDM: _tiers(
        ("driver_shared", "Lib/{version}/km/{arch}"),
    ),
}


class KitLayout:
    """
    Maps kit roots and driver configurations to concrete directories.

    Example:
        >>> layout = KitLayout()
        >>> layout.include_dirs(Path('C:/WDK'), KitVersion.parse('10.0.22621.0'),
        ...                     DriverConfig.kmdf(1, 33))[0].as_posix()
        'C:/WDK/Include/wdf/kmdf/1.33'
    """

    # Directory whose subdirectories name the installed kit versions
    VERSION_DIR = "Lib"

    # Subdirectories of VERSION_DIR that are part of the layout, not versions
    NON_VERSION_DIRS = frozenset({"wdf"})

    def __init__(
        self,
        include_tiers: Optional[Mapping[DriverClass, Sequence[LayoutTier]]] = None,
        lib_tiers: Optional[Mapping[DriverClass, Sequence[LayoutTier]]] = None,
    ):
        self.include_tiers = dict(DEFAULT_INCLUDE_TIERS)
        self.lib_tiers = dict(DEFAULT_LIB_TIERS)
        if include_tiers:
            self.include_tiers.update({k: list(v) for k, v in include_tiers.items()})
        if lib_tiers:
            self.lib_tiers.update({k: list(v) for k, v in lib_tiers.items()})

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "KitLayout":
        """
        Build a layout from an options-file mapping.

        Expected shape::

            include_tiers:
              KMDF:
                - {name: driver_class, template: "Include/wdf/kmdf/{major}.{minor}"}
            lib_tiers:
              ...

        Classes that are not listed keep their default tiers.

        Raises:
            InvalidDriverConfig: If the mapping is malformed
        """
        if not data:
            return cls()
        if not isinstance(data, dict):
            raise InvalidDriverConfig("layout must be a mapping")

        def parse_section(section: str) -> Dict[DriverClass, List[LayoutTier]]:
            parsed: Dict[DriverClass, List[LayoutTier]] = {}
            for class_name, entries in (data.get(section) or {}).items():
                driver_class = DriverClass.parse(class_name)
                if not isinstance(entries, list):
                    raise InvalidDriverConfig(
                        f"layout.{section}.{class_name} must be a list"
                    )
                tiers = []
                for entry in entries:
                    if not isinstance(entry, dict) or "template" not in entry:
                        raise InvalidDriverConfig(
                            f"layout.{section}.{class_name} entries need a template"
                        )
                    tiers.append(
                        LayoutTier(entry.get("name", "custom"), str(entry["template"]))
                    )
                parsed[driver_class] = tiers
            return parsed

        return cls(
            include_tiers=parse_section("include_tiers"),
            lib_tiers=parse_section("lib_tiers"),
        )

    def version_root(self, root: Path) -> Path:
        """Directory listing the installed kit versions under a root."""
        return root / self.VERSION_DIR

    def is_version_candidate(self, name: str) -> bool:
        return name.lower() not in self.NON_VERSION_DIRS

    def include_dirs(
        self, root: Path, version: KitVersion, driver_config: DriverConfig
    ) -> List[Path]:
        """Include directories, highest precedence first."""
        return [
            tier.expand(root, version, driver_config)
            for tier in self.include_tiers[driver_config.driver_class]
        ]

    def lib_dirs(
        self,
        root: Path,
        version: KitVersion,
        driver_config: DriverConfig,
        arch: TargetArch,
    ) -> List[Path]:
        """Library directories for one architecture, highest precedence first."""
        return [
            tier.expand(root, version, driver_config, arch)
            for tier in self.lib_tiers[driver_config.driver_class]
        ]
