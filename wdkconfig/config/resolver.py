"""
Configuration resolution.

Turns the discovered kit installations and the requested driver configuration
into the concrete, ordered include directories, library directories, link
libraries and preprocessor definitions of one build.

Resolution is a pure function of its inputs. All validation happens before
any path is assembled, so an invalid request never yields a partial result.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..core.exceptions import InvalidDriverConfig, KitNotFound, VersionMismatch
from ..kit.layout import KitLayout
from ..kit.locator import KitInstallation
from ..kit.targets import DriverClass, DriverConfig, TargetArch
from ..kit.version import KitVersion

logger = logging.getLogger(__name__)


ARCH_DEFINES: Dict[TargetArch, List[Tuple[str, Optional[str]]]] = {
    TargetArch.X86: [("_X86_", None), ("i386", None), ("STD_CALL", None)],
    TargetArch.X64: [("_WIN64", None), ("_AMD64_", None), ("AMD64", None)],
    TargetArch.ARM: [("_ARM_", None), ("ARM", None), ("STD_CALL", None)],
    TargetArch.ARM64: [
        ("_WIN64", None),
        ("_ARM64_", None),
        ("ARM64", None),
        ("_USE_DECLSPECS_FOR_SAL", "1"),
        ("STD_CALL", None),
    ],
}

KERNEL_MODE_DEFINES: List[Tuple[str, Optional[str]]] = [("_KERNEL_MODE", None)]

# Stub library each framework must link against
FRAMEWORK_STUB_LIBRARIES = {
    DriverClass.KMDF: "WdfDriverEntry",
    DriverClass.UMDF: "WdfDriverStubUm",
}

_KERNEL_LIBRARIES = ["BufferOverflowFastFailK", "ntoskrnl", "hal", "wmilib"]

# Link libraries per driver class, in link order
LINK_LIBRARIES: Dict[DriverClass, List[str]] = {
    DriverClass.WDM: list(_KERNEL_LIBRARIES),
    DriverClass.KMDF: [
        *_KERNEL_LIBRARIES,
        "WdfLdr",
        FRAMEWORK_STUB_LIBRARIES[DriverClass.KMDF],
    ],
    DriverClass.UMDF: ["OneCoreUAP", FRAMEWORK_STUB_LIBRARIES[DriverClass.UMDF]],
}


@dataclass(frozen=True)
class ConfigKey:
    """The inputs a resolved configuration is keyed by."""

    kit_version: KitVersion
    driver_config: DriverConfig
    target_arch: TargetArch

    def __str__(self) -> str:
        return f"WDK {self.kit_version} / {self.driver_config} / {self.target_arch.value}"


@dataclass(frozen=True)
class ResolvedBuildConfig:
    """
    Resolved build configuration.

    Attributes:
        key: Kit version, driver configuration and architecture it was built for
        kit_root: Root of the selected kit installation
        include_dirs: Include directories, highest precedence first
        lib_dirs: Library directories, highest precedence first
        defines: Preprocessor definitions as (name, value or None) pairs
        link_libs: Libraries to link, in link order
        rerun_paths: Paths consulted during discovery and resolution
    """

    key: ConfigKey
    kit_root: Path
    include_dirs: Tuple[Path, ...]
    lib_dirs: Tuple[Path, ...]
    defines: Tuple[Tuple[str, Optional[str]], ...] = ()
    link_libs: Tuple[str, ...] = ()
    rerun_paths: Tuple[Path, ...] = ()

    def __post_init__(self):
        # Sequences and mappings are frozen into tuples
        defines = self.defines
        if isinstance(defines, Mapping):
            defines = defines.items()
        object.__setattr__(self, "defines", tuple(tuple(d) for d in defines))
        for name in ("include_dirs", "lib_dirs", "link_libs", "rerun_paths"):
            object.__setattr__(self, name, tuple(getattr(self, name)))

    @property
    def define_map(self) -> Dict[str, Optional[str]]:
        """Definitions as a name -> value mapping (a copy)."""
        return dict(self.defines)

    @property
    def driver_config(self) -> DriverConfig:
        return self.key.driver_config

    @property
    def target_arch(self) -> TargetArch:
        return self.key.target_arch

    @property
    def kit_version(self) -> KitVersion:
        return self.key.kit_version

    def missing_directories(self) -> List[Path]:
        """Assembled include/library directories that do not exist on disk."""
        return [p for p in (*self.include_dirs, *self.lib_dirs) if not p.is_dir()]


def dedupe(items: Iterable) -> Tuple:
    """Remove duplicates, keeping the first occurrence of each item."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return tuple(result)


def select_installation(
    installations: Sequence[KitInstallation], pin: Optional[KitVersion] = None
) -> KitInstallation:
    """
    Pick the installation to build against.

    Without a pin the newest version wins; among equal versions the first one
    in the given order wins. With a pin only an exact match is accepted,
    where missing trailing fields count as zero: a pin of 10.0.22000 selects
    an installation of 10.0.22000.0.

    Raises:
        KitNotFound: If installations is empty
        VersionMismatch: If pin is set and not installed
    """
    if not installations:
        raise KitNotFound()

    if pin is not None:
        for installation in installations:
            if installation.version == pin:
                return installation
        raise VersionMismatch(pin, dedupe(i.version for i in installations))

    best = installations[0]
    for installation in installations[1:]:
        if installation.version > best.version:
            best = installation
    return best


class ConfigurationResolver:
    """
    Resolves driver configurations against a kit layout.

    Example:
        >>> resolver = ConfigurationResolver()
        >>> config = resolver.resolve(installations, DriverConfig.kmdf(1, 33), TargetArch.X64)
        >>> config.link_libs[-1]
        'WdfDriverEntry'
    """

    def __init__(self, layout: Optional[KitLayout] = None):
        self.layout = layout or KitLayout()

    def resolve(
        self,
        installations: Sequence[KitInstallation],
        driver_config: DriverConfig,
        target_arch: TargetArch,
        pin: Optional[KitVersion] = None,
        consulted_paths: Sequence[Path] = (),
    ) -> ResolvedBuildConfig:
        """
        Resolve a build configuration.

        Args:
            installations: Discovered installations
            driver_config: Driver class and framework version
            target_arch: Target architecture
            pin: Exact kit version to use instead of the newest
            consulted_paths: Directories read during discovery; they become
                             re-run triggers after the selected root's own paths

        Raises:
            InvalidDriverConfig: If driver_config or target_arch is invalid
            KitNotFound: If installations is empty
            VersionMismatch: If pin is set and not installed
        """
        if not isinstance(driver_config, DriverConfig):
            raise InvalidDriverConfig(f"Not a driver configuration: {driver_config!r}")
        if not isinstance(target_arch, TargetArch):
            target_arch = TargetArch.parse(target_arch)

        installation = select_installation(installations, pin)
        logger.info(
            f"Selected {installation} (build {installation.version.build_number})"
        )

        root = installation.root_path
        version = installation.version

        include_dirs = dedupe(self.layout.include_dirs(root, version, driver_config))
        lib_dirs = dedupe(
            self.layout.lib_dirs(root, version, driver_config, target_arch)
        )

        config = ResolvedBuildConfig(
            key=ConfigKey(version, driver_config, target_arch),
            kit_root=root,
            include_dirs=include_dirs,
            lib_dirs=lib_dirs,
            defines=tuple(self._defines(driver_config, target_arch).items()),
            link_libs=tuple(LINK_LIBRARIES[driver_config.driver_class]),
            rerun_paths=dedupe(
                [
                    self.layout.version_root(root),
                    *include_dirs,
                    *lib_dirs,
                    *consulted_paths,
                ]
            ),
        )

        logger.debug(
            f"Resolved {config.key}: {len(include_dirs)} include dirs, "
            f"{len(lib_dirs)} lib dirs, {len(config.defines)} defines"
        )
        return config

    def _defines(
        self, driver_config: DriverConfig, target_arch: TargetArch
    ) -> Dict[str, Optional[str]]:
        defines: Dict[str, Optional[str]] = {}
        for name, value in ARCH_DEFINES[target_arch]:
            defines[name] = value

        if driver_config.driver_class.is_kernel_mode:
            for name, value in KERNEL_MODE_DEFINES:
                defines[name] = value

        framework = driver_config.framework_version
        if framework is not None:
            prefix = driver_config.driver_class.value
            defines[f"{prefix}_VERSION_MAJOR"] = str(framework.major)
            defines[f"{prefix}_VERSION_MINOR"] = str(framework.minor)

        return defines


def resolve(
    installations: Sequence[KitInstallation],
    driver_config: DriverConfig,
    target_arch: TargetArch,
    pin: Optional[KitVersion] = None,
    layout: Optional[KitLayout] = None,
    consulted_paths: Sequence[Path] = (),
) -> ResolvedBuildConfig:
    """Resolve with the default (or given) kit layout."""
    return ConfigurationResolver(layout).resolve(
        installations, driver_config, target_arch, pin, consulted_paths
    )
