"""Build option parsing for wdkconfig.

Options come from an optional YAML file (``wdk.yaml``) and are overridden by
environment variables set by the build orchestrator or the developer.

Example wdk.yaml::

    wdk:
      driver_class: KMDF
      kmdf_version: "1.33"
      target_arch: x64
      pinned_kit_version: 10.0.22621.0
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

import yaml

from ..core.exceptions import InvalidDriverConfig, OptionsError
from ..core.platform import detect_platform
from ..kit.layout import KitLayout
from ..kit.targets import (
    DEFAULT_KMDF_VERSION,
    DEFAULT_UMDF_VERSION,
    DriverClass,
    DriverConfig,
    FrameworkVersion,
    TargetArch,
)
from ..kit.version import InvalidKitVersion, KitVersion

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS_FILE = "wdk.yaml"

# Option name -> environment variable, highest precedence source
ENV_OPTIONS = {
    "driver_class": "WDK_DRIVER_CLASS",
    "kmdf_version": "WDK_KMDF_VERSION",
    "umdf_version": "WDK_UMDF_VERSION",
    "target_arch": "WDK_TARGET_ARCH",
    "pinned_kit_version": "WDK_PINNED_KIT_VERSION",
}

# Target architecture the orchestrator exports for build steps
ORCHESTRATOR_TARGET_ARCH = "CARGO_CFG_TARGET_ARCH"

KNOWN_OPTIONS = set(ENV_OPTIONS) | {"layout"}


@dataclass
class BuildOptions:
    """
    Caller-supplied configuration, before validation.

    Attributes:
        driver_class: 'KMDF', 'UMDF' or 'WDM'
        kmdf_version: KMDF version 'major.minor' (KMDF only)
        umdf_version: UMDF version 'major.minor' (UMDF only)
        target_arch: Target architecture name
        pinned_kit_version: Exact kit version to use instead of the newest
        layout: Optional directory tier overrides (see KitLayout.from_dict)
    """

    driver_class: str = DriverClass.KMDF.value
    kmdf_version: Optional[str] = None
    umdf_version: Optional[str] = None
    target_arch: Optional[str] = None
    pinned_kit_version: Optional[str] = None
    layout: dict = field(default_factory=dict)

    def as_dict(self) -> dict:
        return {
            "driver_class": self.driver_class,
            "kmdf_version": self.kmdf_version,
            "umdf_version": self.umdf_version,
            "target_arch": self.target_arch,
            "pinned_kit_version": self.pinned_kit_version,
        }

    def driver_config(self) -> DriverConfig:
        """
        Validate the driver options and build a DriverConfig.

        Setting the version field of the other framework is an error rather
        than being ignored.

        Raises:
            InvalidDriverConfig: If the options are inconsistent
        """
        supplied = {k: v for k, v in self.as_dict().items() if v is not None}
        try:
            driver_class = DriverClass.parse(self.driver_class)
        except InvalidDriverConfig as e:
            raise InvalidDriverConfig(str(e), supplied) from e

        if driver_class is DriverClass.KMDF:
            own, other, other_name = self.kmdf_version, self.umdf_version, "umdf_version"
            default = DEFAULT_KMDF_VERSION
        elif driver_class is DriverClass.UMDF:
            own, other, other_name = self.umdf_version, self.kmdf_version, "kmdf_version"
            default = DEFAULT_UMDF_VERSION
        else:
            for name in ("kmdf_version", "umdf_version"):
                if getattr(self, name) is not None:
                    raise InvalidDriverConfig(
                        f"{name} cannot be set for a WDM driver", supplied
                    )
            return DriverConfig(DriverClass.WDM)

        if other is not None:
            raise InvalidDriverConfig(
                f"{other_name} cannot be set for a {driver_class.value} driver",
                supplied,
            )

        try:
            version = FrameworkVersion.parse(own) if own is not None else FrameworkVersion(*default)
            return DriverConfig(driver_class, version)
        except InvalidDriverConfig as e:
            raise InvalidDriverConfig(str(e), supplied) from e

    def target(self) -> TargetArch:
        """Target architecture, defaulting to the host architecture."""
        if self.target_arch:
            return TargetArch.parse(self.target_arch)
        host_arch = detect_platform().arch
        logger.debug(f"No target architecture set, using host architecture {host_arch}")
        return TargetArch.parse(host_arch)

    def pin(self) -> Optional[KitVersion]:
        if not self.pinned_kit_version:
            return None
        try:
            return KitVersion.parse(self.pinned_kit_version)
        except InvalidKitVersion as e:
            raise OptionsError(str(e)) from e

    def kit_layout(self) -> KitLayout:
        return KitLayout.from_dict(self.layout)


def load_options(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> BuildOptions:
    """
    Load build options from file and environment.

    Args:
        config_path: Options file. If None, ./wdk.yaml is used when present.
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Merged BuildOptions (not yet validated)

    Raises:
        OptionsError: If the options file is unreadable or malformed
    """
    environ = os.environ if environ is None else environ

    data: dict = {}
    if config_path is not None:
        if not Path(config_path).exists():
            raise OptionsError(f"Options file not found: {config_path}")
        data = _read_options_file(Path(config_path))
    elif Path(DEFAULT_OPTIONS_FILE).exists():
        data = _read_options_file(Path(DEFAULT_OPTIONS_FILE))

    for option, variable in ENV_OPTIONS.items():
        value = environ.get(variable)
        if value:
            logger.debug(f"Option {option} overridden by {variable}={value}")
            data[option] = value

    if not data.get("target_arch") and environ.get(ORCHESTRATOR_TARGET_ARCH):
        data["target_arch"] = environ[ORCHESTRATOR_TARGET_ARCH]

    return BuildOptions(
        driver_class=str(data.get("driver_class", DriverClass.KMDF.value)),
        kmdf_version=_optional_str(data.get("kmdf_version")),
        umdf_version=_optional_str(data.get("umdf_version")),
        target_arch=_optional_str(data.get("target_arch")),
        pinned_kit_version=_optional_str(data.get("pinned_kit_version")),
        layout=data.get("layout") or {},
    )


def _read_options_file(config_path: Path) -> dict:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise OptionsError(f"Invalid YAML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise OptionsError(f"Cannot read options file {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise OptionsError(f"Options file {config_path} must contain a mapping")

    # Options may be nested under a 'wdk' section
    if isinstance(data.get("wdk"), dict):
        data = data["wdk"]

    unknown = set(data) - KNOWN_OPTIONS
    if unknown:
        raise OptionsError(
            f"Unknown option(s) in {config_path}: {', '.join(sorted(unknown))}"
        )

    logger.debug(f"Loaded options from {config_path}")
    return dict(data)


def _optional_str(value) -> Optional[str]:
    if value is None:
        return None
    return str(value)
