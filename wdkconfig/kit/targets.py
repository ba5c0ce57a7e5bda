"""
Driver configuration and target architecture.

This module defines the configuration matrix a build resolves against:
the driver class with its framework version, and the target CPU architecture.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.exceptions import InvalidDriverConfig

logger = logging.getLogger(__name__)


class DriverClass(str, Enum):
    """Driver framework model."""

    KMDF = "KMDF"
    UMDF = "UMDF"
    WDM = "WDM"

    @classmethod
    def parse(cls, text: str) -> "DriverClass":
        try:
            return cls(str(text).strip().upper())
        except ValueError:
            raise InvalidDriverConfig(
                f"Unknown driver class '{text}'. "
                f"Supported classes: {', '.join(c.value for c in cls)}"
            ) from None

    @property
    def is_kernel_mode(self) -> bool:
        return self is not DriverClass.UMDF

    @property
    def uses_framework(self) -> bool:
        return self is not DriverClass.WDM


class TargetArch(str, Enum):
    """Target CPU architecture of the driver binary."""

    X86 = "x86"
    X64 = "x64"
    ARM = "arm"
    ARM64 = "arm64"

    @classmethod
    def parse(cls, text: str) -> "TargetArch":
        """
        Parse an architecture name.

        Accepts both the kit's names and the build orchestrator's target-arch
        spelling (e.g., 'x86_64', 'aarch64').

        Raises:
            InvalidDriverConfig: If the architecture is not supported
        """
        name = str(text).strip().lower()
        arch = _ARCH_ALIASES.get(name)
        if arch is None:
            raise InvalidDriverConfig(
                f"Unsupported target architecture '{text}'. "
                f"Supported architectures: {', '.join(a.value for a in cls)}"
            )
        return arch

    @property
    def lib_folder(self) -> str:
        """Name of the architecture folder inside the kit's Lib tree."""
        return _LIB_FOLDERS[self]

    @property
    def target_triple(self) -> str:
        """Clang target triple used when parsing the kit's headers."""
        return _TARGET_TRIPLES[self]


_ARCH_ALIASES = {
    "x86": TargetArch.X86,
    "i386": TargetArch.X86,
    "i586": TargetArch.X86,
    "i686": TargetArch.X86,
    "x64": TargetArch.X64,
    "x86_64": TargetArch.X64,
    "amd64": TargetArch.X64,
    "arm": TargetArch.ARM,
    "thumbv7a": TargetArch.ARM,
    "arm64": TargetArch.ARM64,
    "aarch64": TargetArch.ARM64,
}

_LIB_FOLDERS = {
    TargetArch.X86: "x86",
    TargetArch.X64: "x64",
    TargetArch.ARM: "arm",
    TargetArch.ARM64: "arm64",
}

_TARGET_TRIPLES = {
    TargetArch.X86: "i686-pc-windows-msvc",
    TargetArch.X64: "x86_64-pc-windows-msvc",
    TargetArch.ARM: "thumbv7a-pc-windows-msvc",
    TargetArch.ARM64: "aarch64-pc-windows-msvc",
}

# Framework major version each class accepts
_FRAMEWORK_MAJOR = {
    DriverClass.KMDF: 1,
    DriverClass.UMDF: 2,
}

DEFAULT_KMDF_VERSION = (1, 33)
DEFAULT_UMDF_VERSION = (2, 33)


def _is_ascii_number(text: str) -> bool:
    return text.isascii() and text.isdecimal()


@dataclass(frozen=True)
class FrameworkVersion:
    """KMDF or UMDF framework version."""

    major: int
    minor: int

    @classmethod
    def parse(cls, text) -> "FrameworkVersion":
        """
        Parse 'major.minor' (string) or a (major, minor) pair.

        Raises:
            InvalidDriverConfig: If the value is malformed
        """
        if isinstance(text, FrameworkVersion):
            return text
        if isinstance(text, (tuple, list)) and len(text) == 2:
            parts = [str(p) for p in text]
        else:
            parts = str(text).strip().split(".")
        if len(parts) != 2 or not all(_is_ascii_number(p.strip()) for p in parts):
            raise InvalidDriverConfig(
                f"Invalid framework version '{text}' (expected 'major.minor', e.g. 1.33)"
            )
        return cls(int(parts[0]), int(parts[1]))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class DriverConfig:
    """
    Driver class plus framework version.

    framework_version is required for KMDF and UMDF and must be absent for
    WDM. KMDF versions are 1.x and UMDF versions are 2.x.

    Raises:
        InvalidDriverConfig: On construction if the invariant is violated
    """

    driver_class: DriverClass
    framework_version: Optional[FrameworkVersion] = None

    def __post_init__(self):
        if not isinstance(self.driver_class, DriverClass):
            object.__setattr__(self, "driver_class", DriverClass.parse(self.driver_class))
        if self.framework_version is not None and not isinstance(
            self.framework_version, FrameworkVersion
        ):
            object.__setattr__(
                self, "framework_version", FrameworkVersion.parse(self.framework_version)
            )

        supplied = {
            "driver_class": self.driver_class.value,
            "framework_version": (
                str(self.framework_version) if self.framework_version else None
            ),
        }

        if self.driver_class.uses_framework:
            if self.framework_version is None:
                raise InvalidDriverConfig(
                    f"{self.driver_class.value} requires a framework version",
                    supplied,
                )
            expected_major = _FRAMEWORK_MAJOR[self.driver_class]
            if self.framework_version.major != expected_major:
                raise InvalidDriverConfig(
                    f"{self.framework_version} is not a {self.driver_class.value} "
                    f"version ({self.driver_class.value} versions are "
                    f"{expected_major}.x)",
                    supplied,
                )
        elif self.framework_version is not None:
            raise InvalidDriverConfig(
                "WDM drivers do not use a framework version", supplied
            )

    @classmethod
    def kmdf(cls, major: int = 1, minor: int = 33) -> "DriverConfig":
        return cls(DriverClass.KMDF, FrameworkVersion(major, minor))

    @classmethod
    def umdf(cls, major: int = 2, minor: int = 33) -> "DriverConfig":
        return cls(DriverClass.UMDF, FrameworkVersion(major, minor))

    @classmethod
    def wdm(cls) -> "DriverConfig":
        return cls(DriverClass.WDM)

    def __str__(self) -> str:
        if self.framework_version is None:
            return self.driver_class.value
        return f"{self.driver_class.value} {self.framework_version}"
