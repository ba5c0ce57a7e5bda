"""
Binding generator flags.

Translates a resolved configuration into the argument list of the external
header-binding generator. Generator options (symbol filters, output style)
come first, followed by ``--`` and the flags forwarded to the C parser.

The output depends only on the configuration, so repeated builds produce
identical bindings.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from ..config.resolver import ResolvedBuildConfig

# Flags the kit's headers need to parse the way MSVC parses them
MSVC_COMPAT_FLAGS: Tuple[str, ...] = (
    "-fms-compatibility",
    "-fms-extensions",
    "-fdelayed-template-parsing",
)

# Generator options that shape the generated declarations
GENERATOR_OPTIONS: Tuple[str, ...] = (
    "--use-core",
    "--with-derive-default",
    "--no-layout-tests",
    "--default-enum-style=moduleconsts",
)


@dataclass(frozen=True)
class SymbolFilter:
    """
    Restricts which declarations the generator surfaces.

    Attributes:
        allowlist_files: Regexes of header paths whose declarations are kept
        blocklist_items: Regexes of symbol names that are never generated
        opaque_types: Types generated as opaque blobs
    """

    allowlist_files: Tuple[str, ...] = field(default_factory=tuple)
    blocklist_items: Tuple[str, ...] = field(default_factory=tuple)
    opaque_types: Tuple[str, ...] = field(default_factory=tuple)

    def to_flags(self) -> List[str]:
        flags: List[str] = []
        for pattern in self.allowlist_files:
            flags += ["--allowlist-file", pattern]
        for pattern in self.blocklist_items:
            flags += ["--blocklist-item", pattern]
        for name in self.opaque_types:
            flags += ["--opaque-type", name]
        return flags


DEFAULT_SYMBOL_FILTER = SymbolFilter(
    allowlist_files=(
        r"(?i).*[\\/]include[\\/]wdf[\\/].*",
        r"(?i).*[\\/]include[\\/][0-9.]+[\\/](km|um|shared|ucrt)[\\/].*",
    ),
    blocklist_items=(
        # Deprecated pool allocators
        "ExAllocatePool",
        "ExAllocatePoolWithQuota",
        "ExAllocatePoolWithQuotaTag",
        "ExAllocatePoolWithTag",
        "ExAllocatePoolWithTagPriority",
        "_?P?IMAGE_TLS_DIRECTORY.*",
    ),
    opaque_types=(
        "_KGDTENTRY64",
        "_KIDTENTRY64",
    ),
)


def define_flag(name: str, value) -> str:
    if value is None:
        return f"-D{name}"
    return f"-D{name}={value}"


def clang_flags(config: ResolvedBuildConfig) -> List[str]:
    """
    Flags forwarded to the C parser.

    Include flags keep the resolved precedence order. Definitions are sorted
    by name.
    """
    flags = [f"-I{path}" for path in config.include_dirs]
    defines = config.define_map
    flags += [define_flag(name, defines[name]) for name in sorted(defines)]
    flags.append(f"--target={config.target_arch.target_triple}")
    flags.extend(MSVC_COMPAT_FLAGS)
    return flags


def build_flags(
    config: ResolvedBuildConfig, symbol_filter: SymbolFilter = DEFAULT_SYMBOL_FILTER
) -> List[str]:
    """
    Build the complete generator argument list.

    Args:
        config: Resolved build configuration
        symbol_filter: Declarations to keep and drop

    Returns:
        Generator options, '--', then parser flags
    """
    return [
        *GENERATOR_OPTIONS,
        *symbol_filter.to_flags(),
        "--",
        *clang_flags(config),
    ]
