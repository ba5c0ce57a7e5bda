"""
Build orchestrator directives.

emit() turns a resolved configuration into a typed list of directives.
render() is the only place that knows the orchestrator's line syntax
(cargo build-script convention, one directive per line on stdout).
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO, Union

from ..config.resolver import ResolvedBuildConfig, dedupe

logger = logging.getLogger(__name__)

DIRECTIVE_PREFIX = "cargo:"


@dataclass(frozen=True)
class LinkSearchPath:
    """Add a native library search directory."""

    path: Path


@dataclass(frozen=True)
class LinkLibrary:
    """Link a static/import library by name."""

    name: str


@dataclass(frozen=True)
class RerunIfChanged:
    """Re-run the build step when this path changes."""

    path: Path


@dataclass(frozen=True)
class SetCfg:
    """Set a conditional-compilation flag, optionally with a value."""

    name: str
    value: Optional[str] = None


BuildDirective = Union[LinkSearchPath, LinkLibrary, RerunIfChanged, SetCfg]


def emit(config: ResolvedBuildConfig) -> List[BuildDirective]:
    """
    Build the directive sequence for a resolved configuration.

    Order: search paths, link libraries, re-run triggers, cfg flags.
    """
    directives: List[BuildDirective] = []

    directives += [LinkSearchPath(path) for path in dedupe(config.lib_dirs)]
    directives += [LinkLibrary(name) for name in dedupe(config.link_libs)]
    directives += [RerunIfChanged(path) for path in dedupe(config.rerun_paths)]

    driver_config = config.driver_config
    directives.append(SetCfg("driver_type", driver_config.driver_class.value))
    if driver_config.framework_version is not None:
        directives.append(
            SetCfg(
                f"{driver_config.driver_class.value.lower()}_version",
                str(driver_config.framework_version),
            )
        )

    logger.debug(f"Emitting {len(directives)} directives for {config.key}")
    return directives


def render_directive(directive: BuildDirective) -> str:
    """Render one directive in the orchestrator's syntax."""
    if isinstance(directive, LinkSearchPath):
        return f"{DIRECTIVE_PREFIX}rustc-link-search=native={directive.path}"
    if isinstance(directive, LinkLibrary):
        return f"{DIRECTIVE_PREFIX}rustc-link-lib=static={directive.name}"
    if isinstance(directive, RerunIfChanged):
        return f"{DIRECTIVE_PREFIX}rerun-if-changed={directive.path}"
    if isinstance(directive, SetCfg):
        if directive.value is None:
            return f"{DIRECTIVE_PREFIX}rustc-cfg={directive.name}"
        return f'{DIRECTIVE_PREFIX}rustc-cfg={directive.name}="{directive.value}"'
    raise TypeError(f"Unknown directive: {directive!r}")


def render(directives: List[BuildDirective]) -> List[str]:
    return [render_directive(d) for d in directives]


def write_directives(directives: List[BuildDirective], stream: TextIO) -> None:
    """Write rendered directives to the orchestrator's stream."""
    lines = render(directives)
    stream.write("".join(f"{line}\n" for line in lines))
    stream.flush()
