"""Build orchestrator directives."""

from wdkconfig.emit.directives import (
    BuildDirective,
    LinkLibrary,
    LinkSearchPath,
    RerunIfChanged,
    SetCfg,
    emit,
    render,
)

__all__ = [
    "BuildDirective",
    "LinkLibrary",
    "LinkSearchPath",
    "RerunIfChanged",
    "SetCfg",
    "emit",
    "render",
]
