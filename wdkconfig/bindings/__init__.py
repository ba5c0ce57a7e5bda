"""Header-binding generation support."""

from wdkconfig.bindings.flags import SymbolFilter, build_flags
from wdkconfig.bindings.generator import BindingGenerator

__all__ = ["SymbolFilter", "build_flags", "BindingGenerator"]
