"""Configuration module for wdkconfig.

This module provides build option parsing, configuration resolution and the
resolved configuration cache.
"""

from wdkconfig.config.parser import BuildOptions, load_options
from wdkconfig.config.resolver import (
    ConfigKey,
    ConfigurationResolver,
    ResolvedBuildConfig,
    resolve,
)
from wdkconfig.config.cache import ConfigCache

__all__ = [
    "BuildOptions",
    "load_options",
    "ConfigKey",
    "ConfigurationResolver",
    "ResolvedBuildConfig",
    "resolve",
    "ConfigCache",
]
