"""
Build-step pipeline.

Runs one build invocation end to end: validate options, discover kits,
resolve, verify, cache, emit. Directives are collected completely before the
first line is written, so a failure at any stage leaves the orchestrator with
no directives at all.
"""

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional, TextIO

from .bindings.flags import build_flags
from .bindings.generator import BindingGenerator
from .config.cache import ConfigCache
from .config.parser import BuildOptions
from .config.resolver import ConfigurationResolver, ResolvedBuildConfig
from .core.exceptions import CacheIoFailure, ProbeFailure
from .core.interfaces import ConfigurationStore
from .emit.directives import BuildDirective, emit, write_directives
from .kit.locator import KitLocator

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Outcome of a configure run."""

    config: ResolvedBuildConfig
    directives: List[BuildDirective]
    cache_file: Path


class BuildConfigurator:
    """
    Configures one package build against the installed kit.

    Example:
        >>> configurator = BuildConfigurator(load_options(), out_dir=Path('target/out'))
        >>> result = configurator.configure()
    """

    def __init__(
        self,
        options: BuildOptions,
        out_dir: Path,
        store: Optional[ConfigurationStore] = None,
        environ: Optional[Mapping[str, str]] = None,
        verify_paths: bool = True,
        locator: Optional[KitLocator] = None,
    ):
        self.options = options
        self.out_dir = Path(out_dir)
        self.verify_paths = verify_paths
        self.layout = options.kit_layout()
        self.locator = locator or KitLocator(
            store=store, environ=environ, layout=self.layout
        )
        self.resolver = ConfigurationResolver(self.layout)
        self.cache = ConfigCache(self.out_dir)

    def resolve(self) -> ResolvedBuildConfig:
        """
        Validate options, discover kits and resolve the configuration.

        Raises:
            InvalidDriverConfig: Before any host probing, if options are invalid
            KitNotFound, VersionMismatch, ProbeFailure: From discovery/resolution
        """
        driver_config = self.options.driver_config()
        target_arch = self.options.target()
        pin = self.options.pin()

        installations = self.locator.discover()
        config = self.resolver.resolve(
            installations,
            driver_config,
            target_arch,
            pin,
            consulted_paths=self.locator.consulted_paths,
        )

        if self.verify_paths:
            missing = config.missing_directories()
            if missing:
                raise ProbeFailure(
                    missing[0],
                    f"kit {config.kit_version} is missing {len(missing)} "
                    f"required director{'y' if len(missing) == 1 else 'ies'}: "
                    + ", ".join(str(p) for p in missing),
                )
        return config

    def configure(self, stream: Optional[TextIO] = None) -> BuildResult:
        """
        Resolve, cache and emit directives.

        Args:
            stream: Where to write directives (defaults to stdout)
        """
        config = self.resolve()
        directives = emit(config)
        cache_file = self.cache.save(config)

        write_directives(directives, stream or sys.stdout)
        logger.info(f"Configured {config.key} ({len(directives)} directives)")
        return BuildResult(config=config, directives=directives, cache_file=cache_file)


def generate_bindings(
    out_dir: Path,
    header: Path,
    output: Path,
    generator: Optional[BindingGenerator] = None,
) -> Path:
    """
    Generate bindings from the cached configuration.

    A missing cache means the configure step did not run.

    Raises:
        CacheIoFailure: If there is no usable cache
        BindingGenerationFailed: If the generator fails
    """
    cache = ConfigCache(out_dir)
    config = cache.load()
    if config is None:
        raise CacheIoFailure(
            cache.cache_file, "no cached configuration; run 'configure' first"
        )

    generator = generator or BindingGenerator()
    return generator.generate(header, build_flags(config), output)
