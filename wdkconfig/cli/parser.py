"""
wdkconfig build-step entry point.

The build orchestrator runs this as a package build step. Directives go to
stdout; logging goes to stderr so it never mixes with them.

Usage:
    wdkconfig configure --out-dir "$OUT_DIR"
    wdkconfig bindgen --out-dir "$OUT_DIR" --header src/wrapper.h --output "$OUT_DIR/bindings.rs"
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from ..core.exceptions import WdkConfigError

try:
    from importlib.metadata import version

    __version__ = version("wdkconfig")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """wdkconfig command-line interface."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="wdkconfig",
            description="Windows Driver Kit build configuration",
        )

        parser.add_argument(
            "--version", action="version", version=f"wdkconfig {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_configure_command(subparsers)
        self._add_bindgen_command(subparsers)

        return parser

    def _add_out_dir(self, parser):
        parser.add_argument(
            "--out-dir",
            type=Path,
            metavar="DIR",
            default=os.environ.get("OUT_DIR"),
            help="Package output directory holding the configuration cache "
            "(default: $OUT_DIR)",
        )

    def _add_configure_command(self, subparsers):
        """Add 'configure' subcommand."""
        parser = subparsers.add_parser(
            "configure",
            help="Discover the kit, resolve and emit build directives",
        )
        self._add_out_dir(parser)
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Options file (default: ./wdk.yaml if present)",
        )
        parser.add_argument(
            "--no-verify",
            action="store_true",
            help="Do not check that resolved directories exist",
        )

    def _add_bindgen_command(self, subparsers):
        """Add 'bindgen' subcommand."""
        parser = subparsers.add_parser(
            "bindgen",
            help="Generate bindings from the cached configuration",
        )
        self._add_out_dir(parser)
        parser.add_argument(
            "--header", type=Path, required=True, metavar="PATH", help="C header"
        )
        parser.add_argument(
            "--output",
            type=Path,
            required=True,
            metavar="PATH",
            help="File to write the bindings to",
        )
        parser.add_argument(
            "--generator",
            default="bindgen",
            metavar="EXE",
            help="Binding generator executable (default: bindgen)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)
        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help(sys.stderr)
            return 1

        if parsed_args.out_dir is None:
            logger.error("No output directory: pass --out-dir or set OUT_DIR")
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except WdkConfigError as e:
            logger.error(f"Error: {e}")
            return 1

    def _configure_logging(self, args):
        """Configure logging based on verbose/quiet flags."""
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,
        )

    def _dispatch_command(self, args) -> int:
        from ..build import BuildConfigurator, generate_bindings
        from ..bindings.generator import BindingGenerator
        from ..config.parser import load_options

        if args.command == "configure":
            options = load_options(args.config)
            configurator = BuildConfigurator(
                options, out_dir=args.out_dir, verify_paths=not args.no_verify
            )
            configurator.configure(sys.stdout)
            return 0

        if args.command == "bindgen":
            generate_bindings(
                args.out_dir,
                args.header,
                args.output,
                generator=BindingGenerator(args.generator),
            )
            return 0

        logger.error(f"Unknown command: {args.command}")
        return 1


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
