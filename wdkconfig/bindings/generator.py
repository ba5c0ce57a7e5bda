"""
External binding generator invocation.

The generator is an opaque tool: it receives a header path, an output path
and the flag list from wdkconfig.bindings.flags, and writes typed
declarations. Any failure is reported as BindingGenerationFailed.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from ..core.exceptions import BindingGenerationFailed

logger = logging.getLogger(__name__)

DEFAULT_GENERATOR = "bindgen"


class BindingGenerator:
    """
    Runs the header-binding generator.

    Example:
        >>> generator = BindingGenerator()
        >>> generator.generate(Path('src/wrapper.h'), build_flags(config),
        ...                    Path('out/bindings.rs'))
    """

    def __init__(self, executable: str = DEFAULT_GENERATOR):
        self.executable = executable

    def find_executable(self) -> Optional[Path]:
        path_str = shutil.which(self.executable)
        return Path(path_str) if path_str else None

    def command(self, header: Path, flags: Sequence[str], output: Path) -> List[str]:
        return [self.executable, str(header), "-o", str(output), *flags]

    def generate(self, header: Path, flags: Sequence[str], output: Path) -> Path:
        """
        Generate bindings for a header.

        Args:
            header: C header to translate
            flags: Generator flag list
            output: File to write the declarations to

        Returns:
            The output path

        Raises:
            BindingGenerationFailed: If the generator is missing or fails
        """
        if not Path(header).is_file():
            raise BindingGenerationFailed(header, None, f"Header not found: {header}")

        if self.find_executable() is None:
            raise BindingGenerationFailed(
                header, None, f"Binding generator '{self.executable}' not found"
            )

        output.parent.mkdir(parents=True, exist_ok=True)
        cmd = self.command(header, flags, output)
        logger.debug(f"Running binding generator: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
            )
        except FileNotFoundError as e:
            raise BindingGenerationFailed(
                header, None, f"Binding generator '{self.executable}' not found"
            ) from e
        except OSError as e:
            raise BindingGenerationFailed(header, None, str(e)) from e

        if result.returncode != 0:
            raise BindingGenerationFailed(header, result.returncode, result.stderr)

        logger.info(f"Generated bindings for {header} -> {output}")
        return output
