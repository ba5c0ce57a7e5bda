"""
Filesystem helpers for wdkconfig.

Only the operations the engine needs: atomic writes for the configuration
cache and a safe directory listing for kit probing.
"""

import logging
import tempfile
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)

    Example:
        >>> atomic_write('wdk-config.yaml', 'kit_version: 10.0.22621.0\\n')
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except Exception:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError as e:
            logger.debug(f"Could not remove temp file {temp_path}: {e}")
        raise


def list_subdirectories(path: Path) -> List[Path]:
    """
    List immediate subdirectories of a directory, sorted by name.

    Args:
        path: Directory to list

    Returns:
        Subdirectory paths in name order

    Raises:
        OSError: If the directory exists but cannot be listed
    """
    return sorted((entry for entry in path.iterdir() if entry.is_dir()), key=str)
