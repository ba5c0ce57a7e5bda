"""
Centralized exception hierarchy for wdkconfig.

Every failure in a build invocation is fatal. Nothing here is retried or
downgraded, so each exception carries enough context (attempted paths,
supplied configuration, tool output) to be rendered as a diagnostic.
"""

from pathlib import Path
from typing import Iterable, Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class WdkConfigError(Exception):
    """Base exception for all wdkconfig errors."""

    pass


# ============================================================================
# Discovery Exceptions
# ============================================================================


class KitNotFound(WdkConfigError):
    """Raised when no kit installation was discovered on the host."""

    def __init__(self, attempted_paths: Iterable[Path] = ()):
        self.attempted_paths = [Path(p) for p in attempted_paths]
        msg = "No Windows Driver Kit installation found"
        if self.attempted_paths:
            searched = ", ".join(str(p) for p in self.attempted_paths)
            msg += f" (searched: {searched})"
        msg += ". Install the WDK or set WDKContentRoot to its root directory."
        super().__init__(msg)


class ProbeFailure(WdkConfigError):
    """Raised when a host query fails with a permission or I/O fault."""

    def __init__(self, path: Optional[Path], reason: str):
        self.path = path
        self.reason = reason
        where = f" at {path}" if path is not None else ""
        super().__init__(f"Failed to probe kit installation{where}: {reason}")


class VersionMismatch(WdkConfigError):
    """Raised when a pinned kit version is not among the discovered ones."""

    def __init__(self, pinned, available: Sequence):
        self.pinned = pinned
        self.available = list(available)
        found = ", ".join(str(v) for v in self.available) or "none"
        super().__init__(
            f"Pinned kit version {pinned} is not installed (available: {found})"
        )


# ============================================================================
# Configuration Exceptions
# ============================================================================


class InvalidDriverConfig(WdkConfigError):
    """Raised when a driver configuration violates its class/version invariant."""

    def __init__(self, message: str, supplied: Optional[dict] = None):
        self.supplied = dict(supplied or {})
        if self.supplied:
            shown = ", ".join(f"{k}={v!r}" for k, v in self.supplied.items())
            message = f"{message} (supplied: {shown})"
        super().__init__(message)


class OptionsError(InvalidDriverConfig):
    """Raised when caller-supplied options cannot be parsed."""

    pass


# ============================================================================
# Output Exceptions
# ============================================================================


class BindingGenerationFailed(WdkConfigError):
    """Raised when the external binding generator reports an error."""

    def __init__(self, header: Path, returncode: Optional[int], stderr: str = ""):
        self.header = header
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Binding generation failed for {header}"
        if returncode is not None:
            msg += f" (exit code {returncode})"
        if stderr:
            msg += f":\n{stderr.strip()}"
        super().__init__(msg)


class CacheIoFailure(WdkConfigError):
    """Raised when the configuration cache cannot be written or read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Configuration cache error for {path}: {reason}")
