"""
Kit release identifiers.

Windows kits are versioned as dotted numeric identifiers such as
``10.0.22621.0``. KitVersion compares them field by field, most significant
field first. When two versions have a different number of fields the shorter
one is treated as if padded with trailing zeros, so ``10.0.22000`` and
``10.0.22000.0`` are equal. String comparison is never used.
"""

import functools
import re
from dataclasses import dataclass
from typing import Tuple

from ..core.exceptions import WdkConfigError

_VERSION_RE = re.compile(r"^[0-9]+(?:\.[0-9]+)+$")


class InvalidKitVersion(WdkConfigError, ValueError):
    """Raised when a string is not a dotted numeric kit version."""

    def __init__(self, text: str):
        self.text = text
        super().__init__(
            f"Invalid kit version '{text}' (expected dotted numbers, e.g. 10.0.22621.0)"
        )


@functools.total_ordering
@dataclass(frozen=True, eq=False)
class KitVersion:
    """
    Ordered kit release identifier.

    Attributes:
        fields: Numeric fields as parsed, most significant first

    Example:
        >>> KitVersion.parse("10.0.26100.0") > KitVersion.parse("10.0.22000.0")
        True
        >>> KitVersion.parse("10.0.22000") == KitVersion.parse("10.0.22000.0")
        True
    """

    fields: Tuple[int, ...]

    @classmethod
    def parse(cls, text: str) -> "KitVersion":
        """
        Parse a dotted release identifier.

        Raises:
            InvalidKitVersion: If text is not at least two dot-separated numbers
        """
        text = str(text).strip()
        if not _VERSION_RE.match(text):
            raise InvalidKitVersion(text)
        return cls(tuple(int(part) for part in text.split(".")))

    @property
    def build_number(self) -> int:
        """
        WDK build number (third field), e.g. 22621 for 10.0.22621.0.

        Returns 0 when the identifier has fewer than three fields.
        """
        return self.fields[2] if len(self.fields) > 2 else 0

    def _key(self) -> Tuple[int, ...]:
        # Trailing zeros carry no ordering information
        fields = list(self.fields)
        while len(fields) > 1 and fields[-1] == 0:
            fields.pop()
        return tuple(fields)

    def _padded(self, width: int) -> Tuple[int, ...]:
        return self.fields + (0,) * (width - len(self.fields))

    def __eq__(self, other) -> bool:
        if not isinstance(other, KitVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, KitVersion):
            return NotImplemented
        width = max(len(self.fields), len(other.fields))
        return self._padded(width) < other._padded(width)

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return ".".join(str(part) for part in self.fields)

    def __repr__(self) -> str:
        return f"KitVersion('{self}')"
