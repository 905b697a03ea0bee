"""Firmware version codes.

Vendor BIOS versions come in two shapes:

- dotted, e.g. ``1.12.0``
- compact three character labels used by older platforms, e.g. ``A08``

Both are normalised into a tuple of integer components. Comparison is
component-wise without zero padding, so ``1.2 < 1.2.0``.
"""

import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from bios_updater.errors import VersionFormatError

logger = logging.getLogger("bios_updater.version")

COMPACT_LENGTH = 3


class VersionFormat(str, Enum):
    """Tagged result of parsing a raw version string."""

    DOTTED = "dotted"
    COMPACT = "compact"
    INVALID = "invalid"


class Ordering(str, Enum):
    """Result of comparing two version codes."""

    LESS = "less"
    EQUAL = "equal"
    GREATER = "greater"


class VersionCode(BaseModel):
    """Comparable representation of a firmware version string."""

    model_config = ConfigDict(frozen=True)

    raw: str = Field(..., description="Version string as reported by the vendor")
    format: VersionFormat = Field(..., description="Which input shape was recognised")
    components: tuple[int, ...] = Field(
        default=(), description="Numeric components, empty when invalid"
    )

    @property
    def is_valid(self) -> bool:
        return self.format != VersionFormat.INVALID

    def __eq__(self, other: object) -> bool:
        # Compact and dotted spellings of the same version are equal
        if not isinstance(other, VersionCode):
            return NotImplemented
        if not (self.is_valid and other.is_valid):
            return self.format == other.format and self.raw == other.raw
        return self.components == other.components

    def __hash__(self) -> int:
        return hash(self.components if self.is_valid else self.raw)

    def __str__(self) -> str:
        if not self.is_valid:
            return self.raw
        return ".".join(str(c) for c in self.components)


def _parse_dotted(text: str) -> Optional[tuple[int, ...]]:
    segments = text.split(".")
    if not all(segment.isascii() and segment.isdigit() for segment in segments):
        return None
    return tuple(int(segment) for segment in segments)


def normalize_compact(raw: str) -> str:
    """Turn a compact label into dotted form: ``A12`` -> ``1.2``."""
    stripped = raw.replace("A", "")
    return f"{stripped[:1]}.{stripped[1:]}"


def parse_version(raw: str) -> VersionCode:
    """Parse a raw vendor version string.

    Never raises: strings that cannot be interpreted produce an ``INVALID``
    VersionCode and a warning in the log. Use :func:`compare_versions` to
    find out whether the result is usable.

    Args:
        raw: Version string, e.g. ``"1.12.0"`` or ``"A08"``

    Returns:
        VersionCode tagged with the recognised format
    """
    text = (raw or "").strip()

    if "." in text:
        components = _parse_dotted(text)
        if components is not None:
            return VersionCode(raw=raw, format=VersionFormat.DOTTED, components=components)
    elif len(text) == COMPACT_LENGTH:
        components = _parse_dotted(normalize_compact(text))
        if components is not None:
            return VersionCode(raw=raw, format=VersionFormat.COMPACT, components=components)
    elif text.isascii() and text.isdigit():
        return VersionCode(raw=raw, format=VersionFormat.DOTTED, components=(int(text),))

    logger.warning(f"Unrecognised version format: {raw!r}")
    return VersionCode(raw=raw or "", format=VersionFormat.INVALID)


def compare_versions(a: VersionCode, b: VersionCode) -> Ordering:
    """Compare two version codes component-wise.

    Raises:
        VersionFormatError: If either version is invalid
    """
    for version in (a, b):
        if not version.is_valid:
            raise VersionFormatError(f"Cannot compare unparseable version {version.raw!r}")

    if a.components < b.components:
        return Ordering.LESS
    if a.components > b.components:
        return Ordering.GREATER
    return Ordering.EQUAL
