"""Pure formatting utilities for human-readable byte counts.

This module converts raw byte counts to unit-suffixed strings and back.
All functions are pure with no side effects.

Unit tiers use binary multiples (1024-based). The bytes tier is rendered
with a trailing period (``"512 bytes."``) for compatibility with existing
log and report consumers; :func:`parse_size` accepts that form.
"""

import math
import re
from typing import Final

# Binary unit constants (1024-based)
_KB: Final[float] = 1024.0
_MB: Final[float] = _KB * 1024.0  # 1,048,576
_GB: Final[float] = _MB * 1024.0  # 1,073,741,824
_TB: Final[float] = _GB * 1024.0  # 1,099,511,627,776

BYTES_SUFFIX: Final[str] = "bytes."

# Largest unit first; format_size picks the first threshold reached
_UNITS: Final[tuple[tuple[str, float], ...]] = (
    ("TB", _TB),
    ("GB", _GB),
    ("MB", _MB),
    ("KB", _KB),
)

_MULTIPLIERS: Final[dict[str, float]] = dict(_UNITS)

# Plain ASCII decimal, optionally signed, with an optional exponent
_DECIMAL: Final[re.Pattern[str]] = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")


class SizeParseError(ValueError):
    """Raised when a size string cannot be converted to a byte count."""

    def __init__(self, text: str, reason: str) -> None:
        """Initialize the parse error.

        Args:
            text: The rejected input
            reason: Why it was rejected
        """
        super().__init__(f"Cannot parse size {text!r}: {reason}")
        self.text: str = text


def _format_decimal(value: float) -> str:
    """Render ``value`` with at most two decimal digits.

    Trailing zeros and a dangling decimal point are dropped, so ``1.50``
    becomes ``1.5`` and ``3.00`` becomes ``3``.
    """
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def format_size(bytes: float) -> str:
    """Convert bytes to human-readable size format.

    Selects the largest unit whose scaled value is at least 1 and renders
    it with up to two decimal places.

    Args:
        bytes: Number of bytes to format (must be non-negative)

    Returns:
        Human-readable string representation of the size.
        - TB/GB/MB/KB: "X.YZ <unit>"
        - < 1024: "X bytes."

    Raises:
        ValueError: If bytes is negative

    Examples:
        >>> format_size(0)
        '0 bytes.'
        >>> format_size(512)
        '512 bytes.'
        >>> format_size(1536)
        '1.5 KB'
        >>> format_size(5 * 1024**3)
        '5 GB'
        >>> format_size(2748779069440)
        '2.5 TB'
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)

    for suffix, threshold in _UNITS:
        if bytes >= threshold:
            return f"{_format_decimal(bytes / threshold)} {suffix}"

    return f"{_format_decimal(bytes)} {BYTES_SUFFIX}"


def parse_size(text: str) -> float:
    """Convert a human-readable size string back to bytes.

    The text is split on single spaces; the first field is the number and
    the second the unit suffix, and any further fields are ignored. The
    number must be a plain ASCII decimal. Recognised suffixes (TB, GB, MB,
    KB) scale it by their binary multiplier; any other suffix, including
    ``"bytes."``, leaves it unscaled.

    Args:
        text: Size string such as ``"1.5 KB"`` or ``"512 bytes."``

    Returns:
        Byte count as a float (fractional when the input was rounded)

    Raises:
        SizeParseError: If there is no space separator, or the numeric part
            is not a finite, non-negative decimal number

    Examples:
        >>> parse_size("1.5 KB")
        1536.0
        >>> parse_size("0 bytes.")
        0.0
    """
    fields = text.split(" ")
    if len(fields) < 2:
        raise SizeParseError(text, "expected '<number> <unit>'")
    number, suffix = fields[0], fields[1]

    if _DECIMAL.fullmatch(number) is None:
        raise SizeParseError(text, f"{number!r} is not a decimal number")

    value = float(number)

    if not math.isfinite(value) or value < 0:
        raise SizeParseError(text, "size must be finite and non-negative")

    return value * _MULTIPLIERS.get(suffix, 1.0)
