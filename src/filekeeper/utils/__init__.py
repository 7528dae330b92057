"""Shared utility modules.

This package provides:
- Byte count formatting and parsing (binary units)
- Logging configuration and correlation ID tracking
"""

from filekeeper.utils.formatting import (
    SizeParseError,
    format_size,
    parse_size,
)

__all__ = [
    "SizeParseError",
    "format_size",
    "parse_size",
]
