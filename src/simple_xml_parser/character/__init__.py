"""Character layer: the scanning cursor over the source buffer."""

from .scanner import Scanner, ScanPosition, WHITESPACE_CHARS

__all__ = [
    "Scanner",
    "ScanPosition",
    "WHITESPACE_CHARS",
]
