"""Typed parse errors shared by every parsing layer.

Structural problems are raised as ParseError at the point of detection and
travel up to the tree builder, which hands them to the caller inside a
failed ParseResult instead of printing anything.
"""

from enum import Enum, auto
from typing import Any, Dict, Optional


class ParseErrorKind(Enum):
    """Kinds of parse failure."""

    UNMATCHED_CLOSING_TAG = auto()    # Closing tag while no element is open
    TAG_MISMATCH = auto()             # Closing name differs from the open element
    UNEXPECTED_EOF = auto()           # Input ended inside a tag, quote or declaration
    INVALID_TAG_TERMINATOR = auto()   # Attributes followed by neither "/>" nor ">"
    UNTERMINATED_DOCUMENT = auto()    # Elements still open at end of input
    EMPTY_TAG_NAME = auto()           # "<>", "</>" or "< />"
    INVALID_ATTRIBUTE_VALUE = auto()  # Attribute value not opened by a quote
    DEPTH_LIMIT_EXCEEDED = auto()     # Nesting deeper than ParserConfig.max_depth
    INPUT_TOO_LARGE = auto()          # Input longer than ParserConfig.max_input_size_bytes
    IO_ERROR = auto()                 # Document could not be read from disk


class ParseError(Exception):
    """Structural parse failure with the position where it was detected.

    Attributes:
        kind: Category of the failure
        line: 1-based line number, 0 when the error has no source position
        offset: 0-based UTF-8 byte offset into the source text
        message: Human-readable description
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        line: int,
        offset: int,
        message: Optional[str] = None
    ) -> None:
        self.kind = kind
        self.line = line
        self.offset = offset
        self.message = message or kind.name.replace("_", " ").lower()
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line <= 0:
            return f"{self.kind.name}: {self.message}"
        return f"{self.kind.name} at line {self.line}, offset {self.offset}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"ParseError(kind={self.kind.name}, line={self.line}, "
            f"offset={self.offset}, message={self.message!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return (
            self.kind is other.kind
            and self.line == other.line
            and self.offset == other.offset
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.line, self.offset))

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "kind": self.kind.name,
            "line": self.line,
            "offset": self.offset,
            "message": self.message,
        }
