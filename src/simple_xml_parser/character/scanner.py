"""Character cursor over an in-memory text buffer.

The Scanner is the only component that moves through the source text. It
tracks the character offset and the 1-based line number, and reports running
off the end of the buffer as an UNEXPECTED_EOF parse error.
"""

from dataclasses import dataclass
from typing import Optional

from simple_xml_parser.shared.result import ParseError, ParseErrorKind

WHITESPACE_CHARS = frozenset(" \t\r\n")


@dataclass(frozen=True)
class ScanPosition:
    """Snapshot of a scanner location; offset is a character index."""

    line: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")


class Scanner:
    """Cursor with peek/advance/rewind primitives.

    A scanner belongs to a single parse; create a new one per document.
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.length = len(text)
        self.position = 0
        self.line = 1

    @property
    def at_end(self) -> bool:
        """Check whether the cursor has consumed the whole buffer."""
        return self.position >= self.length

    def mark(self) -> ScanPosition:
        """Return the current location."""
        return ScanPosition(self.line, self.position)

    def byte_offset(self, position: int) -> int:
        """UTF-8 byte offset of a character index into the buffer."""
        return len(self.text[:position].encode("utf-8", "surrogatepass"))

    def error(
        self,
        kind: ParseErrorKind,
        message: Optional[str] = None,
        at: Optional[ScanPosition] = None
    ) -> ParseError:
        """Build a ParseError located at the cursor, or at a marked position.

        The error carries the UTF-8 byte offset of that location.
        """
        if at is None:
            at = self.mark()
        return ParseError(kind, at.line, self.byte_offset(at.offset), message)

    def peek(self) -> Optional[str]:
        """Return the character at the cursor, or None at end of buffer."""
        if self.position >= self.length:
            return None
        return self.text[self.position]

    def advance(self) -> str:
        """Consume and return one character.

        Raises:
            ParseError: UNEXPECTED_EOF when the buffer is exhausted
        """
        if self.position >= self.length:
            raise self.error(ParseErrorKind.UNEXPECTED_EOF, "unexpected end of input")
        char = self.text[self.position]
        self.position += 1
        if char == "\n":
            self.line += 1
        return char

    def skip_whitespace(self) -> None:
        """Consume a run of spaces, tabs, carriage returns and line feeds."""
        while self.position < self.length and self.text[self.position] in WHITESPACE_CHARS:
            if self.text[self.position] == "\n":
                self.line += 1
            self.position += 1

    def rewind_to(self, char: str, floor: int = 0) -> None:
        """Move backward until just after the last char before the cursor.

        Stops at floor if char does not occur in between. Line numbers are
        kept in step when moving back across newlines.

        Args:
            char: Character to rewind to
            floor: Lowest offset the cursor may move back to
        """
        floor = max(floor, 0)
        while self.position > floor:
            previous = self.text[self.position - 1]
            if previous == char:
                return
            self.position -= 1
            if previous == "\n":
                self.line -= 1

    def slice(self, start: int, end: Optional[int] = None) -> str:
        """Return the source text between start and end (default: cursor)."""
        return self.text[start:self.position if end is None else end]

    def find(self, needle: str, start: Optional[int] = None) -> int:
        """Offset of the next occurrence of needle at or after start, or -1.

        start defaults to the cursor.
        """
        return self.text.find(needle, self.position if start is None else start)
