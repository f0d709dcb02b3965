"""Lexical routines for XML markup.

XMLTokenizer reads one lexical unit at a time from a Scanner: tag names,
attribute lists, closing tags, declarations and text runs. Opening tags and
text runs are turned straight into nodes of the parse's XMLForest. Any
malformed construct is raised as a ParseError located at the cursor.

Known limitations, kept on purpose:
- a declaration or comment ends at its first ">" unless comment_aware is
  set, in which case "<!--" blocks end at "-->";
- CDATA sections are skipped like any other declaration;
- entities are not decoded;
- a quote preceded by a backslash does not close an attribute value, and
  the backslash is kept in the value.
"""

from typing import Dict

from simple_xml_parser.character import Scanner
from simple_xml_parser.shared.result import ParseErrorKind
from simple_xml_parser.tree.node import XMLForest, XMLNode

NAME_BREAK_CHARS = frozenset(" \n\r\t>/")
KEY_BREAK_CHARS = frozenset(" \n\r\t=/>")
ATTRIBUTE_END_CHARS = frozenset("/>")
QUOTE_CHARS = frozenset("\"'")
BOOLEAN_ATTRIBUTE_VALUE = "true"
ESCAPE_CHAR = "\\"
COMMENT_START = "<!--"
COMMENT_END = "-->"


class XMLTokenizer:
    """Tokenizer bound to one scanner and one node arena."""

    def __init__(
        self,
        scanner: Scanner,
        forest: XMLForest,
        comment_aware: bool = False
    ) -> None:
        self.scanner = scanner
        self.forest = forest
        self.comment_aware = comment_aware

    def _peek_or_eof(self, context: str) -> str:
        char = self.scanner.peek()
        if char is None:
            raise self.scanner.error(
                ParseErrorKind.UNEXPECTED_EOF, f"unexpected end of input in {context}"
            )
        return char

    def node_name(self) -> str:
        """Read a tag name, leaving the cursor on the break character."""
        scanner = self.scanner
        scanner.skip_whitespace()
        start = scanner.position
        while self._peek_or_eof("tag name") not in NAME_BREAK_CHARS:
            scanner.advance()
        name = scanner.slice(start)
        if not name:
            raise scanner.error(ParseErrorKind.EMPTY_TAG_NAME, "tag has no name")
        return name

    def attrs(self) -> Dict[str, str]:
        """Read attributes up to, but not including, "/" or ">"."""
        scanner = self.scanner
        attributes: Dict[str, str] = {}
        while True:
            scanner.skip_whitespace()
            if self._peek_or_eof("attribute list") in ATTRIBUTE_END_CHARS:
                return attributes

            key_start = scanner.position
            while self._peek_or_eof("attribute name") not in KEY_BREAK_CHARS:
                scanner.advance()
            key = scanner.slice(key_start)
            if not key:
                raise scanner.error(
                    ParseErrorKind.INVALID_ATTRIBUTE_VALUE, "attribute value has no name"
                )

            scanner.skip_whitespace()
            if self._peek_or_eof("attribute list") != "=":
                attributes[key] = BOOLEAN_ATTRIBUTE_VALUE
                continue

            scanner.advance()  # "="
            scanner.skip_whitespace()
            attributes[key] = self._quoted_value(key)

    def _quoted_value(self, key: str) -> str:
        scanner = self.scanner
        quote = self._peek_or_eof("attribute value")
        if quote not in QUOTE_CHARS:
            raise scanner.error(
                ParseErrorKind.INVALID_ATTRIBUTE_VALUE,
                f"value of attribute {key!r} must be quoted",
            )
        scanner.advance()
        value_start = scanner.position
        while True:
            char = self._peek_or_eof(f"value of attribute {key!r}")
            if char == quote and scanner.text[scanner.position - 1] != ESCAPE_CHAR:
                value = scanner.slice(value_start)
                scanner.advance()
                return value
            scanner.advance()

    def closing_tag(self) -> str:
        """Read a closing tag name through its ">"; the "</" is already consumed."""
        scanner = self.scanner
        scanner.skip_whitespace()
        start = scanner.position
        while self._peek_or_eof("closing tag") != ">":
            scanner.advance()
        name = scanner.slice(start).rstrip(" \t\r\n")
        scanner.advance()  # ">"
        if not name:
            raise scanner.error(ParseErrorKind.EMPTY_TAG_NAME, "closing tag has no name")
        return name

    def skip_declaration(self) -> None:
        """Consume a "<?...>" or "<!...>" block; the "<" is already consumed."""
        scanner = self.scanner
        comment_start = scanner.position - 1
        if self.comment_aware and scanner.text.startswith(COMMENT_START, comment_start):
            # "-->" may not overlap the opening "<!--"
            end = scanner.find(COMMENT_END, comment_start + len(COMMENT_START))
            if end < 0:
                while not scanner.at_end:
                    scanner.advance()
                raise scanner.error(
                    ParseErrorKind.UNEXPECTED_EOF, "unexpected end of input in comment"
                )
            while scanner.position < end + len(COMMENT_END):
                scanner.advance()
            return

        while self._peek_or_eof("declaration") != ">":
            scanner.advance()
        scanner.advance()

    def tag(self) -> XMLNode:
        """Read an opening or self-closing tag into a new, detached element node."""
        scanner = self.scanner
        name = self.node_name()
        attributes = self.attrs()

        # attrs() only returns in front of "/" or ">"
        is_self_closing = scanner.advance() == "/"
        if is_self_closing:
            if self._peek_or_eof(f"tag {name!r}") != ">":
                raise scanner.error(
                    ParseErrorKind.INVALID_TAG_TERMINATOR,
                    f"expected '>' after '/' in tag {name!r}",
                )
            scanner.advance()

        return self.forest.create_element(name, attributes, is_self_closing)

    def text_node(self, floor: int = 0) -> XMLNode:
        """Read a text run into a new, detached text node.

        The cursor is first moved back to just after the preceding ">" (not
        below floor) so leading whitespace skipped by the caller is kept. The
        run ends before the next "<" or at end of input.
        """
        scanner = self.scanner
        scanner.rewind_to(">", floor)
        start = scanner.position
        end = scanner.find("<")
        if end < 0:
            end = scanner.length
        while scanner.position < end:
            scanner.advance()
        return self.forest.create_text(scanner.slice(start))
