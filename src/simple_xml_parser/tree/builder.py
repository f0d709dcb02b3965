"""Tree construction for XML parsing.

XMLTreeBuilder drives the tokenizer over a text buffer and assembles the node
forest with an explicit stack of open elements. Closing tags must match the
innermost open element, and the stack must be empty at end of input; any
violation aborts the parse with a typed ParseError carried by the result.
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from simple_xml_parser.character import ScanPosition, Scanner
from simple_xml_parser.shared import (
    ParseError,
    ParseErrorKind,
    ParserConfig,
    get_logger,
)
from simple_xml_parser.tokenization import XMLTokenizer
from simple_xml_parser.tree.node import XMLForest, XMLNode

MS_PER_SECOND = 1000


@dataclass
class ParseResult:
    """Outcome of one parse: a forest on success, a ParseError on failure.

    An empty document succeeds with an empty forest; a failed parse has no
    forest at all, so the two are never confused.
    """

    forest: Optional[XMLForest] = None
    error: Optional[ParseError] = None
    correlation_id: Optional[str] = None
    processing_time_ms: float = 0.0
    character_count: int = 0

    def __post_init__(self) -> None:
        """Validate that exactly one of forest and error is set."""
        if (self.forest is None) == (self.error is None):
            raise ValueError("ParseResult needs exactly one of forest or error")

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def roots(self) -> List[XMLNode]:
        """Forest roots, or an empty list for a failed parse."""
        return self.forest.roots if self.forest is not None else []

    @property
    def node_count(self) -> int:
        return self.forest.node_count if self.forest is not None else 0

    def unwrap(self) -> XMLForest:
        """Return the forest or raise the parse error."""
        if self.error is not None:
            raise self.error
        assert self.forest is not None
        return self.forest

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result: Dict[str, Any] = {
            "success": self.success,
            "processing_time_ms": self.processing_time_ms,
            "character_count": self.character_count,
        }
        if self.forest is not None:
            result.update(self.forest.to_dict())
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


class XMLTreeBuilder:
    """Stack-based builder turning a text buffer into an XMLForest.

    Every build() call starts from fresh scanner, tokenizer and stack state,
    so one builder can parse many documents in turn. A builder must not be
    shared between threads.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Parsing options, defaults to ParserConfig()
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

    def build(self, text: str) -> ParseResult:
        """Parse text into a forest.

        Args:
            text: Complete document

        Returns:
            ParseResult with either the forest or the ParseError
        """
        start_time = time.time()
        self.logger.debug("Starting tree building", extra={"content_length": len(text)})

        try:
            self._check_input_size(text)
            forest = self._build_forest(text)
        except ParseError as e:
            processing_time = (time.time() - start_time) * MS_PER_SECOND
            self.logger.warning(
                "Tree building failed",
                extra={
                    "error_kind": e.kind.name,
                    "line": e.line,
                    "offset": e.offset,
                    "processing_time_ms": processing_time,
                },
            )
            return ParseResult(
                error=e,
                correlation_id=self.correlation_id,
                processing_time_ms=processing_time,
                character_count=len(text),
            )

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self.logger.debug(
            "Tree building completed",
            extra={
                "root_count": len(forest),
                "node_count": forest.node_count,
                "processing_time_ms": processing_time,
            },
        )
        return ParseResult(
            forest=forest,
            correlation_id=self.correlation_id,
            processing_time_ms=processing_time,
            character_count=len(text),
        )

    def _check_input_size(self, text: str) -> None:
        limit = self.config.max_input_size_bytes
        if limit is not None and len(text.encode("utf-8")) > limit:
            raise ParseError(
                ParseErrorKind.INPUT_TOO_LARGE,
                1,
                0,
                f"input exceeds {limit} bytes",
            )

    def _build_forest(self, text: str) -> XMLForest:
        forest = XMLForest()
        scanner = Scanner(text)
        tokenizer = XMLTokenizer(scanner, forest, comment_aware=self.config.comment_aware)
        stack: List[XMLNode] = []

        while True:
            whitespace_start = scanner.position
            scanner.skip_whitespace()
            char = scanner.peek()
            if char is None:
                break

            if char != "<":
                self._handle_text(tokenizer, stack, forest, whitespace_start)
                continue

            tag_start = scanner.mark()
            scanner.advance()
            next_char = scanner.peek()
            if next_char == "/":
                scanner.advance()
                name = tokenizer.closing_tag()
                if not stack:
                    raise scanner.error(
                        ParseErrorKind.UNMATCHED_CLOSING_TAG,
                        f"closing tag </{name}> without an open element",
                        at=tag_start,
                    )
                if stack[-1].name != name:
                    raise scanner.error(
                        ParseErrorKind.TAG_MISMATCH,
                        f"closing tag </{name}> does not match <{stack[-1].name}>",
                        at=tag_start,
                    )
                stack.pop()
            elif next_char in ("?", "!"):
                tokenizer.skip_declaration()
            else:
                node = tokenizer.tag()
                if stack:
                    forest.append_child(stack[-1], node)
                else:
                    forest.add_root(node)
                if not node.is_self_closing:
                    self._push(scanner, stack, node, tag_start)

        if stack:
            raise scanner.error(
                ParseErrorKind.UNTERMINATED_DOCUMENT,
                f"element <{stack[-1].name}> is never closed "
                f"({len(stack)} element(s) open at end of input)",
            )
        return forest

    def _push(
        self,
        scanner: Scanner,
        stack: List[XMLNode],
        node: XMLNode,
        tag_start: ScanPosition
    ) -> None:
        max_depth = self.config.max_depth
        if max_depth is not None and len(stack) >= max_depth:
            raise scanner.error(
                ParseErrorKind.DEPTH_LIMIT_EXCEEDED,
                f"element <{node.name}> nested deeper than {max_depth}",
                at=tag_start,
            )
        stack.append(node)

    def _handle_text(
        self,
        tokenizer: XMLTokenizer,
        stack: List[XMLNode],
        forest: XMLForest,
        whitespace_start: int
    ) -> None:
        node = tokenizer.text_node(floor=whitespace_start)
        if stack:
            forest.append_child(stack[-1], node)
        elif self.config.keep_top_level_text:
            forest.add_root(node)
        else:
            self.logger.debug(
                "Discarding text outside any element",
                extra={"node_id": node.id, "length": len(node.text_content)},
            )
