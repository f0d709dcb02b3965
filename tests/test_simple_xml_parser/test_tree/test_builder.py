"""Tests for tree building and parse results."""

import logging

import pytest

from simple_xml_parser.shared import ParseError, ParseErrorKind, ParserConfig
from simple_xml_parser.tree import ParseResult, XMLForest, XMLTreeBuilder


def build(text: str, **config) -> ParseResult:
    return XMLTreeBuilder(ParserConfig(**config)).build(text)


def failure(text: str, **config) -> ParseError:
    result = build(text, **config)
    assert not result.success
    assert result.forest is None
    return result.error


class TestStructure:
    """Test forest shape for well-formed input."""

    def test_nested_elements(self) -> None:
        result = build('<root><child attr="value">text</child></root>')
        assert result.success
        root = result.roots[0]
        assert root.name == "root"
        child = root.first_child
        assert child.name == "child"
        assert child.attributes == {"attr": "value"}
        assert child.first_child.text_content == "text"
        assert result.node_count == 3

    def test_self_closing_and_text_children(self) -> None:
        result = build("<a><b/><c>hi</c></a>")
        assert len(result.roots) == 1
        b, c = result.roots[0].children
        assert b.is_self_closing
        assert b.children == []
        assert [child.text_content for child in c.children] == ["hi"]
        assert b.next_sibling is c
        assert c.prev_sibling is b

    def test_declaration_before_root(self) -> None:
        result = build('<?xml version="1.0"?><root/>')
        assert [root.name for root in result.roots] == ["root"]
        assert result.roots[0].is_self_closing

    def test_duplicate_attribute_keeps_first_position(self) -> None:
        root = build('<a x="1" y="2" x="3"/>').roots[0]
        assert list(root.attributes.items()) == [("x", "3"), ("y", "2")]

    def test_boolean_attribute(self) -> None:
        root = build('<a attr="1" flag></a>').roots[0]
        assert root.attributes == {"attr": "1", "flag": "true"}
        assert root.children == []

    def test_multiple_roots(self) -> None:
        result = build("<a/><b></b>")
        assert [root.name for root in result.roots] == ["a", "b"]
        assert result.roots[0].is_self_closing
        assert not result.roots[1].is_self_closing

    def test_empty_and_whitespace_documents(self) -> None:
        for text in ("", "   \n\t"):
            result = build(text)
            assert result.success
            assert result.roots == []
            assert isinstance(result.forest, XMLForest)

    def test_whitespace_between_tags_is_dropped(self) -> None:
        root = build("<a>\n  <b/>\n  <c/>\n</a>").roots[0]
        assert [child.name for child in root.children] == ["b", "c"]

    def test_text_whitespace_is_preserved(self) -> None:
        root = build("  <a>  text  </a>").roots[0]
        assert root.first_child.text_content == "  text  "

    def test_gt_inside_text(self) -> None:
        assert build("<a>x > y</a>").roots[0].text == "x > y"

    def test_gt_inside_attribute_value(self) -> None:
        assert build('<a x="1>2"/>').roots[0].attributes == {"x": "1>2"}

    def test_mixed_content_order(self) -> None:
        root = build("<p>one<b>two</b>three</p>").roots[0]
        assert [child.name for child in root.children] == ["#text", "b", "#text"]
        assert root.text == "onetwothree"
        middle = root.children[1]
        assert middle.prev_sibling.text_content == "one"
        assert middle.next_sibling.text_content == "three"

    def test_declarations_and_comments_are_skipped(self) -> None:
        result = build('<?xml version="1.0"?>\n<!DOCTYPE r>\n<!-- c --><r/>')
        assert [root.name for root in result.roots] == ["r"]

    def test_gt_inside_comment_needs_comment_aware(self) -> None:
        text = "<r><!-- a > b --></r>"
        plain = build(text).roots[0]
        assert plain.first_child.text_content == " b -->"
        aware = build(text, comment_aware=True).roots[0]
        assert aware.children == []

    def test_comment_close_after_comment_open(self) -> None:
        root = build("<r><!-->x--></r>", comment_aware=True).roots[0]
        assert root.children == []

    def test_closing_tag_with_trailing_whitespace(self) -> None:
        assert build("<a></a >").success

    def test_ids_follow_document_order(self) -> None:
        result = build("<a><b/>t<c/></a>")
        assert [node.id for node in result.forest.iter_nodes()] == [0, 1, 2, 3]

    def test_deep_nesting_does_not_recurse(self) -> None:
        depth = 10000
        result = build("<n>" * depth + "</n>" * depth)
        assert result.success
        assert result.node_count == depth
        assert len(result.forest.find_all(lambda node: node.name == "n")) == depth


class TestTopLevelText:
    """Test handling of text outside any element."""

    def test_discarded_by_default(self) -> None:
        result = build("hello <a/> bye")
        assert [root.name for root in result.roots] == ["a"]
        assert result.node_count == 3

    def test_kept_when_configured(self) -> None:
        result = build("hello <a/> bye", keep_top_level_text=True)
        assert [root.name for root in result.roots] == ["#text", "a", "#text"]
        assert result.roots[0].text_content == "hello "
        assert result.roots[2].text_content == " bye"

    def test_discard_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="simple_xml_parser.tree.builder"):
            build("stray<a/>")
        assert any("Discarding text" in record.message for record in caplog.records)


class TestErrors:
    """Test typed failures and their positions."""

    def test_tag_mismatch(self) -> None:
        error = failure("<a><b></a>")
        assert error.kind is ParseErrorKind.TAG_MISMATCH
        assert (error.line, error.offset) == (1, 6)

    def test_tag_mismatch_line_number(self) -> None:
        error = failure("<a>\n<b>\n</a>")
        assert error.kind is ParseErrorKind.TAG_MISMATCH
        assert error.line == 3

    def test_line_number_after_text_rewind(self) -> None:
        error = failure("<a>\n  text\n</b>")
        assert error.kind is ParseErrorKind.TAG_MISMATCH
        assert (error.line, error.offset) == (3, 11)

    def test_unmatched_closing_tag(self) -> None:
        error = failure("</a>")
        assert error.kind is ParseErrorKind.UNMATCHED_CLOSING_TAG
        assert (error.line, error.offset) == (1, 0)
        assert failure("<a/></a>").offset == 4

    def test_unterminated_document(self) -> None:
        error = failure("<a><b></b>")
        assert error.kind is ParseErrorKind.UNTERMINATED_DOCUMENT
        assert error.offset == 10
        assert "<a>" in error.message

    @pytest.mark.parametrize("text", ["<a", '<a x="1', "<a/", "<a></a", "<!DOCTYPE"])
    def test_unexpected_eof(self, text: str) -> None:
        assert failure(text).kind is ParseErrorKind.UNEXPECTED_EOF

    def test_invalid_tag_terminator(self) -> None:
        assert failure("<a / >").kind is ParseErrorKind.INVALID_TAG_TERMINATOR

    @pytest.mark.parametrize("text", ["<>", "<a></>"])
    def test_empty_tag_name(self, text: str) -> None:
        assert failure(text).kind is ParseErrorKind.EMPTY_TAG_NAME

    def test_unquoted_attribute_value(self) -> None:
        assert failure("<a x=1></a>").kind is ParseErrorKind.INVALID_ATTRIBUTE_VALUE

    def test_failure_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="simple_xml_parser.tree.builder"):
            failure("<a>")
        assert any("Tree building failed" in record.message for record in caplog.records)


class TestByteOffsets:
    """Error offsets count UTF-8 bytes, not characters."""

    def test_tag_mismatch_after_non_ascii_name(self) -> None:
        error = failure("<é><b></é>")
        assert error.kind is ParseErrorKind.TAG_MISMATCH
        assert (error.line, error.offset) == (1, 7)

    def test_unmatched_closing_tag(self) -> None:
        assert failure("<é/></a>").offset == 5

    def test_unterminated_document(self) -> None:
        assert failure("<é>").offset == 4

    def test_unexpected_eof_inside_value(self) -> None:
        error = failure('<a x="é')
        assert error.kind is ParseErrorKind.UNEXPECTED_EOF
        assert error.offset == 8

    def test_depth_limit(self) -> None:
        assert failure("<é><b></b></é>", max_depth=1).offset == 4

    def test_multibyte_text_on_earlier_line(self) -> None:
        error = failure("<a>ü€\n</b>")
        assert (error.line, error.offset) == (2, 9)


class TestLimits:
    """Test configured resource limits."""

    def test_depth_limit_counts_open_elements(self) -> None:
        assert build("<a><b><c/></b></a>", max_depth=2).success
        error = failure("<a><b><c></c></b></a>", max_depth=2)
        assert error.kind is ParseErrorKind.DEPTH_LIMIT_EXCEEDED
        assert error.offset == 6

    def test_input_size_limit(self) -> None:
        error = failure("<a></a>", max_input_size_bytes=5)
        assert error.kind is ParseErrorKind.INPUT_TOO_LARGE
        assert (error.line, error.offset) == (1, 0)

    def test_input_size_counts_utf8_bytes(self) -> None:
        assert build("<a/>", max_input_size_bytes=4).success
        assert not build("<é/>", max_input_size_bytes=4).success


class TestBuilderReuse:
    """Test that a builder keeps no state between documents."""

    def test_builds_are_independent(self) -> None:
        builder = XMLTreeBuilder()
        first = builder.build("<a/>")
        failed = builder.build("<a>")
        second = builder.build("<b/>")
        assert first.roots[0].name == "a"
        assert not failed.success
        assert second.roots[0].name == "b"
        assert second.roots[0].id == 0
        assert first.forest is not second.forest

    def test_correlation_id_is_carried(self) -> None:
        result = XMLTreeBuilder(correlation_id="req-1").build("<a/>")
        assert result.correlation_id == "req-1"
        assert result.character_count == 4
        assert result.processing_time_ms >= 0


class TestParseResult:
    """Test ParseResult invariants and helpers."""

    def test_requires_exactly_one_outcome(self) -> None:
        with pytest.raises(ValueError, match="exactly one"):
            ParseResult()
        with pytest.raises(ValueError, match="exactly one"):
            ParseResult(
                forest=XMLForest(),
                error=ParseError(ParseErrorKind.TAG_MISMATCH, 1, 0),
            )

    def test_unwrap(self) -> None:
        ok = build("<a/>")
        assert ok.unwrap() is ok.forest
        failed = build("<a>")
        with pytest.raises(ParseError) as exc_info:
            failed.unwrap()
        assert exc_info.value is failed.error

    def test_failed_result_accessors(self) -> None:
        failed = build("<a>")
        assert failed.roots == []
        assert failed.node_count == 0

    def test_to_dict(self) -> None:
        data = build("<a/>").to_dict()
        assert data["success"] is True
        assert data["roots"][0]["name"] == "a"
        assert "error" not in data

        data = build("</a>").to_dict()
        assert data["success"] is False
        assert data["error"]["kind"] == "UNMATCHED_CLOSING_TAG"
        assert "roots" not in data
