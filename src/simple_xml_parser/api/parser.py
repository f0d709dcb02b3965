"""Public parsing API.

Module-level functions cover the common case; XMLParser holds a
ParserConfig for repeated use. Everything returns a ParseResult: structural
problems and unreadable files are reported as a typed ParseError on the
result rather than raised.
"""

import time
from pathlib import Path
from typing import Optional, Union

from simple_xml_parser.shared import (
    ParseError,
    ParseErrorKind,
    ParserConfig,
    get_logger,
)
from simple_xml_parser.tree import ParseResult, XMLTreeBuilder

PathLike = Union[str, Path]

# Constants for API operations
PREVIEW_LENGTH = 100  # Max length for content preview in logs
MS_PER_SECOND = 1000
DEFAULT_ENCODING = "utf-8"


class FileReadError(Exception):
    """A document could not be loaded from disk."""

    def __init__(self, path: PathLike, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


def read_whole_file(path: PathLike, encoding: str = DEFAULT_ENCODING) -> str:
    """Read a whole file into a text buffer.

    Args:
        path: File to read
        encoding: Text encoding of the file

    Returns:
        File content as a string

    Raises:
        FileReadError: If the file is missing, not a regular file,
            unreadable, or not valid in the given encoding
    """
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileReadError(path_obj, "file not found")
    if not path_obj.is_file():
        raise FileReadError(path_obj, "not a regular file")
    try:
        with path_obj.open(encoding=encoding) as file:
            return file.read()
    except UnicodeDecodeError as e:
        raise FileReadError(path_obj, f"not valid {encoding}: {e.reason}") from e
    except OSError as e:
        raise FileReadError(path_obj, e.strerror or str(e)) from e


class XMLParser:
    """Configured parser.

    Example:
        >>> parser = XMLParser(ParserConfig(keep_top_level_text=True))
        >>> [root.name for root in parser.parse("lead<a/>").roots]
        ['#text', 'a']
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_parser")

    def parse(self, text: str) -> ParseResult:
        """Parse a complete document held in memory.

        Args:
            text: XML content

        Returns:
            ParseResult with the forest or a ParseError
        """
        self.logger.info(
            "Starting string parse operation",
            extra={
                "content_length": len(text),
                "preview": (
                    text[:PREVIEW_LENGTH] + "..."
                    if len(text) > PREVIEW_LENGTH else text
                ),
            },
        )
        builder = XMLTreeBuilder(self.config, self.correlation_id)
        result = builder.build(text)
        self.logger.info(
            "String parse operation completed",
            extra={
                "success": result.success,
                "root_count": len(result.roots),
                "processing_time_ms": result.processing_time_ms,
            },
        )
        return result

    def parse_file(self, path: PathLike, encoding: str = DEFAULT_ENCODING) -> ParseResult:
        """Read a file and parse it.

        An unreadable file yields a failed result of kind IO_ERROR.
        """
        start_time = time.time()
        self.logger.info(
            "Starting file parse operation",
            extra={"file_path": str(path), "encoding": encoding},
        )
        try:
            text = read_whole_file(path, encoding)
        except FileReadError as e:
            self.logger.warning(
                "File could not be read",
                extra={"file_path": str(path), "reason": e.reason},
            )
            return ParseResult(
                error=ParseError(ParseErrorKind.IO_ERROR, 0, 0, str(e)),
                correlation_id=self.correlation_id,
                processing_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            )
        return self.parse(text)


def parse(
    text: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse an XML document held in a string.

    Examples:
        >>> result = parse('<a attr="1" flag></a>')
        >>> result.roots[0].attributes
        {'attr': '1', 'flag': 'true'}

        >>> parse('<a><b></a>').error.kind.name
        'TAG_MISMATCH'
    """
    return XMLParser(config, correlation_id).parse(text)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse an XML string; same as parse()."""
    return parse(xml_string, config, correlation_id)


def parse_file(
    file_path: PathLike,
    encoding: str = DEFAULT_ENCODING,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse an XML file.

    Examples:
        >>> parse_file('missing.xml').error.kind.name
        'IO_ERROR'
    """
    return XMLParser(config, correlation_id).parse_file(file_path, encoding)
