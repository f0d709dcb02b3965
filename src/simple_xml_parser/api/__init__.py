"""Public API: parsing functions, configured parser and conversion adapters."""

from .parser import (
    FileReadError,
    XMLParser,
    parse,
    parse_file,
    parse_string,
    read_whole_file,
)
from .adapters import (
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
)

__all__ = [
    "FileReadError",
    "XMLParser",
    "parse",
    "parse_file",
    "parse_string",
    "read_whole_file",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_available_adapters",
]
