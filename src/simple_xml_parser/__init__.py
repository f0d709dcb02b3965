"""Simple XML Parser.

A small non-validating XML parser that turns a text buffer into an ordered
forest of element and text nodes, or a typed ParseError.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - XMLParser class with ParserConfig
"""

__version__ = "0.1.0"
__author__ = "Simple XML Parser Team"

# Progressive API disclosure - Level 1: Simple functions
# Progressive API disclosure - Level 2: Advanced configuration
from .api import XMLParser, parse, parse_file, parse_string, read_whole_file

# Configuration and error types
from .shared import ParseError, ParseErrorKind, ParserConfig

# Core result objects for all API levels
from .tree import ParseResult, XMLForest, XMLNode, find_all

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions (progressive disclosure entry point)
    "parse",
    "parse_string",
    "parse_file",
    "read_whole_file",
    "find_all",

    # Level 2: Advanced parser class
    "XMLParser",
    "ParserConfig",

    # Result objects and data structures
    "ParseResult",
    "ParseError",
    "ParseErrorKind",
    "XMLForest",
    "XMLNode",
]
