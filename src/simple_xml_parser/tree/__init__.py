"""Tree layer for XML parsing.

Key Components:
    XMLNode: Element or text node with attribute, child and sibling access
    XMLForest: Arena owning all nodes of one parse and the ordered roots
    XMLTreeBuilder: Parse loop maintaining the stack of open elements
    ParseResult: Forest on success, typed ParseError on failure
"""

from .node import (
    TEXT_NODE_NAME,
    XMLForest,
    XMLNode,
    find_all,
)
from .builder import (
    ParseResult,
    XMLTreeBuilder,
)

__all__ = [
    "TEXT_NODE_NAME",
    "XMLForest",
    "XMLNode",
    "find_all",
    "ParseResult",
    "XMLTreeBuilder",
]
