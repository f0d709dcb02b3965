"""Tokenization layer for XML parsing.

Key Components:
    XMLTokenizer: Lexical routines reading tag names, attributes, closing
        tags, declarations and text runs from a Scanner
"""

from .tokenizer import (
    BOOLEAN_ATTRIBUTE_VALUE,
    XMLTokenizer,
)

__all__ = [
    "BOOLEAN_ATTRIBUTE_VALUE",
    "XMLTokenizer",
]
