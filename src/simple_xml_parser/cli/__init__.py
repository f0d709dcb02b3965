"""Command-line interface module for Simple XML Parser.

This module provides the simple-xml tool for parsing, searching and
validating XML files.
"""

from .main import main

__all__ = ["main"]
