"""Shared utilities for XML parsing.

This module provides the error types, configuration object and logging
helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import (
    ParseError,
    ParseErrorKind,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParserConfig",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
    "ParseError",
    "ParseErrorKind",
]
