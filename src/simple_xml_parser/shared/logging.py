"""Structured logging helpers for the XML parser.

Every layer logs through a CorrelationLogger so that records emitted while
parsing one document share the same component and correlation fields.
"""

import logging
from typing import Any, Dict, Optional

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class CorrelationLogger:
    """Logger that attaches component and correlation ID to every record."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize correlation logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional ID shared by all records of one parse
            component: Component name, defaults to the last segment of name
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.split(".")[-1]

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            combined_extra.update(extra)
        return combined_extra

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with correlation info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with correlation info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with correlation info."""
        self.logger.warning(message, extra=self._get_extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Get a correlation-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component)


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for command-line use.

    Args:
        level: Level name such as "DEBUG" or "ERROR"
    """
    logging.basicConfig(level=getattr(logging, level.upper()), format=LOG_FORMAT)
