"""Configuration for the XML parser.

ParserConfig is an immutable dataclass validated on construction. It only
holds knobs that change parsing outcomes or resource bounds; the default
instance reproduces the plain algorithm with no limits.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict, List, Optional

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Parsing options and resource limits.

    Attributes:
        max_input_size_bytes: Reject longer inputs with INPUT_TOO_LARGE
        max_depth: Reject documents nested deeper with DEPTH_LIMIT_EXCEEDED
        keep_top_level_text: Record text outside any element as forest roots
            instead of discarding it
        comment_aware: Skip "<!-- ... -->" through the closing "-->" so that
            comments may contain ">"
        logging_level: Level used by the command-line tool
    """

    max_input_size_bytes: Optional[int] = None
    max_depth: Optional[int] = None
    keep_top_level_text: bool = False
    comment_aware: bool = False
    logging_level: str = "WARNING"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_input_size_bytes is not None and self.max_input_size_bytes <= 0:
            raise ConfigValidationError(
                "max_input_size_bytes must be > 0 or None",
                field_name="max_input_size_bytes",
            )
        if self.max_depth is not None and self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0 or None",
                field_name="max_depth",
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
                suggestions=VALID_LOGGING_LEVELS,
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ParserConfig().override(max_depth=64)
            >>> config.max_depth
            64
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration field(s): {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], base: Optional["ParserConfig"] = None
    ) -> "ParserConfig":
        """Create configuration from dictionary, rejecting unknown keys.

        Args:
            data: Field values
            base: Configuration supplying the fields data leaves out
        """
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration data must be a JSON object")
        return (base or cls()).override(**data)

    @classmethod
    def from_json(
        cls, json_str: str, base: Optional["ParserConfig"] = None
    ) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        return cls.from_dict(data, base)

    # Preset factory methods
    @classmethod
    def strict(cls) -> "ParserConfig":
        """Preset with resource limits suited to untrusted input."""
        return cls(max_input_size_bytes=16 * 1024 * 1024, max_depth=512)

    @classmethod
    def lenient(cls) -> "ParserConfig":
        """Preset that keeps stray top-level text and tolerates ">" in comments."""
        return cls(keep_top_level_text=True, comment_aware=True)
