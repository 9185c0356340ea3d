"""Error taxonomy with error codes and recovery hints.

Error Code Convention:
    CF1xx - Dataset errors
    CF2xx - Configuration errors
    CF3xx - Compare errors
    CF4xx - Search errors
    CF5xx - Session errors
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Structured error codes for observability and debugging."""

    # Dataset errors (CF1xx)
    CF100 = "CF100"  # Dataset is not valid JSON
    CF101 = "CF101"  # Dataset failed schema validation
    CF102 = "CF102"  # Dataset file unreadable

    # Configuration errors (CF2xx)
    CF200 = "CF200"  # Config file missing
    CF201 = "CF201"  # Config file unparseable
    CF202 = "CF202"  # Invalid config value
    CF203 = "CF203"  # Invalid environment override

    # Compare errors (CF3xx)
    CF300 = "CF300"  # Unknown metric or weighting mode
    CF301 = "CF301"  # Unknown time resolution
    CF302 = "CF302"  # Line diff needs a single file

    # Search errors (CF4xx)
    CF400 = "CF400"  # Unknown search scope
    CF401 = "CF401"  # Invalid batch size or limit

    # Session errors (CF5xx)
    CF500 = "CF500"  # Commit index out of range
    CF501 = "CF501"  # Unknown playback speed


@dataclass
class ForensicsError(Exception):
    """Base exception with structured context for logging.

    Attributes:
        message: Human-readable error description
        code: Structured error code for categorization
        context: Additional context (path, field, offending value)
        recoverable: Whether the host can retry
        recovery_hint: Suggested fix for the user
    """

    message: str
    code: ErrorCode
    context: dict[str, Any] = field(default_factory=dict)
    recoverable: bool = True
    recovery_hint: str | None = None

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __post_init__(self) -> None:
        super().__init__(str(self))

    def to_json(self) -> dict[str, Any]:
        """Structured logging format."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
            "recoverable": self.recoverable,
            "recovery_hint": self.recovery_hint,
        }


class DatasetError(ForensicsError):
    """Dataset could not be fetched, parsed or validated (CF1xx)."""

    pass


class ConfigurationError(ForensicsError):
    """Invalid engine configuration (CF2xx)."""

    pass


class CompareError(ForensicsError):
    """Invalid arguments to compare or analytics functions (CF3xx)."""

    pass


class SearchError(ForensicsError):
    """Invalid arguments to search functions (CF4xx)."""

    pass


class SessionError(ForensicsError):
    """Invalid session operation (CF5xx)."""

    pass
