"""Exception hierarchy for Corpus Forensics."""

from .taxonomy import (
    CompareError,
    ConfigurationError,
    DatasetError,
    ErrorCode,
    ForensicsError,
    SearchError,
    SessionError,
)

__all__ = [
    "ErrorCode",
    "ForensicsError",
    "DatasetError",
    "ConfigurationError",
    "CompareError",
    "SearchError",
    "SessionError",
]
