"""Configuration loading and management for Corpus Forensics.

This module provides configuration discovery and validation. Configuration
sources are merged in priority order:
    1. Defaults (defined in EngineConfig)
    2. Global config (~/.corpus-forensics.toml)
    3. Project config (./corpus-forensics.toml)
    4. Explicit config file
    5. Environment variables (FORENSICS_* prefix)
    6. Keyword overrides

Example:
    >>> config = load_config(max_diff_lines=4000)
    >>> config.max_diff_lines
    4000
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, ErrorCode

Verbosity = Literal["quiet", "normal", "verbose"]

_VERBOSITIES = ("quiet", "normal", "verbose")


@dataclass(frozen=True)
class EngineConfig:
    """Tuning knobs for a forensics session.

    Attributes:
        Caching:
            patch_cache_size: Parsed patches kept per session (keyed by sha)
            snapshot_cache_size: Snapshot documents kept per session

        Compare:
            max_diff_lines: Combined line ceiling for a Myers diff

        Search:
            index_batch_size: Commits indexed per scheduler turn
            single_search_limit: Hit cap for this-commit searches
            corpus_search_limit: Hit cap for all-commits searches
            min_query_length: Queries shorter than this return nothing
            snippet_before: Context characters kept before a match
            snippet_after: Context characters kept after a match

        Diagnostics:
            perf_log_size: Timing entries retained by the session
            verbosity: Logging verbosity level
    """

    # Caching
    patch_cache_size: int = 32
    snapshot_cache_size: int = 32

    # Compare
    max_diff_lines: int = 8000

    # Search
    index_batch_size: int = 3
    single_search_limit: int = 50
    corpus_search_limit: int = 100
    min_query_length: int = 2
    snippet_before: int = 40
    snippet_after: int = 60

    # Diagnostics
    perf_log_size: int = 200
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.patch_cache_size < 1:
            raise ValueError("patch_cache_size must be at least 1")
        if self.snapshot_cache_size < 1:
            raise ValueError("snapshot_cache_size must be at least 1")

        if self.max_diff_lines < 1:
            raise ValueError("max_diff_lines must be at least 1")

        if self.index_batch_size < 1:
            raise ValueError("index_batch_size must be at least 1")
        if self.single_search_limit < 1:
            raise ValueError("single_search_limit must be at least 1")
        if self.corpus_search_limit < 1:
            raise ValueError("corpus_search_limit must be at least 1")
        if self.min_query_length < 1:
            raise ValueError("min_query_length must be at least 1")
        if self.snippet_before < 0 or self.snippet_after < 0:
            raise ValueError("snippet context must be non-negative")

        if self.perf_log_size < 1:
            raise ValueError("perf_log_size must be at least 1")
        if self.verbosity not in _VERBOSITIES:
            raise ValueError(f"verbosity must be one of {', '.join(_VERBOSITIES)}")


DEFAULT_CONFIG = EngineConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> EngineConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (highest priority)

    Returns:
        Validated EngineConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid, or a
            value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".corpus-forensics.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "corpus-forensics.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        config_file = Path(config_file)
        if not config_file.exists():
            raise ConfigurationError(
                f"Config file not found: {config_file}",
                ErrorCode.CF200,
                context={"path": str(config_file)},
            )
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    try:
        return EngineConfig(**merged)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid configuration: {e}",
            ErrorCode.CF202,
            context={"keys": ", ".join(sorted(merged))},
        )


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from FORENSICS_* environment variables.

    Every EngineConfig field can be set, e.g. FORENSICS_MAX_DIFF_LINES=4000
    or FORENSICS_VERBOSITY=verbose.
    """
    type_hints = get_type_hints(EngineConfig)

    result: dict[str, Any] = {}

    for field_name in EngineConfig.__dataclass_fields__:
        env_key = f"FORENSICS_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {env_key}: {e}",
                ErrorCode.CF203,
                context={"variable": env_key, "value": env_value},
            )
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the field's type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If the file can't be parsed
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(
            f"Invalid config file '{path}': {e}",
            ErrorCode.CF201,
            context={"path": str(path)},
        )
