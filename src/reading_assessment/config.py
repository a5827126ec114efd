"""Configuration for the reading assessment pipeline.

Provides a typed configuration model with environment-backed defaults, a YAML
loader for file-based configuration, and an accessor that caches the
environment-derived configuration for reuse.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Final

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

from reading_pyutils.logging import LogLevel, get_logger
from src.reading_assessment.constants import DEFAULT_LOG_LEVEL

logger = get_logger(__name__)

_PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parents[2]
_ENV_FILE: Final[Path] = _PROJECT_ROOT / ".env"
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


class AssessmentConfig(BaseModel):
    """Pydantic configuration model for the reading assessment pipeline."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False
    report_indent: bool = True
    include_cleaned_transcript: bool = False
    drop_punctuation_reference: bool = True

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log_level names a supported level."""
        level = v.upper()
        if level not in LogLevel.__members__:
            raise ValueError(f"log_level must be one of {', '.join(LogLevel.__members__)}")
        return level

    @classmethod
    def from_env(cls, *, base: AssessmentConfig | None = None) -> AssessmentConfig:
        """Build a configuration from environment variables.

        Args:
            base: Configuration whose values are used where a variable is unset.

        Returns:
            Configuration with environment overrides applied.
        """
        load_dotenv(_ENV_FILE)
        defaults = base or cls()

        def _bool(name: str, default: bool) -> bool:
            v = os.getenv(name)
            if v is None:
                return default
            return v.lower() in _TRUTHY

        return cls(
            log_level=os.getenv("LOG_LEVEL", defaults.log_level),
            log_json=_bool("LOG_JSON", defaults.log_json),
            report_indent=_bool("REPORT_INDENT", defaults.report_indent),
            include_cleaned_transcript=_bool(
                "INCLUDE_CLEANED_TRANSCRIPT", defaults.include_cleaned_transcript
            ),
            drop_punctuation_reference=_bool(
                "DROP_PUNCTUATION_REFERENCE", defaults.drop_punctuation_reference
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> AssessmentConfig:
    """Load and cache the configuration from environment."""
    return AssessmentConfig.from_env()


def load_config(*, config_path: str | Path | None = None) -> AssessmentConfig:
    """Load configuration from a YAML file, then apply environment overrides.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If the file content is not a valid configuration.
    """
    if config_path is None:
        return AssessmentConfig.from_env()

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with config_file.open("r") as file:
            raw_config: Any = yaml.safe_load(file)
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse YAML config: {e}") from e

    if raw_config is None:
        raw_config = {}
    if not isinstance(raw_config, dict):
        raise ValueError(f"Invalid configuration: expected a mapping in {config_path}")

    try:
        file_config = AssessmentConfig(**raw_config)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    logger.info(f"Config loaded from {config_path}")
    return AssessmentConfig.from_env(base=file_config)
