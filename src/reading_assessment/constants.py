"""Constants for the reading assessment pipeline.

The scoring weights and thresholds are empirically tuned and shared with the
feature libraries; they are collected here so pipeline code and tests have a
single place to import them from. None of them is configurable at runtime.
"""

from typing import Final

from reading_fe.token_classification import FILLER_WORDS, PAUSE_THRESHOLD_SECONDS
from reading_fe.word_level_alignment import (
    INSERT_PENALTY,
    MATCH_SCORE,
    MISMATCH_SCORE,
    MISREAD_SCORE,
    SKIP_PENALTY,
)
from reading_pyutils.word_distance import SIMILARITY_THRESHOLD

__all__ = [
    "FILLER_WORDS",
    "INSERT_PENALTY",
    "MATCH_SCORE",
    "MISMATCH_SCORE",
    "MISREAD_SCORE",
    "PAUSE_THRESHOLD_SECONDS",
    "SIMILARITY_THRESHOLD",
    "SKIP_PENALTY",
    "SKIPPED_LINE_MIN_RUN",
    "PHRASE_LENGTH",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_SERVICE_NAME",
]

SKIPPED_LINE_MIN_RUN: Final[int] = 3
PHRASE_LENGTH: Final[int] = 2

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_SERVICE_NAME: Final[str] = "reading-assessment"
