"""Pytest configuration and fixtures for the reading assessment tests."""

from collections.abc import Callable, Iterator

import pytest
from loguru import logger

from src.reading_assessment.models import SpokenWord

SpokenFactory = Callable[..., list[SpokenWord]]


@pytest.fixture
def make_spoken() -> SpokenFactory:
    """Build untimed SpokenWords from plain strings."""

    def _make(*texts: str, confidence: float = 0.9) -> list[SpokenWord]:
        return [SpokenWord(text=text, confidence=confidence) for text in texts]

    return _make


@pytest.fixture
def timed_spoken_words() -> list[SpokenWord]:
    """Create a transcript with a filler, a repeat and a long pause."""
    return [
        SpokenWord("the", 0.95, 0.0, 0.3),
        SpokenWord("cat", 0.90, 0.4, 0.8),
        SpokenWord("um", 0.60, 0.9, 1.2),
        SpokenWord("sat", 0.92, 1.3, 1.6),
        SpokenWord("sat", 0.91, 1.7, 2.0),
        SpokenWord("down", 0.88, 3.5, 3.9),
    ]


@pytest.fixture
def deepgram_payload() -> dict:
    """Create a minimal Deepgram prerecorded response."""
    return {
        "metadata": {"request_id": "test-request"},
        "results": {
            "channels": [
                {
                    "alternatives": [
                        {
                            "transcript": "the quick fox",
                            "confidence": 0.97,
                            "words": [
                                {"word": "the", "start": 0.1, "end": 0.3, "confidence": 0.99},
                                {"word": "quick", "start": 0.4, "end": 0.8, "confidence": 0.95},
                                {"word": "fox", "start": 2.1, "end": 2.5, "confidence": 0.91},
                            ],
                        }
                    ]
                }
            ]
        },
    }


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove configuration variables that would leak in from the host environment."""
    for name in (
        "LOGLEVEL",
        "LOG_LEVEL",
        "LOG_JSON",
        "REPORT_INDENT",
        "INCLUDE_CLEANED_TRANSCRIPT",
        "DROP_PUNCTUATION_REFERENCE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def reset_loguru() -> Iterator[None]:
    """Drop sinks bound to captured streams after a test reconfigures logging."""
    yield
    logger.remove()
