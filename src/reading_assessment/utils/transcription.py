"""Transcript ingestion for the reading assessment pipeline.

This module converts the payloads produced by speech-recognition providers
into SpokenWord sequences. It understands full Deepgram-style responses, a
single transcript alternative, or a bare list of word records. Word records
without usable text are dropped; they never take an alignment slot.
"""

import math
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Final

import orjson

from reading_pyutils.errors import TranscriptFormatError
from reading_pyutils.logging import get_logger
from src.reading_assessment.models import SpokenWord

logger = get_logger(__name__)

TEXT_FIELDS: Final[tuple[str, ...]] = ("text", "word", "punctuated_word")
START_FIELDS: Final[tuple[str, ...]] = ("start", "startTime", "start_time")
END_FIELDS: Final[tuple[str, ...]] = ("end", "endTime", "end_time")
DEFAULT_CONFIDENCE: Final[float] = 1.0
# "1.500s" style durations
DURATION_PATTERN: Final[re.Pattern[str]] = re.compile(r"\s*([0-9]+(?:\.[0-9]+)?)\s*s?\s*")


def _first_present(record: Mapping[str, Any], fields: Sequence[str]) -> Any:
    for name in fields:
        if name in record:
            return record[name]
    return None


def _parse_seconds(value: Any) -> float | None:
    """Interpret a timestamp as seconds since the start of the recording.

    Accepts numbers, "1.5" / "1.5s" strings and {"seconds", "nanos"} mappings.

    Args:
        value: Raw timestamp value.

    Returns:
        Seconds as float, or None when the value is absent or unusable.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        seconds = float(value)
    elif isinstance(value, str):
        match = DURATION_PATTERN.fullmatch(value)
        if match is None:
            return None
        seconds = float(match.group(1))
    elif isinstance(value, Mapping):
        whole = _parse_seconds(value.get("seconds", 0))
        nanos = value.get("nanos", 0)
        if whole is None or isinstance(nanos, bool) or not isinstance(nanos, (int, float)):
            return None
        seconds = whole + nanos / 1e9
    else:
        return None
    return seconds if math.isfinite(seconds) else None


def _parse_confidence(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        return DEFAULT_CONFIDENCE
    return min(1.0, max(0.0, float(value)))


def coerce_spoken_word(record: Any) -> SpokenWord | None:
    """Convert a single word record into a SpokenWord.

    Args:
        record: SpokenWord or mapping with a text field and optional
            confidence / timing fields.

    Returns:
        SpokenWord, or None if the record has no string text.
    """
    if isinstance(record, SpokenWord):
        return record if isinstance(record.text, str) else None
    if not isinstance(record, Mapping):
        return None

    text = _first_present(record, TEXT_FIELDS)
    if not isinstance(text, str):
        return None

    return SpokenWord(
        text=text,
        confidence=_parse_confidence(record.get("confidence")),
        start_time=_parse_seconds(_first_present(record, START_FIELDS)),
        end_time=_parse_seconds(_first_present(record, END_FIELDS)),
    )


def coerce_spoken_words(records: Sequence[Any]) -> list[SpokenWord]:
    """Convert word records into SpokenWords, dropping malformed records.

    Args:
        records: Word records in speaking order.

    Returns:
        SpokenWords in speaking order.
    """
    words: list[SpokenWord] = []
    dropped = 0
    for record in records:
        word = coerce_spoken_word(record)
        if word is None:
            dropped += 1
            continue
        words.append(word)
    if dropped:
        logger.warning(f"Dropped {dropped} transcript record(s) without a text field")
    return words


def _extract_word_records(payload: Any) -> Any:
    """Locate the list of word records inside a transcript payload.

    Args:
        payload: Decoded JSON payload.

    Returns:
        The word record list, or None if the shape is not recognised.
    """
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, Mapping):
        return None
    if "results" in payload:
        try:
            return payload["results"]["channels"][0]["alternatives"][0]["words"]
        except (KeyError, IndexError, TypeError):
            return None
    if "alternatives" in payload:
        try:
            return payload["alternatives"][0]["words"]
        except (KeyError, IndexError, TypeError):
            return None
    return payload.get("words")


def parse_transcript_payload(payload: Any, *, source: str | None = None) -> list[SpokenWord]:
    """Parse a transcription provider payload into SpokenWords.

    Args:
        payload: Deepgram-style response, a single alternative, or a list of
            word records.
        source: Optional origin of the payload, for error messages.

    Returns:
        SpokenWords in speaking order.

    Raises:
        TranscriptFormatError: If no word record list can be found.
    """
    records = _extract_word_records(payload)
    if not isinstance(records, list):
        raise TranscriptFormatError(
            error_details=f"no word list found in payload of type {type(payload).__name__}",
            source=source,
        )
    words = coerce_spoken_words(records)
    logger.debug(f"Parsed {len(words)} spoken words from {source or 'payload'}")
    return words


def load_transcript_file(path: str | Path) -> list[SpokenWord]:
    """Load a JSON transcript file.

    Args:
        path: Path to the transcript JSON file.

    Returns:
        SpokenWords in speaking order.

    Raises:
        FileNotFoundError: If the file does not exist.
        TranscriptFormatError: If the file is not valid JSON or has an unknown shape.
    """
    transcript_path = Path(path)
    try:
        payload = orjson.loads(transcript_path.read_bytes())
    except orjson.JSONDecodeError as e:
        raise TranscriptFormatError(error_details=f"invalid JSON: {e}", source=str(path)) from e
    return parse_transcript_payload(payload, source=str(path))
