"""File input and output for the reading assessment pipeline."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import orjson

from reading_pyutils.errors import ReferenceFormatError
from reading_pyutils.logging import get_logger
from reading_pyutils.text import tokenize_reference
from src.reading_assessment.models import AnalysisReport, ReferenceWord

logger = get_logger(__name__)


def _reference_from_json(payload: Any, *, source: str) -> list[str]:
    """Extract reference word strings from a decoded JSON payload.

    Args:
        payload: List of strings or of OCR word records with a "text" field.
        source: File path, for error messages.

    Returns:
        Reference word strings in reading order.

    Raises:
        ReferenceFormatError: If the payload is not such a list.
    """
    if not isinstance(payload, list):
        raise ReferenceFormatError(error_details="expected a JSON list of words", source=source)

    words: list[str] = []
    for entry in payload:
        if isinstance(entry, str):
            words.append(entry)
        elif isinstance(entry, Mapping) and isinstance(entry.get("text"), str):
            words.append(entry["text"])
        else:
            raise ReferenceFormatError(
                error_details=f"unsupported word entry of type {type(entry).__name__}",
                source=source,
            )
    return words


def load_reference_file(path: str | Path, *, drop_punctuation: bool = True) -> list[ReferenceWord]:
    """Load the reference words of a passage.

    ``.json`` files hold a list of strings or OCR word records; any other file
    is read as plain text and split on whitespace.

    Args:
        path: Path to the reference file.
        drop_punctuation: Drop punctuation-only tokens.

    Returns:
        Reference words with their positions.

    Raises:
        FileNotFoundError: If the file does not exist.
        ReferenceFormatError: If a JSON reference cannot be interpreted, or a
            text reference is not valid UTF-8.
    """
    reference_path = Path(path)
    if reference_path.suffix.lower() == ".json":
        try:
            payload = orjson.loads(reference_path.read_bytes())
        except orjson.JSONDecodeError as e:
            raise ReferenceFormatError(error_details=f"invalid JSON: {e}", source=str(path)) from e
        texts = _reference_from_json(payload, source=str(path))
        if drop_punctuation:
            texts = tokenize_reference(" ".join(texts), drop_punctuation=True)
    else:
        try:
            raw_text = reference_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ReferenceFormatError(
                error_details=f"not UTF-8 text: {e}", source=str(path)
            ) from e
        texts = tokenize_reference(raw_text, drop_punctuation=drop_punctuation)

    logger.debug(f"Loaded {len(texts)} reference words from {path}")
    return [ReferenceWord(text=text, position=position) for position, text in enumerate(texts)]


def report_to_json(
    report: AnalysisReport, *, indent: bool = True, include_cleaned_transcript: bool = False
) -> bytes:
    """Serialize a report to JSON bytes.

    Args:
        report: Analysis report.
        indent: Pretty-print with two-space indentation.
        include_cleaned_transcript: Include the spoken words used for alignment.

    Returns:
        UTF-8 encoded JSON.
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(
        report.to_dict(include_cleaned_transcript=include_cleaned_transcript), option=option
    )


def write_report(
    report: AnalysisReport,
    path: str | Path,
    *,
    indent: bool = True,
    include_cleaned_transcript: bool = False,
) -> Path:
    """Write a report as JSON, creating parent directories as needed.

    Args:
        report: Analysis report.
        path: Destination file.
        indent: Pretty-print with two-space indentation.
        include_cleaned_transcript: Include the spoken words used for alignment.

    Returns:
        Path the report was written to.
    """
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(
        report_to_json(report, indent=indent, include_cleaned_transcript=include_cleaned_transcript)
    )
    logger.info(f"Report written to {output_path}")
    return output_path
