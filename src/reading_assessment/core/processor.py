"""
Core processing logic for the reading assessment pipeline.

This module runs one analysis end to end: prepare the reference, clean the
transcript, align, and flag errors. Each call is independent; no state is
shared between runs.
"""

from collections.abc import Sequence
from typing import Any

from reading_fe.token_classification import clean_spoken_sequence
from reading_fe.word_level_alignment import require_sequence
from reading_pyutils.logging import get_logger
from src.reading_assessment.alignment.word_alignment import (
    get_word_level_alignment,
    prepare_reference,
    to_match_flags,
)
from src.reading_assessment.models import AnalysisReport, ReferenceWord
from src.reading_assessment.rules.flagging import ErrorFlagger
from src.reading_assessment.utils.transcription import coerce_spoken_words

logger = get_logger(__name__)


def _reference_text(word: object) -> str:
    text = word.text if isinstance(word, ReferenceWord) else word
    return text if isinstance(text, str) else ""


def _reference_texts(reference: Sequence[str | ReferenceWord]) -> list[str]:
    """Extract word strings from a reference sequence.

    Args:
        reference: Word strings or ReferenceWords.

    Returns:
        Word strings in reference order; ReferenceWords are ordered by
        position, and entries without string text become "".
    """
    if reference and all(isinstance(word, ReferenceWord) for word in reference):
        reference = sorted(reference, key=lambda word: word.position)  # type: ignore[union-attr]
    return [_reference_text(word) for word in reference]


def analyze_reading(
    reference: Sequence[str | ReferenceWord], spoken: Sequence[Any]
) -> AnalysisReport:
    """Compare a spoken reading with its reference text.

    Args:
        reference: Reference words in reading order.
        spoken: SpokenWords or word records in speaking order; records
            without text are dropped.

    Returns:
        AnalysisReport with one aligned item per prepared reference word.

    Raises:
        PreconditionError: If either argument is not a sequence.
    """
    require_sequence(argument="reference", value=reference)
    require_sequence(argument="spoken", value=spoken)

    reference_words = prepare_reference(_reference_texts(reference))
    raw_spoken = coerce_spoken_words(spoken)
    cleaned = clean_spoken_sequence(raw_spoken)
    logger.debug(
        f"Analyzing {len(reference_words)} reference words against {len(raw_spoken)} spoken "
        f"words ({len(raw_spoken) - len(cleaned)} removed as fillers or repeats)"
    )

    aligned_items = get_word_level_alignment(
        reference=reference_words, cleaned_spoken=cleaned.words
    )
    errors = ErrorFlagger.build_errors(
        aligned_items=aligned_items, spoken=raw_spoken, reference=reference_words
    )

    report = AnalysisReport(
        aligned_items=tuple(aligned_items),
        correct_count=sum(to_match_flags(aligned_items)),
        errors=errors,
        cleaned_transcript=cleaned.words,
    )
    logger.info(f"Analysis complete: {report.summary()}")
    return report
