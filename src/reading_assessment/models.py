"""Models for the reading assessment pipeline.

This module contains the data structures that flow through an analysis run:
reference and spoken words on the way in, aligned items and the error
report on the way out. All report types are frozen; re-running an analysis
produces a new report.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class ItemStatus(StrEnum):
    """Outcome for a single reference word."""

    CORRECT = "correct"
    SKIPPED = "skipped"
    MISREAD = "misread"


class HesitationKind(StrEnum):
    """Kind of hesitation signal found in the raw transcript."""

    FILLER = "filler"
    PAUSE = "pause"


@dataclass(frozen=True)
class ReferenceWord:
    """Word of the text the reader is expected to say.

    Attributes:
        text: Word text as printed.
        position: Index in the original reference order.
    """

    text: str
    position: int


@dataclass(frozen=True)
class SpokenWord:
    """Individual word from a transcript with timing and confidence data.

    Attributes:
        text: The transcribed word text.
        confidence: Recognizer confidence in [0, 1].
        start_time: Start time in seconds since the start of the recording.
        end_time: End time in seconds since the start of the recording.
    """

    text: str
    confidence: float = 1.0
    start_time: float | None = None
    end_time: float | None = None

    def __str__(self) -> str:
        """Return string representation of the spoken word."""
        return f"{self.text}: {self.start_time} - {self.end_time} ({self.confidence})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "confidence": self.confidence,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass(frozen=True)
class AlignedItem:
    """Alignment outcome for one reference word.

    Attributes:
        expected: Reference word text.
        spoken: Spoken text paired with it, None when skipped.
        status: Correct, skipped or misread.
        confidence: Recognizer confidence of the paired spoken word.
        ref_index: Index of the word in the (prepared) reference.
    """

    expected: str
    spoken: str | None
    status: ItemStatus
    confidence: float | None
    ref_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "expected": self.expected,
            "spoken": self.spoken,
            "status": self.status.value,
            "confidence": self.confidence,
            "refIndex": self.ref_index,
        }


@dataclass(frozen=True)
class MisreadPair:
    """Reference word that was read as a different word.

    Attributes:
        ref_index: Index of the reference word.
        expected: Reference word text.
        spoken: What was said instead.
        similar: True for a near miss, False for a substitution.
    """

    ref_index: int
    expected: str
    spoken: str
    similar: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "refIndex": self.ref_index,
            "expected": self.expected,
            "spoken": self.spoken,
            "similar": self.similar,
        }


@dataclass(frozen=True)
class Hesitation:
    """Hesitation signal at a position of the raw transcript.

    Attributes:
        index: Index in the raw spoken sequence.
        kind: Filler word or long pause.
        word: Spoken text at the index.
        pause_seconds: Length of the preceding gap for pause hesitations.
    """

    index: int
    kind: HesitationKind
    word: str
    pause_seconds: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "type": self.kind.value,
            "word": self.word,
            "pauseSeconds": self.pause_seconds,
        }


@dataclass(frozen=True)
class RepeatedWord:
    """Word said twice in a row in the raw transcript.

    Attributes:
        index: Index of the repetition in the raw spoken sequence.
        word: Spoken text of the repetition.
    """

    index: int
    word: str

    def to_dict(self) -> dict[str, Any]:
        return {"index": self.index, "word": self.word}


@dataclass(frozen=True)
class SkippedLineRun:
    """Run of consecutive skipped reference words.

    Attributes:
        start: First reference index of the run.
        end: Last reference index of the run (inclusive).
        count: Number of words in the run.
    """

    start: int
    end: int
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "count": self.count}


@dataclass(frozen=True)
class RepeatedPhrase:
    """Two-word phrase said more often than the reference contains it.

    Attributes:
        phrase: Normalized phrase text.
        first_index: Raw spoken index where the phrase first starts.
        second_index: Raw spoken index where the phrase starts the second time.
        spoken_count: Occurrences in the raw transcript.
        reference_count: Occurrences in the reference.
    """

    phrase: str
    first_index: int
    second_index: int
    spoken_count: int
    reference_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "phrase": self.phrase,
            "indices": [self.first_index, self.second_index],
            "spokenCount": self.spoken_count,
            "referenceCount": self.reference_count,
        }


@dataclass(frozen=True)
class ReadingErrors:
    """Every error class found in one reading.

    Attributes:
        skipped_word_indices: Reference indices of skipped words.
        misread_pairs: Misread or substituted words.
        hesitations: Filler and pause hesitations.
        repeated_words: Immediate word repetitions.
        skipped_lines: Runs of three or more skipped words.
        repeated_phrases: Over-repeated two-word phrases.
    """

    skipped_word_indices: tuple[int, ...] = ()
    misread_pairs: tuple[MisreadPair, ...] = ()
    hesitations: tuple[Hesitation, ...] = ()
    repeated_words: tuple[RepeatedWord, ...] = ()
    skipped_lines: tuple[SkippedLineRun, ...] = ()
    repeated_phrases: tuple[RepeatedPhrase, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "skippedWords": list(self.skipped_word_indices),
            "misreadWords": [pair.to_dict() for pair in self.misread_pairs],
            "hesitations": [hesitation.to_dict() for hesitation in self.hesitations],
            "repeatedWords": [repeat.to_dict() for repeat in self.repeated_words],
            "skippedLines": [run.to_dict() for run in self.skipped_lines],
            "repeatedPhrases": [phrase.to_dict() for phrase in self.repeated_phrases],
        }


@dataclass(frozen=True)
class AnalysisReport:
    """Complete result of comparing one reading against its reference.

    Attributes:
        aligned_items: One item per prepared reference word, in order.
        correct_count: Number of items with status CORRECT.
        errors: Classified reading errors.
        cleaned_transcript: Spoken words that took part in alignment.
    """

    aligned_items: tuple[AlignedItem, ...]
    correct_count: int
    errors: ReadingErrors = field(default_factory=ReadingErrors)
    cleaned_transcript: tuple[SpokenWord, ...] = ()

    @property
    def total_words(self) -> int:
        return len(self.aligned_items)

    @property
    def accuracy(self) -> float:
        """Share of reference words read correctly, 0.0 for an empty reference."""
        if not self.aligned_items:
            return 0.0
        return self.correct_count / len(self.aligned_items)

    def summary(self) -> str:
        """One-line digest of the report."""
        return (
            f"{self.correct_count}/{self.total_words} words correct ({self.accuracy:.0%}), "
            f"{len(self.errors.skipped_word_indices)} skipped, "
            f"{len(self.errors.misread_pairs)} misread, "
            f"{len(self.errors.hesitations)} hesitations, "
            f"{len(self.errors.repeated_words)} repeated words, "
            f"{len(self.errors.skipped_lines)} skipped lines, "
            f"{len(self.errors.repeated_phrases)} repeated phrases"
        )

    def to_dict(self, *, include_cleaned_transcript: bool = False) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary.

        Args:
            include_cleaned_transcript: Add the spoken words used for alignment.

        Returns:
            Dictionary with camelCase keys.
        """
        payload: dict[str, Any] = {
            "alignedItems": [item.to_dict() for item in self.aligned_items],
            "correctCount": self.correct_count,
            "totalWords": self.total_words,
            "accuracy": self.accuracy,
            "errors": self.errors.to_dict(),
        }
        if include_cleaned_transcript:
            payload["cleanedTranscript"] = [word.to_dict() for word in self.cleaned_transcript]
        return payload
