"""
Error flagging for the reading assessment pipeline.

This module walks the aligned items and the raw transcript to classify
reading errors. Word-level outcomes come from the alignment; hesitations and
repetitions come from the raw transcript, since that is what the listener heard.
"""

from collections import Counter
from collections.abc import Sequence

from reading_fe.token_classification import (
    detect_hesitation,
    is_filler,
    is_immediate_repeat,
    pause_before,
)
from reading_pyutils.logging import get_logger
from reading_pyutils.text import normalize_token
from reading_pyutils.word_distance import are_similar
from src.reading_assessment import constants
from src.reading_assessment.models import (
    AlignedItem,
    Hesitation,
    HesitationKind,
    ItemStatus,
    MisreadPair,
    ReadingErrors,
    RepeatedPhrase,
    RepeatedWord,
    SkippedLineRun,
    SpokenWord,
)

logger = get_logger(__name__)


class ErrorFlagger:
    """Derives the reading errors of one analysis run."""

    @staticmethod
    def find_skipped_words(*, aligned_items: Sequence[AlignedItem]) -> list[int]:
        """Reference indices of words that were not read.

        Args:
            aligned_items: Aligned items in reference order.

        Returns:
            Indices of SKIPPED items.
        """
        return [item.ref_index for item in aligned_items if item.status == ItemStatus.SKIPPED]

    @staticmethod
    def find_misreads(*, aligned_items: Sequence[AlignedItem]) -> list[MisreadPair]:
        """Pairs of expected and spoken text for misread words.

        Args:
            aligned_items: Aligned items in reference order.

        Returns:
            One MisreadPair per MISREAD item.
        """
        return [
            MisreadPair(
                ref_index=item.ref_index,
                expected=item.expected,
                spoken=item.spoken or "",
                similar=are_similar(item.expected, spoken=item.spoken or ""),
            )
            for item in aligned_items
            if item.status == ItemStatus.MISREAD
        ]

    @staticmethod
    def find_hesitations(*, spoken: Sequence[SpokenWord]) -> list[Hesitation]:
        """Filler words and long pauses in the raw transcript.

        A position yields at most one entry; a filler after a long pause is
        reported as a filler.

        Args:
            spoken: Raw spoken words.

        Returns:
            Hesitations in transcript order.
        """
        hesitations: list[Hesitation] = []
        for index, word in enumerate(spoken):
            if is_filler(word.text):
                hesitations.append(
                    Hesitation(index=index, kind=HesitationKind.FILLER, word=word.text)
                )
                continue
            if detect_hesitation(spoken, index):
                gap = pause_before(spoken, index)
                hesitations.append(
                    Hesitation(
                        index=index,
                        kind=HesitationKind.PAUSE,
                        word=word.text,
                        pause_seconds=None if gap is None else round(gap, 3),
                    )
                )
        return hesitations

    @staticmethod
    def find_repeated_words(*, spoken: Sequence[SpokenWord]) -> list[RepeatedWord]:
        """Immediate word repetitions in the raw transcript.

        Args:
            spoken: Raw spoken words.

        Returns:
            One entry per repeated occurrence (the second "the" in "the the").
        """
        return [
            RepeatedWord(index=index, word=word.text)
            for index, word in enumerate(spoken)
            if is_immediate_repeat(spoken, index)
        ]

    @staticmethod
    def find_skipped_lines(
        *, aligned_items: Sequence[AlignedItem], min_run: int = constants.SKIPPED_LINE_MIN_RUN
    ) -> list[SkippedLineRun]:
        """Maximal runs of consecutive skipped words.

        Args:
            aligned_items: Aligned items in reference order.
            min_run: Shortest run that counts as a skipped line.

        Returns:
            Runs of at least ``min_run`` skipped words.
        """
        runs: list[SkippedLineRun] = []
        run_start: int | None = None

        def _close(end: int) -> None:
            if run_start is not None and end - run_start + 1 >= min_run:
                runs.append(SkippedLineRun(start=run_start, end=end, count=end - run_start + 1))

        for position, item in enumerate(aligned_items):
            if item.status == ItemStatus.SKIPPED:
                if run_start is None:
                    run_start = position
                continue
            _close(position - 1)
            run_start = None
        _close(len(aligned_items) - 1)

        return runs

    @staticmethod
    def _phrases(words: Sequence[str]) -> list[tuple[int, str]]:
        """Adjacent normalized phrases with the index where each starts.

        Args:
            words: Word texts.

        Returns:
            (start index, phrase) pairs; phrases containing an empty token are skipped.
        """
        normalized = [normalize_token(word) for word in words]
        phrases: list[tuple[int, str]] = []
        for start in range(len(normalized) - constants.PHRASE_LENGTH + 1):
            parts = normalized[start : start + constants.PHRASE_LENGTH]
            if all(parts):
                phrases.append((start, " ".join(parts)))
        return phrases

    @classmethod
    def find_repeated_phrases(
        cls, *, spoken: Sequence[SpokenWord], reference: Sequence[str]
    ) -> list[RepeatedPhrase]:
        """Two-word phrases said more often than the reference contains them.

        Args:
            spoken: Raw spoken words.
            reference: Prepared reference words.

        Returns:
            Repeated phrases ordered by first occurrence in the transcript.
        """
        reference_counts = Counter(phrase for _, phrase in cls._phrases(reference))
        occurrences: dict[str, list[int]] = {}
        for start, phrase in cls._phrases([word.text for word in spoken]):
            occurrences.setdefault(phrase, []).append(start)

        repeated: list[RepeatedPhrase] = []
        for phrase, starts in occurrences.items():
            spoken_count = len(starts)
            reference_count = reference_counts.get(phrase, 0)
            if spoken_count >= 2 and spoken_count > reference_count:
                repeated.append(
                    RepeatedPhrase(
                        phrase=phrase,
                        first_index=starts[0],
                        second_index=starts[1],
                        spoken_count=spoken_count,
                        reference_count=reference_count,
                    )
                )
        return repeated

    @classmethod
    def build_errors(
        cls,
        *,
        aligned_items: Sequence[AlignedItem],
        spoken: Sequence[SpokenWord],
        reference: Sequence[str],
    ) -> ReadingErrors:
        """Run every scan and collect the results.

        Args:
            aligned_items: Aligned items in reference order.
            spoken: Raw spoken words.
            reference: Prepared reference words.

        Returns:
            ReadingErrors for the run.
        """
        errors = ReadingErrors(
            skipped_word_indices=tuple(cls.find_skipped_words(aligned_items=aligned_items)),
            misread_pairs=tuple(cls.find_misreads(aligned_items=aligned_items)),
            hesitations=tuple(cls.find_hesitations(spoken=spoken)),
            repeated_words=tuple(cls.find_repeated_words(spoken=spoken)),
            skipped_lines=tuple(cls.find_skipped_lines(aligned_items=aligned_items)),
            repeated_phrases=tuple(cls.find_repeated_phrases(spoken=spoken, reference=reference)),
        )
        logger.debug(
            f"Flagged {len(errors.skipped_word_indices)} skipped, "
            f"{len(errors.misread_pairs)} misread, {len(errors.hesitations)} hesitations, "
            f"{len(errors.repeated_phrases)} repeated phrases"
        )
        return errors
