"""
Test suite for error flagging.

This module tests the scans that turn aligned items and the raw transcript
into skipped words, misreads, hesitations, repetitions, skipped lines and
repeated phrases.
"""

import pytest

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
from src.reading_assessment.rules.flagging import ErrorFlagger


def _items(statuses: str) -> list[AlignedItem]:
    """Build aligned items from a status string: C(orrect), S(kipped), M(isread)."""
    items = []
    for index, code in enumerate(statuses):
        word = f"w{index}"
        match code:
            case "C":
                items.append(AlignedItem(word, word, ItemStatus.CORRECT, 1.0, index))
            case "S":
                items.append(AlignedItem(word, None, ItemStatus.SKIPPED, None, index))
            case "M":
                items.append(AlignedItem(word, "zzz", ItemStatus.MISREAD, 0.5, index))
    return items


@pytest.mark.unit
class TestSkippedAndMisread:
    """Test cases for find_skipped_words and find_misreads."""

    def test_skipped_indices(self: "TestSkippedAndMisread") -> None:
        """Test that skipped reference indices are collected in order."""
        assert ErrorFlagger.find_skipped_words(aligned_items=_items("CSCSS")) == [1, 3, 4]

    def test_misreads_record_similarity(self: "TestSkippedAndMisread") -> None:
        """Test that near misses and substitutions are told apart."""
        items = [
            AlignedItem("cat", "kat", ItemStatus.MISREAD, 0.8, 0),
            AlignedItem("sat", "dog", ItemStatus.MISREAD, 0.6, 1),
            AlignedItem("on", "on", ItemStatus.CORRECT, 0.9, 2),
        ]

        assert ErrorFlagger.find_misreads(aligned_items=items) == [
            MisreadPair(ref_index=0, expected="cat", spoken="kat", similar=True),
            MisreadPair(ref_index=1, expected="sat", spoken="dog", similar=False),
        ]


@pytest.mark.unit
class TestFindHesitations:
    """Test cases for find_hesitations."""

    def test_filler_and_pause(
        self: "TestFindHesitations", timed_spoken_words: list[SpokenWord]
    ) -> None:
        """Test that fillers and long gaps are reported at their raw indices."""
        hesitations = ErrorFlagger.find_hesitations(spoken=timed_spoken_words)

        assert hesitations == [
            Hesitation(index=2, kind=HesitationKind.FILLER, word="um"),
            Hesitation(index=5, kind=HesitationKind.PAUSE, word="down", pause_seconds=1.5),
        ]

    def test_filler_after_pause_reported_once(self: "TestFindHesitations") -> None:
        """Test that one index yields one entry, the filler taking precedence."""
        spoken = [SpokenWord("the", 1.0, 0.0, 0.2), SpokenWord("uh", 1.0, 3.0, 3.2)]

        hesitations = ErrorFlagger.find_hesitations(spoken=spoken)

        assert len(hesitations) == 1
        assert hesitations[0].kind == HesitationKind.FILLER

    def test_untimed_transcript(self: "TestFindHesitations", make_spoken) -> None:
        """Test that only fillers are found without timing data."""
        hesitations = ErrorFlagger.find_hesitations(spoken=make_spoken("a", "um", "b", "uh"))
        assert [h.index for h in hesitations] == [1, 3]
        assert all(h.pause_seconds is None for h in hesitations)


@pytest.mark.unit
class TestFindRepeatedWords:
    """Test cases for find_repeated_words."""

    def test_repeats_in_raw_sequence(self: "TestFindRepeatedWords", make_spoken) -> None:
        """Test that each repeated occurrence is reported with its raw index."""
        spoken = make_spoken("the", "the", "The", "cat", "um", "cat")

        assert ErrorFlagger.find_repeated_words(spoken=spoken) == [
            RepeatedWord(index=1, word="the"),
            RepeatedWord(index=2, word="The"),
        ]

    def test_no_repeats(self: "TestFindRepeatedWords", make_spoken) -> None:
        """Test a transcript without repetitions."""
        assert ErrorFlagger.find_repeated_words(spoken=make_spoken("a", "b", "a")) == []


@pytest.mark.unit
class TestFindSkippedLines:
    """Test cases for find_skipped_lines."""

    def test_min_run_value(self: "TestFindSkippedLines") -> None:
        """Test that SKIPPED_LINE_MIN_RUN has expected value - will fail if changed."""
        assert constants.SKIPPED_LINE_MIN_RUN == 3

    def test_run_of_three(self: "TestFindSkippedLines") -> None:
        """Test a single run in the middle of the passage."""
        runs = ErrorFlagger.find_skipped_lines(aligned_items=_items("CSSSC"))
        assert runs == [SkippedLineRun(start=1, end=3, count=3)]

    def test_short_runs_ignored(self: "TestFindSkippedLines") -> None:
        """Test that runs of one or two skips are not lines."""
        assert ErrorFlagger.find_skipped_lines(aligned_items=_items("SCSSCMS")) == []

    def test_runs_are_maximal(self: "TestFindSkippedLines") -> None:
        """Test that a long run is reported once, not as overlapping windows."""
        runs = ErrorFlagger.find_skipped_lines(aligned_items=_items("SSSSSCSSS"))
        assert runs == [
            SkippedLineRun(start=0, end=4, count=5),
            SkippedLineRun(start=6, end=8, count=3),
        ]

    def test_misread_breaks_run(self: "TestFindSkippedLines") -> None:
        """Test that only consecutive SKIPPED items form a run."""
        assert ErrorFlagger.find_skipped_lines(aligned_items=_items("SSMSS")) == []

    def test_custom_min_run(self: "TestFindSkippedLines") -> None:
        """Test overriding the minimum run length."""
        runs = ErrorFlagger.find_skipped_lines(aligned_items=_items("CSSC"), min_run=2)
        assert runs == [SkippedLineRun(start=1, end=2, count=2)]

    def test_empty(self: "TestFindSkippedLines") -> None:
        """Test that no items give no runs."""
        assert ErrorFlagger.find_skipped_lines(aligned_items=[]) == []


@pytest.mark.unit
class TestFindRepeatedPhrases:
    """Test cases for find_repeated_phrases."""

    def test_over_repeated_phrase_flagged(self: "TestFindRepeatedPhrases", make_spoken) -> None:
        """Test that a phrase said twice but printed once is flagged."""
        spoken = make_spoken("the", "cat", "the", "cat", "sat")

        phrases = ErrorFlagger.find_repeated_phrases(
            spoken=spoken, reference=["the", "cat", "sat"]
        )

        assert phrases == [
            RepeatedPhrase(
                phrase="the cat",
                first_index=0,
                second_index=2,
                spoken_count=2,
                reference_count=1,
            )
        ]

    def test_phrase_repeated_in_reference_not_flagged(
        self: "TestFindRepeatedPhrases", make_spoken
    ) -> None:
        """Test that echoing a phrase the text itself repeats is not an error."""
        spoken = make_spoken("the", "cat", "and", "the", "cat")

        phrases = ErrorFlagger.find_repeated_phrases(
            spoken=spoken, reference=["the", "cat", "and", "the", "cat"]
        )

        assert phrases == []

    def test_single_occurrence_not_flagged(self: "TestFindRepeatedPhrases", make_spoken) -> None:
        """Test that a phrase absent from the reference needs two occurrences."""
        phrases = ErrorFlagger.find_repeated_phrases(
            spoken=make_spoken("big", "dog"), reference=["the", "cat"]
        )
        assert phrases == []

    def test_normalized_and_ordered(self: "TestFindRepeatedPhrases", make_spoken) -> None:
        """Test normalized phrase text and first-occurrence ordering."""
        spoken = make_spoken("A", "dog,", "a", "Dog", "ran", "far", "ran", "far")

        phrases = ErrorFlagger.find_repeated_phrases(spoken=spoken, reference=[])

        assert [(p.phrase, p.first_index, p.second_index) for p in phrases] == [
            ("a dog", 0, 2),
            ("ran far", 4, 6),
        ]

    def test_punctuation_tokens_ignored(self: "TestFindRepeatedPhrases", make_spoken) -> None:
        """Test that pairs involving an empty normalized token are not phrases."""
        spoken = make_spoken("go", "!", "go", "!")
        assert ErrorFlagger.find_repeated_phrases(spoken=spoken, reference=[]) == []


@pytest.mark.unit
class TestBuildErrors:
    """Test cases for build_errors."""

    def test_collects_every_scan(
        self: "TestBuildErrors", timed_spoken_words: list[SpokenWord]
    ) -> None:
        """Test that the report combines word-level and transcript-level scans."""
        items = _items("CSSSM")

        errors = ErrorFlagger.build_errors(
            aligned_items=items, spoken=timed_spoken_words, reference=["a", "b", "c", "d", "e"]
        )

        assert isinstance(errors, ReadingErrors)
        assert errors.skipped_word_indices == (1, 2, 3)
        assert len(errors.misread_pairs) == 1
        assert [h.kind for h in errors.hesitations] == [HesitationKind.FILLER, HesitationKind.PAUSE]
        assert errors.repeated_words == (RepeatedWord(index=4, word="sat"),)
        assert errors.skipped_lines == (SkippedLineRun(start=1, end=3, count=3),)
        assert errors.repeated_phrases == ()
