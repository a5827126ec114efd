"""
Test suite for spoken-token classification and transcript cleaning.
"""

import pytest

from reading_fe.token_classification import (
    FILLER_WORDS,
    PAUSE_THRESHOLD_SECONDS,
    CleanedSequence,
    clean_spoken_sequence,
    detect_hesitation,
    is_filler,
    is_immediate_repeat,
    pause_before,
)
from src.reading_assessment.models import SpokenWord


@pytest.mark.unit
class TestIsFiller:
    """Test cases for is_filler."""

    def test_filler_set(self: "TestIsFiller") -> None:
        """Test that the filler set has not drifted."""
        assert FILLER_WORDS == frozenset({"um", "uh", "er", "ah", "hmm", "like", "you know"})

    @pytest.mark.parametrize("token", ["um", "Uh", "er,", "AH", "hmm...", "like", "you know"])
    def test_fillers(self: "TestIsFiller", token: str) -> None:
        """Test that fillers are recognised regardless of case and punctuation."""
        assert is_filler(token)

    @pytest.mark.parametrize("token", ["the", "you", "know", "umbrella", "", "!"])
    def test_non_fillers(self: "TestIsFiller", token: str) -> None:
        """Test that ordinary and empty tokens are not fillers."""
        assert not is_filler(token)


@pytest.mark.unit
class TestIsImmediateRepeat:
    """Test cases for is_immediate_repeat."""

    def test_repeat_detected(self: "TestIsImmediateRepeat", make_spoken) -> None:
        """Test that an equal normalized neighbour counts as a repeat."""
        spoken = make_spoken("The", "the.", "cat")
        assert is_immediate_repeat(spoken, 1)
        assert not is_immediate_repeat(spoken, 2)

    def test_first_index_never_repeat(self: "TestIsImmediateRepeat", make_spoken) -> None:
        """Test that index 0 has no predecessor."""
        assert not is_immediate_repeat(make_spoken("the", "the"), 0)

    def test_filler_between_breaks_raw_repeat(self: "TestIsImmediateRepeat", make_spoken) -> None:
        """Test that the raw check only looks at the direct predecessor."""
        assert not is_immediate_repeat(make_spoken("the", "um", "the"), 2)

    def test_empty_tokens_not_repeats(self: "TestIsImmediateRepeat", make_spoken) -> None:
        """Test that punctuation-only neighbours are not repeats of each other."""
        assert not is_immediate_repeat(make_spoken("!", "?"), 1)
        assert not is_immediate_repeat(make_spoken("...", "..."), 1)
        assert not is_immediate_repeat(make_spoken("", ""), 1)

    def test_out_of_range(self: "TestIsImmediateRepeat", make_spoken) -> None:
        """Test that an index past the end is not a repeat."""
        assert not is_immediate_repeat(make_spoken("a", "a"), 5)


@pytest.mark.unit
class TestDetectHesitation:
    """Test cases for pause_before and detect_hesitation."""

    def test_threshold_value(self: "TestDetectHesitation") -> None:
        """Test that PAUSE_THRESHOLD_SECONDS has expected value - will fail if changed."""
        assert PAUSE_THRESHOLD_SECONDS == 1.0

    def test_long_gap(self: "TestDetectHesitation", timed_spoken_words: list[SpokenWord]) -> None:
        """Test that a 1.5 s gap is a hesitation."""
        assert pause_before(timed_spoken_words, 5) == pytest.approx(1.5)
        assert detect_hesitation(timed_spoken_words, 5)

    def test_short_gap(self: "TestDetectHesitation", timed_spoken_words: list[SpokenWord]) -> None:
        """Test that ordinary gaps are not hesitations."""
        assert not detect_hesitation(timed_spoken_words, 1)

    def test_gap_equal_to_threshold(self: "TestDetectHesitation") -> None:
        """Test that the comparison is strictly greater than the threshold."""
        spoken = [SpokenWord("a", 1.0, 0.0, 0.5), SpokenWord("b", 1.0, 1.5, 2.0)]
        assert not detect_hesitation(spoken, 1)

    def test_first_index(
        self: "TestDetectHesitation", timed_spoken_words: list[SpokenWord]
    ) -> None:
        """Test that index 0 is never a hesitation."""
        assert pause_before(timed_spoken_words, 0) is None
        assert not detect_hesitation(timed_spoken_words, 0)

    def test_missing_timing(self: "TestDetectHesitation") -> None:
        """Test that missing timestamps disable detection instead of failing."""
        spoken = [
            SpokenWord("a", 1.0, 0.0, None),
            SpokenWord("b", 1.0, 5.0, 5.5),
            SpokenWord("c", 1.0, None, 9.0),
        ]
        assert pause_before(spoken, 1) is None
        assert not detect_hesitation(spoken, 1)
        assert not detect_hesitation(spoken, 2)


@pytest.mark.unit
class TestCleanSpokenSequence:
    """Test cases for clean_spoken_sequence."""

    def test_drops_fillers_and_repeats(
        self: "TestCleanSpokenSequence", timed_spoken_words: list[SpokenWord]
    ) -> None:
        """Test that fillers and immediate repeats are removed, order kept."""
        cleaned = clean_spoken_sequence(timed_spoken_words)

        assert isinstance(cleaned, CleanedSequence)
        assert [word.text for word in cleaned.words] == ["the", "cat", "sat", "down"]
        assert cleaned.source_indices == (0, 1, 3, 5)
        assert len(cleaned) == 4

    def test_repeat_across_removed_filler(self: "TestCleanSpokenSequence", make_spoken) -> None:
        """Test that repeats are judged against the previous retained word."""
        cleaned = clean_spoken_sequence(make_spoken("the", "um", "The", "cat"))
        assert [word.text for word in cleaned.words] == ["the", "cat"]
        assert cleaned.source_indices == (0, 3)

    def test_non_adjacent_duplicates_kept(self: "TestCleanSpokenSequence", make_spoken) -> None:
        """Test that only immediate repeats are dropped."""
        cleaned = clean_spoken_sequence(make_spoken("the", "cat", "the", "cat"))
        assert len(cleaned) == 4

    def test_retains_original_objects(self: "TestCleanSpokenSequence", make_spoken) -> None:
        """Test that retained entries are the raw SpokenWord instances."""
        spoken = make_spoken("a", "b")
        cleaned = clean_spoken_sequence(spoken)
        assert cleaned.words[0] is spoken[0]
        assert cleaned.words[1] is spoken[1]

    def test_empty(self: "TestCleanSpokenSequence") -> None:
        """Test cleaning an empty sequence."""
        cleaned = clean_spoken_sequence([])
        assert cleaned.words == ()
        assert cleaned.source_indices == ()

    def test_only_fillers(self: "TestCleanSpokenSequence", make_spoken) -> None:
        """Test that a transcript of fillers cleans to nothing."""
        assert len(clean_spoken_sequence(make_spoken("um", "uh", "hmm"))) == 0
