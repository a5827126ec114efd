"""Spoken-token classification and cleaning ahead of alignment.

Fillers and immediate repeats ("the the") are disfluencies rather than
reading errors: they are removed from the sequence handed to the aligner, and
reported separately from the raw sequence.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Generic, TypeVar

from reading_pyutils.abstract_alignment import SpokenToken
from reading_pyutils.text import normalize_token

FILLER_WORDS: Final[frozenset[str]] = frozenset({"um", "uh", "er", "ah", "hmm", "like", "you know"})
PAUSE_THRESHOLD_SECONDS: Final[float] = 1.0

_NORMALIZED_FILLERS: Final[frozenset[str]] = frozenset(normalize_token(w) for w in FILLER_WORDS)

TokenT = TypeVar("TokenT", bound=SpokenToken)


@dataclass(frozen=True)
class CleanedSequence(Generic[TokenT]):
    """Spoken sequence with disfluencies removed.

    Attributes:
        words: Retained tokens, in original order
        source_indices: Index of each retained token in the raw sequence
    """

    words: tuple[TokenT, ...]
    source_indices: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.words)


def is_filler(token: str) -> bool:
    """Check whether a token is a filler word such as "um".

    Args:
        token: Raw token text

    Returns:
        True if the normalized token is a known filler
    """
    return normalize_token(token) in _NORMALIZED_FILLERS


def is_immediate_repeat(sequence: Sequence[SpokenToken], index: int) -> bool:
    """Check whether the token at ``index`` repeats the token right before it.

    Args:
        sequence: Spoken tokens
        index: Position to check

    Returns:
        True if index > 0 and both normalized tokens are equal and non-empty
    """
    if index <= 0 or index >= len(sequence):
        return False
    current = normalize_token(sequence[index].text)
    # Empty normalized tokens never equal anything, the same rule as are_similar.
    return bool(current) and current == normalize_token(sequence[index - 1].text)


def pause_before(sequence: Sequence[SpokenToken], index: int) -> float | None:
    """Gap in seconds between the previous token's end and this token's start.

    Args:
        sequence: Spoken tokens
        index: Position of the token after the gap

    Returns:
        Gap length, or None when index is 0 or either timestamp is missing
    """
    if index <= 0 or index >= len(sequence):
        return None
    start = sequence[index].start_time
    previous_end = sequence[index - 1].end_time
    if start is None or previous_end is None:
        return None
    return start - previous_end


def detect_hesitation(sequence: Sequence[SpokenToken], index: int) -> bool:
    """Check whether the speaker paused too long before the token at ``index``.

    Args:
        sequence: Spoken tokens
        index: Position to check

    Returns:
        True if the preceding gap exceeds ``PAUSE_THRESHOLD_SECONDS``;
        False when timing is unavailable
    """
    gap = pause_before(sequence, index)
    return gap is not None and gap > PAUSE_THRESHOLD_SECONDS


def clean_spoken_sequence(spoken: Sequence[TokenT]) -> CleanedSequence[TokenT]:
    """Drop fillers and immediate repeats from a spoken sequence.

    A token is dropped if it is a filler, or if its normalized form equals the
    normalized form of the previously retained token.

    Args:
        spoken: Raw spoken tokens

    Returns:
        CleanedSequence keeping the raw index of every retained token
    """
    words: list[TokenT] = []
    source_indices: list[int] = []
    last_retained: str | None = None

    for index, token in enumerate(spoken):
        if is_filler(token.text):
            continue
        normalized = normalize_token(token.text)
        if normalized and normalized == last_retained:
            continue
        words.append(token)
        source_indices.append(index)
        last_retained = normalized

    return CleanedSequence(words=tuple(words), source_indices=tuple(source_indices))
