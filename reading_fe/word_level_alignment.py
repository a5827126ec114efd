from collections.abc import Sequence
from typing import Final

import numpy as np

from reading_pyutils.abstract_alignment import (
    AlignmentOp,
    AlignmentResult,
    AlignmentStep,
    SpokenToken,
)
from reading_pyutils.errors import PreconditionError
from reading_pyutils.logging import get_logger
from reading_pyutils.text import normalize_token
from reading_pyutils.word_distance import SIMILARITY_THRESHOLD, similarity_ratio

_LOGGER: Final = get_logger(__name__)

MATCH_SCORE: Final[float] = 1.0
MISREAD_SCORE: Final[float] = 0.3
MISMATCH_SCORE: Final[float] = -1.0
SKIP_PENALTY: Final[float] = -1.0
INSERT_PENALTY: Final[float] = -0.5

# Scores are accumulated as integers in tenths so tie-breaks are exact.
SCORE_SCALE: Final[int] = 10


def _to_units(score: float) -> int:
    return round(score * SCORE_SCALE)


_MATCH_UNITS: Final[int] = _to_units(MATCH_SCORE)
_MISREAD_UNITS: Final[int] = _to_units(MISREAD_SCORE)
_MISMATCH_UNITS: Final[int] = _to_units(MISMATCH_SCORE)
_SKIP_UNITS: Final[int] = _to_units(SKIP_PENALTY)
_INSERT_UNITS: Final[int] = _to_units(INSERT_PENALTY)


def require_sequence(*, argument: str, value: object) -> None:
    """Raise PreconditionError unless ``value`` is a non-string sequence.

    Args:
        argument: Argument name for the error message
        value: Value to check

    Raises:
        PreconditionError: If value is None, a string, or not a sequence
    """
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        raise PreconditionError(argument=argument, expected="a sequence", received=value)


def _normalized_pair_score(norm_expected: str, norm_spoken: str) -> float:
    """Score a reference/spoken pair whose tokens are already normalized.

    Args:
        norm_expected: Normalized reference token
        norm_spoken: Normalized spoken token

    Returns:
        MATCH_SCORE, MISREAD_SCORE or MISMATCH_SCORE
    """
    if not norm_expected or not norm_spoken:
        return MISMATCH_SCORE
    if norm_expected == norm_spoken:
        return MATCH_SCORE
    if similarity_ratio(norm_expected, s2=norm_spoken) >= SIMILARITY_THRESHOLD:
        return MISREAD_SCORE
    return MISMATCH_SCORE


def word_pair_score(expected: str, *, spoken: str) -> float:
    """Score aligning a spoken word against a reference word.

    Args:
        expected: Reference token
        spoken: Spoken token

    Returns:
        +1 for an exact normalized match, +0.3 for a similar word, -1 otherwise
    """
    return _normalized_pair_score(normalize_token(expected), normalize_token(spoken))


def align_words(reference: Sequence[str], spoken: Sequence[SpokenToken]) -> AlignmentResult:
    """Compute the optimal global alignment of a reference and a spoken sequence.

    Dynamic programming over an (m+1) x (n+1) score table. Skipping a reference
    word costs 1, an extra spoken word costs 0.5, and pairing two words scores
    +1 / +0.3 / -1 depending on how close they are. Ties resolve in the order
    match, skip, insert.

    Args:
        reference: Reference word strings in reading order
        spoken: Cleaned spoken tokens in speaking order

    Returns:
        AlignmentResult with the backtracked path and the optimal score

    Raises:
        PreconditionError: If either argument is not a sequence, or a spoken
            element has no ``text`` attribute
    """
    require_sequence(argument="reference", value=reference)
    require_sequence(argument="spoken", value=spoken)
    for token in spoken:
        if not hasattr(token, "text"):
            raise PreconditionError(
                argument="spoken", expected="tokens with a 'text' attribute", received=token
            )

    m, n = len(reference), len(spoken)
    norm_reference = [normalize_token(word) for word in reference]
    norm_spoken = [normalize_token(token.text) for token in spoken]

    scores = np.zeros((m + 1, n + 1), dtype=np.int64)
    trace = np.zeros((m + 1, n + 1), dtype=np.int8)
    scores[:, 0] = np.arange(m + 1) * _SKIP_UNITS
    scores[0, :] = np.arange(n + 1) * _INSERT_UNITS
    trace[1:, 0] = AlignmentStep.SKIP
    trace[0, 1:] = AlignmentStep.INSERT

    for i in range(1, m + 1):
        expected = norm_reference[i - 1]
        for j in range(1, n + 1):
            pair_units = _to_units(_normalized_pair_score(expected, norm_spoken[j - 1]))
            best = scores[i - 1, j - 1] + pair_units
            step = AlignmentStep.MATCH

            skip_option = scores[i - 1, j] + _SKIP_UNITS
            if skip_option > best:
                best, step = skip_option, AlignmentStep.SKIP

            insert_option = scores[i, j - 1] + _INSERT_UNITS
            if insert_option > best:
                best, step = insert_option, AlignmentStep.INSERT

            scores[i, j] = best
            trace[i, j] = step

    ops = _backtrack(trace=trace, m=m, n=n)
    score = float(scores[m, n]) / SCORE_SCALE
    _LOGGER.debug(f"Aligned {m} reference words against {n} spoken words (score={score:.1f})")
    return AlignmentResult(ops=tuple(ops), score=score)


def _backtrack(*, trace: np.ndarray, m: int, n: int) -> list[AlignmentOp]:
    """Walk the trace table from (m, n) back to (0, 0).

    Args:
        trace: Backtrack decisions per cell
        m: Reference length
        n: Spoken length

    Returns:
        Alignment path in forward order
    """
    ops: list[AlignmentOp] = []
    i, j = m, n
    while i > 0 or j > 0:
        match AlignmentStep(int(trace[i, j])):
            case AlignmentStep.MATCH:
                ops.append(AlignmentOp.match(ref_index=i - 1, spoken_index=j - 1))
                i -= 1
                j -= 1
            case AlignmentStep.SKIP:
                ops.append(AlignmentOp.skip(ref_index=i - 1))
                i -= 1
            case AlignmentStep.INSERT:
                ops.append(AlignmentOp.insert(spoken_index=j - 1))
                j -= 1
    ops.reverse()
    return ops


def align(reference: Sequence[str], cleaned_spoken: Sequence[SpokenToken]) -> list[AlignmentOp]:
    """Align a reference sequence against a cleaned spoken sequence.

    Args:
        reference: Reference word strings
        cleaned_spoken: Spoken tokens with fillers and repeats already removed

    Returns:
        Alignment path; every reference index appears exactly once
    """
    return list(align_words(reference, cleaned_spoken).ops)
