from typing import Final

from jellyfish import levenshtein_distance

from reading_pyutils.text import normalize_token

SIMILARITY_THRESHOLD: Final[float] = 0.60


def edit_distance(s1: str, *, s2: str) -> int:
    """Calculate the Levenshtein distance between two strings.

    Insertion, deletion and substitution each cost 1. Comparison is case
    sensitive; callers normalize first.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Levenshtein distance between the two strings
    """
    return levenshtein_distance(s1, s2)


def similarity_ratio(s1: str, *, s2: str) -> float:
    """Calculate ``1 - distance / max(len)`` for two strings.

    Args:
        s1: First string
        s2: Second string

    Returns:
        Ratio in [0, 1]; 0.0 when either string is empty
    """
    if not s1 or not s2:
        return 0.0
    return 1.0 - edit_distance(s1, s2=s2) / max(len(s1), len(s2))


def are_similar(expected: str, *, spoken: str) -> bool:
    """Decide whether a spoken token is close enough to the expected token.

    Both tokens are normalized first. Equal normalized forms are similar;
    otherwise the similarity ratio must reach ``SIMILARITY_THRESHOLD``.
    An empty normalized form is never similar to anything, itself included.

    Args:
        expected: Reference token
        spoken: Transcribed token

    Returns:
        True if the tokens count as a (possibly mispronounced) match
    """
    norm_expected = normalize_token(expected)
    norm_spoken = normalize_token(spoken)
    if not norm_expected or not norm_spoken:
        return False
    if norm_expected == norm_spoken:
        return True
    return similarity_ratio(norm_expected, s2=norm_spoken) >= SIMILARITY_THRESHOLD
