from collections.abc import Sequence
from typing import Final

from reading_fe.word_level_alignment import align
from reading_pyutils.abstract_alignment import AlignmentOp, AlignmentStep
from reading_pyutils.logging import get_logger
from reading_pyutils.text import expand_currency_tokens, normalize_token
from src.reading_assessment.models import AlignedItem, ItemStatus, SpokenWord

logger = get_logger(__name__)

WORD_MATCH_SCORE: Final[int] = 1
WORD_NO_MATCH_SCORE: Final[int] = 0


def prepare_reference(reference: Sequence[str]) -> list[str]:
    """Expand printed currency amounts so they align with how they are read.

    Args:
        reference: Reference word strings.

    Returns:
        Reference word strings ready for alignment.
    """
    return expand_currency_tokens(list(reference))


def _classify_match(*, expected: str, spoken: SpokenWord, ref_index: int) -> AlignedItem:
    """Classify a reference word that the alignment paired with a spoken word.

    Args:
        expected: Reference word.
        spoken: Spoken word paired with it.
        ref_index: Index of the reference word.

    Returns:
        CORRECT item for equal normalized forms, MISREAD item otherwise.
    """
    norm_expected = normalize_token(expected)
    if norm_expected and norm_expected == normalize_token(spoken.text):
        status = ItemStatus.CORRECT
    else:
        status = ItemStatus.MISREAD
    return AlignedItem(
        expected=expected,
        spoken=spoken.text,
        status=status,
        confidence=spoken.confidence,
        ref_index=ref_index,
    )


def build_aligned_items(
    *, ops: Sequence[AlignmentOp], reference: Sequence[str], spoken: Sequence[SpokenWord]
) -> list[AlignedItem]:
    """Turn an alignment path into one AlignedItem per reference word.

    INSERT steps are extra spoken words and produce no item.

    Args:
        ops: Alignment path.
        reference: Reference words the path was computed for.
        spoken: Spoken words the path was computed for.

    Returns:
        Aligned items in reference order.
    """
    items: list[AlignedItem] = []
    for op in ops:
        match op.step:
            case AlignmentStep.MATCH:
                assert op.ref_index is not None and op.spoken_index is not None
                items.append(
                    _classify_match(
                        expected=reference[op.ref_index],
                        spoken=spoken[op.spoken_index],
                        ref_index=op.ref_index,
                    )
                )
            case AlignmentStep.SKIP:
                assert op.ref_index is not None
                items.append(
                    AlignedItem(
                        expected=reference[op.ref_index],
                        spoken=None,
                        status=ItemStatus.SKIPPED,
                        confidence=None,
                        ref_index=op.ref_index,
                    )
                )
            case AlignmentStep.INSERT:
                continue
    return items


def get_word_level_alignment(
    *, reference: Sequence[str], cleaned_spoken: Sequence[SpokenWord]
) -> list[AlignedItem]:
    """Align prepared reference words with the cleaned spoken sequence.

    Args:
        reference: Prepared reference words (see ``prepare_reference``).
        cleaned_spoken: Spoken words with fillers and repeats removed.

    Returns:
        One AlignedItem per reference word, in reference order.
    """
    ops = align(reference, cleaned_spoken)
    items = build_aligned_items(ops=ops, reference=reference, spoken=cleaned_spoken)
    logger.debug(
        f"Alignment produced {len(items)} items from {len(ops)} steps "
        f"({len(ops) - len(items)} extra spoken words)"
    )
    return items


def to_match_flags(items: Sequence[AlignedItem]) -> list[int]:
    """Convert aligned items to binary match scores.

    Args:
        items: Aligned items.

    Returns:
        1 for each correctly read reference word, 0 otherwise.
    """
    return [
        WORD_MATCH_SCORE if item.status == ItemStatus.CORRECT else WORD_NO_MATCH_SCORE
        for item in items
    ]
