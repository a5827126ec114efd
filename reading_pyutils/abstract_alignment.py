from dataclasses import dataclass
from enum import IntEnum
from typing import Protocol


class SpokenToken(Protocol):
    """Protocol for a transcribed word as seen by the alignment layer."""

    @property
    def text(self) -> str: ...

    @property
    def start_time(self) -> float | None: ...

    @property
    def end_time(self) -> float | None: ...


class AlignmentStep(IntEnum):
    """Backtrack decision recorded per cell of the alignment table.

    Values are ordered by tie-break preference: a lower value wins a tie.
    """

    MATCH = 0
    SKIP = 1
    INSERT = 2


@dataclass(frozen=True)
class AlignmentOp:
    """Single step of an alignment path.

    Attributes:
        step: Which edit operation this is
        ref_index: Index into the reference sequence (None for INSERT)
        spoken_index: Index into the aligned spoken sequence (None for SKIP)
    """

    step: AlignmentStep
    ref_index: int | None = None
    spoken_index: int | None = None

    @classmethod
    def match(cls, *, ref_index: int, spoken_index: int) -> "AlignmentOp":
        """Create a MATCH step consuming one word from each sequence."""
        return cls(AlignmentStep.MATCH, ref_index, spoken_index)

    @classmethod
    def skip(cls, *, ref_index: int) -> "AlignmentOp":
        """Create a SKIP step consuming one reference word."""
        return cls(AlignmentStep.SKIP, ref_index, None)

    @classmethod
    def insert(cls, *, spoken_index: int) -> "AlignmentOp":
        """Create an INSERT step consuming one spoken word."""
        return cls(AlignmentStep.INSERT, None, spoken_index)


@dataclass(frozen=True)
class AlignmentResult:
    """Result of aligning a reference against a spoken sequence.

    Attributes:
        ops: Alignment path from the start of both sequences to their end
        score: Optimal alignment score in reference scoring units
    """

    ops: tuple[AlignmentOp, ...]
    score: float

    @property
    def matches(self) -> tuple[AlignmentOp, ...]:
        """Steps that pair a reference word with a spoken word."""
        return tuple(op for op in self.ops if op.step == AlignmentStep.MATCH)
