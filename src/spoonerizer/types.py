"""Core data types for spoonerizer."""

from dataclasses import dataclass, field
from enum import Enum

# Ordered phonetic segment labels for one word, e.g. ["k", "ae", "t"]
SegmentSequence = list[str]


@dataclass(frozen=True)
class SwapPattern:
    """How many leading segments move between the two words."""
    n1: int     # taken from the second word's front
    n2: int     # removed from the first word's front

    def transposed(self) -> "SwapPattern":
        return SwapPattern(self.n2, self.n1)


@dataclass(frozen=True)
class Spoonerism:
    """A successful swap: both hypothetical words, as collapsed strings."""
    first: str
    second: str
    pattern: SwapPattern


@dataclass
class EnumerationMatch:
    """One dictionary partner found for an input word in enumeration mode."""
    partner: str
    spoonerism: Spoonerism
    words1: list[str]   # every spelling of spoonerism.first
    words2: list[str]   # every spelling of spoonerism.second


class StepKind(Enum):
    """Transitions of the streaming scanner."""
    EMIT_ONE = 1
    EMIT_PAIR = 2
    EMIT_TRIPLE = 3

    @property
    def advance(self) -> int:
        return self.value


@dataclass
class ScanStep:
    """One emitted span of the streaming scanner."""
    kind: StepKind
    original: list[str]                                  # tokens consumed
    replaced: list[str] = field(default_factory=list)    # rewritten span, empty for EMIT_ONE
