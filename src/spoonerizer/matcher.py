"""Swap-pattern search for spoonerisms between two segment sequences."""

from spoonerizer.index import CollapsedIndex, collapse
from spoonerizer.types import SegmentSequence, Spoonerism, SwapPattern

# Tried in order; the first pattern producing two known words wins.
# Single-segment swaps come first, then the asymmetric ones, then 2-for-2.
SWAP_PATTERNS = (
    SwapPattern(1, 1),
    SwapPattern(1, 2),
    SwapPattern(2, 1),
    SwapPattern(2, 2),
)


def spoonerize(
    segments1: SegmentSequence,
    segments2: SegmentSequence,
    index: CollapsedIndex,
) -> Spoonerism | None:
    """Find a spoonerism of two segment sequences.

    For pattern (n1, n2) the hypothetical words are::

        hyp1 = segments2[:n1] + segments1[n2:]
        hyp2 = segments1[:n2] + segments2[n1:]

    and the swap is accepted when both exist in *index* and they are not
    just the two input words traded.

    Returns:
        The first accepted Spoonerism in SWAP_PATTERNS order, or None.
    """
    if segments1 == segments2:
        return None
    originals = {collapse(segments1), collapse(segments2)}

    for pattern in SWAP_PATTERNS:
        n1, n2 = pattern.n1, pattern.n2
        # Leave at least two segments behind in each word
        if len(segments1) <= n2 + 1 or len(segments2) <= n1 + 1:
            continue
        # Same leading segments would swap into the same words
        if n1 == n2 and segments1[:n1] == segments2[:n1]:
            continue

        hyp1 = collapse(segments2[:n1] + segments1[n2:])
        hyp2 = collapse(segments1[:n2] + segments2[n1:])
        # Both results must differ from the inputs; cat/pat -> pat/cat
        # only trades the two words
        if {hyp1, hyp2} == originals:
            continue
        if hyp1 in index and hyp2 in index:
            return Spoonerism(first=hyp1, second=hyp2, pattern=pattern)

    return None
