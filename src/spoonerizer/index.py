"""Collapsed segment strings and their reverse index."""

from collections import defaultdict
from dataclasses import dataclass, field

from spoonerizer.cache import SegmentStore
from spoonerizer.types import SegmentSequence

SEPARATOR = " "


def collapse(segments: SegmentSequence) -> str:
    """Serialize a segment sequence into a hashable key."""
    return SEPARATOR.join(segments)


@dataclass
class CollapsedIndex:
    """Word -> collapsed string, and collapsed string -> spellings.

    Several spellings can share one collapsed string (homophones).
    """
    collapsed: dict[str, str] = field(default_factory=dict)
    inverted: dict[str, set[str]] = field(default_factory=dict)

    def __contains__(self, key: str) -> bool:
        return key in self.inverted

    def spellings(self, key: str) -> list[str]:
        """All spellings of a collapsed string, sorted."""
        return sorted(self.inverted.get(key, ()))

    def spelling(self, key: str) -> str:
        """The lexicographically smallest spelling of a collapsed string."""
        return min(self.inverted[key])


def build_index(store: SegmentStore) -> CollapsedIndex:
    """Build the index from the store's current contents.

    Build once, after every word the run needs has been computed.

    Every stored word counts as known, not just dictionary words: input
    tokens filled into the store, and anything cached by earlier runs,
    can complete a spoonerism.
    """
    collapsed: dict[str, str] = {}
    inverted: dict[str, set[str]] = defaultdict(set)
    for word, segments in store.items():
        key = collapse(segments)
        collapsed[word] = key
        inverted[key].add(word)
    return CollapsedIndex(collapsed=collapsed, inverted=dict(inverted))
