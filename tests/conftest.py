"""Shared fixtures: an in-memory synthesizer and a small segment store."""

import pytest

from spoonerizer.cache import SegmentStore
from spoonerizer.index import build_index
from spoonerizer.synth import PAUSE, Synthesizer

LEXICON = {
    "cat": ["k", "ae", "t"],
    "pat": ["p", "ae", "t"],
    "kit": ["k", "ih", "t"],
    "pit": ["p", "ih", "t"],
    "cow": ["k", "aw"],
    "sea": ["s", "iy"],
    "see": ["s", "iy"],
}


class FakeSynthesizer(Synthesizer):
    """Looks words up in a fixed lexicon and frames them like Festival."""

    name = "fake"

    def __init__(self, lexicon=None):
        self.lexicon = dict(LEXICON if lexicon is None else lexicon)
        self.calls = []

    def synthesize(self, text):
        self.calls.append(text)
        segments = self.lexicon.get(text)
        if segments is None:
            return []
        return [PAUSE, *segments, PAUSE]


@pytest.fixture
def synth():
    return FakeSynthesizer()


@pytest.fixture
def store(synth):
    s = SegmentStore(synth)
    s.fill(LEXICON)
    return s


@pytest.fixture
def index(store):
    return build_index(store)
