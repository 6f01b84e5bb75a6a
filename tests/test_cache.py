"""Tests for the segment store."""

import json

import pytest

from spoonerizer.cache import SegmentStore, default_cache_path, is_pronounceable
from spoonerizer.synth import SynthesizerTimeout

from conftest import FakeSynthesizer


@pytest.fixture(autouse=True)
def isolated_cache(tmp_path, monkeypatch):
    """Redirect cache to tmp_path so tests don't pollute the real cache."""
    monkeypatch.setattr("spoonerizer.cache.CACHE_DIR", tmp_path / "cache")


def test_default_cache_path_per_synthesizer(tmp_path):
    assert default_cache_path("festival") == tmp_path / "cache" / "segments-festival.json"
    assert default_cache_path("g2p") != default_cache_path("festival")


def test_is_pronounceable():
    assert is_pronounceable("cat")
    assert is_pronounceable("R2D2")
    assert not is_pronounceable("...")
    assert not is_pronounceable("1234")
    assert not is_pronounceable("")


def test_pause_markers_stripped(synth):
    store = SegmentStore(synth)
    assert store.get_or_compute("cat") == ["k", "ae", "t"]


def test_computed_once(synth):
    store = SegmentStore(synth)
    store.get_or_compute("cat")
    store.get_or_compute("cat")
    assert synth.calls == ["cat"]
    assert store.dirty


def test_unpronounceable_short_circuits(synth):
    store = SegmentStore(synth)
    assert store.get_or_compute(",") == []
    assert synth.calls == []
    assert "," not in store
    assert not store.dirty


def test_unrecognized_word_stores_empty(synth):
    store = SegmentStore(synth)
    assert store.get_or_compute("xyzzy") == []
    assert "xyzzy" in store
    assert store.get("xyzzy") == []


def test_get_unknown_is_empty(synth):
    assert SegmentStore(synth).get("never") == []


def test_fill_skips_empty_and_counts_new(synth):
    store = SegmentStore(synth)
    assert store.fill(["cat", "", "pat", "cat"]) == 2
    assert store.words() == ["cat", "pat"]
    assert len(store) == 2


def test_flush_writes_when_dirty(synth, tmp_path):
    path = tmp_path / "segments.json"
    store = SegmentStore(synth, path)
    store.fill(["cat", "pit"])
    assert store.flush_if_dirty() is True
    assert json.loads(path.read_text()) == {
        "cat": ["k", "ae", "t"],
        "pit": ["p", "ih", "t"],
    }
    assert not store.dirty


def test_flush_is_noop_when_clean(synth, tmp_path):
    path = tmp_path / "segments.json"
    store = SegmentStore(synth, path)
    assert store.flush_if_dirty() is False
    assert not path.exists()


def test_flush_is_idempotent(synth, tmp_path):
    path = tmp_path / "segments.json"
    store = SegmentStore(synth, path)
    store.get_or_compute("cat")
    assert store.flush_if_dirty() is True
    assert store.flush_if_dirty() is False


def test_flush_without_path_never_writes(synth):
    store = SegmentStore(synth)
    store.get_or_compute("cat")
    assert store.flush_if_dirty() is False


def test_load_roundtrip_avoids_synthesizer(synth, tmp_path):
    path = tmp_path / "segments.json"
    first = SegmentStore(synth, path)
    first.fill(["cat", "pat"])
    first.flush_if_dirty()

    fresh = FakeSynthesizer()
    second = SegmentStore(fresh, path).load()
    second.fill(["cat", "pat"])
    assert fresh.calls == []
    assert second.get("pat") == ["p", "ae", "t"]
    assert not second.dirty


def test_load_keeps_cached_values(tmp_path):
    path = tmp_path / "segments.json"
    path.write_text(json.dumps({"cat": ["c", "a", "t"]}))
    store = SegmentStore(FakeSynthesizer(), path).load()
    assert store.get_or_compute("cat") == ["c", "a", "t"]


def test_load_missing_file(synth, tmp_path):
    store = SegmentStore(synth, tmp_path / "absent.json").load()
    assert len(store) == 0


def test_load_corrupt_cache_starts_empty(synth, tmp_path):
    path = tmp_path / "segments.json"
    path.write_text("{not json")
    store = SegmentStore(synth, path).load()
    assert len(store) == 0
    store.get_or_compute("cat")
    assert store.flush_if_dirty()
    assert json.loads(path.read_text()) == {"cat": ["k", "ae", "t"]}


def test_flush_creates_parent_dirs(synth, tmp_path):
    path = tmp_path / "nested" / "dir" / "segments.json"
    store = SegmentStore(synth, path)
    store.get_or_compute("cat")
    store.flush_if_dirty()
    assert path.exists()


class StallingSynthesizer(FakeSynthesizer):
    """Times out on every word in ``stalls``."""

    def __init__(self, stalls):
        super().__init__()
        self.stalls = set(stalls)

    def synthesize(self, text):
        if text in self.stalls:
            self.calls.append(text)
            raise SynthesizerTimeout(f"festival failed on {text!r}")
        return super().synthesize(text)


def test_timeout_is_not_stored(tmp_path):
    path = tmp_path / "segments.json"
    store = SegmentStore(StallingSynthesizer({"cat"}), path)
    assert store.get_or_compute("cat") == []
    assert "cat" not in store
    assert not store.dirty
    assert store.flush_if_dirty() is False
    assert not path.exists()


def test_timeout_retried_by_later_run(tmp_path):
    path = tmp_path / "segments.json"
    first = SegmentStore(StallingSynthesizer({"cat"}), path)
    first.fill(["cat", "pit"])
    first.flush_if_dirty()
    assert json.loads(path.read_text()) == {"pit": ["p", "ih", "t"]}

    second = SegmentStore(FakeSynthesizer(), path).load()
    assert second.get_or_compute("cat") == ["k", "ae", "t"]


def test_load_skips_malformed_entries(tmp_path):
    path = tmp_path / "segments.json"
    path.write_text(json.dumps({
        "cat": ["k", "ae", "t"],
        "pat": "p ae t",
        "kit": ["k", 3, "t"],
        "pit": None,
    }))
    synth = FakeSynthesizer()
    store = SegmentStore(synth, path).load()
    assert store.words() == ["cat"]
    assert store.get_or_compute("pat") == ["p", "ae", "t"]
    assert synth.calls == ["pat"]
