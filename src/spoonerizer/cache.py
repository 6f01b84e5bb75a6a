"""Persisted word -> segment sequence store."""

import json
import logging
import os
import re
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from tqdm import tqdm

from spoonerizer.synth import Synthesizer, SynthesizerTimeout
from spoonerizer.types import SegmentSequence

logger = logging.getLogger(__name__)

CACHE_DIR = Path(os.environ.get("SPOONERIZER_CACHE_DIR", "~/.cache/spoonerizer")).expanduser()

_HAS_ALPHA = re.compile(r"[a-zA-Z]")


def default_cache_path(synthesizer_name: str) -> Path:
    """Cache file for one backend; label sets differ between backends."""
    return CACHE_DIR / f"segments-{synthesizer_name}.json"


def _atomic_write(target: Path, data: bytes) -> None:
    """Write data to target atomically via temp file + rename."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=target.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, target)
    except Exception:
        if os.path.exists(tmp):
            os.unlink(tmp)
        raise


def is_pronounceable(word: str) -> bool:
    """True if *word* has at least one ASCII letter."""
    return bool(_HAS_ALPHA.search(word))


class SegmentStore:
    """Append-only mapping of word -> segment sequence.

    Entries missing from the persisted cache are computed through the
    synthesizer. The store only writes back to disk when something was
    added since it was loaded.

    Args:
        synthesizer: Backend used to fill gaps.
        path: Cache file, or None for a store that never persists.
    """

    def __init__(self, synthesizer: Synthesizer, path: Path | None = None):
        self.synthesizer = synthesizer
        self.path = Path(path) if path is not None else None
        self._segments: dict[str, SegmentSequence] = {}
        self.dirty = False

    def load(self) -> "SegmentStore":
        """Merge the persisted cache into the store, if there is one."""
        if self.path is None or not self.path.exists():
            return self
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable segment cache {self.path}: {e}")
            return self
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed segment cache {self.path}")
            return self
        loaded = 0
        for word, segments in data.items():
            if not isinstance(segments, list) or not all(isinstance(s, str) for s in segments):
                logger.warning(f"Skipping malformed cache entry for {word!r}: {segments!r}")
                continue
            self._segments.setdefault(word, segments)
            loaded += 1
        logger.info(f"Loaded {loaded} cached words from {self.path}")
        return self

    def get_or_compute(self, word: str) -> SegmentSequence:
        """Return the segments for *word*, synthesizing them if unknown."""
        if word in self._segments:
            return self._segments[word]
        if not is_pronounceable(word):
            return []
        try:
            raw = self.synthesizer.synthesize(word)
        except SynthesizerTimeout as e:
            # Not stored, so a later run asks again
            logger.warning(f"{e}; treating {word!r} as unpronounceable for this run")
            return []
        # Drop the leading and trailing pause markers
        segments = raw[1:-1]
        if not segments:
            logger.debug(f"No segments recognized for {word!r}")
        self._segments[word] = segments
        self.dirty = True
        return segments

    def get(self, word: str) -> SegmentSequence:
        """Return the stored segments for *word*, or [] if never seen."""
        return self._segments.get(word, [])

    def fill(self, words: Iterable[str], progress: bool = False, desc: str = "Calculating segments") -> int:
        """Make sure every non-empty word in *words* is in the store.

        Returns the number of newly computed entries.
        """
        before = len(self._segments)
        words_iter = words
        if progress:
            words_iter = tqdm(words, desc=desc, unit="word")
        for word in words_iter:
            if word:
                self.get_or_compute(word)
        added = len(self._segments) - before
        logger.info(f"{desc}: {added} new, {len(self._segments)} total")
        return added

    def flush_if_dirty(self) -> bool:
        """Persist the whole mapping if anything was added. Returns True if written."""
        if not self.dirty or self.path is None:
            return False
        logger.info(f"Saving {len(self._segments)} words to {self.path}")
        _atomic_write(self.path, json.dumps(self._segments).encode("utf-8"))
        self.dirty = False
        return True

    def items(self) -> Iterator[tuple[str, SegmentSequence]]:
        return iter(self._segments.items())

    def words(self) -> list[str]:
        return list(self._segments)

    def __contains__(self, word: str) -> bool:
        return word in self._segments

    def __len__(self) -> int:
        return len(self._segments)
