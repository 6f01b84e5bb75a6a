"""Reference dictionary loading."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY = Path(
    os.environ.get("SPOONERIZER_DICTIONARY", "/usr/share/dict/american-english")
)


def load_dictionary(path: str | Path = DEFAULT_DICTIONARY) -> list[str]:
    """Read a newline-delimited word list.

    Lines are stripped, blank lines skipped and duplicates dropped (first
    occurrence wins). Raises FileNotFoundError if *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dictionary not found: {path}")
    with open(path, encoding="utf-8", errors="replace") as f:
        words = dict.fromkeys(line.strip() for line in f)
    words.pop("", None)
    logger.info(f"Loaded {len(words)} dictionary words from {path}")
    return list(words)
