"""Input text normalization: make numbers pronounceable, split punctuation."""

import re

import inflect

_inflect = None

_RANGE_RE = re.compile(r"([0-9]+)-([0-9]+)")
_THOUSANDS_RE = re.compile(r"([0-9]+),([0-9]+)")
_DECIMAL_RE = re.compile(r"([0-9]+)\.([0-9]+)")
_NUMBER_RE = re.compile(r"[0-9]+")
_TOKEN_SPLIT_RE = re.compile(r"[ \n]")

# Punctuation that becomes its own token
PUNCTUATION = (".", ",", "-", ":", "!", ";")


def _get_inflect() -> inflect.engine:
    global _inflect
    if _inflect is None:
        _inflect = inflect.engine()
    return _inflect


def spell_number(match: re.Match) -> str:
    """Spell out a run of digits, e.g. '42' -> ' forty-two '.

    Runs too long for inflect (hashes, IDs) are read digit by digit.
    """
    engine = _get_inflect()
    digits = match.group(0)
    try:
        words = engine.number_to_words(digits, andword="", comma="")
    except inflect.NumOutOfRangeError:
        words = " ".join(engine.number_to_words(d) for d in digits)
    return f" {words} "


def normalize_text(text: str) -> str:
    """Rewrite numbers as words and pad punctuation with spaces."""
    text = _RANGE_RE.sub(r"\1 to \2", text)
    text = _THOUSANDS_RE.sub(r"\1\2", text)
    text = _DECIMAL_RE.sub(r"\1 point \2", text)
    text = _NUMBER_RE.sub(spell_number, text)
    for mark in PUNCTUATION:
        text = text.replace(mark, f" {mark} ")
    return text


def tokenize(text: str) -> list[str]:
    """Split normalized text on spaces and newlines, dropping empty tokens."""
    return [token for token in _TOKEN_SPLIT_RE.split(text) if token]
