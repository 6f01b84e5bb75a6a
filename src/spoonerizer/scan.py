"""Scan drivers: inline rewriting of a token stream, and dictionary enumeration."""

import logging

from tqdm import tqdm

from spoonerizer.cache import SegmentStore
from spoonerizer.index import CollapsedIndex
from spoonerizer.matcher import spoonerize
from spoonerizer.types import EnumerationMatch, ScanStep, StepKind

logger = logging.getLogger(__name__)

# Tokens needed from the cursor onward before a position is scanned
_WINDOW = 4


def _next_step(
    tokens: list[str],
    i: int,
    store: SegmentStore,
    index: CollapsedIndex,
) -> ScanStep:
    """Decide the transition at cursor *i*."""
    first = store.get(tokens[i])

    # Adjacent words: "a b"
    result = spoonerize(first, store.get(tokens[i + 1]), index)
    if result:
        return ScanStep(
            kind=StepKind.EMIT_PAIR,
            original=tokens[i:i + 2],
            replaced=[index.spelling(result.first), index.spelling(result.second)],
        )

    # Skip one word: "a b c", b left untouched
    result = spoonerize(first, store.get(tokens[i + 2]), index)
    if result:
        return ScanStep(
            kind=StepKind.EMIT_TRIPLE,
            original=tokens[i:i + 3],
            replaced=[index.spelling(result.first), tokens[i + 1], index.spelling(result.second)],
        )

    return ScanStep(kind=StepKind.EMIT_ONE, original=[tokens[i]])


def scan_tokens(
    tokens: list[str],
    store: SegmentStore,
    index: CollapsedIndex,
) -> list[ScanStep]:
    """Walk a token stream and find spoonerism spans.

    Positions up to ``len(tokens) - 4`` are scanned; the tail after that is
    emitted unchanged. Tokens unknown to *store* never match.
    """
    steps: list[ScanStep] = []
    i = 0
    while i <= len(tokens) - _WINDOW:
        step = _next_step(tokens, i, store, index)
        steps.append(step)
        i += step.kind.advance
    steps.extend(ScanStep(kind=StepKind.EMIT_ONE, original=[token]) for token in tokens[i:])

    found = sum(1 for s in steps if s.kind is not StepKind.EMIT_ONE)
    logger.info(f"Found {found} spoonerism(s) in {len(tokens)} tokens")
    return steps


def render_stream(steps: list[ScanStep]) -> str:
    """Format scan steps as text with spoonerism spans marked.

    A rewritten span reads ``{"new1 new2" (old1 old2)}``.
    """
    parts = []
    for step in steps:
        if step.kind is StepKind.EMIT_ONE:
            parts.append(f"{step.original[0]} ")
        else:
            parts.append(f'{{"{" ".join(step.replaced)}" ({" ".join(step.original)})}} ')
    return "".join(parts) + "\n"


def enumerate_partners(
    word: str,
    store: SegmentStore,
    index: CollapsedIndex,
    progress: bool = False,
) -> list[EnumerationMatch]:
    """Test *word* against every word in the store; return every match."""
    segments = store.get_or_compute(word)
    partners = list(store.items())
    if progress:
        partners = tqdm(partners, desc=f"Spoonerizing {word}", unit="word")

    matches = []
    for partner, partner_segments in partners:
        result = spoonerize(segments, partner_segments, index)
        if result:
            matches.append(EnumerationMatch(
                partner=partner,
                spoonerism=result,
                words1=index.spellings(result.first),
                words2=index.spellings(result.second),
            ))
    logger.debug(f"{word}: {len(matches)} partner(s)")
    return matches


def render_report(word: str, matches: list[EnumerationMatch]) -> str:
    """Format one input word's matches, one tab-indented line per partner."""
    lines = [f"{word}: "]
    for m in matches:
        lines.append(
            f"\t{word} {m.partner}: "
            + "".join(f"{w} " for w in m.words1)
            + " / "
            + "".join(f"{w} " for w in m.words2)
            + "\n"
        )
    lines.append("\n")
    return "".join(lines)
