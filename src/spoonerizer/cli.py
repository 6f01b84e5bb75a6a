"""CLI entrypoint for spoonerizer."""

import argparse
import logging
import sys
from pathlib import Path

from spoonerizer.cache import SegmentStore, default_cache_path
from spoonerizer.dictionary import DEFAULT_DICTIONARY, load_dictionary
from spoonerizer.synth import SpoonerizerError, get_synthesizer

logger = logging.getLogger("spoonerizer")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments."""
    parser = argparse.ArgumentParser(
        prog="spoonerizer",
        description=(
            "Find spoonerisms. Without -m, reads text from stdin and marks "
            "spoonerisms inline; with -m, lists every dictionary partner of "
            "each given word."
        ),
    )
    parser.add_argument("-m", "--match", nargs="+", metavar="WORD", default=None,
                        help="Enumerate spoonerisms of these words against the dictionary")
    parser.add_argument("--dictionary", type=Path, default=DEFAULT_DICTIONARY,
                        help=f"Newline-delimited word list (default: {DEFAULT_DICTIONARY})")
    parser.add_argument("--synthesizer", default="auto",
                        choices=["auto", "festival", "g2p"],
                        help="Text-to-segment backend (default: auto)")
    parser.add_argument("--festival-bin", default="festival",
                        help="Festival executable (default: festival)")
    parser.add_argument("--timeout", type=float, default=10.0,
                        help="Seconds to wait for festival per word (default: 10)")
    parser.add_argument("--cache", type=Path, default=None,
                        help="Segment cache file (default: per-synthesizer file in the cache dir)")
    parser.add_argument("--no-cache", action="store_true", default=False,
                        help="Do not read or write the segment cache")
    parser.add_argument("-v", "--verbose", action="store_true", default=False,
                        help="Debug logging and progress bars")
    return parser.parse_args(argv)


def _run_stream(args: argparse.Namespace, store: SegmentStore) -> None:
    """Rewrite stdin with spoonerisms marked inline."""
    from spoonerizer.index import build_index
    from spoonerizer.normalize import normalize_text, tokenize
    from spoonerizer.scan import render_stream, scan_tokens

    tokens = tokenize(normalize_text(sys.stdin.read()))
    store.fill(tokens, progress=args.verbose, desc="Calculating input segments")
    index = build_index(store)
    sys.stdout.write(render_stream(scan_tokens(tokens, store, index)))


def _run_match(args: argparse.Namespace, store: SegmentStore) -> None:
    """Report every dictionary partner of each word given with -m."""
    from spoonerizer.index import build_index
    from spoonerizer.scan import enumerate_partners, render_report

    store.fill(args.match, desc="Calculating input segments")
    index = build_index(store)
    for word in args.match:
        logger.info(f"Spoonerizing {word}")
        matches = enumerate_partners(word, store, index, progress=args.verbose)
        sys.stdout.write(render_report(word, matches))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s %(levelname)s: %(message)s",
    )

    try:
        words = load_dictionary(args.dictionary)
        synthesizer = get_synthesizer(
            args.synthesizer, binary=args.festival_bin, timeout=args.timeout,
        )
    except (FileNotFoundError, SpoonerizerError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    with synthesizer:
        cache_path = None
        if not args.no_cache:
            cache_path = args.cache or default_cache_path(synthesizer.name)
        store = SegmentStore(synthesizer, cache_path).load()

        try:
            store.fill(words, progress=args.verbose)
            if args.match:
                _run_match(args, store)
            else:
                _run_stream(args, store)
        except SpoonerizerError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        finally:
            # Segments computed before a failure are kept for the next run
            store.flush_if_dirty()


if __name__ == "__main__":
    main()
