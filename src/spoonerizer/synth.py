"""Synthesizer backends: raw word text -> phonetic segment labels."""

import logging
import os
import re
import selectors
import shutil
import subprocess
import time
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

# Pause label framing every utterance
PAUSE = "pau"

_SEGMENT_RE = re.compile(r"name ([^;]+) ; dur_factor ")
_END_OF_STREAM = "End_of_Stream_Items"


class SpoonerizerError(Exception):
    """Base class for spoonerizer errors."""


class SynthesizerUnavailable(SpoonerizerError):
    """The synthesizer collaborator could not be started."""


class SynthesizerTimeout(SpoonerizerError):
    """One request got no complete answer; the backend is usable again."""


class Synthesizer(ABC):
    """Abstract base for text-to-segment backends."""

    name: str = "base"

    @abstractmethod
    def synthesize(self, text: str) -> list[str]:
        """Return the raw segment labels for *text*.

        The result is framed the way Festival frames an utterance: the first
        and last labels are pause markers, not speech. Callers strip them.
        Returns an empty list when no segments could be recognized.
        Raises SynthesizerTimeout when this one request failed but later
        requests may succeed.
        """

    def close(self) -> None:
        """Release any resources held by the backend."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def parse_segments(lines: list[str]) -> list[str]:
    """Extract segment labels from Festival's ``utt.save`` output lines."""
    segments = []
    for line in lines:
        match = _SEGMENT_RE.search(line)
        if match:
            segments.append(match.group(1))
    return segments


def festival_request(text: str) -> str:
    """Build the Scheme expression that synthesizes *text* and dumps its segments."""
    text = text.replace('"', " ")
    return f'(utt.save (utt.synth (Utterance Text "{text}")) "-")\n'


class FestivalSynthesizer(Synthesizer):
    """Festival speech synthesizer driven over a request/response pipe.

    One interpreter process is kept alive for the whole run. Each request is
    answered by a dump of the synthesized utterance ending with an
    ``End_of_Stream_Items`` line. If no complete answer arrives within
    ``timeout`` seconds, the process is restarted so later answers stay in
    sync, and SynthesizerTimeout is raised for that word.
    """

    name = "festival"

    def __init__(
        self,
        binary: str = "festival",
        timeout: float = 10.0,
        args: tuple[str, ...] = (),
        **kwargs,
    ):
        self.binary = binary
        self.timeout = timeout
        self.args = tuple(args)
        self._proc: subprocess.Popen | None = None
        self._selector: selectors.BaseSelector | None = None
        self._buffer = b""
        self._start()

    def _start(self) -> None:
        try:
            self._proc = subprocess.Popen(
                [self.binary, *self.args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
            )
        except OSError as e:
            raise SynthesizerUnavailable(
                f"Could not start festival ({self.binary}): {e}"
            ) from e
        self._buffer = b""
        self._selector = selectors.DefaultSelector()
        self._selector.register(self._proc.stdout, selectors.EVENT_READ)
        logger.debug(f"Started festival (pid {self._proc.pid})")

    def _restart(self) -> None:
        self.close()
        self._start()

    def _readline(self, deadline: float) -> str:
        while b"\n" not in self._buffer:
            remaining = deadline - time.monotonic()
            if remaining <= 0 or not self._selector.select(remaining):
                raise TimeoutError(f"no response from festival within {self.timeout}s")
            chunk = os.read(self._proc.stdout.fileno(), 4096)
            if not chunk:
                raise EOFError("festival closed its output stream")
            self._buffer += chunk
        line, _, self._buffer = self._buffer.partition(b"\n")
        return line.decode("utf-8", errors="replace")

    def _read_response(self) -> list[str]:
        deadline = time.monotonic() + self.timeout
        lines = []
        while True:
            line = self._readline(deadline)
            lines.append(line)
            if line.strip() == _END_OF_STREAM:
                return lines

    def synthesize(self, text: str) -> list[str]:
        try:
            self._proc.stdin.write(festival_request(text).encode("utf-8"))
            self._proc.stdin.flush()
            lines = self._read_response()
        except (TimeoutError, EOFError, OSError) as e:
            self._restart()
            raise SynthesizerTimeout(f"festival failed on {text!r}: {e}") from e
        return parse_segments(lines)

    def close(self) -> None:
        if self._proc is None:
            return
        if self._selector is not None:
            self._selector.close()
            self._selector = None
        try:
            self._proc.stdin.close()
        except OSError:
            pass
        try:
            self._proc.wait(timeout=1)
        except subprocess.TimeoutExpired:
            self._proc.kill()
            self._proc.wait()
        self._proc.stdout.close()
        self._proc = None


class G2pSynthesizer(Synthesizer):
    """Grapheme-to-phoneme conversion via g2p_en (ARPABET with stress digits).

    Output is framed with pause markers so it reads like a Festival
    utterance.
    """

    name = "g2p"

    def __init__(self, **kwargs):
        try:
            from g2p_en import G2p
        except ImportError as e:
            raise SynthesizerUnavailable(
                f"g2p backend requires the 'g2p_en' package: {e}"
            ) from e
        self._g2p = G2p()

    def synthesize(self, text: str) -> list[str]:
        # g2p_en returns phonemes plus spaces and punctuation; keep phonemes
        phonemes = [p for p in self._g2p(text) if p.strip() and p[0].isalpha()]
        if not phonemes:
            return []
        return [PAUSE, *phonemes, PAUSE]


_SYNTHESIZERS = {
    "festival": FestivalSynthesizer,
    "g2p": G2pSynthesizer,
}


def get_synthesizer(name: str, **kwargs) -> Synthesizer:
    """Get a synthesizer backend by name.

    Modes:
        "festival" - Festival subprocess (requires the festival binary).
        "g2p" - g2p_en grapheme-to-phoneme model.
        "auto" - Festival if its binary is on PATH, else g2p_en.
    """
    if name == "auto":
        binary = kwargs.get("binary", "festival")
        if shutil.which(binary):
            logger.info(f"Found {binary}, using festival synthesizer")
            return FestivalSynthesizer(**kwargs)
        logger.info("festival not available, falling back to g2p_en")
        return G2pSynthesizer(**kwargs)

    if name not in _SYNTHESIZERS:
        raise ValueError(
            f"Unknown synthesizer: {name!r}. Available: {list(_SYNTHESIZERS.keys()) + ['auto']}"
        )
    return _SYNTHESIZERS[name](**kwargs)
