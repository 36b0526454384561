"""Progress indicator for long-running LLM calls."""

from __future__ import annotations

import itertools
import sys
import threading
import time
from typing import TextIO

_BRAILLE = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
_INTERVAL = 0.1


def _format_elapsed(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m{secs:02d}s" if minutes else f"{secs}s"


class Spinner:
    """Spinner with an elapsed-time counter, shown while waiting on the model.

    The label can be changed from the worker side with update(); the spinner
    thread picks it up on its next frame.
    """

    def __init__(self, label: str, stream: TextIO | None = None) -> None:
        self._label = label
        self._stream = stream
        self._out: TextIO = stream or sys.stderr
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._started = 0.0

    @property
    def label(self) -> str:
        return self._label

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self._started if self._started else 0.0

    def __enter__(self) -> Spinner:
        self._out = self._stream or sys.stderr
        self._started = time.monotonic()
        self._stop.clear()
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()
        return self

    def __exit__(self, exc_type, *_exc) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join()
        took = _format_elapsed(self.elapsed)
        if exc_type is None:
            self._write(f"\r  ✔ {self._label} done in {took}.\033[K\n")
        else:
            self._write(f"\r  ✘ {self._label} failed after {took}.\033[K\n")

    def update(self, label: str) -> None:
        self._label = label

    def _spin(self) -> None:
        for frame in itertools.cycle(_BRAILLE):
            self._write(f"\r  {frame} {self._label} ({_format_elapsed(self.elapsed)})\033[K")
            if self._stop.wait(_INTERVAL):
                break

    def _write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()
