"""
Progress reporting for batch plugin operations.

A reporter receives ``start`` followed by exactly one terminal event per
plugin. Events of different plugins interleave, so implementations must be
safe to call from several threads.
"""

import sys
import threading
from typing import TextIO


class Reporter:
    """Lifecycle event sink. The base class ignores every event."""

    def start(self, name: str) -> None:
        pass

    def success(self, name: str, detail: str | None = None) -> None:
        pass

    def already_installed(self, name: str) -> None:
        pass

    def up_to_date(self, name: str, detail: str | None = None) -> None:
        pass

    def error(self, name: str) -> None:
        pass


class ConsoleReporter(Reporter):
    """
    Prints one line per finished plugin.

    Example output:
        ✔ tmux-yank 1a2b3c4..5d6e7f8
        ≡ tmux-sensible 9f8e7d6
        ⊙ tmux-continuum (already installed)
        ✗ tmux-resurrect
    """

    def __init__(self, stream: TextIO | None = None):
        self._stream = stream if stream is not None else sys.stdout
        self._lock = threading.Lock()

    def success(self, name: str, detail: str | None = None) -> None:
        self._write("✔", name, detail)

    def already_installed(self, name: str) -> None:
        self._write("⊙", name, "(already installed)")

    def up_to_date(self, name: str, detail: str | None = None) -> None:
        self._write("≡", name, detail)

    def error(self, name: str) -> None:
        self._write("✗", name)

    def _write(self, symbol: str, name: str, detail: str | None = None) -> None:
        line = f"{symbol} {name}" + (f" {detail}" if detail else "")
        with self._lock:
            print(line, file=self._stream, flush=True)
