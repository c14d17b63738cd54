"""A terminal spinner that runs in a background thread."""

from __future__ import annotations

import queue
import sys
import threading
import time
from dataclasses import dataclass, field
from typing import TextIO

_FRAMES = ("⠋", "⠙", "⠹", "⠸", "⠼", "⠴", "⠦", "⠧", "⠇", "⠏")
_MOVE_TO_START = "\x1b[1G"
_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_DOWN = "\x1b[J"
_TICK = 0.05
_SEND_PAUSE = 0.01


@dataclass
class SpinnerState:
    """Frame counter and message of a spinner drawn on ``stream``."""

    index: int = 0
    message: str = ""
    stream: TextIO = field(default_factory=lambda: sys.stdout, repr=False)

    def _is_terminal(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def step(self) -> None:
        """Draw the next frame, if on a terminal with a message to show."""
        if not self._is_terminal() or not self.message:
            return
        frame = _FRAMES[self.index % len(_FRAMES)]
        dots = "." * ((self.index // 5) % 4)
        output = f"{_MOVE_TO_START}{frame}{self.message}{dots:<3}"
        if self.index == 0:
            output += _HIDE_CURSOR
        self.stream.write(output)
        self.stream.flush()
        self.index += 1

    def set_message(self, message: str) -> None:
        """Replace the message; an empty one just clears it."""
        self.clear_message()
        if message:
            self.message = f" {message}"

    def clear_message(self) -> None:
        """Erase the spinner line and show the cursor again."""
        if not self._is_terminal() or not self.message:
            return
        self.message = ""
        self.stream.write(f"{_MOVE_TO_START}{_CLEAR_DOWN}{_SHOW_CURSOR}")
        self.stream.flush()


_STOP = object()


class Spinner:
    """Handle for a running spinner."""

    def __init__(self, events: queue.Queue, worker: threading.Thread) -> None:
        self._events = events
        self._worker = worker

    def set_message(self, message: str) -> None:
        """Change the spinner's message; raises ``RuntimeError`` once stopped."""
        if not self._worker.is_alive():
            raise RuntimeError("Spinner has stopped")
        self._events.put(message)
        time.sleep(_SEND_PAUSE)

    def stop(self) -> None:
        """Clear the spinner and wait for its thread to finish."""
        self._events.put(_STOP)
        self._worker.join(timeout=1.0)


def _run(state: SpinnerState, events: queue.Queue) -> None:
    while True:
        try:
            event = events.get(timeout=_TICK)
        except queue.Empty:
            state.step()
            continue
        if event is _STOP:
            state.clear_message()
            return
        state.set_message(event)


def spawn_spinner(message: str) -> Spinner:
    """Start a spinner showing ``message`` on standard output."""
    events: queue.Queue = queue.Queue()
    events.put(message)
    state = SpinnerState()
    worker = threading.Thread(target=_run, args=(state, events), daemon=True)
    worker.start()
    return Spinner(events, worker)