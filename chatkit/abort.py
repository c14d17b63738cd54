"""Shared flags that record a Ctrl-C or Ctrl-D abort request."""

from __future__ import annotations

import asyncio
import threading

_POLL_INTERVAL = 0.025


class AbortSignal:
    """Thread-safe pair of flags: one for Ctrl-C, one for Ctrl-D."""

    def __init__(self) -> None:
        self._ctrlc = threading.Event()
        self._ctrld = threading.Event()

    def __repr__(self) -> str:
        return f"AbortSignal(ctrlc={self.aborted_ctrlc()}, ctrld={self.aborted_ctrld()})"

    def aborted(self) -> bool:
        """Whether either flag is set."""
        return self.aborted_ctrlc() or self.aborted_ctrld()

    def aborted_ctrlc(self) -> bool:
        """Whether Ctrl-C was requested."""
        return self._ctrlc.is_set()

    def aborted_ctrld(self) -> bool:
        """Whether Ctrl-D was requested."""
        return self._ctrld.is_set()

    def reset(self) -> None:
        """Clear both flags."""
        self._ctrlc.clear()
        self._ctrld.clear()

    def set_ctrlc(self) -> None:
        """Record a Ctrl-C request."""
        self._ctrlc.set()

    def set_ctrld(self) -> None:
        """Record a Ctrl-D request."""
        self._ctrld.set()


def create_abort_signal() -> AbortSignal:
    """Create a fresh, unset abort signal."""
    return AbortSignal()


async def wait_abort_signal(abort_signal: AbortSignal) -> None:
    """Wait until ``abort_signal`` is set, polling every 25 ms."""
    while not abort_signal.aborted():
        await asyncio.sleep(_POLL_INTERVAL)