"""Cooperative cancellation for network waits and polite delays."""

from __future__ import annotations

import time
from threading import Event
from typing import Callable

from ..errors import TransferCancelledError

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


class CancellationToken:
    """Signal shared between the CLI and the fetch loop.

    Waits go through :meth:`sleep` so a cancel request interrupts them
    immediately instead of after the full delay.
    """

    def __init__(self) -> None:
        self._event = Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise TransferCancelledError()

    def sleep(self, seconds: float) -> None:
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        if self._event.wait(seconds):
            raise TransferCancelledError()


def monotonic_clock() -> float:
    return time.monotonic()


__all__ = ["CancellationToken", "Clock", "Sleeper", "monotonic_clock"]
