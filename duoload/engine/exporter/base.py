"""Sink contract shared by every output format."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ..records import VocabularyRecord
from .destination import Destination


class BaseSink(ABC):
    """Accept deduplicated records incrementally, then finalize once.

    Sinks never re-check uniqueness; whatever reaches :meth:`add` has already
    been admitted. Calling :meth:`add` or :meth:`finalize` after finalization
    is a programming error.
    """

    format_name = "abstract"

    def __init__(self) -> None:
        self.count = 0
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def add(self, record: VocabularyRecord) -> None:
        if self._finalized:
            raise RuntimeError(f"{type(self).__name__} already finalized; add() is not allowed")
        self._add(record)
        self.count += 1

    def add_many(self, records: Iterable[VocabularyRecord]) -> None:
        for record in records:
            self.add(record)

    def finalize(self, destination: Destination) -> None:
        if self._finalized:
            raise RuntimeError(f"{type(self).__name__} already finalized")
        self.check_destination(destination)
        try:
            self._write(destination)
        finally:
            self._finalized = True

    def check_destination(self, destination: Destination) -> None:
        """Raise ``UnsupportedDestinationError`` when ``destination`` cannot be used."""

    @abstractmethod
    def _add(self, record: VocabularyRecord) -> None:
        """Incorporate a single record into the in-progress output."""

    @abstractmethod
    def _write(self, destination: Destination) -> None:
        """Emit the complete, framed artifact."""


__all__ = ["BaseSink"]
