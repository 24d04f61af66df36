"""Byte destinations a sink can be finalized into."""

from __future__ import annotations

import os
import sys
import tempfile
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, ContextManager, Iterator

from ...errors import SinkIOError


def _default_file_mode() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


class Destination(ABC):
    """Where a finalized artifact goes."""

    @property
    @abstractmethod
    def seekable(self) -> bool:
        """Whether random-access writes are possible."""

    @abstractmethod
    def open(self) -> ContextManager[BinaryIO]:
        """Context manager yielding a binary handle; commits on clean exit."""

    @abstractmethod
    def describe(self) -> str:
        """Short human-readable label."""


class FileDestination(Destination):
    """Write to a temporary sibling file, then atomically rename into place.

    On any failure the temporary file is removed and ``path`` is left
    untouched.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    @property
    def seekable(self) -> bool:
        return True

    def describe(self) -> str:
        return str(self.path)

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".part", dir=self.path.parent
            )
        except OSError as exc:
            raise SinkIOError(f"{self.path}: {exc.strerror or exc}") from exc
        tmp_path = Path(tmp_name)
        committed = False
        try:
            with os.fdopen(fd, "w+b") as handle:
                yield handle
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_path, _default_file_mode())
            os.replace(tmp_path, self.path)
            committed = True
        except OSError as exc:
            raise SinkIOError(f"{self.path}: {exc.strerror or exc}") from exc
        finally:
            if not committed:
                tmp_path.unlink(missing_ok=True)


class StreamDestination(Destination):
    """Forward-only destination such as a pipe on stdout.

    The stream is never closed here. When no stream is given, the binary
    buffer of ``sys.stdout`` at open time is used.
    """

    def __init__(self, stream: BinaryIO | None = None, name: str = "<stdout>") -> None:
        self._stream = stream
        self.name = name

    @property
    def stream(self) -> BinaryIO:
        if self._stream is not None:
            return self._stream
        return sys.stdout.buffer

    @property
    def seekable(self) -> bool:
        try:
            return bool(self.stream.seekable())
        except (AttributeError, OSError, ValueError):
            return False

    def describe(self) -> str:
        return self.name

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        stream = self.stream
        try:
            yield stream
            stream.flush()
        except OSError as exc:
            raise SinkIOError(f"{self.name}: {exc.strerror or exc}") from exc


__all__ = ["Destination", "FileDestination", "StreamDestination"]
