"""JSON array sink usable with files and pipes alike."""

from __future__ import annotations

import json
import textwrap

import structlog

from ..records import VocabularyRecord
from .base import BaseSink
from .destination import Destination


class JsonSink(BaseSink):
    """Buffer records, then stream them out as one pretty-printed array."""

    format_name = "json"

    def __init__(self, indent: int = 2) -> None:
        super().__init__()
        self.indent = indent
        self._records: list[VocabularyRecord] = []
        self.logger = structlog.get_logger("duoload.sink").bind(format=self.format_name)

    def _add(self, record: VocabularyRecord) -> None:
        self._records.append(record)

    def _write(self, destination: Destination) -> None:
        with destination.open() as handle:
            if not self._records:
                handle.write(b"[]\n")
            else:
                handle.write(b"[")
                pad = " " * self.indent
                for index, record in enumerate(self._records):
                    body = json.dumps(record.to_dict(), ensure_ascii=False, indent=self.indent)
                    chunk = ("," if index else "") + "\n" + textwrap.indent(body, pad)
                    handle.write(chunk.encode("utf-8"))
                handle.write(b"\n]\n")
        self.logger.info("sink_finalized", records=self.count, destination=destination.describe())


__all__ = ["JsonSink"]
