"""Anki package sink built on genanki."""

from __future__ import annotations

import html
import sqlite3
import zipfile

import genanki
import structlog

from ...config import PackageConfig
from ...errors import SinkIOError, UnsupportedDestinationError
from ..records import VocabularyRecord
from .base import BaseSink
from .destination import Destination

BACK_TEMPLATE = (
    "{{FrontSide}}\n\n<hr id=answer>\n\n{{Back}}\n\n"
    '{{#Example}}<div class="example">{{Example}}</div>{{/Example}}'
)


def build_vocabulary_model(config: PackageConfig) -> genanki.Model:
    return genanki.Model(
        config.model_id,
        config.model_name,
        fields=[
            {"name": "Front"},
            {"name": "Back"},
            {"name": "Example"},
        ],
        templates=[
            {
                "name": "Card 1",
                "qfmt": "{{Front}}",
                "afmt": BACK_TEMPLATE,
            }
        ],
    )


class PackageSink(BaseSink):
    """Collect notes into a deck and write a ``.apkg`` at finalize time.

    The package is a ZIP archive, which needs random-access writes, so only
    seekable destinations are accepted.
    """

    format_name = "apkg"

    def __init__(self, config: PackageConfig | None = None) -> None:
        super().__init__()
        self.config = config or PackageConfig()
        self.model = build_vocabulary_model(self.config)
        self.deck = genanki.Deck(
            self.config.deck_id,
            self.config.deck_name,
            description=self.config.deck_description,
        )
        self.logger = structlog.get_logger("duoload.sink").bind(format=self.format_name)

    def _add(self, record: VocabularyRecord) -> None:
        note = genanki.Note(
            model=self.model,
            fields=[
                html.escape(record.word, quote=False),
                html.escape(record.translation, quote=False),
                html.escape(record.example or "", quote=False),
            ],
            tags=[record.status.tag],
            guid=genanki.guid_for(self.config.deck_id, record.word),
        )
        self.deck.add_note(note)

    def check_destination(self, destination: Destination) -> None:
        if not destination.seekable:
            raise UnsupportedDestinationError(
                f"Cannot write an Anki package to non-seekable {destination.describe()}"
            )

    def _write(self, destination: Destination) -> None:
        package = genanki.Package(self.deck)
        try:
            with destination.open() as handle:
                package.write_to_file(handle)
        except (sqlite3.Error, zipfile.BadZipFile) as exc:
            raise SinkIOError(str(exc)) from exc
        self.logger.info("sink_finalized", records=self.count, destination=destination.describe())


__all__ = ["BACK_TEMPLATE", "PackageSink", "build_vocabulary_model"]
