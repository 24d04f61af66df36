"""Offline format check for Duocards deck identifiers."""

from __future__ import annotations

import base64
import binascii
import uuid

from ..errors import DeckIdError

DECK_PREFIX = "Deck:"


def validate_deck_id(deck_id: str) -> uuid.UUID:
    """Return the deck UUID encoded in ``deck_id``.

    Duocards identifiers are ``base64("Deck:<uuid4>")``. This only checks the
    shape; whether the deck exists is discovered by the first fetch.
    """

    try:
        decoded = base64.b64decode(deck_id.strip(), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DeckIdError(f"Invalid base64 encoding: {exc}") from exc
    try:
        text = decoded.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DeckIdError(f"Invalid UTF-8 after base64 decode: {exc}") from exc
    if not text.startswith(DECK_PREFIX):
        raise DeckIdError(f"Missing '{DECK_PREFIX}' prefix")
    try:
        deck_uuid = uuid.UUID(text[len(DECK_PREFIX):])
    except ValueError as exc:
        raise DeckIdError(f"Invalid UUID: {exc}") from exc
    if deck_uuid.version != 4:
        raise DeckIdError(f"Expected UUID v4, got version {deck_uuid.version}")
    return deck_uuid


def encode_deck_id(deck_uuid: uuid.UUID | str) -> str:
    return base64.b64encode(f"{DECK_PREFIX}{deck_uuid}".encode("utf-8")).decode("ascii")


__all__ = ["DECK_PREFIX", "encode_deck_id", "validate_deck_id"]
