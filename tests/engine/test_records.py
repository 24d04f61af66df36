from __future__ import annotations

import pytest

from duoload.engine import LearningStatus, Page, VocabularyRecord
from duoload.engine.deck_id import encode_deck_id, validate_deck_id
from duoload.errors import DeckIdError


@pytest.mark.parametrize(
    ("known_count", "status"),
    [(None, LearningStatus.NEW), (0, LearningStatus.NEW), (1, LearningStatus.LEARNING),
     (4, LearningStatus.LEARNING), (5, LearningStatus.KNOWN), (12, LearningStatus.KNOWN)],
)
def test_status_from_known_count(known_count, status) -> None:
    assert LearningStatus.from_known_count(known_count) is status


def test_status_tags() -> None:
    assert [status.tag for status in LearningStatus] == ["duoload_new", "duoload_learning", "duoload_known"]


def test_record_requires_word_and_translation() -> None:
    with pytest.raises(ValueError):
        VocabularyRecord(word="", translation="x")
    with pytest.raises(ValueError):
        VocabularyRecord(word="x", translation="")


def test_record_serialises_to_plain_dict(make_record) -> None:
    record = make_record(word="hola", translation="hello", example="¡Hola!", status=LearningStatus.KNOWN)

    assert record.to_dict() == {"word": "hola", "translation": "hello", "example": "¡Hola!", "status": "known"}
    assert record.identity == "hola"


def test_page_length(make_record) -> None:
    page = Page(records=(make_record(word="a"), make_record(word="b")), current_page=1, has_next=False)
    assert len(page) == 2


def test_valid_deck_id(deck_id) -> None:
    assert str(validate_deck_id(deck_id)) == "46f2b9ed-abf3-4bd8-a054-68dfa4a4203e"


def test_encode_round_trip() -> None:
    assert encode_deck_id("46f2b9ed-abf3-4bd8-a054-68dfa4a4203e") == (
        "RGVjazo0NmYyYjllZC1hYmYzLTRiZDgtYTA1NC02OGRmYTRhNDIwM2U="
    )


@pytest.mark.parametrize(
    "value",
    [
        "not base64!",
        encode_deck_id("46f2b9ed-abf3-4bd8-a054-68dfa4a4203e").replace("RGVjazo", "VXNlcjo"),
        "RGVjazpub3QtYS11dWlk",
        encode_deck_id("46f2b9ed-abf3-1bd8-a054-68dfa4a4203e"),
    ],
)
def test_invalid_deck_ids(value) -> None:
    with pytest.raises(DeckIdError):
        validate_deck_id(value)
