from __future__ import annotations

from duoload.engine import DeduplicationFilter


def test_first_occurrence_is_admitted_and_repeats_are_counted(make_record) -> None:
    dedup = DeduplicationFilter()
    words = ["hola", "adiós", "hola", "gracias", "adiós", "hola"]

    admitted = [word for word in words if dedup.admit(make_record(word=word))]

    assert admitted == ["hola", "adiós", "gracias"]
    assert dedup.admitted == 3
    assert dedup.duplicates == 3
    assert dedup.admitted + dedup.duplicates == len(words)


def test_identity_is_exact_and_case_sensitive(make_record) -> None:
    dedup = DeduplicationFilter()

    assert dedup.admit(make_record(word="Hola"))
    assert dedup.admit(make_record(word="hola"))
    assert dedup.admit(make_record(word="hola "))
    assert "Hola" in dedup
    assert len(dedup) == 3


def test_translation_does_not_affect_identity(make_record) -> None:
    dedup = DeduplicationFilter()
    first = dedup.check(make_record(word="banco", translation="bank"))
    second = dedup.check(make_record(word="banco", translation="bench"))

    assert first.admitted is True
    assert second.duplicate is True
    assert second.identity == "banco"
