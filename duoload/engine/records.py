"""Vocabulary records and page containers flowing through the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

KNOWN_THRESHOLD = 5


class LearningStatus(str, Enum):
    """Learning progress of a card on the remote side."""

    NEW = "new"
    LEARNING = "learning"
    KNOWN = "known"

    @property
    def tag(self) -> str:
        return f"duoload_{self.value}"

    @classmethod
    def from_known_count(cls, known_count: int | None) -> "LearningStatus":
        count = known_count or 0
        if count >= KNOWN_THRESHOLD:
            return cls.KNOWN
        if count > 0:
            return cls.LEARNING
        return cls.NEW


@dataclass(frozen=True, slots=True)
class VocabularyRecord:
    """One word with its translation; identity is the exact ``word`` text."""

    word: str
    translation: str
    example: str | None = None
    status: LearningStatus = LearningStatus.NEW

    def __post_init__(self) -> None:
        if not self.word:
            raise ValueError("VocabularyRecord.word must not be empty")
        if not self.translation:
            raise ValueError("VocabularyRecord.translation must not be empty")

    @property
    def identity(self) -> str:
        return self.word

    def to_dict(self) -> dict[str, Any]:
        return {
            "word": self.word,
            "translation": self.translation,
            "example": self.example,
            "status": self.status.value,
        }


@dataclass(frozen=True, slots=True)
class Page:
    """A batch of records plus pagination metadata.

    ``has_next`` is authoritative; ``total_pages`` is ``None`` when the remote
    does not report a page count.
    """

    records: tuple[VocabularyRecord, ...]
    current_page: int
    has_next: bool
    total_pages: int | None = None
    end_cursor: str | None = None

    def __len__(self) -> int:
        return len(self.records)


__all__ = ["KNOWN_THRESHOLD", "LearningStatus", "Page", "VocabularyRecord"]
