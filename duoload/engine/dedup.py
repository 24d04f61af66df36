"""In-memory identity filter for one transfer session."""

from __future__ import annotations

from dataclasses import dataclass

from .records import VocabularyRecord


@dataclass
class DeduplicationResult:
    identity: str
    duplicate: bool

    @property
    def admitted(self) -> bool:
        return not self.duplicate


class DeduplicationFilter:
    """Admit each ``word`` once per session.

    Comparison is exact and case-sensitive; no Unicode normalisation or case
    folding is applied. The seen-set only grows.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()
        self.duplicates = 0

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, identity: object) -> bool:
        return identity in self._seen

    @property
    def admitted(self) -> int:
        return len(self._seen)

    def check(self, record: VocabularyRecord) -> DeduplicationResult:
        identity = record.identity
        if identity in self._seen:
            self.duplicates += 1
            return DeduplicationResult(identity, duplicate=True)
        self._seen.add(identity)
        return DeduplicationResult(identity, duplicate=False)

    def admit(self, record: VocabularyRecord) -> bool:
        return self.check(record).admitted


__all__ = ["DeduplicationFilter", "DeduplicationResult"]
