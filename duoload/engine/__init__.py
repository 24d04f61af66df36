"""Engine components for the fetch → dedup → sink pipeline."""

from .cancel import CancellationToken
from .dedup import DeduplicationFilter, DeduplicationResult
from .fetcher import PaginatedFetcher
from .parser import ResponseParser
from .records import LearningStatus, Page, VocabularyRecord

__all__ = [
    "CancellationToken",
    "DeduplicationFilter",
    "DeduplicationResult",
    "LearningStatus",
    "Page",
    "PaginatedFetcher",
    "ResponseParser",
    "VocabularyRecord",
]
