"""Transfer orchestrator driving fetch → dedup → sink page by page."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

import structlog

from .engine import DeduplicationFilter, Page, PaginatedFetcher, VocabularyRecord
from .engine.exporter import BaseSink, Destination
from .ui import PageProgress, ProgressObserver


class TransferState(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    FILTERING = "filtering"
    SINKING = "sinking"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class TransferSession:
    """Run-scoped counters and the identity filter; never persisted."""

    page_limit: int | None = None
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    pages: int = 0
    fetched: int = 0
    admitted: int = 0
    duplicates_skipped: int = 0
    dedup: DeduplicationFilter = field(default_factory=DeduplicationFilter)


@dataclass(frozen=True, slots=True)
class TransferSummary:
    state: TransferState
    pages: int
    fetched: int
    admitted: int
    duplicates_skipped: int
    elapsed: float

    def as_dict(self) -> dict[str, object]:
        return {
            "state": self.state.value,
            "pages": self.pages,
            "fetched": self.fetched,
            "admitted": self.admitted,
            "duplicates_skipped": self.duplicates_skipped,
            "elapsed": round(self.elapsed, 3),
        }


class TransferOrchestrator:
    """Single-use coordinator for one transfer run.

    Pages are fetched strictly one after another. A fetch or sink error moves
    the run to ``FAILED`` and is re-raised; the sink is only finalized after
    the last page succeeded, so a failed run never commits output.
    """

    def __init__(
        self,
        fetcher: PaginatedFetcher,
        sink: BaseSink,
        destination: Destination,
        *,
        page_limit: int | None = None,
        progress: ProgressObserver | None = None,
        clock: Callable[[], float] | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        if page_limit is not None and page_limit < 1:
            raise ValueError("page_limit must be a positive integer")
        self.fetcher = fetcher
        self.sink = sink
        self.destination = destination
        self.page_limit = page_limit
        self.progress = progress
        self._clock = clock or time.monotonic
        self.logger = logger or structlog.get_logger("duoload.orchestrator").bind(
            deck_id=fetcher.deck_id
        )
        self.state = TransferState.IDLE
        self.history: list[TransferState] = []
        self.session: TransferSession | None = None
        self.error: BaseException | None = None

    # ------------------------------------------------------------------
    def run(self) -> TransferSummary:
        if self.state is not TransferState.IDLE:
            raise RuntimeError("TransferOrchestrator instances are single-use")
        session = TransferSession(page_limit=self.page_limit)
        self.session = session
        started = self._clock()
        if self.progress is not None:
            self.progress.start(self.destination.describe(), self.page_limit)

        try:
            page_number = 1
            while True:
                self._transition(TransferState.FETCHING)
                page = self.fetcher.fetch(page_number)
                session.pages += 1
                self._process_page(page, session)
                if not self._should_continue(page, session):
                    break
                page_number += 1
            self._transition(TransferState.FINALIZING)
            self.sink.finalize(self.destination)
        except BaseException as exc:
            self._fail(exc, session)
            raise

        self._transition(TransferState.DONE)
        summary = self._summary(session, self._clock() - started)
        self.logger.info("transfer_done", **summary.as_dict())
        if self.progress is not None:
            self.progress.finish(summary)
        return summary

    # ------------------------------------------------------------------
    def _process_page(self, page: Page, session: TransferSession) -> None:
        self._transition(TransferState.FILTERING)
        admitted: list[VocabularyRecord] = []
        duplicates = 0
        for record in page.records:
            session.fetched += 1
            if session.dedup.admit(record):
                admitted.append(record)
                continue
            duplicates += 1
            session.duplicates_skipped += 1
            self.logger.warning("duplicate_skipped", word=record.word, page=page.current_page)

        self._transition(TransferState.SINKING)
        self.sink.add_many(admitted)
        session.admitted += len(admitted)

        self.logger.debug(
            "page_processed",
            page=page.current_page,
            records=len(page),
            admitted=len(admitted),
            duplicates=duplicates,
        )
        if self.progress is not None:
            self.progress.page_done(
                PageProgress(
                    page=page.current_page,
                    records=len(page),
                    admitted=len(admitted),
                    duplicates=duplicates,
                    fetched_total=session.fetched,
                    admitted_total=session.admitted,
                    duplicates_total=session.duplicates_skipped,
                    has_next=page.has_next,
                    total_pages=page.total_pages,
                    page_limit=self.page_limit,
                )
            )

    def _should_continue(self, page: Page, session: TransferSession) -> bool:
        if not page.has_next:
            return False
        if session.page_limit is not None and session.pages >= session.page_limit:
            self.logger.info("page_limit_reached", pages=session.pages)
            return False
        return True

    def _fail(self, exc: BaseException, session: TransferSession) -> None:
        failed_in = self.state
        self.error = exc
        self._transition(TransferState.FAILED)
        self.logger.info(
            "transfer_failed",
            stage=failed_in.value,
            error_type=type(exc).__name__,
            error=str(exc),
            pages=session.pages,
            fetched=session.fetched,
        )

    def _transition(self, state: TransferState) -> None:
        self.state = state
        self.history.append(state)

    def _summary(self, session: TransferSession, elapsed: float) -> TransferSummary:
        return TransferSummary(
            state=self.state,
            pages=session.pages,
            fetched=session.fetched,
            admitted=session.admitted,
            duplicates_skipped=session.duplicates_skipped,
            elapsed=elapsed,
        )


__all__ = ["TransferOrchestrator", "TransferSession", "TransferState", "TransferSummary"]
