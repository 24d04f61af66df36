"""Shared fixtures: fake Duocards remote, deterministic timing and config."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable

import httpx
import pytest
import structlog

from duoload import logging_conf
from duoload.config import ConfigLocator, ConfigRepository, RetryConfig, TransferConfig
from duoload.engine import CancellationToken, LearningStatus, PaginatedFetcher, VocabularyRecord

DECK_ID = "RGVjazo0NmYyYjllZC1hYmYzLTRiZDgtYTA1NC02OGRmYTRhNDIwM2U="


class FakeTimer:
    """Recording sleep paired with a clock that only moves when slept on."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def clock(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


def card(front: str, back: str, hint: str | None = None, known_count: int | None = 0) -> dict:
    return {"id": f"card-{front}", "front": front, "back": back, "hint": hint, "knownCount": known_count}


def deck_body(cards: list[dict], has_next: bool, end_cursor: str | None = None) -> dict:
    return {
        "data": {
            "node": {
                "__typename": "Deck",
                "id": DECK_ID,
                "cards": {
                    "edges": [{"node": item, "cursor": item["id"]} for item in cards],
                    "pageInfo": {"endCursor": end_cursor, "hasNextPage": has_next},
                },
            }
        }
    }


class FakeRemote:
    """In-process GraphQL deck served through ``httpx.MockTransport``.

    ``failures`` maps a page number to the responses returned before the real
    page: an int is an HTTP status, an exception instance is raised.
    """

    def __init__(self, pages: list[list[dict]], failures: dict[int, list] | None = None) -> None:
        self.pages = pages
        self.failures = {page: list(items) for page, items in (failures or {}).items()}
        self.requests: list[httpx.Request] = []
        self.cursors: list[str | None] = []
        self.on_request: Callable[[httpx.Request], None] | None = None

    def _page_for(self, cursor: str | None) -> int:
        return 1 if cursor is None else int(cursor.split("-")[1])

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request is not None:
            self.on_request(request)
        variables = json.loads(request.content)["variables"]
        cursor = variables["cursor"]
        self.cursors.append(cursor)
        number = self._page_for(cursor)
        pending = self.failures.get(number)
        if pending:
            outcome = pending.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return httpx.Response(outcome, text="upstream unavailable")
        has_next = number < len(self.pages)
        body = deck_body(
            self.pages[number - 1],
            has_next=has_next,
            end_cursor=f"page-{number + 1}" if has_next else None,
        )
        return httpx.Response(200, json=body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))


@pytest.fixture()
def deck_id() -> str:
    return DECK_ID


@pytest.fixture()
def fake_timer() -> FakeTimer:
    return FakeTimer()


@pytest.fixture()
def transfer_config() -> TransferConfig:
    return TransferConfig(
        endpoint="https://duocards.test/graphql",
        polite_delay=0.0,
        fetch_timeout=60.0,
        retry=RetryConfig(initial_delay=1.0, factor=2.0, max_delay=16.0, max_retries=3),
    )


@pytest.fixture()
def make_record() -> Callable[..., VocabularyRecord]:
    def factory(
        word: str = "hola",
        translation: str = "hello",
        example: str | None = None,
        status: LearningStatus = LearningStatus.NEW,
    ) -> VocabularyRecord:
        return VocabularyRecord(word=word, translation=translation, example=example, status=status)

    return factory


@pytest.fixture()
def make_fetcher(transfer_config: TransferConfig, fake_timer: FakeTimer, deck_id: str):
    """Build a fetcher bound to a fake remote with deterministic timing."""

    created: list[PaginatedFetcher] = []

    def factory(
        remote: FakeRemote,
        config: TransferConfig | None = None,
        token: CancellationToken | None = None,
        **kwargs,
    ) -> PaginatedFetcher:
        kwargs.setdefault("sleep", fake_timer.sleep)
        fetcher = PaginatedFetcher(
            config or transfer_config,
            deck_id,
            client=remote.client(),
            token=token,
            clock=fake_timer.clock,
            **kwargs,
        )
        created.append(fetcher)
        return fetcher

    yield factory
    for fetcher in created:
        fetcher._client.close()


@pytest.fixture()
def config_repository(tmp_path: Path) -> ConfigRepository:
    return ConfigRepository(ConfigLocator(home=tmp_path / "home"))


@pytest.fixture()
def remote() -> type[FakeRemote]:
    return FakeRemote


@pytest.fixture()
def make_card() -> Callable[..., dict]:
    return card


@pytest.fixture()
def make_deck_body() -> Callable[..., dict]:
    return deck_body


@pytest.fixture()
def fresh_logging(monkeypatch: pytest.MonkeyPatch):
    """Let ``configure_logging`` run again and drop its handlers afterwards."""

    monkeypatch.setattr(logging_conf, "_LOGGING_INITIALISED", False)
    yield
    for name in ("duoload", "httpx"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    structlog.reset_defaults()
