"""Paginated HTTP fetching with polite pacing, backoff and cancellation."""

from __future__ import annotations

import httpx
import structlog

from ..config import TransferConfig
from ..errors import FetchTimeoutError, InvalidCollectionError, NetworkError, ParseError
from .cancel import CancellationToken, Clock, Sleeper, monotonic_clock
from .parser import NOT_FOUND_MARKERS, ResponseParser, build_cards_query
from .records import Page
from .throttle import RetryContext, ThrottleChain, build_chain

TRANSIENT_STATUS = frozenset({408, 429})


class PaginatedFetcher:
    """Fetch one deck page per call.

    The remote paginates by cursor, so page ``n + 1`` can only be requested
    after page ``n`` resolved; the cursor of each page is remembered here.
    """

    def __init__(
        self,
        config: TransferConfig,
        deck_id: str,
        *,
        client: httpx.Client | None = None,
        token: CancellationToken | None = None,
        sleep: Sleeper | None = None,
        clock: Clock | None = None,
        chain: ThrottleChain | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.config = config
        self.deck_id = deck_id
        self.token = token or CancellationToken()
        self._sleep = sleep or self.token.sleep
        self._clock = clock or monotonic_clock
        self._chain = chain or build_chain(config, clock=self._clock)
        self._parser = ResponseParser()
        self.logger = logger or structlog.get_logger("duoload.fetcher").bind(deck_id=deck_id)
        self._owns_client = client is None
        self._client = client or httpx.Client(
            follow_redirects=True,
            timeout=config.request_timeout,
        )
        self._cursors: dict[int, str | None] = {1: None}
        self.requests_issued = 0

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "PaginatedFetcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    def fetch(self, page: int) -> Page:
        if page < 1:
            raise ValueError("Pages are numbered from 1")
        if page not in self._cursors:
            raise ValueError(f"Page {page} requested before page {page - 1} was fetched")
        cursor = self._cursors[page]
        context = RetryContext(page=page)
        last_cause = "no attempt made"

        while True:
            self.token.raise_if_cancelled()
            directive = self._chain.prepare(context)
            if directive.expired:
                raise FetchTimeoutError(page, self.config.fetch_timeout)
            if directive.delay:
                self._sleep(directive.delay)
                self.token.raise_if_cancelled()

            response: httpx.Response | None = None
            error: Exception | None = None
            self.requests_issued += 1
            try:
                response = self._client.post(
                    self.config.endpoint,
                    json=build_cards_query(self.deck_id, self.config.page_size, cursor),
                    headers=directive.headers,
                    timeout=directive.timeout if directive.timeout is not None else httpx.USE_CLIENT_DEFAULT,
                )
            except httpx.DecodingError as exc:
                raise ParseError(f"undecodable response body: {exc}") from exc
            except httpx.TransportError as exc:
                error = exc
                last_cause = f"{type(exc).__name__}: {exc}"
            except httpx.RequestError as exc:
                # TooManyRedirects and other non-transport request failures.
                raise NetworkError(f"{type(exc).__name__}: {exc}", attempts=context.attempt) from exc
            else:
                if self._is_transient(response):
                    last_cause = f"HTTP {response.status_code}"
                else:
                    self._raise_for_client_error(response, context)
                    result = self._parser.parse_page(response.text, self.deck_id, page)
                    self._chain.record_success(context, response)
                    self._remember_cursor(result)
                    self.logger.debug(
                        "page_fetched",
                        page=page,
                        records=len(result),
                        has_next=result.has_next,
                        attempts=context.attempt,
                    )
                    return result

            self.logger.info(
                "fetch_attempt_failed",
                page=page,
                attempt=context.attempt,
                error=last_cause,
            )
            self._chain.record_failure(context, response, error)
            if self._chain.exhausted(context):
                raise NetworkError(last_cause, attempts=context.attempt - 1) from error
            self.logger.info(
                "fetch_retry_scheduled",
                page=page,
                attempt=context.attempt,
                delay=context.next_delay,
            )

    # ------------------------------------------------------------------
    def _remember_cursor(self, page: Page) -> None:
        for stale in [number for number in self._cursors if number > page.current_page]:
            del self._cursors[stale]
        if page.has_next:
            self._cursors[page.current_page + 1] = page.end_cursor

    def _raise_for_client_error(self, response: httpx.Response, context: RetryContext) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 404 or any(marker in response.text.lower() for marker in NOT_FOUND_MARKERS):
            raise InvalidCollectionError(self.deck_id)
        raise NetworkError(f"HTTP {status}", attempts=context.attempt)

    @staticmethod
    def _is_transient(response: httpx.Response) -> bool:
        return response.status_code >= 500 or response.status_code in TRANSIENT_STATUS


__all__ = ["PaginatedFetcher", "TRANSIENT_STATUS"]
