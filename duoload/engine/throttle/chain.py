"""Strategy chain deciding delays, headers, retries and the per-page time budget."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Protocol

import httpx

from ..cancel import Clock, monotonic_clock


@dataclass
class RequestDirective:
    """Options to apply to the next outgoing request.

    ``expired`` is set when waiting ``delay`` would already exhaust the page
    budget; the request must not be sent.
    """

    headers: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None
    delay: float | None = None
    expired: bool = False


@dataclass
class RetryContext:
    """Attempt bookkeeping for one page; the backoff is plain data here."""

    page: int
    attempt: int = 1
    max_attempts: int = 1
    deadline: float | None = None
    next_delay: float = 0.0
    last_status: int | None = None
    last_exception: Exception | None = None

    @property
    def retries_used(self) -> int:
        return self.attempt - 1


class Strategy(Protocol):
    def before_request(self, context: RetryContext, directive: RequestDirective) -> None: ...

    def after_success(self, context: RetryContext, response: httpx.Response) -> None: ...

    def after_failure(
        self,
        context: RetryContext,
        response: httpx.Response | None,
        error: Exception | None,
    ) -> None: ...


class ThrottleChain:
    """Run strategies in order, then hold the page to its overall budget.

    The deadline is armed on the first attempt of a page, after that
    attempt's polite delay. Every later directive has its request timeout
    capped to what is left, and is marked expired once a pending wait would
    reach the deadline.
    """

    def __init__(
        self,
        strategies: Iterable[Strategy] = (),
        *,
        budget: float | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.strategies = list(strategies)
        self.budget = budget
        self._clock = clock or monotonic_clock

    def prepare(self, context: RetryContext) -> RequestDirective:
        directive = RequestDirective()
        for strategy in self.strategies:
            strategy.before_request(context, directive)
        if self.budget is not None:
            self._apply_budget(context, directive)
        return directive

    def _apply_budget(self, context: RetryContext, directive: RequestDirective) -> None:
        send_at = self._clock() + (directive.delay or 0.0)
        if context.deadline is None:
            context.deadline = send_at + self.budget
        remaining = context.deadline - send_at
        if remaining <= 0:
            directive.expired = True
            return
        directive.timeout = remaining if directive.timeout is None else min(directive.timeout, remaining)

    def record_success(self, context: RetryContext, response: httpx.Response) -> None:
        context.last_status = response.status_code
        context.last_exception = None
        for strategy in self.strategies:
            strategy.after_success(context, response)

    def record_failure(
        self,
        context: RetryContext,
        response: httpx.Response | None,
        error: Exception | None,
    ) -> None:
        context.last_status = response.status_code if response is not None else None
        context.last_exception = error
        for strategy in self.strategies:
            strategy.after_failure(context, response, error)

    def exhausted(self, context: RetryContext) -> bool:
        return context.attempt > context.max_attempts


__all__ = ["RequestDirective", "RetryContext", "Strategy", "ThrottleChain"]
