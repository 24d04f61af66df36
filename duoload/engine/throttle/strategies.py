"""Concrete pacing and retry strategies used by the chain."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import httpx

from ...config import TransferConfig
from ..cancel import Clock
from .chain import RequestDirective, RetryContext, Strategy, ThrottleChain


@dataclass(frozen=True, slots=True)
class BackoffSchedule:
    """Exponential delays between attempts: 1s, 2s, 4s, ... capped at ``cap``."""

    initial: float = 1.0
    factor: float = 2.0
    cap: float = 16.0
    max_retries: int = 3

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_for(self, retry_number: int) -> float:
        if retry_number < 1:
            raise ValueError("retry_number is 1-based")
        return min(self.cap, self.initial * self.factor ** (retry_number - 1))

    def delays(self) -> list[float]:
        return [self.delay_for(n) for n in range(1, self.max_retries + 1)]


class RetryStrategy(Strategy):
    """Track attempts and schedule the backoff before the next one."""

    def __init__(self, schedule: BackoffSchedule) -> None:
        self.schedule = schedule

    def before_request(self, context: RetryContext, directive: RequestDirective) -> None:
        context.max_attempts = self.schedule.max_attempts
        if context.attempt > 1:
            directive.delay = context.next_delay

    def after_success(self, context: RetryContext, response: httpx.Response) -> None:
        context.next_delay = 0.0

    def after_failure(
        self, context: RetryContext, response: httpx.Response | None, error: Exception | None
    ) -> None:
        if context.attempt <= self.schedule.max_retries:
            context.next_delay = self.schedule.delay_for(context.attempt)
        context.attempt += 1


class PoliteDelayStrategy(Strategy):
    """Pause before every request except the very first one of the run."""

    def __init__(self, delay: float) -> None:
        self.delay = delay
        self._issued = False

    def before_request(self, context: RetryContext, directive: RequestDirective) -> None:
        if context.attempt == 1 and self._issued and self.delay > 0:
            directive.delay = max(directive.delay or 0.0, self.delay)
        self._issued = True

    def after_success(self, context: RetryContext, response: httpx.Response) -> None:
        return

    def after_failure(
        self, context: RetryContext, response: httpx.Response | None, error: Exception | None
    ) -> None:
        return


class HeaderStrategy(Strategy):
    """Attach fixed request headers."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self.headers = dict(headers)

    def before_request(self, context: RetryContext, directive: RequestDirective) -> None:
        for name, value in self.headers.items():
            directive.headers.setdefault(name, value)

    def after_success(self, context: RetryContext, response: httpx.Response) -> None:
        return

    def after_failure(
        self, context: RetryContext, response: httpx.Response | None, error: Exception | None
    ) -> None:
        return


class RequestTimeoutStrategy(Strategy):
    """Expose the per-request timeout from config."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout

    def before_request(self, context: RetryContext, directive: RequestDirective) -> None:
        directive.timeout = self.timeout

    def after_success(self, context: RetryContext, response: httpx.Response) -> None:
        return

    def after_failure(
        self, context: RetryContext, response: httpx.Response | None, error: Exception | None
    ) -> None:
        return


def schedule_from_config(config: TransferConfig) -> BackoffSchedule:
    retry = config.retry
    return BackoffSchedule(
        initial=retry.initial_delay,
        factor=retry.factor,
        cap=retry.max_delay,
        max_retries=retry.max_retries,
    )


def build_chain(config: TransferConfig, clock: Clock | None = None) -> ThrottleChain:
    """Build the ready-to-use chain for one fetcher."""

    strategies: list[Strategy] = [
        RetryStrategy(schedule_from_config(config)),
        PoliteDelayStrategy(config.polite_delay),
        HeaderStrategy(
            {
                "Content-Type": "application/json",
                "Accept-Encoding": "gzip, deflate",
                "User-Agent": config.user_agent,
            }
        ),
        RequestTimeoutStrategy(config.request_timeout),
    ]
    return ThrottleChain(strategies, budget=config.fetch_timeout, clock=clock)


__all__ = [
    "BackoffSchedule",
    "HeaderStrategy",
    "PoliteDelayStrategy",
    "RequestTimeoutStrategy",
    "RetryStrategy",
    "build_chain",
    "schedule_from_config",
]
