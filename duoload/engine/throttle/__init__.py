"""Request pacing: polite delays, backoff and retry bookkeeping."""

from .chain import RequestDirective, RetryContext, Strategy, ThrottleChain
from .strategies import BackoffSchedule, build_chain, schedule_from_config

__all__ = [
    "BackoffSchedule",
    "RequestDirective",
    "RetryContext",
    "Strategy",
    "ThrottleChain",
    "build_chain",
    "schedule_from_config",
]
