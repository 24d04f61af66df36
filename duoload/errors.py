"""Exception taxonomy shared by the fetcher, sinks and CLI."""

from __future__ import annotations


class DuoloadError(Exception):
    """Base class for every fatal condition of a transfer run."""

    user_message = "Transfer failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


# ----------------------------------------------------------------------
# Fetch side
# ----------------------------------------------------------------------
class FetchError(DuoloadError):
    """A page could not be obtained from the remote source."""

    user_message = "Could not fetch vocabulary from Duocards."


class InvalidCollectionError(FetchError):
    user_message = "The deck does not exist on Duocards. Check the deck ID."

    def __init__(self, deck_id: str, message: str | None = None) -> None:
        self.deck_id = deck_id
        super().__init__(message or f"Deck not found: {deck_id}")


class NetworkError(FetchError):
    user_message = "Network error while talking to Duocards. Check your connection and retry."

    def __init__(self, cause: str, *, attempts: int = 1) -> None:
        self.cause = cause
        self.attempts = attempts
        super().__init__(f"Network failure after {attempts} attempt(s): {cause}")


class ParseError(FetchError):
    user_message = "Duocards returned an unexpected response; the API may have changed."

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Malformed response: {cause}")


class FetchTimeoutError(FetchError):
    user_message = "Timed out waiting for Duocards."

    def __init__(self, page: int, budget: float) -> None:
        self.page = page
        self.budget = budget
        super().__init__(f"Page {page} not fetched within {budget:.1f}s")


class TransferCancelledError(FetchError):
    user_message = "Transfer cancelled."


# ----------------------------------------------------------------------
# Sink side
# ----------------------------------------------------------------------
class SinkError(DuoloadError):
    user_message = "Could not write the output."


class UnsupportedDestinationError(SinkError):
    user_message = "Anki packages can only be written to a file, not to a stream."


class SinkIOError(SinkError):
    user_message = "Could not write the output file. Check the path and permissions."

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(f"Output write failed: {cause}")


# ----------------------------------------------------------------------
# Offline validation
# ----------------------------------------------------------------------
class DeckIdError(DuoloadError, ValueError):
    user_message = "Invalid deck ID. Expected the base64 encoded 'Deck:<UUID>' from Duocards."


__all__ = [
    "DeckIdError",
    "DuoloadError",
    "FetchError",
    "FetchTimeoutError",
    "InvalidCollectionError",
    "NetworkError",
    "ParseError",
    "SinkError",
    "SinkIOError",
    "TransferCancelledError",
    "UnsupportedDestinationError",
]
