"""Pydantic models describing how a transfer talks to Duocards and writes output."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator, model_validator

from .. import __version__

DEFAULT_ENDPOINT = "https://api.duocards.com/graphql"


class RetryConfig(BaseModel):
    """Exponential backoff for transient fetch failures."""

    initial_delay: float = 1.0
    factor: float = 2.0
    max_delay: float = 16.0
    max_retries: int = Field(default=3, ge=0)

    @field_validator("initial_delay", "max_delay")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Backoff delays must be non-negative")
        return value

    @field_validator("factor")
    @classmethod
    def _factor_at_least_one(cls, value: float) -> float:
        if value < 1:
            raise ValueError("Backoff factor must be >= 1")
        return value

    @model_validator(mode="after")
    def _validate_cap(self) -> "RetryConfig":
        if self.max_delay < self.initial_delay:
            raise ValueError("max_delay must be >= initial_delay")
        return self


class PackageConfig(BaseModel):
    """Fixed identifiers for the generated Anki deck and note model."""

    deck_name: str = "Duocards Vocabulary"
    deck_description: str = "Vocabulary imported from Duocards"
    deck_id: int = 2059400110
    model_id: int = 1607392319
    model_name: str = "Duoload Vocabulary"


class TransferConfig(BaseModel):
    """Everything a transfer run needs apart from the deck and destination."""

    endpoint: str = DEFAULT_ENDPOINT
    page_size: int = Field(default=100, ge=1, le=500)
    user_agent: str = f"duoload/{__version__}"
    polite_delay: float = 1.5
    request_timeout: float = 30.0
    fetch_timeout: float = 60.0
    retry: RetryConfig = Field(default_factory=RetryConfig)
    package: PackageConfig = Field(default_factory=PackageConfig)

    @field_validator("polite_delay")
    @classmethod
    def _coerce_delay(cls, value: float) -> float:
        if value < 0:
            raise ValueError("polite_delay must be non-negative")
        return float(value)

    @field_validator("request_timeout", "fetch_timeout")
    @classmethod
    def _positive_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Timeouts must be greater than zero")
        return float(value)

    @field_validator("endpoint")
    @classmethod
    def _validate_endpoint(cls, value: str) -> str:
        text = value.strip()
        if not text.startswith(("http://", "https://")):
            raise ValueError("endpoint must be an http(s) URL")
        return text


__all__ = ["DEFAULT_ENDPOINT", "PackageConfig", "RetryConfig", "TransferConfig"]
