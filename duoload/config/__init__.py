"""Configuration package exports."""

from .loader import ConfigLocator, ConfigRepository
from .models import DEFAULT_ENDPOINT, PackageConfig, RetryConfig, TransferConfig

__all__ = [
    "ConfigLocator",
    "ConfigRepository",
    "DEFAULT_ENDPOINT",
    "PackageConfig",
    "RetryConfig",
    "TransferConfig",
]
