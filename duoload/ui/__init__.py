"""User-facing terminal output."""

from .progress import PageProgress, ProgressObserver, ProgressReporter

__all__ = ["PageProgress", "ProgressObserver", "ProgressReporter"]
