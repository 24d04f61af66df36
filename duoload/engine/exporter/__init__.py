"""Sink contract, destinations and implementations."""

from .apkg_exporter import PackageSink
from .base import BaseSink
from .destination import Destination, FileDestination, StreamDestination
from .json_exporter import JsonSink

__all__ = [
    "BaseSink",
    "Destination",
    "FileDestination",
    "JsonSink",
    "PackageSink",
    "StreamDestination",
]
