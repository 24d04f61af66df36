"""Duoload: move vocabulary from Duocards decks into Anki packages or JSON."""

__version__ = "0.2.0"

__all__ = ["__version__"]
