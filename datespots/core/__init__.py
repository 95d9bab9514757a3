"""Core services: record store client, filters, map view, submission, loader."""
from datespots.core.loader import StoryLoader

__all__ = ["StoryLoader"]
