"""Adapters - I/O implementations of ports."""

from .file_store import FileEventStore

__all__ = [
    "FileEventStore",
]
