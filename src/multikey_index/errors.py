"""Exceptions raised by the index, its extractors and its loaders."""

from __future__ import annotations

from typing import Any


class MultiKeyIndexError(Exception):
    """Base error for the project."""


class DuplicateKeyError(MultiKeyIndexError, ValueError):
    """Raised when an add would take over a key owned by another live value."""

    def __init__(self, key: Any, incoming: Any, existing: Any) -> None:
        super().__init__(f"Duplicate key {key!r} is already owned by another value")
        self.key = key
        self.incoming = incoming
        self.existing = existing


class ExtractionError(MultiKeyIndexError, KeyError):
    """Raised when a field extractor cannot resolve its path on a value."""

    def __init__(self, path: str, step: str) -> None:
        super().__init__(f"Cannot extract {path!r}: missing {step!r}")
        self.path = path
        self.step = step

    def __str__(self) -> str:
        return str(self.args[0])
