"""Abstract repository for document number sequences."""

from __future__ import annotations

from abc import ABC, abstractmethod


class SequenceRepository(ABC):

    @abstractmethod
    def advance(self, key: str) -> int:
        """Bump the counter stored under *key* and return its new value.

        The first call for a key returns 1. Values are never handed out
        twice, even after the document that used one is deleted.
        """
