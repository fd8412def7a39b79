"""Abstract history interface.

The orchestrator depends on BaseHistory, not on a concrete ledger, so tests
and alternative front ends can supply their own.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codelens_store.models import InputSnapshot, ReviewRecord


class BaseHistory(ABC):
    """Ordered record of completed reviews, most recent first."""

    @abstractmethod
    def record(self, review_text: str, snapshot: InputSnapshot) -> ReviewRecord:
        """Create a record for a finished review and put it at the front."""

    @abstractmethod
    def select(self, record_id: str) -> ReviewRecord | None:
        """Return the record with this id, or None. Never reorders history."""

    @abstractmethod
    def list_reviews(self) -> list[ReviewRecord]:
        """Return every record, most recent first.

        Returns an empty list if no reviews exist; never raises.
        """
