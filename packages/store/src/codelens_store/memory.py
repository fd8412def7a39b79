"""InMemoryHistory: session-lifetime review history.

Nothing is written to disk: history disappears with the process, and so
does every review text in it.
"""

from __future__ import annotations

import logging
import uuid
from collections import deque
from datetime import datetime, timezone

from codelens_store.base import BaseHistory
from codelens_store.models import InputSnapshot, ReviewRecord

logger = logging.getLogger(__name__)


class InMemoryHistory(BaseHistory):
    def __init__(self):
        self._records: deque[ReviewRecord] = deque()

    def __len__(self) -> int:
        return len(self._records)

    def record(self, review_text: str, snapshot: InputSnapshot) -> ReviewRecord:
        entry = ReviewRecord(
            id=uuid.uuid4().hex,
            timestamp=datetime.now(timezone.utc).isoformat(),
            summary=snapshot.describe(),
            result=review_text,
        )
        self._records.appendleft(entry)
        logger.debug("Recorded review %s (%s)", entry.id, entry.summary)
        return entry

    def select(self, record_id: str) -> ReviewRecord | None:
        for entry in self._records:
            if entry.id == record_id:
                return entry
        return None

    def list_reviews(self) -> list[ReviewRecord]:
        return list(self._records)
