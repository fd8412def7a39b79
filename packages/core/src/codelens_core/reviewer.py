"""Core review orchestration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from codelens_core.errors import FileReadError, ReviewError
from codelens_core.inputs import InputMode, UploadedItem, build_reviewable_unit, read_uploads
from codelens_core.prompt import ReviewRequest, build_request
from codelens_core.providers.base import BaseReviewClient, ensure_credential
from codelens_core.session import SessionState
from codelens_store.base import BaseHistory
from codelens_store.memory import InMemoryHistory
from codelens_store.models import InputSnapshot, ReviewRecord

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "리뷰 요청 중 예기치 않은 오류가 발생했습니다."


@dataclass(frozen=True)
class ReviewSucceeded:
    text: str
    snapshot: InputSnapshot


@dataclass(frozen=True)
class ReviewFailed:
    kind: str  # error class name, e.g. "ProviderError"
    message: str

    @classmethod
    def from_error(cls, error: ReviewError) -> ReviewFailed:
        return cls(kind=type(error).__name__, message=str(error))


ReviewOutcome = Union[ReviewSucceeded, ReviewFailed]


class ReviewOrchestrator:
    """Owns the session state and drives one review run at a time.

    States are idle and running; a run always ends back in idle, either with
    new output and a history record or with an error message and the
    previous output left in place.
    """

    def __init__(
        self,
        client: BaseReviewClient,
        history: BaseHistory | None = None,
        state: SessionState | None = None,
    ):
        self.client = client
        self.history = history if history is not None else InMemoryHistory()
        self.state = state if state is not None else SessionState()

    # ------------------------------------------------------------------ #
    # Derived views                                                        #
    # ------------------------------------------------------------------ #

    @property
    def reviewable_unit(self) -> str:
        return build_reviewable_unit(self.state.input_mode, self.state.items, self.state.manual_text)

    @property
    def selected_item(self) -> UploadedItem | None:
        """The selected upload, or None when the selection no longer resolves."""
        return self.state.find_item(self.state.selected_item_id)

    def list_history(self) -> list[ReviewRecord]:
        return self.history.list_reviews()

    # ------------------------------------------------------------------ #
    # Inbound mutators                                                     #
    # ------------------------------------------------------------------ #

    def set_input_mode(self, mode: InputMode) -> None:
        """Switch the active source. Destructive: the other source is cleared."""
        mode = InputMode(mode)
        self.state.input_mode = mode
        if mode == InputMode.FILE:
            self.state.manual_text = ""
        else:
            self.state.items = []
            self.state.selected_item_id = None

    async def add_files(self, paths: list[str | Path]) -> list[UploadedItem]:
        """Read a batch of files and append them in the given order.

        If any file fails, nothing from the batch is kept and the error names
        that file. Adding files while in manual mode switches to file mode.
        """
        if not paths:
            return []
        try:
            uploaded = await read_uploads(paths)
        except FileReadError as e:
            self.state.last_error = str(e)
            return []

        if self.state.input_mode != InputMode.FILE:
            self.set_input_mode(InputMode.FILE)
        self.state.items = [*self.state.items, *uploaded]
        if self.state.selected_item_id is None and uploaded:
            self.state.selected_item_id = uploaded[0].id
        self.state.last_error = None
        logger.info("Added %d file(s); %d in total", len(uploaded), len(self.state.items))
        return uploaded

    def remove_file(self, item_id: str) -> None:
        self.state.items = [item for item in self.state.items if item.id != item_id]
        if self.state.selected_item_id == item_id:
            self.state.selected_item_id = None

    def select_file(self, item_id: str) -> UploadedItem | None:
        item = self.state.find_item(item_id)
        self.state.selected_item_id = item.id if item is not None else None
        return item

    def set_manual_text(self, text: str) -> None:
        self.state.manual_text = text

    def set_focus(self, focus: str) -> None:
        self.state.focus = focus

    def set_credential(self, api_key: str) -> None:
        self.state.api_key = api_key

    def dismiss_error(self) -> None:
        self.state.last_error = None

    def select_history_entry(self, record_id: str) -> ReviewRecord | None:
        """Redisplay a past review. History itself is left untouched."""
        entry = self.history.select(record_id)
        if entry is not None:
            self.state.current_output = entry.result
        return entry

    # ------------------------------------------------------------------ #
    # Review run                                                           #
    # ------------------------------------------------------------------ #

    async def run_review(self) -> ReviewOutcome | None:
        """Run one review and fold its outcome into the session state.

        Returns None without touching anything if a run is already in flight.
        Validation happens before the loading flag is raised, so a missing
        key or empty input never reaches the client.
        """
        state = self.state
        if state.is_loading:
            logger.info("Review already in progress; ignoring run request.")
            return None

        try:
            ensure_credential(state.api_key)
            request = build_request(state.focus, self.reviewable_unit)
        except ReviewError as e:
            outcome: ReviewOutcome = ReviewFailed.from_error(e)
            self._apply(outcome)
            return outcome

        snapshot = self._snapshot()
        state.is_loading = True
        state.last_error = None
        try:
            outcome = await self._attempt(request, snapshot)
            self._apply(outcome)
        finally:
            state.is_loading = False
        return outcome

    def _snapshot(self) -> InputSnapshot:
        """Describe only the source that feeds the reviewable unit."""
        if self.state.input_mode == InputMode.FILE:
            return InputSnapshot(file_count=len(self.state.items), manual_chars=0)
        return InputSnapshot(file_count=0, manual_chars=len(self.state.manual_text))

    async def _attempt(self, request: ReviewRequest, snapshot: InputSnapshot) -> ReviewOutcome:
        try:
            text = await self.client.submit_review(self.state.api_key, request)
        except ReviewError as e:
            logger.warning("Review failed (%s): %s", type(e).__name__, e)
            return ReviewFailed.from_error(e)
        except Exception as e:
            logger.exception("Unexpected error during review")
            return ReviewFailed(kind=type(e).__name__, message=UNEXPECTED_ERROR_MESSAGE)
        return ReviewSucceeded(text=text, snapshot=snapshot)

    def _apply(self, outcome: ReviewOutcome) -> None:
        if isinstance(outcome, ReviewSucceeded):
            self.state.current_output = outcome.text
            self.history.record(outcome.text, outcome.snapshot)
            self.state.last_error = None
        else:
            self.state.last_error = outcome.message
