"""Session state owned by the review orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field

from codelens_core.inputs import InputMode, UploadedItem
from codelens_core.prompt import DEFAULT_FOCUS


@dataclass
class SessionState:
    """Everything one user session can see or change.

    Only ReviewOrchestrator writes is_loading, last_error and current_output.
    History lives in the orchestrator's ledger, not here.
    """

    input_mode: InputMode = InputMode.FILE
    items: list[UploadedItem] = field(default_factory=list)
    selected_item_id: str | None = None
    manual_text: str = ""
    # Kept out of repr so the key never ends up in a log line or traceback.
    api_key: str = field(default="", repr=False)
    focus: str = DEFAULT_FOCUS
    is_loading: bool = False
    last_error: str | None = None
    current_output: str = ""

    def find_item(self, item_id: str | None) -> UploadedItem | None:
        if item_id is None:
            return None
        for item in self.items:
            if item.id == item_id:
                return item
        return None
