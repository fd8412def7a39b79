"""Review history data models.

Decoupled from codelens_core so the history layer has no knowledge of
prompts, providers, or session state.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class InputSnapshot:
    """What was submitted, captured when the run starts.

    A value copy rather than a reference to the session, so editing the file
    list afterwards never rewrites the summary of an earlier review.
    """

    file_count: int
    manual_chars: int

    def describe(self) -> str:
        return f"파일 {self.file_count}개, 수동 입력 {self.manual_chars}자"


@dataclass(frozen=True)
class ReviewRecord:
    """One completed review run. Never mutated after creation."""

    id: str
    timestamp: str  # ISO-8601 UTC timestamp
    summary: str
    result: str
