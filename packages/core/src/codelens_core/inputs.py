"""Input normalization: uploaded files or a pasted buffer → one reviewable unit."""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import aiofiles

from codelens_core.errors import FileReadError

logger = logging.getLogger(__name__)

FILE_MARKER = "// 파일: {name}"
EMPTY_FILE_PLACEHOLDER = "// (빈 파일)"
MANUAL_MARKER = "// 수동 입력 코드"

_SIZE_UNITS = ("B", "KB", "MB")


class InputMode(str, Enum):
    FILE = "file"
    MANUAL = "manual"


@dataclass(frozen=True)
class UploadedItem:
    """A successfully read upload. Immutable; removed only as a whole."""

    name: str
    size: int  # raw byte count
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


def build_reviewable_unit(mode: InputMode, items: list[UploadedItem], manual_text: str) -> str:
    """Return the single text blob that is sent for review.

    File mode keeps upload order (not alphabetical) and marks every file
    boundary so the model can attribute findings. Output depends only on the
    arguments, so identical input always yields a byte-identical prompt.
    """
    if mode == InputMode.FILE:
        blocks = [
            f"{FILE_MARKER.format(name=item.name)}\n{item.content.strip() or EMPTY_FILE_PLACEHOLDER}"
            for item in items
        ]
        return "\n\n".join(blocks)

    manual = manual_text.strip()
    if not manual:
        return ""
    return f"{MANUAL_MARKER}\n{manual}"


def readable_bytes(size: int) -> str:
    """Format a byte count for display next to an uploaded file."""
    if size == 0:
        return "0 B"
    value = float(size)
    for unit in _SIZE_UNITS:
        if value < 1024 or unit == _SIZE_UNITS[-1]:
            break
        value /= 1024
    return f"{value:.1f} {unit}"


async def _read_one(path: Path) -> UploadedItem:
    try:
        async with aiofiles.open(path, "rb") as f:
            raw = await f.read()
        content = raw.decode("utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        raise FileReadError(path.name) from e
    return UploadedItem(name=path.name, size=len(raw), content=content)


async def read_uploads(paths: list[str | Path]) -> list[UploadedItem]:
    """Read a batch of files concurrently.

    All-or-nothing: the first failure propagates as FileReadError and the
    caller commits none of the batch.
    """
    return list(await asyncio.gather(*(_read_one(Path(p)) for p in paths)))
