"""OpenAI API key resolution.

Resolution order (stops at first success):
  1. The --api-key option (or a key typed at the session prompt)
  2. OPENAI_API_KEY environment variable

The key is held in memory for the life of the process only. It is never
written to the config file, the history, or any log record.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def resolve_api_key(explicit: str | None = None) -> str | None:
    """Return an API key or None if no source provides one.

    Never raises. The orchestrator reports a missing key when a review runs.
    """
    if explicit and explicit.strip():
        return explicit.strip()

    key = os.environ.get("OPENAI_API_KEY")
    if key and key.strip():
        logger.debug("Using API key from OPENAI_API_KEY.")
        return key.strip()

    return None
