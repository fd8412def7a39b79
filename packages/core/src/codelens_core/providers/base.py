"""Base review client implementing the Template Method pattern.

Every provider shares the same submission algorithm:
    submit_review() → ensure_credential()
                    → _call_api()          ← only this differs per provider
                    → _extract_content()

Subclasses implement one thing only: _call_api, which makes exactly one
request and returns the decoded JSON envelope, translating the SDK's own
exceptions into ProviderError / NetworkError.

Each submission is a single attempt with no retry loop. A failure is
surfaced once and the user decides whether to run again.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from codelens_core.errors import MalformedResponseError, MissingCredentialError
from codelens_core.prompt import ReviewRequest

logger = logging.getLogger(__name__)

NO_CONTENT_FALLBACK = "모델로부터 응답을 받지 못했습니다."


def ensure_credential(credential: str | None) -> str:
    """Return the stripped credential or raise MissingCredentialError."""
    if credential is None or not credential.strip():
        raise MissingCredentialError()
    return credential.strip()


class BaseReviewClient(ABC):
    MODEL: str
    TEMPERATURE: float

    # ------------------------------------------------------------------ #
    # Public interface                                                     #
    # ------------------------------------------------------------------ #

    async def submit_review(self, credential: str | None, request: ReviewRequest) -> str:
        """Send one review request and return the review text.

        The credential is validated before any network activity. An envelope
        without usable content is not an error: the fallback text is returned.
        """
        key = ensure_credential(credential)
        logger.debug("%s: submitting review to %s", self.__class__.__name__, self.MODEL)
        try:
            envelope = await self._call_api(key, request)
            return self._extract_content(envelope)
        except MalformedResponseError:
            logger.warning("%s: response carried no message content", self.__class__.__name__)
            return NO_CONTENT_FALLBACK

    # ------------------------------------------------------------------ #
    # Abstract: implement in each provider                               #
    # ------------------------------------------------------------------ #

    @abstractmethod
    async def _call_api(self, credential: str, request: ReviewRequest) -> object:
        """Make a single API call and return the decoded response body.

        Must raise ProviderError for non-success statuses and NetworkError for
        transport failures. A body that is not valid JSON should raise
        MalformedResponseError.
        """

    # ------------------------------------------------------------------ #
    # Shared implementations                                               #
    # ------------------------------------------------------------------ #

    def _body(self, request: ReviewRequest) -> dict:
        return {
            "model": self.MODEL,
            "temperature": self.TEMPERATURE,
            "messages": request.to_messages(),
        }

    @staticmethod
    def _extract_content(envelope: object) -> str:
        """Pull ``choices[0].message.content`` out of a chat-completion envelope."""
        try:
            content = envelope["choices"][0]["message"]["content"]  # type: ignore[index]
        except (KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(str(e)) from e
        if not isinstance(content, str):
            raise MalformedResponseError("message content is not a string")
        return content
