"""Error kinds raised while preparing and submitting a review.

Every error's ``str()`` is the message shown to the user, so the
orchestrator can surface any of them without a lookup table.
"""

from __future__ import annotations


class ReviewError(Exception):
    """Base class for every failure the orchestrator knows how to surface."""


class FileReadError(ReviewError):
    """An uploaded file could not be read or decoded as text."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} 파일 읽기에 실패했습니다.")


class EmptyInputError(ReviewError):
    def __init__(self):
        super().__init__("리뷰를 요청하기 전에 최소 하나의 파일을 업로드하거나 코드를 붙여넣어주세요.")


class MissingCredentialError(ReviewError):
    def __init__(self):
        super().__init__("리뷰를 요청하기 전에 OpenAI API 키를 입력해주세요.")


class ProviderError(ReviewError):
    """Non-success HTTP response from the provider.

    ``body`` is the raw response text, e.g. ``invalid_api_key``.
    """

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"OpenAI request failed ({status_code}): {body}")


class NetworkError(ReviewError):
    """Transport-level failure (timeout, DNS, connection reset)."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"네트워크 오류로 리뷰 요청에 실패했습니다: {cause}")


class MalformedResponseError(ReviewError):
    """Success response whose envelope has no usable message content.

    Never reaches the orchestrator: the client replaces it with fallback text.
    """
