from __future__ import annotations

import json

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from codelens_core.errors import MalformedResponseError, NetworkError, ProviderError
from codelens_core.prompt import ReviewRequest
from codelens_core.providers.base import BaseReviewClient


class OpenAIReviewClient(BaseReviewClient):
    MODEL = "gpt-4o-mini"
    # Low temperature: the same code should get the same review.
    TEMPERATURE = 0.2

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        # When injected, the caller owns the http client and closes it.
        self._http_client = http_client

    def _make_client(self, credential: str) -> AsyncOpenAI:
        kwargs: dict = {"api_key": credential, "max_retries": 0}
        if self._base_url:
            kwargs["base_url"] = self._base_url
        if self._timeout is not None:
            kwargs["timeout"] = self._timeout
        if self._http_client is not None:
            kwargs["http_client"] = self._http_client
        return AsyncOpenAI(**kwargs)

    async def _call_api(self, credential: str, request: ReviewRequest) -> object:
        client = self._make_client(credential)
        body = self._body(request)
        try:
            raw = await client.chat.completions.with_raw_response.create(
                model=body["model"],
                temperature=body["temperature"],
                messages=body["messages"],
            )
            text = raw.text
        except APIStatusError as e:
            raise ProviderError(e.status_code, e.response.text) from e
        except APIConnectionError as e:
            # APITimeoutError is a subclass, so timeouts land here too.
            raise NetworkError(e.__cause__ or e) from e
        finally:
            if self._http_client is None:
                await client.close()

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedResponseError(str(e)) from e
