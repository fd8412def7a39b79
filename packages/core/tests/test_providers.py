"""Tests for review client implementations.

Shared behaviour (credential check, envelope extraction, fallback text) lives
in BaseReviewClient and is tested once via a lightweight stub. The OpenAI
client is exercised through the real SDK over httpx.MockTransport, so the
wire format and the SDK's exception types are covered without a network.
"""

import json

import httpx
import pytest

from codelens_core.errors import MissingCredentialError, NetworkError, ProviderError
from codelens_core.prompt import ReviewRequest, build_request
from codelens_core.providers.base import NO_CONTENT_FALLBACK, BaseReviewClient, ensure_credential
from codelens_core.providers.openai import OpenAIReviewClient

REQUEST = build_request("security", "// 파일: a.py\nx=1")


def completion(content="Looks good.") -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 0,
        "model": "gpt-4o-mini",
        "choices": [
            {"index": 0, "finish_reason": "stop", "message": {"role": "assistant", "content": content}},
        ],
    }


class _StubClient(BaseReviewClient):
    MODEL = "stub-model"
    TEMPERATURE = 0.0

    def __init__(self, envelope):
        self.envelope = envelope
        self.calls = 0

    async def _call_api(self, credential: str, request: ReviewRequest) -> object:
        self.calls += 1
        return self.envelope


class _Recorder:
    """httpx.MockTransport handler that records every request it sees."""

    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return self.response


async def _submit(recorder, credential="sk-test", **kwargs):
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as http:
        client = OpenAIReviewClient(http_client=http, **kwargs)
        return await client.submit_review(credential, REQUEST)


# ---------------------------------------------------------------------------
# Shared behaviour: tested once through the stub
# ---------------------------------------------------------------------------


class TestEnsureCredential:
    @pytest.mark.parametrize("credential", [None, "", "   ", "\n"])
    def test_blank_credential_raises(self, credential):
        with pytest.raises(MissingCredentialError):
            ensure_credential(credential)

    def test_credential_is_stripped(self):
        assert ensure_credential("  sk-abc \n") == "sk-abc"


class TestBaseReviewClient:
    @pytest.mark.asyncio
    async def test_missing_credential_never_calls_api(self):
        client = _StubClient(completion())
        with pytest.raises(MissingCredentialError):
            await client.submit_review("  ", REQUEST)
        assert client.calls == 0

    @pytest.mark.asyncio
    async def test_returns_first_choice_content(self):
        assert await _StubClient(completion("## 발견 사항")).submit_review("k", REQUEST) == "## 발견 사항"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "envelope",
        [
            {},
            {"choices": []},
            {"choices": [{}]},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": None}}]},
            {"choices": [{"message": {"content": 42}}]},
            ["not", "an", "object"],
            None,
        ],
    )
    async def test_malformed_envelope_returns_fallback(self, envelope):
        assert await _StubClient(envelope).submit_review("k", REQUEST) == NO_CONTENT_FALLBACK

    @pytest.mark.asyncio
    async def test_empty_string_content_is_returned_as_is(self):
        assert await _StubClient(completion("")).submit_review("k", REQUEST) == ""

    def test_body_carries_model_temperature_and_messages(self):
        body = _StubClient(None)._body(REQUEST)
        assert body == {
            "model": "stub-model",
            "temperature": 0.0,
            "messages": REQUEST.to_messages(),
        }


# ---------------------------------------------------------------------------
# OpenAI: the wire contract and error classification
# ---------------------------------------------------------------------------


class TestOpenAIReviewClient:
    def test_model_is_fixed(self):
        assert OpenAIReviewClient.MODEL == "gpt-4o-mini"

    def test_temperature_is_low(self):
        assert OpenAIReviewClient.TEMPERATURE == 0.2

    @pytest.mark.asyncio
    async def test_posts_chat_completion_request(self, monkeypatch):
        monkeypatch.delenv("OPENAI_BASE_URL", raising=False)
        recorder = _Recorder(httpx.Response(200, json=completion()))

        await _submit(recorder, credential=" sk-test ")

        [request] = recorder.requests
        assert request.method == "POST"
        assert request.url.host == "api.openai.com"
        assert request.url.path == "/v1/chat/completions"
        assert request.headers["authorization"] == "Bearer sk-test"
        assert request.headers["content-type"].startswith("application/json")
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o-mini"
        assert body["temperature"] == 0.2
        assert body["messages"] == REQUEST.to_messages()

    @pytest.mark.asyncio
    async def test_returns_review_text(self):
        recorder = _Recorder(httpx.Response(200, json=completion("### 심각도: 높음")))
        assert await _submit(recorder) == "### 심각도: 높음"

    @pytest.mark.asyncio
    async def test_null_content_returns_fallback(self):
        recorder = _Recorder(httpx.Response(200, json=completion(None)))
        assert await _submit(recorder) == NO_CONTENT_FALLBACK

    @pytest.mark.asyncio
    async def test_non_json_success_body_returns_fallback(self):
        recorder = _Recorder(httpx.Response(200, text="<html>gateway</html>"))
        assert await _submit(recorder) == NO_CONTENT_FALLBACK

    @pytest.mark.asyncio
    async def test_http_error_keeps_status_and_raw_body(self):
        recorder = _Recorder(httpx.Response(401, text="invalid_api_key"))

        with pytest.raises(ProviderError) as exc_info:
            await _submit(recorder)

        assert exc_info.value.status_code == 401
        assert exc_info.value.body == "invalid_api_key"
        assert "401" in str(exc_info.value)
        assert "invalid_api_key" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_server_error_is_not_retried(self):
        recorder = _Recorder(httpx.Response(503, text="overloaded"))

        with pytest.raises(ProviderError) as exc_info:
            await _submit(recorder)

        assert exc_info.value.status_code == 503
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_not_retried(self):
        recorder = _Recorder(httpx.Response(429, text="rate_limit_exceeded"))

        with pytest.raises(ProviderError):
            await _submit(recorder)

        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_connection_failure_raises_network_error(self):
        recorder = _Recorder(exc=httpx.ConnectError("connection refused"))

        with pytest.raises(NetworkError) as exc_info:
            await _submit(recorder)

        assert isinstance(exc_info.value.cause, httpx.ConnectError)
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_timeout_raises_network_error(self):
        recorder = _Recorder(exc=httpx.ReadTimeout("timed out"))

        with pytest.raises(NetworkError):
            await _submit(recorder)

    @pytest.mark.asyncio
    async def test_missing_credential_sends_nothing(self):
        recorder = _Recorder(httpx.Response(200, json=completion()))

        with pytest.raises(MissingCredentialError):
            await _submit(recorder, credential="")

        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_base_url_override(self):
        recorder = _Recorder(httpx.Response(200, json=completion()))

        await _submit(recorder, base_url="https://llm-proxy.internal/v1")

        assert recorder.requests[0].url.host == "llm-proxy.internal"

    @pytest.mark.asyncio
    async def test_injected_http_client_is_reusable(self):
        recorder = _Recorder(httpx.Response(200, json=completion()))
        async with httpx.AsyncClient(transport=httpx.MockTransport(recorder)) as http:
            client = OpenAIReviewClient(http_client=http)
            await client.submit_review("k", REQUEST)
            await client.submit_review("k", REQUEST)
        assert len(recorder.requests) == 2
