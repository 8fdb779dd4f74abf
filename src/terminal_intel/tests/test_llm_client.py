"""
Test suite for the inference HTTP clients, using httpx mock transports.
"""

import json

import httpx
import pytest

from terminal_intel.core.llm_client import (
    ChatCompletionsClient,
    LLMConnectionError,
    LLMResponseError,
    LLMServerError,
    LLMTimeoutError,
    OllamaClient,
)


def ollama(handler, **kwargs):
    return OllamaClient(transport=httpx.MockTransport(handler), **kwargs)


def refuse(request):
    raise httpx.ConnectError("connection refused", request=request)


@pytest.mark.unit
class TestOllamaProbe:
    """Test the /api/tags health probe."""

    @pytest.mark.asyncio
    async def test_probe_ok(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"models": []})

        async with ollama(handler) as client:
            assert await client.probe() is True
        assert seen == [("GET", "/api/tags")]

    @pytest.mark.asyncio
    async def test_probe_non_200(self):
        async with ollama(lambda request: httpx.Response(503)) as client:
            assert await client.probe() is False

    @pytest.mark.asyncio
    async def test_probe_connection_refused(self):
        async with ollama(refuse) as client:
            assert await client.probe() is False


@pytest.mark.unit
class TestOllamaGenerate:
    """Test generation requests and error mapping."""

    @pytest.mark.asyncio
    async def test_generate_sends_non_streaming_request(self):
        bodies = []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, json={"model": "m", "response": "  git status \n", "done": True})

        async with ollama(handler) as client:
            result = await client.generate("m", "suggest", options={"temperature": 0.3})

        assert result.text == "git status"
        assert result.done is True
        assert bodies == [{"model": "m", "prompt": "suggest", "stream": False, "options": {"temperature": 0.3}}]

    @pytest.mark.asyncio
    async def test_connection_error(self):
        async with ollama(refuse) as client:
            with pytest.raises(LLMConnectionError):
                await client.generate("m", "p")

    @pytest.mark.asyncio
    async def test_connection_error_is_retried(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) == 1:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"response": "ok"})

        async with ollama(handler, max_retries=1, retry_delay=0.0) as client:
            result = await client.generate("m", "p")

        assert result.text == "ok"
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        async with ollama(handler) as client:
            with pytest.raises(LLMTimeoutError):
                await client.generate("m", "p")

    @pytest.mark.asyncio
    async def test_server_error_keeps_status(self):
        async with ollama(lambda request: httpx.Response(404, text="model not found")) as client:
            with pytest.raises(LLMServerError) as exc_info:
                await client.generate("m", "p")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("response", [
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"done": True}),
    ])
    async def test_malformed_body(self, response):
        async with ollama(lambda request: response) as client:
            with pytest.raises(LLMResponseError):
                await client.generate("m", "p")


@pytest.mark.unit
class TestChatCompletionsClient:
    """Test the cloud fallback client."""

    def _client(self, handler):
        return ChatCompletionsClient(
            "https://api.example.com/v1", "sk-test", transport=httpx.MockTransport(handler)
        )

    @pytest.mark.asyncio
    async def test_complete(self):
        captured = {}

        def handler(request):
            captured["auth"] = request.headers["Authorization"]
            captured["path"] = request.url.path
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"choices": [{"message": {"content": " du -sh * "}}]})

        async with self._client(handler) as client:
            text = await client.complete("gpt", "prompt", temperature=0.2, max_tokens=50)

        assert text == "du -sh *"
        assert captured["auth"] == "Bearer sk-test"
        assert captured["path"] == "/v1/chat/completions"
        assert captured["body"]["messages"] == [{"role": "user", "content": "prompt"}]
        assert captured["body"]["max_tokens"] == 50

    @pytest.mark.asyncio
    async def test_server_error(self):
        async with self._client(lambda request: httpx.Response(429)) as client:
            with pytest.raises(LLMServerError) as exc_info:
                await client.complete("gpt", "prompt")

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_unexpected_payload(self):
        async with self._client(lambda request: httpx.Response(200, json={"choices": []})) as client:
            with pytest.raises(LLMResponseError):
                await client.complete("gpt", "prompt")
