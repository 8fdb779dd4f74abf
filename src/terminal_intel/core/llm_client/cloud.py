"""
HTTP client for an OpenAI-compatible chat completions endpoint.

From the suggestion pipeline's point of view the cloud fallback is opaque:
prompt text in, text out. This client is the one concrete transport for it.
"""

from typing import Optional

import httpx
from loguru import logger

from .exceptions import (
    LLMClientError, LLMServerError, LLMConnectionError, LLMTimeoutError, LLMResponseError
)


class ChatCompletionsClient:
    """Minimal async client for `POST {base_url}/chat/completions`."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        await self.client.aclose()

    async def complete(
        self,
        model: str,
        prompt: str,
        temperature: float = 0.3,
        max_tokens: int = 500,
    ) -> str:
        """
        Send a single-turn chat completion and return the message text.

        Raises:
            LLMConnectionError, LLMTimeoutError, LLMServerError, LLMResponseError
        """
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        try:
            logger.debug(f"Sending chat completion to {self.base_url}: {prompt[:80]!r}")
            response = await self.client.post("/chat/completions", json=payload)
            response.raise_for_status()
        except httpx.ConnectError as e:
            raise LLMConnectionError(f"Unable to connect to {self.base_url}: {e}")
        except httpx.TimeoutException:
            raise LLMTimeoutError(f"Chat completion timed out after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            raise LLMServerError(
                f"Cloud provider returned error {e.response.status_code}",
                e.response.status_code
            )
        except httpx.HTTPError as e:
            raise LLMClientError(f"Unexpected HTTP error during chat completion: {e}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMResponseError(f"Unexpected chat completion payload: {e}")

        if not isinstance(content, str):
            raise LLMResponseError("Chat completion content is not text")

        return content.strip()
