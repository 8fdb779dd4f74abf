"""
HTTP client for a local Ollama inference engine.

Two request shapes are used: a cheap `GET /api/tags` health probe with a
short timeout, and a non-streaming `POST /api/generate` with the longer
generation timeout. Both timeouts are enforced by httpx per request.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, Any, Optional

import httpx
from loguru import logger

from .exceptions import (
    LLMClientError, LLMServerError, LLMConnectionError, LLMTimeoutError, LLMResponseError
)


@dataclass
class GenerateResult:
    """Text produced by /api/generate plus the completion flag."""
    text: str
    model: str
    done: bool


class OllamaClient:
    """
    HTTP client for the Ollama REST API.

    Handles the health probe, non-streaming generation and error mapping.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        probe_timeout: float = 2.0,
        generation_timeout: float = 10.0,
        max_retries: int = 0,
        retry_delay: float = 0.5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Base URL of the Ollama server
            probe_timeout: Timeout for the health probe in seconds
            generation_timeout: Timeout for generation requests in seconds
            max_retries: Retries on connection failures and timeouts
            retry_delay: Delay between retry attempts
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip('/')
        self.probe_timeout = probe_timeout
        self.generation_timeout = generation_timeout
        self.max_retries = max_retries
        self.retry_delay = retry_delay

        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(generation_timeout),
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json"
            },
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def probe(self) -> bool:
        """
        Check whether the server answers /api/tags with HTTP 200.

        Returns:
            True on a 200 response; False on any other status, timeout or
            connection failure. Never raises for transport problems.
        """
        try:
            response = await self.client.get("/api/tags", timeout=self.probe_timeout)
        except httpx.HTTPError as e:
            logger.debug(f"Ollama probe failed at {self.base_url}: {e}")
            return False

        if response.status_code != 200:
            logger.debug(f"Ollama probe returned status {response.status_code}")
            return False

        return True

    async def generate(
        self,
        model: str,
        prompt: str,
        options: Optional[Dict[str, Any]] = None,
    ) -> GenerateResult:
        """
        Send a non-streaming generation request.

        Args:
            model: Model identifier
            prompt: Prompt text
            options: Generation options (temperature, num_predict, top_p)

        Returns:
            GenerateResult with the trimmed response text

        Raises:
            LLMConnectionError: If unable to connect to server
            LLMServerError: If server returns error status
            LLMTimeoutError: If request times out
            LLMResponseError: If the body is not a valid generate response
        """
        request_data = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "options": options,
        }
        request_data = {k: v for k, v in request_data.items() if v is not None}

        for attempt in range(self.max_retries + 1):
            try:
                logger.debug(f"Sending generate request (attempt {attempt + 1}): {prompt[:80]!r}")

                response = await self.client.post("/api/generate", json=request_data)
                response.raise_for_status()
                return self._parse_generate_response(response)

            except httpx.ConnectError as e:
                if attempt < self.max_retries:
                    logger.warning(f"Connection failed (attempt {attempt + 1}), retrying in {self.retry_delay}s...")
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise LLMConnectionError(f"Unable to connect to Ollama at {self.base_url}: {e}")

            except httpx.TimeoutException:
                if attempt < self.max_retries:
                    logger.warning(f"Request timeout (attempt {attempt + 1}), retrying in {self.retry_delay}s...")
                    await asyncio.sleep(self.retry_delay)
                    continue
                raise LLMTimeoutError(f"Generate request timed out after {self.generation_timeout}s")

            except httpx.HTTPStatusError as e:
                raise LLMServerError(
                    f"Ollama returned error {e.response.status_code}: {e.response.text[:200]}",
                    e.response.status_code
                )

            except httpx.HTTPError as e:
                raise LLMClientError(f"Unexpected HTTP error during generate: {e}")

        raise LLMClientError("Generate request was not attempted")

    @staticmethod
    def _parse_generate_response(response: httpx.Response) -> GenerateResult:
        try:
            data = response.json()
        except ValueError as e:
            raise LLMResponseError(f"Ollama returned invalid JSON: {e}")

        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise LLMResponseError("Ollama response is missing the 'response' field")

        result = GenerateResult(
            text=data["response"].strip(),
            model=str(data.get("model", "")),
            done=bool(data.get("done", True)),
        )
        logger.debug(f"Received response: {len(result.text)} characters")
        return result

    @property
    def is_connected(self) -> bool:
        """Check if client is open (basic check)."""
        return not self.client.is_closed
