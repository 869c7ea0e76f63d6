"""Ollama-style /api/generate client with bounded retries and per-attempt timeouts."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

import httpx

from config import OllamaConfig
from services.exceptions import InferenceExhausted, TransportError

logger = logging.getLogger(__name__)


def backoff_seconds(attempt: int) -> float:
    """Delay after the given 1-based failed attempt: 1000 * attempt * 2 ms."""
    return 1000 * attempt * 2 / 1000


@dataclass
class InferenceOutcome:
    """Either the generated text or the exhaustion error, never both."""
    text: str | None = None
    error: InferenceExhausted | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class OllamaClient:
    """Sends one non-streaming prompt per attempt to the configured endpoint.

    Holds no state between calls apart from its configuration, so a single
    instance can serve concurrent requests.
    """

    def __init__(
        self,
        config: OllamaConfig,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sleep = sleep

    async def _post(self, prompt: str) -> str:
        payload = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
        }
        async with httpx.AsyncClient(transport=self._transport, timeout=None) as client:
            response = await client.post(self.config.url, json=payload)

        if not response.is_success:
            raise TransportError(
                f"API error: {response.status_code}", status_code=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON from endpoint: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        return text.strip() if isinstance(text, str) else ""

    async def _attempt(self, prompt: str, timeout_ms: int) -> str:
        try:
            return await asyncio.wait_for(self._post(prompt), timeout=timeout_ms / 1000)
        except asyncio.TimeoutError as e:
            raise TransportError(f"Request timed out after {timeout_ms}ms") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}") from e

    async def generate(
        self,
        prompt: str,
        retries: int | None = None,
        timeout_ms: int | None = None,
    ) -> str:
        """Return the trimmed ``response`` text, or raise InferenceExhausted.

        ``retries`` and ``timeout_ms`` fall back to the configured values.
        """
        retries = self.config.retries if retries is None else retries
        timeout_ms = self.config.timeout_ms if timeout_ms is None else timeout_ms
        if retries < 1:
            raise ValueError("retries must be at least 1")

        last_error: TransportError | None = None
        for attempt in range(1, retries + 1):
            try:
                return await self._attempt(prompt, timeout_ms)
            except TransportError as e:
                last_error = e
                logger.warning("Ollama attempt %d/%d failed: %s", attempt, retries, e)
                if attempt < retries:
                    await self._sleep(backoff_seconds(attempt))

        logger.error("Ollama call failed after %d attempts", retries)
        raise InferenceExhausted(retries, last_error) from last_error

    async def try_generate(
        self,
        prompt: str,
        retries: int | None = None,
        timeout_ms: int | None = None,
    ) -> InferenceOutcome:
        """Like generate(), but reports exhaustion as a value instead of raising."""
        try:
            return InferenceOutcome(text=await self.generate(prompt, retries, timeout_ms))
        except InferenceExhausted as e:
            return InferenceOutcome(error=e)
