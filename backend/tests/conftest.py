"""Shared test configuration and fixtures."""

import json
import os

# Must be set before config is imported anywhere.
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("DATABASE_PATH", ":memory:")

import httpx
import pytest

from config import OllamaConfig
from services.ollama_client import OllamaClient

TEST_CONFIG = OllamaConfig(url="http://ollama.test/api/generate", model="mistral:latest")


def _to_response(step) -> httpx.Response:
    if isinstance(step, BaseException):
        raise step
    if isinstance(step, httpx.Response):
        return step
    if isinstance(step, int):
        return httpx.Response(step, text="upstream error")
    return httpx.Response(
        200, json={"model": "mistral:latest", "response": step, "done": True}
    )


@pytest.fixture
def sleeps() -> list[float]:
    """Backoff delays (seconds) requested by clients built with scripted_client."""
    return []


@pytest.fixture
def scripted_client(sleeps):
    """Build an OllamaClient whose transport replays the given steps in order.

    A step is reply text (200), an int status code, an httpx.Response, or an
    exception to raise. The last step repeats once the script runs out.
    Decoded request bodies are collected on ``client.requests``.
    """

    def _make(*steps, config: OllamaConfig = TEST_CONFIG) -> OllamaClient:
        script = list(steps)
        requests: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(json.loads(request.content))
            step = script.pop(0) if len(script) > 1 else script[0]
            return _to_response(step)

        async def _sleep(seconds: float) -> None:
            sleeps.append(seconds)

        client = OllamaClient(config, transport=httpx.MockTransport(handler), sleep=_sleep)
        client.requests = requests
        return client

    return _make
