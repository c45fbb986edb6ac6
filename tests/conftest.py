"""pytest configuration and fixtures for multi-model-advisor tests.

Provides a scriptable fake Ollama backend served through
httpx.MockTransport, plus clients and advisors wired to it.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any

import httpx
import pytest

from multi_model_advisor.backends.ollama import OllamaClient
from multi_model_advisor.core.config import Settings
from multi_model_advisor.models.responses import ToolResult
from multi_model_advisor.orchestration.advisor import ModelAdvisor


# =============================================================================
# Constants
# =============================================================================

TEST_BACKEND_URL = "http://ollama.test:11434"
MODEL_M1 = "m1"
MODEL_M2 = "m2"
MODEL_M3 = "m3"
ONE_GIB = 1073741824


def result_text(result: ToolResult) -> str:
    """Text of the first content block of a tool result."""
    return result.content[0].text if result.content else ""


# =============================================================================
# Fake Ollama Backend
# =============================================================================


@dataclass
class FakeOllama:
    """Scriptable stand-in for the Ollama REST API.

    Attributes:
        models: Entries returned by /api/tags.
        replies: Response text per model for /api/generate.
        unreachable: Models whose generate call raises a connect error.
        statuses: Models whose generate call returns this HTTP status.
        delays: Seconds to wait before answering, per model.
        tags_body: Raw /api/tags body overriding ``models``.
        tags_status: HTTP status for /api/tags.
        tags_unreachable: Make /api/tags raise a connect error.
        calls: Recorded (path, json body) of every request.
    """

    models: list[dict[str, Any]] = field(default_factory=list)
    replies: dict[str, str] = field(default_factory=dict)
    unreachable: set[str] = field(default_factory=set)
    statuses: dict[str, int] = field(default_factory=dict)
    delays: dict[str, float] = field(default_factory=dict)
    tags_body: Any = None
    tags_status: int = 200
    tags_unreachable: bool = False
    calls: list[tuple[str, dict[str, Any] | None]] = field(default_factory=list)

    @property
    def generate_calls(self) -> list[dict[str, Any]]:
        return [body for path, body in self.calls if path == "/api/generate" and body]

    async def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.calls.append((request.url.path, body))

        if request.url.path == "/api/tags":
            if self.tags_unreachable:
                raise httpx.ConnectError("Connection refused", request=request)
            payload = self.tags_body if self.tags_body is not None else {"models": self.models}
            return httpx.Response(self.tags_status, json=payload)

        if request.url.path == "/api/generate":
            model = body["model"]
            if model in self.delays:
                await asyncio.sleep(self.delays[model])
            if model in self.unreachable:
                raise httpx.ConnectError("Connection refused", request=request)
            if model in self.statuses:
                return httpx.Response(self.statuses[model], json={"error": "boom"})
            if model not in self.replies:
                return httpx.Response(404, json={"error": f"model '{model}' not found"})
            return httpx.Response(
                200,
                json={
                    "model": model,
                    "created_at": "2024-01-01T00:00:00Z",
                    "response": self.replies[model],
                    "done": True,
                },
            )

        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_ollama() -> FakeOllama:
    """Backend with two models, both answering."""
    return FakeOllama(
        models=[
            {
                "name": MODEL_M1,
                "size": ONE_GIB,
                "details": {"parameter_size": "1B", "quantization_level": "Q4"},
            },
            {
                "name": MODEL_M2,
                "size": 2 * ONE_GIB,
                "details": {"parameter_size": "1.5B", "quantization_level": "Q8_0"},
            },
        ],
        replies={MODEL_M1: "A", MODEL_M2: "B"},
    )


@pytest.fixture
async def ollama_client(fake_ollama: FakeOllama) -> AsyncGenerator[OllamaClient, None]:
    """OllamaClient talking to the fake backend."""
    async with OllamaClient(TEST_BACKEND_URL, transport=fake_ollama.transport) as client:
        yield client


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at the fake backend, independent of the environment."""
    return Settings(
        _env_file=None,
        ollama_api_url=TEST_BACKEND_URL,
        default_models=[MODEL_M1, MODEL_M2],
        max_concurrent_requests=4,
    )


@pytest.fixture
def advisor(ollama_client: OllamaClient) -> ModelAdvisor:
    """Advisor with m1/m2 as defaults and a built-in prompt for m1."""
    return ModelAdvisor(
        client=ollama_client,
        default_models=[MODEL_M1, MODEL_M2],
        system_prompts={MODEL_M1: "You are the m1 default role."},
    )
