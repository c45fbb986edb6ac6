"""Async HTTP client for the Ollama inference backend.

Wraps the two backend endpoints the advisor depends on:
- GET  /api/tags      - list locally available models
- POST /api/generate  - one non-streaming completion

Every failure is mapped onto the advisor exception hierarchy:
- transport errors and timeouts -> BackendUnreachableError
- non-2xx status or a body carrying "error" -> BackendStatusError
- undecodable or ill-shaped bodies -> MalformedResponseError
"""

from __future__ import annotations

from types import TracebackType
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from multi_model_advisor.core.exceptions import (
    BackendStatusError,
    BackendUnreachableError,
    MalformedCatalogResponseError,
    MalformedResponseError,
)
from multi_model_advisor.observability.tracing import inject_trace_context


# =============================================================================
# Constants
# =============================================================================

TAGS_PATH = "/api/tags"
GENERATE_PATH = "/api/generate"
DEFAULT_TIMEOUT_SECONDS = 120.0


# =============================================================================
# Wire Models
# =============================================================================


class OllamaModelDetails(BaseModel):
    """The ``details`` object of a model in the /api/tags listing."""

    model_config = ConfigDict(extra="ignore")

    parameter_size: str | None = None
    quantization_level: str | None = None
    family: str | None = None
    format: str | None = None
    families: list[str] | None = None


class OllamaModel(BaseModel):
    """One model entry of the /api/tags listing.

    Only ``name`` is required; ``size`` and ``details`` may be absent or null.
    """

    model_config = ConfigDict(extra="ignore")

    name: str
    size: int | None = None
    modified_at: str | None = None
    digest: str | None = None
    details: OllamaModelDetails | None = None


class GenerateResponse(BaseModel):
    """Body of a non-streaming /api/generate reply."""

    model_config = ConfigDict(extra="ignore")

    model: str | None = None
    created_at: str | None = None
    response: str
    done: bool = True


# =============================================================================
# Client
# =============================================================================


class OllamaClient:
    """Thin async client over the Ollama REST API.

    A single httpx.AsyncClient is shared by all concurrent calls. Each call
    builds its own request body and reads its own response, so no state
    is shared between in-flight requests.

    Example:
        async with OllamaClient("http://localhost:11434") as client:
            models = await client.list_models()
            reply = await client.generate("gemma3:1b", "Hi", system="Be brief.")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Backend base URL, e.g. http://localhost:11434.
            timeout: Timeout in seconds applied to every request.
            transport: Optional transport override (tests use MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        """Backend base URL without trailing slash."""
        return self._base_url

    async def close(self) -> None:
        """Close the underlying connection pool."""
        await self._client.aclose()

    async def __aenter__(self) -> OllamaClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def list_models(self) -> list[OllamaModel]:
        """Fetch the models currently available on the backend.

        Returns:
            Parsed model entries in backend order.

        Raises:
            BackendUnreachableError: Backend could not be contacted.
            BackendStatusError: Backend returned a non-2xx status.
            MalformedCatalogResponseError: Body lacks a valid ``models`` array.
        """
        try:
            data = await self._request("GET", TAGS_PATH)
        except MalformedResponseError as e:
            raise MalformedCatalogResponseError(e.message) from e

        models = data.get("models") if isinstance(data, dict) else None
        if not isinstance(models, list):
            raise MalformedCatalogResponseError(
                "No models found or unexpected response format from Ollama API."
            )

        try:
            return [OllamaModel.model_validate(entry) for entry in models]
        except PydanticValidationError as e:
            raise MalformedCatalogResponseError(
                f"Unexpected model entry in Ollama listing: {e.error_count()} invalid field(s)"
            ) from e

    async def generate(self, model: str, prompt: str, system: str) -> GenerateResponse:
        """Run one non-streaming completion.

        Args:
            model: Model identifier, e.g. "gemma3:1b".
            prompt: User question.
            system: System prompt establishing the model's role.

        Returns:
            Parsed generate reply.

        Raises:
            BackendUnreachableError: Backend could not be contacted.
            BackendStatusError: Non-2xx status or backend-reported error.
            MalformedResponseError: Body is not a valid generate reply.
        """
        body = {
            "model": model,
            "prompt": prompt,
            "system": system,
            "stream": False,
        }
        data = await self._request("POST", GENERATE_PATH, json=body)

        if isinstance(data, dict) and data.get("error"):
            raise BackendStatusError(
                f"Ollama reported an error for {model}: {data['error']}",
                endpoint=GENERATE_PATH,
            )

        try:
            return GenerateResponse.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedResponseError(
                f"Unexpected generate response for {model}", endpoint=GENERATE_PATH
            ) from e

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _request(
        self, method: str, path: str, json: dict[str, Any] | None = None
    ) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            BackendUnreachableError: On timeouts and transport errors.
            BackendStatusError: On non-2xx responses.
            MalformedResponseError: If the body is not JSON.
        """
        url = f"{self._base_url}{path}"
        headers = inject_trace_context({"Content-Type": "application/json"})

        try:
            response = await self._client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            raise BackendUnreachableError(
                f"Request to {url} timed out", backend_url=self._base_url
            ) from e
        except httpx.HTTPError as e:
            raise BackendUnreachableError(
                f"Could not reach {url}: {e!s}", backend_url=self._base_url
            ) from e

        if response.is_error:
            raise BackendStatusError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
                endpoint=path,
            )

        try:
            return response.json()
        except ValueError as e:
            raise MalformedResponseError(
                f"Response from {url} is not valid JSON", endpoint=path
            ) from e
