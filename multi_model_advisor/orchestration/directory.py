"""Endpoint directory - which models does the backend have right now?

Nothing is cached: models can be pulled or removed outside this service,
so every listing re-queries the backend.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from multi_model_advisor.backends.ollama import (
    OllamaClient,
    OllamaModel,
    OllamaModelDetails,
)


# =============================================================================
# Constants
# =============================================================================

BYTES_PER_GB = 1024**3
UNKNOWN = "Unknown"

AVAILABLE_MARK = "✓ Available"
MISSING_MARK = "⚠️ Not available"

USAGE_HINT = (
    "You can use any of the available models with the query-models tool "
    "by specifying them in the 'models' parameter."
)


@dataclass(frozen=True)
class ModelCatalogEntry:
    """A model reported by the backend listing.

    Attributes:
        name: Model identifier.
        size_bytes: On-disk size in bytes.
        parameter_size: Parameter count label, e.g. "1B".
        quantization_level: Quantization label, e.g. "Q4_K_M".
    """

    name: str
    size_bytes: int
    parameter_size: str = UNKNOWN
    quantization_level: str = UNKNOWN

    @property
    def size_gb(self) -> float:
        """Size in GiB."""
        return self.size_bytes / BYTES_PER_GB

    @classmethod
    def from_ollama(cls, model: OllamaModel) -> ModelCatalogEntry:
        """Build an entry from a backend listing item."""
        details = model.details or OllamaModelDetails()
        return cls(
            name=model.name,
            size_bytes=model.size or 0,
            parameter_size=details.parameter_size or UNKNOWN,
            quantization_level=details.quantization_level or UNKNOWN,
        )


class EndpointDirectory:
    """Lists backend models and checks them against the configured defaults."""

    def __init__(self, client: OllamaClient) -> None:
        self._client = client

    async def list_available(self) -> list[ModelCatalogEntry]:
        """Query the backend for its current models.

        Raises:
            BackendUnreachableError: Backend could not be contacted.
            BackendStatusError: Backend returned a non-2xx status.
            MalformedCatalogResponseError: Listing body is ill-shaped.
        """
        models = await self._client.list_models()
        return [ModelCatalogEntry.from_ollama(m) for m in models]


def annotate_defaults(
    catalog: Sequence[ModelCatalogEntry],
    defaults: Sequence[str],
) -> dict[str, bool]:
    """Map each configured default model to whether the catalog has it."""
    present = {entry.name for entry in catalog}
    return {model: model in present for model in defaults}


def format_catalog(
    catalog: Sequence[ModelCatalogEntry],
    availability: Mapping[str, bool],
) -> str:
    """Render the listing and default-model availability as markdown."""
    model_lines = "\n".join(
        f"- **{entry.name}**: {entry.parameter_size} parameters, "
        f"{entry.size_gb:.2f} GB, {entry.quantization_level} quantization"
        for entry in catalog
    )
    default_lines = "\n".join(
        f"- **{model}**: {AVAILABLE_MARK if available else MISSING_MARK}"
        for model, available in availability.items()
    )
    return (
        f"# Available Ollama Models\n\n{model_lines}\n\n"
        f"## Current Default Models\n\n{default_lines}\n\n{USAGE_HINT}"
    )
