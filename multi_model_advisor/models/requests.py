"""Request models for the advisor operations."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class QueryModelsRequest(BaseModel):
    """Arguments of the ``query-models`` operation.

    Attributes:
        question: The question to ask all models.
        models: Models to query; the configured defaults when omitted or empty.
        system_prompt: Prompt for every model without a per-model override.
        model_system_prompts: Per-model prompts; win over ``system_prompt``.
    """

    model_config = ConfigDict(extra="forbid")

    question: str = Field(
        description="The question to ask all models",
        examples=["Should I learn Rust or Go first?"],
    )
    models: list[str] | None = Field(
        default=None,
        description="Array of model names to query (defaults to configured models)",
        examples=[["gemma3:1b", "llama3.2:1b"]],
    )
    system_prompt: str | None = Field(
        default=None,
        description=(
            "Optional system prompt to provide context to all models "
            "(overridden by model_system_prompts if provided)"
        ),
    )
    model_system_prompts: dict[str, str] | None = Field(
        default=None,
        description="Optional object mapping model names to specific system prompts",
    )
