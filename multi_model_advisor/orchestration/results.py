"""Per-model results of a query batch.

Each target yields exactly one result: a ModelSuccess or a ModelFailure.
Both record the system prompt that was sent so the aggregator can label
every section with its role.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelSuccess:
    """A model answered.

    Attributes:
        model: Model identifier.
        system_prompt: Resolved system prompt sent with the request.
        response_text: Full response text.
    """

    model: str
    system_prompt: str
    response_text: str

    @property
    def failed(self) -> bool:
        return False


@dataclass(frozen=True)
class ModelFailure:
    """A model could not produce an answer.

    Attributes:
        model: Model identifier.
        system_prompt: Resolved system prompt that was sent.
        reason: Internal failure description (logged, not shown to callers).
    """

    model: str
    system_prompt: str
    reason: str

    @property
    def failed(self) -> bool:
        return True

    @property
    def response_text(self) -> str:
        """Placeholder shown in place of an answer."""
        return failure_placeholder(self.model)


ModelResult = ModelSuccess | ModelFailure

# Ordered like the requested targets, not by completion time
QueryBatch = list[ModelResult]


def failure_placeholder(model: str) -> str:
    """Human-readable text standing in for a failed model's answer."""
    return (
        f"Error: Could not get response from {model}. "
        "Make sure this model is available in Ollama."
    )
