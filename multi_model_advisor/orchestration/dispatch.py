"""Dispatch coordinator - one request per model, all in parallel.

Flow:
    Question → [All targets](parallel, bounded) → QueryBatch

Each target runs in its own guarded coroutine that always returns a
result variant, so a failing model never aborts its siblings. The join
waits for every target to settle. Cancelling the caller cancels every
in-flight target; cancellation is never turned into a failure result.
"""

import asyncio
from collections.abc import Mapping, Sequence

from multi_model_advisor.backends.ollama import OllamaClient
from multi_model_advisor.core.exceptions import AdvisorServiceError
from multi_model_advisor.core.logging import get_logger, preview
from multi_model_advisor.observability.tracing import get_tracer
from multi_model_advisor.orchestration.results import (
    ModelFailure,
    ModelResult,
    ModelSuccess,
    QueryBatch,
)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_MAX_CONCURRENT = 4

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class DispatchCoordinator:
    """Scatter a question to several models and gather one result each.

    Attributes:
        client: Backend client used for every generate call.
        max_concurrent: Cap on simultaneous backend calls within a batch.

    Example:
        coordinator = DispatchCoordinator(client, max_concurrent=4)
        batch = await coordinator.dispatch_all(
            "Why is the sky blue?",
            ["gemma3:1b", "llama3.2:1b"],
            {"gemma3:1b": "Be creative.", "llama3.2:1b": "Be precise."},
        )
    """

    def __init__(
        self,
        client: OllamaClient,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: Backend client.
            max_concurrent: Maximum backend calls in flight per batch (min 1).

        Raises:
            ValueError: If max_concurrent is below 1.
        """
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be >= 1, got {max_concurrent}")
        self._client = client
        self._max_concurrent = max_concurrent

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def client(self) -> OllamaClient:
        """Get the backend client."""
        return self._client

    @property
    def max_concurrent(self) -> int:
        """Get the per-batch concurrency cap."""
        return self._max_concurrent

    # -------------------------------------------------------------------------
    # Main Execution
    # -------------------------------------------------------------------------

    async def dispatch_all(
        self,
        question: str,
        targets: Sequence[str],
        prompts: Mapping[str, str],
    ) -> QueryBatch:
        """Query every target concurrently and collect one result per target.

        Args:
            question: User question sent as the prompt.
            targets: Models to query, in output order.
            prompts: Resolved system prompt per target.

        Returns:
            One result per target, in ``targets`` order.
        """
        logger.debug("Dispatching batch", models=list(targets))

        # A fresh semaphore per batch: batches never throttle each other
        slots = asyncio.Semaphore(self._max_concurrent)
        tasks = [
            self._dispatch_one(question, model, prompts[model], slots)
            for model in targets
        ]
        results = await asyncio.gather(*tasks)
        return list(results)

    async def _dispatch_one(
        self,
        question: str,
        model: str,
        system_prompt: str,
        slots: asyncio.Semaphore,
    ) -> ModelResult:
        """Run a single target and map its outcome to a result variant."""
        with tracer.start_as_current_span(f"dispatch {model}") as span:
            span.set_attribute("advisor.model", model)
            logger.debug(
                "Querying model",
                model=model,
                system_prompt=preview(system_prompt),
            )

            try:
                async with slots:
                    reply = await self._client.generate(model, question, system_prompt)
            except AdvisorServiceError as e:
                logger.warning(
                    "Model query failed",
                    model=model,
                    error_code=e.error_code,
                    reason=e.message,
                )
                span.set_attribute("advisor.failed", True)
                return ModelFailure(model=model, system_prompt=system_prompt, reason=e.message)
            except Exception as e:
                logger.exception("Unexpected error querying model", model=model)
                span.record_exception(e)
                span.set_attribute("advisor.failed", True)
                return ModelFailure(model=model, system_prompt=system_prompt, reason=str(e))

            span.set_attribute("advisor.failed", False)
            return ModelSuccess(
                model=model,
                system_prompt=system_prompt,
                response_text=reply.response,
            )
