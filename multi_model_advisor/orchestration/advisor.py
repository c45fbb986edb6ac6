"""ModelAdvisor - entry point for the two advisor operations.

- list_available_models: backend catalog + default model availability
- query_models: resolve prompts → dispatch all → aggregate

Both operations catch advisor errors at their boundary and return them
as error results, so a failure reaches the caller as readable text and
never takes the process down.
"""

from collections.abc import Mapping, Sequence

from multi_model_advisor.backends.ollama import OllamaClient
from multi_model_advisor.core.config import Settings
from multi_model_advisor.core.exceptions import (
    AdvisorServiceError,
    InvalidRequestError,
    MalformedCatalogResponseError,
)
from multi_model_advisor.core.logging import get_logger, new_correlation_id
from multi_model_advisor.models.requests import QueryModelsRequest
from multi_model_advisor.models.responses import ToolDescriptor, ToolResult
from multi_model_advisor.orchestration.aggregator import format_batch
from multi_model_advisor.orchestration.directory import (
    EndpointDirectory,
    annotate_defaults,
    format_catalog,
)
from multi_model_advisor.orchestration.dispatch import DispatchCoordinator
from multi_model_advisor.orchestration.prompts import resolve_all


logger = get_logger(__name__)


# =============================================================================
# Operation Names
# =============================================================================

LIST_MODELS_TOOL = ToolDescriptor(
    name="list-available-models",
    description="List all available models in Ollama that can be used with query-models",
)
QUERY_MODELS_TOOL = ToolDescriptor(
    name="query-models",
    description=(
        "Query multiple AI models via Ollama and get their responses "
        "to compare perspectives"
    ),
)
TOOLS = [LIST_MODELS_TOOL, QUERY_MODELS_TOOL]

MALFORMED_CATALOG_TEXT = "No models found or unexpected response format from Ollama API."


class ModelAdvisor:
    """Runs the advisor operations against one backend.

    Attributes:
        default_models: Models queried when a request names none.
        system_prompts: Built-in role prompts keyed by model (read-only).

    Example:
        settings = get_settings()
        client = OllamaClient(settings.ollama_api_url)
        advisor = ModelAdvisor.from_settings(settings, client)
        result = await advisor.query_models(QueryModelsRequest(question="Hi"))
    """

    def __init__(
        self,
        client: OllamaClient,
        default_models: Sequence[str],
        system_prompts: Mapping[str, str],
        max_concurrent: int = 4,
    ) -> None:
        self._client = client
        self._default_models = tuple(default_models)
        self._system_prompts = system_prompts
        self._directory = EndpointDirectory(client)
        self._coordinator = DispatchCoordinator(client, max_concurrent=max_concurrent)

    @classmethod
    def from_settings(cls, settings: Settings, client: OllamaClient) -> "ModelAdvisor":
        """Build an advisor from application settings."""
        return cls(
            client=client,
            default_models=settings.default_models,
            system_prompts=settings.system_prompts,
            max_concurrent=settings.max_concurrent_requests,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def default_models(self) -> tuple[str, ...]:
        """Get the configured default models."""
        return self._default_models

    @property
    def system_prompts(self) -> Mapping[str, str]:
        """Get the built-in role prompts."""
        return self._system_prompts

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    async def list_available_models(self) -> ToolResult:
        """List backend models and report which defaults are present.

        Returns:
            ToolResult with the catalog document, or an error result.
        """
        new_correlation_id()
        try:
            catalog = await self._directory.list_available()
        except MalformedCatalogResponseError as e:
            logger.error("Malformed model listing", reason=e.message)
            return ToolResult.error(MALFORMED_CATALOG_TEXT)
        except AdvisorServiceError as e:
            logger.error("Error listing models", error_code=e.error_code, reason=e.message)
            return ToolResult.error(
                f"Error listing models: {e.message}\n\n"
                f"Make sure Ollama is running and accessible at {self._client.base_url}."
            )

        availability = annotate_defaults(catalog, self._default_models)
        return ToolResult.text(format_catalog(catalog, availability))

    async def query_models(self, request: QueryModelsRequest) -> ToolResult:
        """Ask every target model the question and merge the answers.

        Args:
            request: Question, optional targets and optional prompt overrides.

        Returns:
            ToolResult with the composite document, or an error result when
            the request is invalid.
        """
        new_correlation_id()
        try:
            targets = self.resolve_targets(request)
        except InvalidRequestError as e:
            logger.info("Rejected query", field=e.field, reason=e.message)
            return ToolResult.error(f"Invalid request: {e.message}")

        logger.debug("Using models", models=targets)
        prompts = resolve_all(
            targets,
            global_prompt=request.system_prompt,
            per_model_prompts=request.model_system_prompts,
            defaults=self._system_prompts,
        )

        try:
            batch = await self._coordinator.dispatch_all(request.question, targets, prompts)
        except AdvisorServiceError as e:
            logger.error("Error in query-models", error_code=e.error_code, reason=e.message)
            return ToolResult.error(f"Error querying models: {e.message}")

        failed = sum(1 for result in batch if result.failed)
        logger.info("Query complete", models=len(batch), failed=failed)
        return ToolResult.text(format_batch(batch))

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def resolve_targets(self, request: QueryModelsRequest) -> list[str]:
        """Validate a request and return the models to query.

        Raises:
            InvalidRequestError: Empty question or duplicate model names.
        """
        if not request.question or not request.question.strip():
            raise InvalidRequestError(
                "question is required and must not be empty",
                field="question",
                value=request.question,
            )

        targets = list(request.models) if request.models else list(self._default_models)

        duplicates = sorted({m for m in targets if targets.count(m) > 1})
        if duplicates:
            raise InvalidRequestError(
                f"models must be unique, got duplicates: {', '.join(duplicates)}",
                field="models",
                value=targets,
            )
        return targets
