"""Tool API routes exposing the advisor operations.

- GET  /v1/tools                        - operation catalogue
- POST /v1/tools/list-available-models  - backend model listing
- POST /v1/tools/query-models           - fan a question out to models

Operation failures come back as 200 with ``isError: true`` so the calling
agent can read and relay them.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request, status

from multi_model_advisor.models.requests import QueryModelsRequest
from multi_model_advisor.models.responses import ToolDescriptor, ToolResult
from multi_model_advisor.orchestration.advisor import TOOLS, ModelAdvisor


# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(prefix="/tools", tags=["tools"])


# =============================================================================
# Helper Functions
# =============================================================================


def _get_advisor(request: Request) -> ModelAdvisor:
    """Get the advisor from app state or raise 503.

    Raises:
        HTTPException: 503 if the advisor is not initialized
    """
    advisor: ModelAdvisor | None = getattr(request.app.state, "advisor", None)
    if advisor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Advisor not initialized",
        )
    return advisor


# =============================================================================
# Endpoints
# =============================================================================


@router.get(
    "",
    response_model=list[ToolDescriptor],
    summary="List operations",
)
async def list_tools() -> list[ToolDescriptor]:
    """Return the names and descriptions of the advisor operations."""
    return TOOLS


@router.post(
    "/list-available-models",
    response_model=ToolResult,
    summary="List available models",
    description="List all available models in Ollama that can be used with query-models.",
)
async def list_available_models(request: Request) -> ToolResult:
    """Report backend models and which configured defaults are present."""
    return await _get_advisor(request).list_available_models()


@router.post(
    "/query-models",
    response_model=ToolResult,
    summary="Query multiple models",
    description=(
        "Query multiple AI models via Ollama and get their responses "
        "to compare perspectives."
    ),
    responses={
        422: {"description": "Malformed request body"},
        503: {"description": "Advisor not initialized"},
    },
)
async def query_models(request: Request, query: QueryModelsRequest) -> ToolResult:
    """Ask each model the question and return the composite document."""
    return await _get_advisor(request).query_models(query)
