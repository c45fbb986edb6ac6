"""Health check API routes for multi-model-advisor.

Provides liveness (/health) and readiness (/health/ready) endpoints.
Readiness reflects whether the advisor is wired; backend model health
is not probed here.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


# =============================================================================
# Constants
# =============================================================================

STATUS_OK = "ok"
STATUS_READY = "ready"
STATUS_NOT_READY = "not_ready"
REASON_NOT_INITIALIZED = "Advisor not initialized"


# =============================================================================
# Response Models
# =============================================================================


class HealthResponse(BaseModel):
    """Response model for /health liveness endpoint."""

    status: str = Field(default=STATUS_OK, examples=["ok"])
    service: str = Field(examples=["multi-model-advisor"])
    version: str = Field(examples=["1.0.0"])


class ReadinessResponse(BaseModel):
    """Response model for /health/ready readiness endpoint."""

    status: str = Field(examples=["ready", "not_ready"])
    backend_url: str | None = Field(default=None, examples=["http://localhost:11434"])
    default_models: list[str] = Field(default_factory=list)
    reason: str | None = None


# =============================================================================
# Router
# =============================================================================

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    """Liveness probe: 200 whenever the process is serving."""
    return HealthResponse(
        service=getattr(request.app.state, "service_name", "multi-model-advisor"),
        version=getattr(request.app.state, "service_version", "unknown"),
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    responses={503: {"model": ReadinessResponse}},
)
async def readiness(request: Request) -> ReadinessResponse | JSONResponse:
    """Readiness probe: 200 once the advisor is wired, else 503."""
    advisor = getattr(request.app.state, "advisor", None)
    if advisor is None:
        body = ReadinessResponse(status=STATUS_NOT_READY, reason=REASON_NOT_INITIALIZED)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=body.model_dump(),
        )

    return ReadinessResponse(
        status=STATUS_READY,
        backend_url=getattr(request.app.state, "backend_url", None),
        default_models=list(advisor.default_models),
    )
