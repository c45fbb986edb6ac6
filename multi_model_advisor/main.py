"""FastAPI application entrypoint for multi-model-advisor.

Patterns applied:
- asynccontextmanager lifespan (modern FastAPI pattern, not deprecated @app.on_event)
- configure_logging() called ONCE in lifespan startup
- Settings read once and shared read-only through app.state
- Docs disabled in production
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from multi_model_advisor.api.error_handlers import register_exception_handlers
from multi_model_advisor.api.routes.health import router as health_router
from multi_model_advisor.api.routes.tools import router as tools_router
from multi_model_advisor.backends.ollama import OllamaClient
from multi_model_advisor.core.config import Settings, get_settings
from multi_model_advisor.core.logging import configure_logging, get_logger, preview
from multi_model_advisor.observability.tracing import (
    TracingMiddleware,
    setup_tracing,
    shutdown_tracing,
)
from multi_model_advisor.orchestration.advisor import ModelAdvisor


# =============================================================================
# Application Metadata
# =============================================================================
APP_DESCRIPTION = "Ask several local Ollama models one question and compare their answers"
HEALTH_PATHS = ["/health", "/health/ready"]


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        transport: Optional httpx transport for the backend client (tests).

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan - startup and shutdown events.

        Args:
            app: FastAPI application instance.

        Yields:
            None after startup, before shutdown.
        """
        # =====================================================================
        # STARTUP
        # =====================================================================
        configure_logging(level=settings.effective_log_level)
        logger = get_logger(__name__)

        if settings.tracing_enabled:
            setup_tracing(
                settings.service_name,
                settings.otlp_endpoint,
                service_version=settings.service_version,
            )

        client = OllamaClient(
            settings.ollama_api_url,
            timeout=settings.request_timeout_seconds,
            transport=transport,
        )
        app.state.advisor = ModelAdvisor.from_settings(settings, client)
        app.state.backend_url = client.base_url

        logger.info(
            "Application starting",
            service=settings.service_name,
            version=settings.service_version,
            environment=settings.environment,
            backend_url=client.base_url,
            default_models=settings.default_models,
        )
        if settings.debug:
            logger.debug("Debug mode enabled")
            for model, prompt in settings.system_prompts.items():
                logger.debug("Default system prompt", model=model, prompt=preview(prompt))

        yield

        # =====================================================================
        # SHUTDOWN
        # =====================================================================
        logger.info("Application shutting down", service=settings.service_name)
        app.state.advisor = None
        await client.close()
        if settings.tracing_enabled:
            shutdown_tracing()

    app = FastAPI(
        title=settings.service_name,
        description=APP_DESCRIPTION,
        version=settings.service_version,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.service_name = settings.service_name
    app.state.service_version = settings.service_version
    app.state.advisor = None

    app.include_router(health_router)
    app.include_router(tools_router, prefix="/v1")

    register_exception_handlers(app)

    if settings.tracing_enabled:
        app.add_middleware(TracingMiddleware, exclude_paths=HEALTH_PATHS)

    return app
