"""Core configuration module for multi-model-advisor.

Loads settings from ADVISOR_* prefixed environment variables using Pydantic Settings.

Patterns applied:
- pydantic-settings BaseSettings with env_prefix for namespace isolation
- frozen model: configuration is read once at startup and never mutated
- @field_validator + @classmethod (Pydantic v2 pattern)
- @lru_cache for singleton pattern
"""

from functools import lru_cache
from types import MappingProxyType
from typing import Annotated, Literal

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode

from multi_model_advisor.core.exceptions import ConfigurationError


# =============================================================================
# Well-known models with built-in role prompts
# =============================================================================
GEMMA_MODEL = "gemma3:1b"
QWEN_MODEL = "qwen2.5:1.5b-8k"
DEEPSEEK_MODEL = "deepseek-r1:1.5b-8k"

DEFAULT_MODELS = ["gemma3:1b", "llama3.2:1b", "deepseek-r1:1.5b"]


class Settings(BaseSettings):
    """Application settings loaded from ADVISOR_* environment variables.

    All environment variables must be prefixed with ADVISOR_.
    Example: ADVISOR_OLLAMA_API_URL=http://gpu-box:11434, ADVISOR_DEBUG=true

    Attributes:
        service_name: Service identifier for logging and discovery.
        service_version: Version string reported by the service.
        port: HTTP port (1-65535). Default: 8090.
        host: Bind address. Default: 127.0.0.1.
        environment: Deployment environment. Default: development.
        log_level: Logging verbosity. Default: INFO.
        debug: Force DEBUG logging. Default: False.
        ollama_api_url: Base URL of the Ollama backend.
        default_models: Models queried when a request names none.
        request_timeout_seconds: Timeout applied to every backend call.
        max_concurrent_requests: Cap on simultaneous backend calls per batch.
    """

    # =========================================================================
    # Core Settings
    # =========================================================================
    service_name: str = Field(
        default="multi-model-advisor",
        description="Service name for identification",
    )
    service_version: str = Field(
        default="1.0.0",
        description="Service version string",
    )
    port: int = Field(
        default=8090,
        ge=1,
        le=65535,
        description="HTTP server port",
    )
    host: str = Field(
        default="127.0.0.1",
        description="HTTP server bind address",
    )
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug logging regardless of log_level",
    )

    # =========================================================================
    # Backend Configuration
    # =========================================================================
    ollama_api_url: str = Field(
        default="http://localhost:11434",
        description="Base URL of the Ollama inference backend",
    )
    default_models: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_MODELS),
        description="Comma-separated models queried when none are requested",
    )
    request_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Timeout in seconds for each backend request",
    )
    max_concurrent_requests: int = Field(
        default=4,
        ge=1,
        description="Maximum number of backend requests in flight per batch",
    )

    # =========================================================================
    # Role Prompts
    # =========================================================================
    gemma_system_prompt: str = Field(
        default=(
            "You are a creative and innovative AI assistant. "
            "Think outside the box and offer novel perspectives."
        ),
        description=f"Default system prompt for {GEMMA_MODEL}",
    )
    qwen_system_prompt: str = Field(
        default=(
            "You are a supportive and empathetic AI assistant focused on human "
            "well-being. Provide considerate and balanced advice."
        ),
        description=f"Default system prompt for {QWEN_MODEL}",
    )
    deepseek_system_prompt: str = Field(
        default=(
            "You are a logical and analytical AI assistant. "
            "Think step-by-step and explain your reasoning clearly."
        ),
        description=f"Default system prompt for {DEEPSEEK_MODEL}",
    )

    # =========================================================================
    # Observability
    # =========================================================================
    tracing_enabled: bool = Field(
        default=False,
        description="Enable OpenTelemetry tracing",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        description="OTLP gRPC endpoint; console exporter is used when unset",
    )

    # =========================================================================
    # Pydantic v2 Model Configuration
    # =========================================================================
    model_config = {
        "env_prefix": "ADVISOR_",
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
        "frozen": True,
    }

    # =========================================================================
    # Validators (Pydantic v2 pattern: @field_validator + @classmethod)
    # =========================================================================
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level to uppercase.

        Args:
            v: Input log level string.

        Returns:
            Normalized uppercase log level.

        Raises:
            ValueError: If log level is not valid.
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        normalized = v.upper()
        if normalized not in valid_levels:
            msg = f"log_level must be one of {valid_levels}, got '{v}'"
            raise ValueError(msg)
        return normalized

    @field_validator("ollama_api_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Drop trailing slashes so endpoint paths can be appended."""
        return v.rstrip("/")

    @field_validator("default_models", mode="before")
    @classmethod
    def split_default_models(cls, v: object) -> object:
        """Accept a comma-separated string as well as a list.

        Raises:
            ValueError: If no model names remain after splitting.
        """
        if isinstance(v, str):
            v = v.split(",")
        if isinstance(v, (list, tuple)):
            models = [str(m).strip() for m in v if str(m).strip()]
            if not models:
                raise ValueError("default_models must name at least one model")
            return models
        return v

    # =========================================================================
    # Derived values
    # =========================================================================
    @property
    def effective_log_level(self) -> str:
        """Log level after applying the debug toggle."""
        return "DEBUG" if self.debug else self.log_level

    @property
    def system_prompts(self) -> MappingProxyType[str, str]:
        """Read-only map of built-in role prompts keyed by model."""
        return MappingProxyType(
            {
                GEMMA_MODEL: self.gemma_system_prompt,
                QWEN_MODEL: self.qwen_system_prompt,
                DEEPSEEK_MODEL: self.deepseek_system_prompt,
            }
        )


@lru_cache
def get_settings() -> Settings:
    """Get singleton Settings instance.

    Uses @lru_cache to ensure only one instance is created.

    Returns:
        Cached Settings instance.

    Raises:
        ConfigurationError: An ADVISOR_* variable is invalid. ``setting``
            names the first offending field.
    """
    try:
        return Settings()
    except ValidationError as e:
        first = e.errors()[0]
        setting = ".".join(str(part) for part in first["loc"]) or None
        raise ConfigurationError(
            f"Invalid configuration: {e.error_count()} error(s), first: "
            f"{setting}: {first['msg']}",
            setting=setting,
        ) from e
