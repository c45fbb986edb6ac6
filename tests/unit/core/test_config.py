"""Tests for core configuration module.

Tests verify:
- Settings defaults
- ADVISOR_* environment variables are loaded and validated
- Settings are immutable after construction
"""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from multi_model_advisor.core.config import (
    DEEPSEEK_MODEL,
    DEFAULT_MODELS,
    GEMMA_MODEL,
    QWEN_MODEL,
    Settings,
    get_settings,
)
from multi_model_advisor.core.exceptions import ConfigurationError


def load(env: dict[str, str]) -> Settings:
    """Build Settings from exactly ``env``, ignoring any .env file."""
    with patch.dict(os.environ, env, clear=True):
        return Settings(_env_file=None)


class TestSettingsDefaults:
    """Test Settings class default values."""

    def test_default_backend_url(self) -> None:
        assert load({}).ollama_api_url == "http://localhost:11434"

    def test_default_models(self) -> None:
        assert load({}).default_models == DEFAULT_MODELS

    def test_default_service_identity(self) -> None:
        settings = load({})
        assert settings.service_name == "multi-model-advisor"
        assert settings.service_version == "1.0.0"

    def test_default_log_level_is_info(self) -> None:
        assert load({}).log_level == "INFO"

    def test_debug_off_by_default(self) -> None:
        settings = load({})
        assert settings.debug is False
        assert settings.effective_log_level == "INFO"

    def test_default_timeout_and_fan_out(self) -> None:
        settings = load({})
        assert settings.request_timeout_seconds == 120.0
        assert settings.max_concurrent_requests == 4

    def test_default_system_prompts(self) -> None:
        prompts = load({}).system_prompts
        assert set(prompts) == {GEMMA_MODEL, QWEN_MODEL, DEEPSEEK_MODEL}
        assert "creative" in prompts[GEMMA_MODEL]
        assert "empathetic" in prompts[QWEN_MODEL]
        assert "step-by-step" in prompts[DEEPSEEK_MODEL]


class TestSettingsEnvironmentVariables:
    """Test Settings loads from ADVISOR_* prefixed environment variables."""

    def test_loads_backend_url_and_strips_slash(self) -> None:
        settings = load({"ADVISOR_OLLAMA_API_URL": "http://gpu:11434/"})
        assert settings.ollama_api_url == "http://gpu:11434"

    def test_default_models_from_comma_list(self) -> None:
        settings = load({"ADVISOR_DEFAULT_MODELS": "a:1b, b:2b,,c"})
        assert settings.default_models == ["a:1b", "b:2b", "c"]

    def test_blank_default_models_rejected(self) -> None:
        with pytest.raises(ValidationError):
            load({"ADVISOR_DEFAULT_MODELS": " , "})

    def test_prompt_override_from_env(self) -> None:
        settings = load({"ADVISOR_GEMMA_SYSTEM_PROMPT": "Be a pirate."})
        assert settings.system_prompts[GEMMA_MODEL] == "Be a pirate."

    def test_debug_forces_debug_level(self) -> None:
        settings = load({"ADVISOR_DEBUG": "true", "ADVISOR_LOG_LEVEL": "warning"})
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "DEBUG"

    def test_unprefixed_variables_ignored(self) -> None:
        assert load({"OLLAMA_API_URL": "http://elsewhere"}).ollama_api_url == (
            "http://localhost:11434"
        )


class TestSettingsValidation:
    """Invalid configuration fails at startup with a clear error."""

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError, match="log_level"):
            load({"ADVISOR_LOG_LEVEL": "VERBOSE"})

    def test_invalid_port(self) -> None:
        with pytest.raises(ValidationError):
            load({"ADVISOR_PORT": "70000"})

    def test_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            load({"ADVISOR_REQUEST_TIMEOUT_SECONDS": "0"})

    def test_zero_concurrency(self) -> None:
        with pytest.raises(ValidationError):
            load({"ADVISOR_MAX_CONCURRENT_REQUESTS": "0"})


class TestSettingsImmutability:
    """Settings are read-only once built."""

    def test_fields_cannot_be_reassigned(self) -> None:
        settings = load({})
        with pytest.raises(ValidationError):
            settings.ollama_api_url = "http://changed"  # type: ignore[misc]

    def test_system_prompts_are_read_only(self) -> None:
        prompts = load({}).system_prompts
        with pytest.raises(TypeError):
            prompts[GEMMA_MODEL] = "changed"  # type: ignore[index]


class TestGetSettings:
    """get_settings returns a cached singleton."""

    def test_returns_same_instance(self) -> None:
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_invalid_environment_raises_configuration_error(self) -> None:
        get_settings.cache_clear()
        try:
            with patch.dict(os.environ, {"ADVISOR_REQUEST_TIMEOUT_SECONDS": "0"}, clear=True):
                with pytest.raises(ConfigurationError) as exc_info:
                    get_settings()
        finally:
            get_settings.cache_clear()

        assert exc_info.value.setting == "request_timeout_seconds"
        assert exc_info.value.error_code == "CONFIGURATION_ERROR"
        assert isinstance(exc_info.value.__cause__, ValidationError)
