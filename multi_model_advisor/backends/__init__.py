"""Inference backend clients for multi-model-advisor."""

from multi_model_advisor.backends.ollama import (
    GenerateResponse,
    OllamaClient,
    OllamaModel,
    OllamaModelDetails,
)

__all__ = [
    "GenerateResponse",
    "OllamaClient",
    "OllamaModel",
    "OllamaModelDetails",
]
