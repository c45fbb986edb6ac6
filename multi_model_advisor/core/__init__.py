"""Core configuration, logging and exceptions for multi-model-advisor."""

__all__: list[str] = []
