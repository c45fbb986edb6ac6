"""HTTP API for multi-model-advisor."""

__all__: list[str] = []
