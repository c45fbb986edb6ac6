"""Request and response models for multi-model-advisor."""

__all__: list[str] = []
