"""multi-model-advisor: Ask several local models one question.

This package fans a question out to multiple Ollama-hosted models and
merges their answers into one composite document for a calling agent.
"""

__version__ = "1.0.0"
__all__ = ["__version__"]
