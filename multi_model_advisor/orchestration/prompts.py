"""System prompt resolution.

Precedence, first match wins:
1. non-empty per-model override for the target
2. non-empty global prompt
3. non-empty built-in default for the target
4. generic fallback prompt

An empty string counts as absent, so every model gets a role.
"""

from collections.abc import Mapping, Sequence


GENERIC_SYSTEM_PROMPT = "You are a helpful AI assistant answering a user's question."


def resolve_system_prompt(
    model: str,
    global_prompt: str | None = None,
    per_model_prompts: Mapping[str, str] | None = None,
    defaults: Mapping[str, str] | None = None,
) -> str:
    """Determine the system prompt to send to ``model``.

    Args:
        model: Target model identifier.
        global_prompt: Caller-supplied prompt for all models.
        per_model_prompts: Caller-supplied prompts keyed by model.
        defaults: Built-in role prompts keyed by model.

    Returns:
        The prompt text for this model.

    Example:
        >>> resolve_system_prompt("m1", "Be brief.", {"m1": "Be a poet."})
        'Be a poet.'
    """
    if per_model_prompts and per_model_prompts.get(model):
        return per_model_prompts[model]
    if global_prompt:
        return global_prompt
    if defaults and defaults.get(model):
        return defaults[model]
    return GENERIC_SYSTEM_PROMPT


def resolve_all(
    models: Sequence[str],
    global_prompt: str | None = None,
    per_model_prompts: Mapping[str, str] | None = None,
    defaults: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Resolve one prompt per target, keyed by model in target order."""
    return {
        model: resolve_system_prompt(model, global_prompt, per_model_prompts, defaults)
        for model in models
    }
