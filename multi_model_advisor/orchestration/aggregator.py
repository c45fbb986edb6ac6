"""Response aggregation - merge a query batch into one composite document.

The aggregator only lays answers side by side. Scoring, reconciling or
synthesizing the viewpoints is left to whoever reads the document.
"""

from multi_model_advisor.orchestration.results import QueryBatch


# =============================================================================
# Constants
# =============================================================================

ROLE_PREVIEW_LIMIT = 100
ELLIPSIS = "..."

DOCUMENT_HEADING = "# Responses from Multiple Models"

CLOSING_NOTE = (
    "Consider the perspectives above when formulating your response. "
    "You may agree or disagree with any of these models. "
    "Note that these are all compact 1-1.5B parameter models, "
    "so take that into account when evaluating their responses."
)


def role_preview(system_prompt: str, limit: int = ROLE_PREVIEW_LIMIT) -> str:
    """Truncate a system prompt for display.

    Example:
        >>> role_preview("x" * 120)[-3:]
        '...'
    """
    if len(system_prompt) > limit:
        return f"{system_prompt[:limit]}{ELLIPSIS}"
    return system_prompt


def format_batch(batch: QueryBatch) -> str:
    """Render a batch as a markdown document, one section per model.

    Sections keep batch order. Each carries the model name, a role line
    previewing the system prompt, and the answer or failure placeholder.
    A fixed advisory note closes the document.

    Args:
        batch: Results in target order.

    Returns:
        Composite document text.
    """
    sections: list[str] = []
    for result in batch:
        role = f"*Role: {role_preview(result.system_prompt)}*\n\n" if result.system_prompt else ""
        sections.append(
            f"## {result.model.upper()} RESPONSE:\n{role}{result.response_text}\n\n"
        )

    return f"{DOCUMENT_HEADING}\n\n{''.join(sections)}\n\n{CLOSING_NOTE}"
