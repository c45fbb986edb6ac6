"""API route handlers for multi-model-advisor.

Routes:
- tools: /v1/tools, /v1/tools/list-available-models, /v1/tools/query-models
- health: /health, /health/ready
"""

__all__: list[str] = []
