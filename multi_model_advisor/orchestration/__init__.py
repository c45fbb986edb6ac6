"""Multi-model orchestration for multi-model-advisor.

Modules:
- prompts: system prompt resolution
- dispatch: DispatchCoordinator, parallel per-model requests
- results: ModelSuccess / ModelFailure variants
- aggregator: composite document formatting
- directory: EndpointDirectory, backend model catalog
- advisor: ModelAdvisor, the two public operations
"""

__all__: list[str] = []
