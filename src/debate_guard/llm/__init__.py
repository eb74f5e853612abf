from .client import CompletionService, LiteLLMCompletionService, NoopCompletionService

__all__ = [
    "CompletionService",
    "LiteLLMCompletionService",
    "NoopCompletionService",
]
