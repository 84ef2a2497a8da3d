"""Completion service clients."""

from .provider import (
    CompletionProvider,
    MockCompletionProvider,
    OpenAICompletionProvider,
    get_completion_provider,
)

__all__ = [
    "CompletionProvider",
    "MockCompletionProvider",
    "OpenAICompletionProvider",
    "get_completion_provider",
]
