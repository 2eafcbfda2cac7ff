"""LLM Provider abstraction layer.

This package provides a unified interface for the chat-completion endpoints
the analyzer sends prompts to.
"""

from .base import (
    GenerateResult,
    LLMProvider,
)
from .openai import OpenAIProvider

__all__ = [
    "LLMProvider",
    "GenerateResult",
    "OpenAIProvider",
]
