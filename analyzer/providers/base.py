"""Base provider interface for LLM providers.

This module defines the abstract base class and result type that every LLM
integration used by the analyzer must implement.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class GenerateResult:
    """Result from a completion/generation request.

    Attributes:
        content: Generated text content
        model: Model name that was used
        provider: Provider that generated the response
        metadata: Additional response metadata (tokens, finish reason, etc.)
    """
    content: str
    model: str
    provider: str
    metadata: Dict[str, Any] = field(default_factory=dict)


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if provider is configured.

        Returns:
            True if provider can be used, False otherwise.

        Note:
            This should be a lightweight, offline check (e.g., verify an API key
            exists). It must not issue a completion request.
        """
        pass

    @abstractmethod
    def get_unavailable_reason(self) -> Optional[str]:
        """Get human-readable reason why provider is unavailable.

        Returns:
            None if available, otherwise a message such as a missing API key hint.
        """
        pass

    @abstractmethod
    def generate(
        self,
        model: str,
        prompt: str,
        system: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> GenerateResult:
        """Generate a completion from the model.

        Args:
            model: Model name/identifier to use
            prompt: User prompt/message
            system: Optional system prompt
            options: Provider-specific options (temperature, max_tokens, json_mode, etc.)

        Returns:
            GenerateResult with the generated content and metadata.

        Raises:
            Exception: If generation fails (model not found, API error, etc.)
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the provider identifier (e.g. "openai")."""
        pass

    @abstractmethod
    def supports_json_mode(self) -> bool:
        """Check if provider supports native JSON-structured output."""
        pass
