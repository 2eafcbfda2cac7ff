"""Structured-output LLM calls used by the analyzer."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

from . import config
from .providers import LLMProvider, OpenAIProvider

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = "You are a helpful assistant designed to output JSON."

_DEBUG_TEXT_LIMIT = 2048

# Signature shared by invoke_llm and the test doubles handed to the pipeline.
InvokeLLM = Callable[[str, Dict[str, Any]], Dict[str, Any]]


class LLMInvocationError(RuntimeError):
    """Raised when the LLM provider cannot be called."""


class StructuredResponseError(RuntimeError):
    """Raised when a provider response cannot be parsed into the expected structure."""

    def __init__(self, message: str, response_text: str = ""):
        super().__init__(message)
        self.response_text = response_text or ""


def _format_debug_text(text: Optional[str]) -> str:
    """Return a truncated text preview for debug logging."""
    if text is None:
        return "<none>"
    if len(text) > _DEBUG_TEXT_LIMIT:
        return f"{text[:_DEBUG_TEXT_LIMIT]}…(truncated)"
    return text


def build_system_prompt(response_json_schema: Optional[Dict[str, Any]]) -> str:
    """Return the system prompt, embedding the expected schema when given."""
    if not response_json_schema:
        return SYSTEM_PROMPT
    schema_text = json.dumps(response_json_schema, ensure_ascii=False)
    return f"{SYSTEM_PROMPT}\nRespond with a single JSON object matching this schema:\n{schema_text}"


def invoke_llm(
    prompt: str,
    response_json_schema: Optional[Dict[str, Any]] = None,
    *,
    provider: Optional[LLMProvider] = None,
    model: Optional[str] = None,
) -> Dict[str, Any]:
    """Send ``prompt`` to the LLM and return the decoded JSON object.

    Raises:
        LLMInvocationError: If the provider is not configured.
        StructuredResponseError: If the reply is not a JSON object.
        requests.exceptions.RequestException: If the HTTP call fails.
    """
    provider = provider or OpenAIProvider()
    model = model or config.ANALYZER_MODEL

    if not provider.is_available():
        raise LLMInvocationError(
            provider.get_unavailable_reason() or f"Provider {provider.get_provider_name()} is unavailable."
        )

    options: Dict[str, Any] = {}
    if provider.supports_json_mode():
        options["json_mode"] = True

    LOGGER.info(
        "Invoking %s model %s (prompt_chars=%d)",
        provider.get_provider_name(),
        model,
        len(prompt),
    )
    result = provider.generate(
        model,
        prompt,
        system=build_system_prompt(response_json_schema),
        options=options,
    )
    LOGGER.debug("LLM usage: %s", result.metadata.get("usage"))

    try:
        payload = json.loads(result.content)
    except ValueError as exc:
        LOGGER.error(
            "LLM returned malformed output: %s\nResponse: %s",
            exc,
            _format_debug_text(result.content),
        )
        raise StructuredResponseError(
            f"LLM returned malformed output: {exc}", result.content
        ) from exc

    if not isinstance(payload, dict):
        raise StructuredResponseError(
            f"LLM returned a {type(payload).__name__} instead of an object", result.content
        )
    return payload
