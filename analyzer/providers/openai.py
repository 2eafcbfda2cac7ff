"""OpenAI provider implementation.

This module provides chat-completion access to OpenAI and OpenAI-compatible
endpoints for the analyzer.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from .. import config
from .base import GenerateResult, LLMProvider

LOGGER = logging.getLogger(__name__)


class OpenAIProvider(LLMProvider):
    """OpenAI API provider implementation.

    Supports OpenAI-compatible APIs by allowing custom base URLs.
    Authentication is via Bearer token (API key).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key (defaults to the configured OPENAI_API_KEY)
            base_url: API base URL (defaults to config.OPENAI_API_BASE)
            timeout: Request timeout in seconds (defaults to config.LLM_TIMEOUT_SECONDS)
        """
        self.api_key = api_key if api_key is not None else config.get_openai_api_key()
        self.base_url = (base_url or config.OPENAI_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else config.LLM_TIMEOUT_SECONDS

    def is_available(self) -> bool:
        """Return True when an API key is configured."""
        return bool(self.api_key)

    def get_unavailable_reason(self) -> Optional[str]:
        """Get human-readable reason why provider is unavailable."""
        if not self.api_key:
            return "Missing OpenAI API Key. Please add OPENAI_API_KEY to your .env file."
        return None

    def generate(
        self,
        model: str,
        prompt: str,
        system: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> GenerateResult:
        """Generate a chat completion from OpenAI.

        Args:
            model: Model ID to use
            prompt: User message content
            system: Optional system message
            options: Optional parameters (temperature, max_tokens, etc.)

        Returns:
            GenerateResult with generated content and metadata.

        Raises:
            requests.exceptions.HTTPError: If the API rejects the request. The
                message carries the provider's own error text so callers can
                recognise context-window failures.
            requests.exceptions.RequestException: If the API is unreachable.

        Note:
            Maps common options to OpenAI parameter names:
            - num_predict: max_tokens
            - json_mode: If True, sets response_format={"type": "json_object"}
            - Additional OpenAI-specific options are passed through directly
        """
        LOGGER.debug("Generating completion with OpenAI model: %s", model)

        options = options or {}

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        request_body: Dict[str, Any] = {
            "model": model,
            "messages": messages,
        }

        if "temperature" in options:
            request_body["temperature"] = options["temperature"]

        if "num_predict" in options:
            request_body["max_tokens"] = options["num_predict"]
        elif "max_tokens" in options:
            request_body["max_tokens"] = options["max_tokens"]

        if options.get("json_mode"):
            request_body["response_format"] = {"type": "json_object"}
            LOGGER.debug("Enabled JSON mode for model %s", model)

        for key, value in options.items():
            if key not in ("temperature", "num_predict", "max_tokens", "json_mode"):
                request_body[key] = value

        response = requests.post(
            f"{self.base_url}/chat/completions",
            headers=self._get_headers(),
            json=request_body,
            timeout=self.timeout,
        )
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as exc:
            detail = self._extract_error_message(response)
            raise requests.exceptions.HTTPError(
                f"OpenAI API Error: {detail}", response=response
            ) from exc

        data = response.json()

        # Extract generated content (handle string, list-of-parts, or legacy text field)
        content = ""
        choices = data.get("choices") or []
        primary: Dict[str, Any] = {}
        if choices:
            primary = choices[0] or {}
            message = primary.get("message") or {}
            message_content = message.get("content")
            if isinstance(message_content, str):
                content = message_content
            elif isinstance(message_content, list):
                parts = []
                for part in message_content:
                    if isinstance(part, dict) and isinstance(part.get("text"), str):
                        parts.append(part["text"])
                content = "".join(parts).strip()
            if not content:
                text_candidate = primary.get("text")
                if isinstance(text_candidate, str):
                    content = text_candidate

            if not content:
                LOGGER.warning(
                    "OpenAI completion returned empty content; finish_reason=%s keys=%s",
                    primary.get("finish_reason"),
                    list(primary.keys()),
                )

        metadata = {
            "finish_reason": primary.get("finish_reason"),
            "usage": data.get("usage", {}),
            "model_used": data.get("model"),  # Actual model (may differ for aliases)
        }

        return GenerateResult(
            content=content,
            model=model,
            provider="openai",
            metadata=metadata,
        )

    def get_provider_name(self) -> str:
        """Return provider identifier.

        Returns:
            "openai"
        """
        return "openai"

    def supports_json_mode(self) -> bool:
        """OpenAI supports response_format={"type": "json_object"}."""
        return True

    def _get_headers(self) -> Dict[str, str]:
        """Build HTTP headers for OpenAI requests."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _extract_error_message(response: requests.Response) -> str:
        """Return the provider's error message, falling back to the status text."""
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            error = payload.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
            if isinstance(error, str) and error:
                return error
        return response.reason or response.text.strip() or f"HTTP {response.status_code}"
