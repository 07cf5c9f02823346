"""Generation client with OpenAI integration.

Security: Reads API key from environment only, never hardcoded.
Provides a deterministic stub when no key is present for local development
and testing. Failures raise GenerationError; they are never retried and never
replaced with stub output.
"""

import logging
import time
from typing import Any, Literal, Protocol

from openai import AsyncOpenAI

from planassist.config import get_settings
from planassist.utils.logging import content_logger
from planassist.utils.metrics import content_metrics

logger = logging.getLogger(__name__)

ChatMessage = dict[str, Any]


class GenerationError(Exception):
    """Generation client call failed, timed out or returned nothing."""

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"Generation failed for {operation}: {reason}")


class LLMClient(Protocol):
    """Protocol for generation client implementations."""

    source: Literal["openai", "stub"]

    async def generate(
        self,
        *,
        operation: str,
        messages: list[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate text for chat messages.

        Args:
            operation: Short label for logs and metrics ("draft", "compare")
            messages: Chat-completions messages; user content may be a list
                of text and image_url parts
            temperature: Sampling temperature
            max_tokens: Completion token cap

        Returns:
            Generated text

        Raises:
            GenerationError: On any failure
        """
        ...


def has_image_parts(messages: list[ChatMessage]) -> bool:
    """True when any message carries an image_url content part."""
    for message in messages:
        content = message.get("content")
        if isinstance(content, list) and any(
            isinstance(part, dict) and part.get("type") == "image_url" for part in content
        ):
            return True
    return False


class DeterministicStubClient:
    """Deterministic stub client for testing (no API key required)."""

    source: Literal["openai", "stub"] = "stub"

    async def generate(
        self,
        *,
        operation: str,
        messages: list[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate deterministic stub text describing the request."""
        image_note = " with images" if has_image_parts(messages) else ""
        return (
            f"[Stub {operation} response - {len(messages)} message(s){image_note}]\n\n"
            "*This is a stub response generated without a language model.*"
        )


class OpenAIClient:
    """OpenAI-backed generation client."""

    source: Literal["openai", "stub"] = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        vision_model: str = "gpt-4o",
        timeout_sec: float = 60.0,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key (read from environment)
            model: Model for text-only prompts
            vision_model: Model used when a message carries image parts
            timeout_sec: Per-request timeout; the SDK's own retries are disabled
        """
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout_sec, max_retries=0)
        self.model = model
        self.vision_model = vision_model

    async def generate(
        self,
        *,
        operation: str,
        messages: list[ChatMessage],
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate text using the OpenAI chat completions API."""
        model = self.vision_model if has_image_parts(messages) else self.model
        start = time.perf_counter()

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=messages,  # type: ignore[arg-type]
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except Exception as e:
            self._record(operation, model, "error", start, type(e).__name__)
            raise GenerationError(operation, type(e).__name__) from e

        text = response.choices[0].message.content if response.choices else None

        # Validation: Check for empty response
        if not text or not text.strip():
            self._record(operation, model, "empty", start, "empty response")
            raise GenerationError(operation, "empty response")

        self._record(operation, model, "success", start)
        return text

    def _record(
        self,
        operation: str,
        model: str,
        outcome: str,
        start: float,
        error_reason: str | None = None,
    ) -> None:
        latency_ms = (time.perf_counter() - start) * 1000
        content_metrics.record_generation(operation, outcome, latency_ms)
        content_logger.log_generation(
            operation=operation,
            model=model,
            outcome=outcome,
            latency_ms=latency_ms,
            error_reason=error_reason,
        )


async def get_llm_client() -> LLMClient:
    """Factory function to get appropriate client based on config.

    Used as a FastAPI dependency so routes receive the client by injection.

    Returns:
        OpenAIClient if API key is configured, DeterministicStubClient otherwise
    """
    settings = get_settings()
    api_key = settings.openai_api_key

    if api_key and api_key.get_secret_value():
        return OpenAIClient(
            api_key=api_key.get_secret_value(),
            model=settings.openai_model,
            vision_model=settings.openai_vision_model,
            timeout_sec=settings.generation_timeout_sec,
        )

    logger.warning("No OpenAI API key configured, using deterministic stub client")
    return DeterministicStubClient()
