"""
LLM Client Infrastructure
==========================

Wrapper for LLM providers (Z.AI, OpenAI-compatible) providing a clean
"generate text from prompt" interface.

Every provider failure surfaces as ``LLMException`` carrying the upstream
HTTP status when there is one, so callers can tell an overloaded model (503)
from anything else without knowing which SDK raised.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Optional

from openai import APIStatusError, AsyncOpenAI
from zai import ZaiClient

from helpbox.config import Settings, settings
from helpbox.core import ConfigurationException, LLMException
from helpbox.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class ChatCompletionResult:
    """Result of a single text generation."""

    def __init__(
        self,
        content: str,
        model: str,
        prompt_tokens: int,
        completion_tokens: int,
        latency_ms: int
    ):
        self.content = content
        self.model = model
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = prompt_tokens + completion_tokens
        self.latency_ms = latency_ms


def _status_of(error: Exception) -> Optional[int]:
    """Best-effort extraction of an HTTP status from an SDK error."""
    for attr in ("status_code", "status", "http_status"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    response = getattr(error, "response", None)
    value = getattr(response, "status_code", None)
    return value if isinstance(value, int) else None


class ILLMClient(ABC):
    """
    Interface for LLM client operations.

    Following Interface Segregation Principle - only what triage needs.
    """

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> ChatCompletionResult:
        """Generate text for a single user prompt."""


class ZAIILLMClient(ILLMClient):
    """
    Z.AI SDK client implementation for GLM models.

    The SDK is synchronous, so calls run in a worker thread to keep the
    event loop free while other requests are served.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self._api_key = api_key or settings.zai_api_key
        if not self._api_key:
            raise ConfigurationException("Z.AI API key not configured")

        self._client = ZaiClient(api_key=self._api_key)
        self._model = model or settings.llm_model

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> ChatCompletionResult:
        """
        Generate text using a GLM model.

        Args:
            prompt: Full prompt sent as a single user message
            temperature: Sampling temperature (0-1)
            max_tokens: Maximum tokens to generate

        Returns:
            ChatCompletionResult with generated text

        Raises:
            LLMException: If the call fails, with the upstream status if any
        """
        start_time = time.perf_counter()
        messages = [{"role": "user", "content": prompt}]

        try:
            response = await asyncio.to_thread(
                self._client.chat.completions.create,
                model=self._model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens
            )
        except Exception as e:
            raise LLMException(f"Chat completion failed: {e}", upstream_status=_status_of(e))

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        content = response.choices[0].message.content or ""

        # Z.AI doesn't return token usage, so we estimate
        return ChatCompletionResult(
            content=content,
            model=self._model,
            prompt_tokens=len(prompt),
            completion_tokens=len(content),
            latency_ms=latency_ms
        )


class OpenAILLMClient(ILLMClient):
    """
    OpenAI client implementation.

    Works against api.openai.com or any OpenAI-compatible endpoint set with
    ``openai_base_url`` (Gemini, Groq, local gateways).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None
    ):
        self._api_key = api_key or settings.openai_api_key
        if not self._api_key:
            raise ConfigurationException("OpenAI API key not configured")

        self._client = AsyncOpenAI(
            api_key=self._api_key,
            base_url=base_url or settings.openai_base_url
        )
        self._model = model or settings.llm_model

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> ChatCompletionResult:
        """
        Generate text using an OpenAI-compatible chat model.

        Raises:
            LLMException: If the call fails, with the upstream status if any
        """
        start_time = time.perf_counter()

        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": prompt}],
                temperature=temperature,
                max_tokens=max_tokens
            )
        except APIStatusError as e:
            raise LLMException(f"Chat completion failed: {e.message}", upstream_status=e.status_code)
        except Exception as e:
            raise LLMException(f"Chat completion failed: {e}", upstream_status=_status_of(e))

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        usage = response.usage

        return ChatCompletionResult(
            content=response.choices[0].message.content or "",
            model=self._model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            latency_ms=latency_ms
        )


class MockLLMClient(ILLMClient):
    """
    Mock LLM client for local runs and tests.

    Returns a predictable, well-formed triage answer without calling any API.
    """

    def __init__(self, content: str = "M|**Olá!** Reinicie o equipamento e tente novamente."):
        self._content = content

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> ChatCompletionResult:
        """Return the canned response."""
        return ChatCompletionResult(
            content=self._content,
            model="mock-model",
            prompt_tokens=len(prompt),
            completion_tokens=len(self._content),
            latency_ms=0
        )


class UnavailableLLMClient(ILLMClient):
    """
    Stand-in used when no provider is configured.

    Every call fails without an upstream status, so triage falls back
    immediately instead of inventing an answer.
    """

    def __init__(self, reason: str = "LLM provider not configured"):
        self.reason = reason

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> ChatCompletionResult:
        raise LLMException(self.reason)


def create_llm_client(config: Optional[Settings] = None) -> ILLMClient:
    """
    Build the LLM client selected by configuration.

    Raises:
        ConfigurationException: If the selected provider has no API key
    """
    config = config or settings
    if config.mock_llm:
        logger.info("Using mock LLM client")
        return MockLLMClient()

    if config.llm_provider == "openai":
        return OpenAILLMClient(
            api_key=config.openai_api_key,
            base_url=config.openai_base_url,
            model=config.llm_model
        )
    return ZAIILLMClient(api_key=config.zai_api_key, model=config.llm_model)


__all__ = [
    "ChatCompletionResult",
    "ILLMClient",
    "ZAIILLMClient",
    "OpenAILLMClient",
    "MockLLMClient",
    "UnavailableLLMClient",
    "create_llm_client",
]
