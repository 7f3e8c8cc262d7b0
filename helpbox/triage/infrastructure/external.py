"""
Triage External Service Adapters
==================================

Adapters for external services used by the triage module.

Implements the application layer ILLMClient port with the concrete
infrastructure LLM clients, and wires a ready-to-use TriageService.
"""

from typing import Optional

from helpbox.config import Settings, settings
from helpbox.core import ConfigurationException
from helpbox.infrastructure.llm import (
    ChatCompletionResult,
    ILLMClient as InfrastructureLLMClient,
    UnavailableLLMClient,
    create_llm_client,
)
from helpbox.shared.infrastructure.logging import get_logger
from helpbox.triage.application import ILLMClient, RetryController, TriageService

logger = get_logger(__name__)


class LLMClientAdapter(ILLMClient):
    """
    Adapter that wraps an infrastructure LLM client.

    Implements the application layer ILLMClient interface using
    the provider selected in configuration (Z.AI, OpenAI-compatible, mock).
    """

    def __init__(self, client: Optional[InfrastructureLLMClient] = None):
        self._client = client or create_llm_client()

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ) -> ChatCompletionResult:
        """Generate text for the triage prompt."""
        return await self._client.generate(prompt, temperature, max_tokens)


def build_triage_service(
    config: Optional[Settings] = None,
    client: Optional[InfrastructureLLMClient] = None
) -> TriageService:
    """
    Create a TriageService from configuration.

    Raises:
        ConfigurationException: If the configured provider has no API key
    """
    config = config or settings
    adapter = LLMClientAdapter(client or create_llm_client(config))
    retry = RetryController(
        max_attempts=config.triage_max_attempts,
        initial_delay=config.triage_initial_backoff_ms / 1000
    )
    return TriageService(
        adapter,
        retry_controller=retry,
        temperature=config.llm_temperature,
        max_tokens=config.llm_max_tokens
    )


def build_triage_service_or_unavailable(config: Optional[Settings] = None) -> TriageService:
    """
    Create a TriageService, degrading to the fixed fallback answer when the
    configured provider has no API key.
    """
    config = config or settings
    try:
        return build_triage_service(config)
    except ConfigurationException as e:
        logger.warning(f"LLM client not configured, triage will use the fallback answer: {e.message}")
        return build_triage_service(config, client=UnavailableLLMClient(e.message))
