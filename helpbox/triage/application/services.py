"""
Triage Application Services
============================

Application service for automated ticket triage.

Orchestrates prompt building, the upstream model call (through the retry
controller) and parsing. Never raises to its caller: ticket creation must
not fail because the AI assistant is unavailable.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Optional

from helpbox.shared.infrastructure.logging import get_logger
from helpbox.triage.application.retry import RetryController
from helpbox.triage.domain import (
    TriagePromptBuilder,
    TriageRequest,
    TriageResult,
    parse_model_output,
)

logger = get_logger(__name__)


# ========== Upstream Interface ==========

class ILLMClient(ABC):
    """Interface for the text generation capability triage depends on."""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        temperature: float,
        max_tokens: int
    ) -> Any:
        """Generate text; the returned object exposes ``content``."""


# ========== Application Services ==========

class TriageService:
    """
    Service for first-pass ticket triage using an LLM.

    Holds no state across calls; safe to share between requests.
    """

    def __init__(
        self,
        llm_client: ILLMClient,
        retry_controller: Optional[RetryController] = None,
        temperature: float = 0.1,
        max_tokens: int = 1000
    ):
        self._llm = llm_client
        self._retry = retry_controller or RetryController()
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def triage(self, request: TriageRequest) -> TriageResult:
        """
        Produce priority and suggested solution for a ticket.

        Args:
            request: Ticket fields relevant for triage

        Returns:
            TriageResult, the fallback result when the model cannot help
        """
        if not request.has_meaningful_description:
            logger.info("Description too short, skipping model call")
            return TriageResult.short_description()

        prompt = TriagePromptBuilder.build_prompt(request)
        start_time = time.perf_counter()

        async def attempt() -> TriageResult:
            response = await self._llm.generate(
                prompt=prompt,
                temperature=self._temperature,
                max_tokens=self._max_tokens
            )
            return parse_model_output(response.content)

        outcome = await self._retry.run(attempt)

        logger.info(
            "Ticket triaged",
            extra={
                "priority": outcome.result.priority.value,
                "state": outcome.state.value,
                "attempts": outcome.attempts,
                "latency_ms": int((time.perf_counter() - start_time) * 1000),
                "category": request.category.value if request.category else None,
            }
        )
        return outcome.result
