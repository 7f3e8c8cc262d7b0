"""
Triage Application Layer
=========================

Application layer for ticket triage module.

Contains:
- Services: TriageService orchestration and the ILLMClient port
- Retry: RetryController state machine
"""

from helpbox.triage.application.retry import (
    RetryController,
    RetryOutcome,
    RetryState,
    is_retryable,
)
from helpbox.triage.application.services import ILLMClient, TriageService

__all__ = [
    # Services
    "TriageService",
    "ILLMClient",
    # Retry
    "RetryController",
    "RetryOutcome",
    "RetryState",
    "is_retryable",
]
