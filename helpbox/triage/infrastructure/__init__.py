"""
Triage Infrastructure Layer
============================

Infrastructure implementations for ticket triage module.

Contains:
- External: LLM client adapter and TriageService wiring
"""

from helpbox.triage.infrastructure.external import (
    LLMClientAdapter,
    build_triage_service,
    build_triage_service_or_unavailable,
)

__all__ = [
    "LLMClientAdapter",
    "build_triage_service",
    "build_triage_service_or_unavailable",
]
