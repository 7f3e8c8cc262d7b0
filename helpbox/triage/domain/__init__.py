"""
Triage Domain Layer
===================

Domain layer for ticket triage module.

Contains:
- Entities: TriageRequest, TriageResult and the fixed user-facing texts
- Parser: raw model output -> TriageResult
- Prompts: TriagePromptBuilder

This layer is framework-agnostic and contains pure business logic.
"""

from helpbox.triage.domain.entities import (
    TriageRequest,
    TriageResult,
    SHORT_DESCRIPTION_MESSAGE,
    FALLBACK_MESSAGE,
    HARDWARE_HANDOFF_MESSAGE,
    NON_TECHNICAL_MESSAGE,
    NOT_INFORMED,
)
from helpbox.triage.domain.parser import parse_model_output, strip_leaked_rationale
from helpbox.triage.domain.prompts import TriagePromptBuilder

__all__ = [
    "TriageRequest",
    "TriageResult",
    "SHORT_DESCRIPTION_MESSAGE",
    "FALLBACK_MESSAGE",
    "HARDWARE_HANDOFF_MESSAGE",
    "NON_TECHNICAL_MESSAGE",
    "NOT_INFORMED",
    "parse_model_output",
    "strip_leaked_rationale",
    "TriagePromptBuilder",
]
