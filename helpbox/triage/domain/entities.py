"""
Triage Domain Entities
======================

Domain entities for the ticket triage module.

Pure Python value objects describing what goes into an automated triage
and what comes out of it. No I/O, no framework.
"""

from dataclasses import dataclass
from typing import Optional

from helpbox.config import Frequency, Impact, Priority, Scope, TicketCategory

# ========== Fixed user-facing texts ==========

SHORT_DESCRIPTION_MESSAGE = "Descrição muito curta."
FALLBACK_MESSAGE = "A análise automática falhou. Encaminhado para equipe técnica."
HARDWARE_HANDOFF_MESSAGE = (
    "Caso seja necessária a troca do equipamento, encaminhe o chamado para a equipe técnica."
)
NON_TECHNICAL_MESSAGE = (
    "Esta solicitação não trata de um problema técnico. "
    "Por favor, procure o setor responsável (RH, Treinamento ou Administração)."
)
NOT_INFORMED = "Não informado"

MIN_DESCRIPTION_LENGTH = 5
MAX_SOLUTION_LENGTH = 1999


@dataclass(frozen=True)
class TriageRequest:
    """
    Ticket fields the triage looks at.

    Built per ticket-creation request; never persisted on its own.
    """
    category: TicketCategory
    title: str
    description: Optional[str]
    frequency: Optional[Frequency] = None
    impact: Optional[Impact] = None
    scope: Optional[Scope] = None

    def __post_init__(self):
        """Accept raw values for the enum fields, as sent by API clients."""
        if self.category is not None:
            object.__setattr__(self, "category", TicketCategory(self.category))
        for name, enum in (("frequency", Frequency), ("impact", Impact), ("scope", Scope)):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, enum(value))

    @property
    def has_meaningful_description(self) -> bool:
        """True when the description is long enough to be worth a model call."""
        return bool(self.description) and len(self.description.strip()) >= MIN_DESCRIPTION_LENGTH


@dataclass(frozen=True)
class TriageResult:
    """
    Outcome of an automated triage.

    Stored on the ticket as ``priority`` and ``ai_solution``; never rewritten.
    """
    priority: Priority
    solution: str

    def __post_init__(self):
        """Coerce raw codes so equality with plain strings keeps working."""
        object.__setattr__(self, "priority", Priority(self.priority))
        if self.solution is None:
            raise ValueError("solution must not be None")

    @classmethod
    def fallback(cls) -> "TriageResult":
        """Safe result used whenever automated triage cannot complete."""
        return cls(priority=Priority.MEDIUM, solution=FALLBACK_MESSAGE)

    @classmethod
    def short_description(cls) -> "TriageResult":
        """Result for descriptions too short to analyse."""
        return cls(priority=Priority.LOW, solution=SHORT_DESCRIPTION_MESSAGE)

    @classmethod
    def non_technical(cls) -> "TriageResult":
        """Canned low-priority answer for requests outside technical support."""
        return cls(priority=Priority.LOW, solution=NON_TECHNICAL_MESSAGE)

    @property
    def is_fallback(self) -> bool:
        return self.priority == Priority.MEDIUM and self.solution == FALLBACK_MESSAGE
