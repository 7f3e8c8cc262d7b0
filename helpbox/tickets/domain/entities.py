"""
Ticket Domain Entities
======================

Pure Python domain entity for help-desk tickets and their lifecycle.

Following Domain-Driven Design principles, the entity carries the business
rules (who may close, what may be deleted) and is free of infrastructure
concerns.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from helpbox.config import (
    Frequency, Impact, Priority, Scope,
    TicketCategory, TicketStatus
)
from helpbox.core import DomainException, PermissionDeniedException
from helpbox.triage.domain import TriageResult
from helpbox.users.domain import as_utc

CLOSED_BY_CLIENT = "Fechado pelo cliente"
AGREEMENT_RECORDED = "Concordância registrada"
NO_SUGGESTION = "Sem sugestão da IA."
TRUNCATION_MARKER = "... [Texto cortado]"


def truncate_solution(text: str, max_length: int) -> str:
    """Cut AI text longer than ``max_length`` and mark the cut."""
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER
    return text


@dataclass
class Ticket:
    """
    Ticket entity representing a help-desk request.

    ``priority`` and ``ai_solution`` come from the automated triage and are
    written once, at creation.
    """

    # Core attributes
    id: Optional[int]
    client_id: int
    title: str
    category: TicketCategory
    description: str
    status: TicketStatus

    # Timestamps
    opened_at: datetime
    problem_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None

    # Requester's assessment
    impact: Optional[Impact] = None
    scope: Optional[Scope] = None
    frequency: Optional[Frequency] = None

    # Triage output
    priority: Optional[Priority] = None
    ai_solution: Optional[str] = None

    # Human handling
    technician_id: Optional[int] = None
    technician_solution: Optional[str] = None
    final_solution: Optional[str] = None

    # Read-side names, filled by listing/detail queries
    client_name: Optional[str] = None
    technician_name: Optional[str] = None

    def __post_init__(self):
        self.category = TicketCategory(self.category)
        self.status = TicketStatus(self.status)
        if self.priority is not None:
            self.priority = Priority(self.priority)

    @classmethod
    def open(
        cls,
        client_id: int,
        title: str,
        category: TicketCategory,
        description: str,
        triage: TriageResult,
        ai_solution_max_length: int,
        status: TicketStatus = TicketStatus.OPEN,
        opened_at: Optional[datetime] = None,
        problem_at: Optional[datetime] = None,
        impact: Optional[Impact] = None,
        scope: Optional[Scope] = None,
        frequency: Optional[Frequency] = None,
    ) -> "Ticket":
        """Create a new ticket carrying its triage outcome."""
        opened_at = opened_at or datetime.now(timezone.utc)
        solution = triage.solution or NO_SUGGESTION

        return cls(
            id=None,
            client_id=client_id,
            title=title,
            category=category,
            description=description,
            status=status,
            opened_at=opened_at,
            problem_at=problem_at or opened_at,
            impact=impact,
            scope=scope,
            frequency=frequency,
            priority=triage.priority,
            ai_solution=truncate_solution(solution, ai_solution_max_length),
        )

    @property
    def is_closed(self) -> bool:
        return self.status == TicketStatus.CLOSED

    @property
    def is_unassigned(self) -> bool:
        return not self.technician_id

    def escalate(self, status: TicketStatus) -> None:
        """Move the ticket to ``status`` and release it back to the pool."""
        self.status = TicketStatus(status)
        self.technician_id = None

    def close_by_client(self, user_id: int, now: Optional[datetime] = None) -> None:
        """
        Close on behalf of the requester.

        Raises:
            PermissionDeniedException: If ``user_id`` did not open the ticket
        """
        if self.client_id != user_id:
            raise PermissionDeniedException(
                "Only the ticket owner can close it",
                details={"ticket_id": self.id}
            )
        self.status = TicketStatus.CLOSED
        self.closed_at = now or datetime.now(timezone.utc)
        self.final_solution = CLOSED_BY_CLIENT

    def reopen(self) -> None:
        """The requester rejected the solution: back to the unassigned pool."""
        self.status = TicketStatus.IN_PROGRESS
        self.technician_id = None
        self.closed_at = None

    def agree(self) -> None:
        self.final_solution = AGREEMENT_RECORDED

    def ensure_deletable(self) -> None:
        """
        Raises:
            DomainException: If the ticket is not closed
        """
        if not self.is_closed:
            raise DomainException(
                "Only closed tickets can be deleted",
                details={"ticket_id": self.id, "status": self.status.value}
            )

    def resolution_minutes(self) -> Optional[int]:
        """Minutes between opening and closing, None while open."""
        if self.closed_at is None:
            return None
        delta = as_utc(self.closed_at) - as_utc(self.opened_at)
        return int(delta.total_seconds() // 60)
