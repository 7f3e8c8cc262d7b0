"""
Tickets Application Services
=============================

Application service for the ticket lifecycle: opening (with automated
triage), listing, technician updates and the requester's workflow actions.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from helpbox.config import TicketStatus, settings
from helpbox.core import ResourceNotFoundException, ValidationException
from helpbox.shared.infrastructure.logging import get_logger
from helpbox.tickets.application.dto import (
    TicketCreateRequest,
    TicketListQuery,
    TicketUpdateRequest,
)
from helpbox.tickets.domain import Ticket
from helpbox.triage.application import TriageService
from helpbox.triage.domain import TriageRequest
from helpbox.users.domain import User

logger = get_logger(__name__)


# ========== Repository Interface ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        """Get ticket by ID, with requester and technician names."""

    @abstractmethod
    async def create(self, ticket: Ticket) -> Ticket:
        """Persist a new ticket and return it with its ID."""

    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        """Persist the mutable fields of an existing ticket."""

    @abstractmethod
    async def delete(self, ticket_id: int) -> None:
        """Delete a ticket."""

    @abstractmethod
    async def list(self, query: TicketListQuery) -> Tuple[List[Ticket], int]:
        """Return one page of tickets and the total matching count."""


# ========== Application Services ==========

class TicketService:
    """
    Service for the ticket lifecycle.

    Opening a ticket always succeeds as far as triage is concerned: the
    triage service absorbs upstream failures and returns a usable result.
    """

    def __init__(
        self,
        ticket_repository: ITicketRepository,
        triage_service: Optional[TriageService] = None,
        ai_solution_max_length: Optional[int] = None
    ):
        self._tickets = ticket_repository
        self._triage = triage_service
        self._ai_max = ai_solution_max_length or settings.ai_solution_max_length

    async def open_ticket(self, user: User, request: TicketCreateRequest) -> Ticket:
        """
        Triage and persist a new ticket for ``user``.

        Args:
            user: The requester
            request: Ticket fields

        Returns:
            The stored ticket, priority and AI solution included
        """
        if self._triage is None:
            raise RuntimeError("Triage service not configured")

        triage = await self._triage.triage(TriageRequest(
            category=request.category,
            title=request.title,
            description=request.description,
            frequency=request.frequency,
            impact=request.impact,
            scope=request.scope,
        ))

        ticket = Ticket.open(
            client_id=user.id,
            title=request.title.strip(),
            category=request.category,
            description=request.description,
            triage=triage,
            ai_solution_max_length=self._ai_max,
            status=request.status,
            opened_at=request.opened_at,
            problem_at=request.problem_at,
            impact=request.impact,
            scope=request.scope,
            frequency=request.frequency,
        )
        created = await self._tickets.create(ticket)
        created.client_name = user.full_name

        logger.info(
            "Ticket opened",
            extra={
                "ticket_id": created.id,
                "client_id": user.id,
                "priority": created.priority.value if created.priority else None,
                "triage_fallback": triage.is_fallback
            }
        )
        return created

    async def list_mine(self, user: User, query: TicketListQuery) -> Tuple[List[Ticket], int]:
        query.viewer_id = user.id
        query.kind = "mine"
        return await self._tickets.list(query)

    async def list_queue(self, user: User, query: TicketListQuery) -> Tuple[List[Ticket], int]:
        """Unassigned in-progress tickets a technician may pick up."""
        query.viewer_id = user.id
        query.kind = "queue"
        return await self._tickets.list(query)

    async def list_all(self, user: User, query: TicketListQuery) -> Tuple[List[Ticket], int]:
        query.viewer_id = user.id
        query.kind = "all"
        query.mine_type = None
        return await self._tickets.list(query)

    async def get_ticket(self, ticket_id: int) -> Ticket:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", str(ticket_id))
        return ticket

    async def update_ticket(self, ticket_id: int, request: TicketUpdateRequest) -> Ticket:
        """
        Apply the fields present in ``request``.

        Raises:
            ValidationException: If the body carries no field
            ResourceNotFoundException: If the ticket does not exist
        """
        changes = request.model_dump(include=request.model_fields_set)
        if not changes:
            raise ValidationException("Nothing to update")

        ticket = await self.get_ticket(ticket_id)

        if changes.get("status"):
            ticket.status = TicketStatus(changes["status"])
        if changes.get("closed_at"):
            ticket.closed_at = changes["closed_at"]
        if "technician_id" in changes:
            # 0 and null both mean "no technician"
            ticket.technician_id = changes["technician_id"] or None
        if "technician_solution" in changes:
            ticket.technician_solution = changes["technician_solution"]
        if "final_solution" in changes:
            ticket.final_solution = changes["final_solution"]

        saved = await self._tickets.save(ticket)
        logger.info(
            "Ticket updated",
            extra={"ticket_id": ticket_id, "fields": sorted(changes)}
        )
        return saved

    async def escalate(self, ticket_id: int, status: TicketStatus) -> Ticket:
        ticket = await self.get_ticket(ticket_id)
        ticket.escalate(status)
        logger.info("Ticket escalated", extra={"ticket_id": ticket_id, "status": ticket.status.value})
        return await self._tickets.save(ticket)

    async def close(self, ticket_id: int, user: User) -> Ticket:
        ticket = await self.get_ticket(ticket_id)
        ticket.close_by_client(user.id)
        logger.info("Ticket closed by client", extra={"ticket_id": ticket_id, "user_id": user.id})
        return await self._tickets.save(ticket)

    async def reopen(self, ticket_id: int) -> Ticket:
        ticket = await self.get_ticket(ticket_id)
        ticket.reopen()
        logger.info("Ticket reopened", extra={"ticket_id": ticket_id})
        return await self._tickets.save(ticket)

    async def agree(self, ticket_id: int) -> Ticket:
        ticket = await self.get_ticket(ticket_id)
        ticket.agree()
        return await self._tickets.save(ticket)

    async def delete(self, ticket_id: int, user: User) -> None:
        """
        Delete a closed ticket. Administrators only.

        Raises:
            ResourceNotFoundException: If the ticket does not exist
            DomainException: If the ticket is not closed
        """
        ticket = await self.get_ticket(ticket_id)
        ticket.ensure_deletable()
        await self._tickets.delete(ticket_id)
        logger.info("Ticket deleted", extra={"ticket_id": ticket_id, "user_id": user.id})
