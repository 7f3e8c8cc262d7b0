"""
Tickets Controllers (API Routes)
=================================

FastAPI routes for opening, listing and working tickets.

Controllers are thin - they delegate to application services.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from helpbox.config import AccessLevel, TicketStatus, settings
from helpbox.infrastructure.database import get_session
from helpbox.shared.infrastructure.logging import get_logger
from helpbox.tickets.application import (
    TicketActionResponse,
    TicketCreateRequest,
    TicketEscalateRequest,
    TicketListQuery,
    TicketListResponse,
    TicketResponse,
    TicketService,
    TicketUpdateRequest,
)
from helpbox.tickets.domain import Ticket
from helpbox.tickets.infrastructure import SQLAlchemyTicketRepository
from helpbox.triage.application import TriageService
from helpbox.triage.infrastructure import build_triage_service_or_unavailable
from helpbox.users.domain import User
from helpbox.users.interfaces import get_current_user, require_access_level

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])


# ========== Example payloads for Swagger ==========

TICKET_RESPONSE_EXAMPLE = {
    "id": 42,
    "client_id": 7,
    "client_name": "Ana Souza",
    "title": "Impressora não imprime",
    "category": "Hardware",
    "description": "A impressora do setor fiscal mostra erro de papel mesmo com a bandeja cheia.",
    "status": "Aberto",
    "opened_at": "2026-03-02T13:10:00Z",
    "problem_at": "2026-03-02T13:10:00Z",
    "closed_at": None,
    "impact": "Delay",
    "scope": "Group",
    "frequency": "Continuous",
    "priority": "M",
    "ai_solution": "**Olá!** Abra a bandeja e verifique se há papel preso no rolete...",
    "technician_id": None,
    "technician_name": None,
    "technician_solution": None,
    "final_solution": None,
    "resolution_minutes": None
}


# ========== Dependencies ==========

def get_triage_service(request: Request) -> TriageService:
    """Shared triage service built at startup (built lazily when lifespan is off)."""
    service = getattr(request.app.state, "triage_service", None)
    if service is None:
        service = build_triage_service_or_unavailable()
        request.app.state.triage_service = service
    return service


async def get_ticket_service(
    session: AsyncSession = Depends(get_session),
    triage: TriageService = Depends(get_triage_service)
) -> TicketService:
    """Get ticket service instance."""
    return TicketService(SQLAlchemyTicketRepository(session), triage)


def listing_query(
    page: int = Query(1, ge=1, description="1-based page number"),
    page_size: int = Query(settings.default_page_size, ge=1, le=100),
    q: Optional[str] = Query(None, description="Title/description substring; digits also match ticket numbers"),
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
) -> TicketListQuery:
    return TicketListQuery(
        viewer_id=0,
        page=page,
        page_size=page_size,
        q=q,
        status=status_filter,
    )


def _to_response(ticket: Ticket) -> TicketResponse:
    return TicketResponse(
        id=ticket.id,
        client_id=ticket.client_id,
        client_name=ticket.client_name,
        title=ticket.title,
        category=ticket.category,
        description=ticket.description,
        status=ticket.status,
        opened_at=ticket.opened_at,
        problem_at=ticket.problem_at,
        closed_at=ticket.closed_at,
        impact=ticket.impact,
        scope=ticket.scope,
        frequency=ticket.frequency,
        priority=ticket.priority,
        ai_solution=ticket.ai_solution,
        technician_id=ticket.technician_id,
        technician_name=ticket.technician_name,
        technician_solution=ticket.technician_solution,
        final_solution=ticket.final_solution,
        resolution_minutes=ticket.resolution_minutes(),
    )


def _to_list_response(tickets: List[Ticket], total: int, query: TicketListQuery) -> TicketListResponse:
    return TicketListResponse(
        tickets=[_to_response(t) for t in tickets],
        total_count=total,
        page=query.page,
        page_size=query.page_size,
    )


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a ticket",
    description="""
    Open a ticket on behalf of the logged-in user.

    The automated triage runs first and its outcome is stored with the ticket:
    - `priority`: `A` (high), `M` (medium) or `B` (low)
    - `ai_solution`: suggested first steps for the requester

    If the AI assistant is unavailable the ticket is still created, with
    priority `M` and a note that it was forwarded to the technical team.
    """,
    responses={201: {"content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}}}
)
async def open_ticket(
    body: TicketCreateRequest,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketResponse:
    ticket = await service.open_ticket(user, body)
    return _to_response(ticket)


@router.get("/mine", response_model=TicketListResponse, summary="Tickets I opened or work on")
async def list_my_tickets(
    mine_type: Optional[str] = Query(None, alias="type", pattern="^(created|assigned)$"),
    query: TicketListQuery = Depends(listing_query),
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketListResponse:
    query.mine_type = mine_type
    tickets, total = await service.list_mine(user, query)
    return _to_list_response(tickets, total, query)


@router.get("/queue", response_model=TicketListResponse, summary="Unassigned in-progress tickets")
async def list_queue(
    query: TicketListQuery = Depends(listing_query),
    user: User = Depends(require_access_level(AccessLevel.TECHNICIAN)),
    service: TicketService = Depends(get_ticket_service)
) -> TicketListResponse:
    tickets, total = await service.list_queue(user, query)
    return _to_list_response(tickets, total, query)


@router.get("", response_model=TicketListResponse, summary="All tickets (administrators)")
async def list_tickets(
    query: TicketListQuery = Depends(listing_query),
    user: User = Depends(require_access_level(AccessLevel.ADMIN)),
    service: TicketService = Depends(get_ticket_service)
) -> TicketListResponse:
    tickets, total = await service.list_all(user, query)
    return _to_list_response(tickets, total, query)


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Ticket detail",
    responses={404: {"description": "Ticket not found"}}
)
async def get_ticket(
    ticket_id: int,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketResponse:
    return _to_response(await service.get_ticket(ticket_id))


@router.put(
    "/{ticket_id}",
    response_model=TicketActionResponse,
    summary="Update ticket fields",
    responses={
        400: {"description": "Nothing to update"},
        404: {"description": "Ticket not found"},
    }
)
async def update_ticket(
    ticket_id: int,
    body: TicketUpdateRequest,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketActionResponse:
    await service.update_ticket(ticket_id, body)
    return TicketActionResponse()


@router.put("/{ticket_id}/escalate", response_model=TicketActionResponse, summary="Send to the technician pool")
async def escalate_ticket(
    ticket_id: int,
    body: TicketEscalateRequest,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketActionResponse:
    await service.escalate(ticket_id, body.status)
    return TicketActionResponse()


@router.put(
    "/{ticket_id}/close",
    response_model=TicketActionResponse,
    summary="Close (requester only)",
    responses={403: {"description": "Caller did not open the ticket"}}
)
async def close_ticket(
    ticket_id: int,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketActionResponse:
    await service.close(ticket_id, user)
    return TicketActionResponse()


@router.put("/{ticket_id}/reopen", response_model=TicketActionResponse, summary="Reject the solution and reopen")
async def reopen_ticket(
    ticket_id: int,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketActionResponse:
    await service.reopen(ticket_id)
    return TicketActionResponse()


@router.put("/{ticket_id}/agree", response_model=TicketActionResponse, summary="Agree with the solution")
async def agree_with_solution(
    ticket_id: int,
    user: User = Depends(get_current_user),
    service: TicketService = Depends(get_ticket_service)
) -> TicketActionResponse:
    await service.agree(ticket_id)
    return TicketActionResponse()


@router.delete(
    "/{ticket_id}",
    response_model=TicketActionResponse,
    summary="Delete a closed ticket (administrators)",
    responses={
        400: {"description": "Ticket is not closed"},
        404: {"description": "Ticket not found"},
    }
)
async def delete_ticket(
    ticket_id: int,
    user: User = Depends(require_access_level(AccessLevel.ADMIN)),
    service: TicketService = Depends(get_ticket_service)
) -> TicketActionResponse:
    await service.delete(ticket_id, user)
    return TicketActionResponse()
