"""
Tickets Application Layer
=========================

Contains:
- DTOs: request/response models and listing queries
- Services: TicketService
- Repository interface: ITicketRepository
"""

from helpbox.tickets.application.dto import (
    TicketCreateRequest,
    TicketUpdateRequest,
    TicketEscalateRequest,
    TicketListQuery,
    TicketResponse,
    TicketListResponse,
    TicketActionResponse,
)
from helpbox.tickets.application.services import ITicketRepository, TicketService

__all__ = [
    "TicketCreateRequest",
    "TicketUpdateRequest",
    "TicketEscalateRequest",
    "TicketListQuery",
    "TicketResponse",
    "TicketListResponse",
    "TicketActionResponse",
    "ITicketRepository",
    "TicketService",
]
