"""
Tickets Application DTOs
=========================

Data Transfer Objects for ticket request/response validation and for the
listing queries handed to the repository.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from helpbox.config import (
    Frequency, Impact, Priority, Scope,
    TicketCategory, TicketStatus
)

ListingKind = Literal["mine", "queue", "all"]
MineType = Literal["created", "assigned"]


# ========== Request DTOs ==========

class TicketCreateRequest(BaseModel):
    """Request model for opening a ticket."""
    title: str = Field(..., min_length=1, max_length=255)
    category: TicketCategory
    description: str = Field(..., max_length=20000)
    status: TicketStatus = TicketStatus.OPEN
    opened_at: Optional[datetime] = Field(None, description="Defaults to now")
    problem_at: Optional[datetime] = Field(None, description="When the problem started; defaults to opened_at")
    impact: Optional[Impact] = None
    scope: Optional[Scope] = None
    frequency: Optional[Frequency] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Impressora não imprime",
                "category": "Hardware",
                "description": "A impressora do setor fiscal mostra erro de papel mesmo com a bandeja cheia.",
                "impact": "Delay",
                "scope": "Group",
                "frequency": "Continuous"
            }
        }
    )


class TicketUpdateRequest(BaseModel):
    """
    Partial update by a technician or administrator.

    Only the fields present in the body are written. The AI triage fields are
    not part of this model and are rejected.
    """
    model_config = ConfigDict(extra="forbid")

    status: Optional[TicketStatus] = None
    closed_at: Optional[datetime] = None
    technician_id: Optional[int] = None
    technician_solution: Optional[str] = None
    final_solution: Optional[str] = None


class TicketEscalateRequest(BaseModel):
    status: TicketStatus


@dataclass
class TicketListQuery:
    """Listing parameters handed from the controllers to the repository."""
    viewer_id: int
    kind: ListingKind = "all"
    mine_type: Optional[MineType] = None
    page: int = 1
    page_size: int = 5
    q: Optional[str] = None
    status: Optional[TicketStatus] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    @property
    def search_term(self) -> str:
        return (self.q or "").strip()


# ========== Response DTOs ==========

class TicketResponse(BaseModel):
    """A ticket with the names of its requester and technician."""
    id: int
    client_id: int
    client_name: Optional[str] = None
    title: str
    category: TicketCategory
    description: str
    status: TicketStatus
    opened_at: datetime
    problem_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    impact: Optional[Impact] = None
    scope: Optional[Scope] = None
    frequency: Optional[Frequency] = None
    priority: Optional[Priority] = None
    ai_solution: Optional[str] = None
    technician_id: Optional[int] = None
    technician_name: Optional[str] = None
    technician_solution: Optional[str] = None
    final_solution: Optional[str] = None
    resolution_minutes: Optional[int] = None


class TicketListResponse(BaseModel):
    tickets: List[TicketResponse]
    total_count: int
    page: int
    page_size: int


class TicketActionResponse(BaseModel):
    success: bool = True
