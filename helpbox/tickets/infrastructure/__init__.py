"""
Tickets Infrastructure Layer
============================

Contains:
- Models: SQLAlchemy ORM model (tickets)
- Repositories: data access implementation
"""

from helpbox.tickets.infrastructure.models import TicketModel
from helpbox.tickets.infrastructure.repositories import SQLAlchemyTicketRepository

__all__ = [
    "TicketModel",
    "SQLAlchemyTicketRepository",
]
