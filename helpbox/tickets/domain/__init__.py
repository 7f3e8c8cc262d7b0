"""
Tickets Domain Layer
====================

Contains:
- Entities: Ticket
- Lifecycle texts written by the workflow routes
"""

from helpbox.tickets.domain.entities import (
    Ticket,
    truncate_solution,
    CLOSED_BY_CLIENT,
    AGREEMENT_RECORDED,
    NO_SUGGESTION,
    TRUNCATION_MARKER,
)

__all__ = [
    "Ticket",
    "truncate_solution",
    "CLOSED_BY_CLIENT",
    "AGREEMENT_RECORDED",
    "NO_SUGGESTION",
    "TRUNCATION_MARKER",
]
