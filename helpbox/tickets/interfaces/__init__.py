"""
Tickets Interfaces Layer
========================

FastAPI router for the ticket lifecycle.
"""

from helpbox.tickets.interfaces.controllers import router as tickets_router
from helpbox.tickets.interfaces.controllers import get_triage_service

__all__ = ["tickets_router", "get_triage_service"]
