"""Tests for the ticket entity lifecycle rules."""

from datetime import datetime, timedelta, timezone

import pytest

from helpbox.config import Priority, TicketCategory, TicketStatus
from helpbox.core import DomainException, PermissionDeniedException
from helpbox.tickets.domain import (
    AGREEMENT_RECORDED,
    CLOSED_BY_CLIENT,
    NO_SUGGESTION,
    TRUNCATION_MARKER,
    Ticket,
    truncate_solution,
)
from helpbox.triage.domain import TriageResult

OPENED = datetime(2026, 3, 2, 13, 0, tzinfo=timezone.utc)


def open_ticket(solution="Reinicie o computador.", max_length=3500, **kwargs) -> Ticket:
    ticket = Ticket.open(
        client_id=7,
        title="Sem internet",
        category=TicketCategory.SOFTWARE,
        description="O navegador não abre nenhuma página.",
        triage=TriageResult(priority=Priority.HIGH, solution=solution),
        ai_solution_max_length=max_length,
        opened_at=OPENED,
        **kwargs
    )
    ticket.id = 1
    return ticket


def test_open_carries_triage_and_defaults():
    ticket = open_ticket()

    assert ticket.status == TicketStatus.OPEN
    assert ticket.priority == Priority.HIGH
    assert ticket.ai_solution == "Reinicie o computador."
    assert ticket.problem_at == OPENED
    assert ticket.technician_id is None


def test_open_with_empty_solution_uses_placeholder():
    assert open_ticket(solution="").ai_solution == NO_SUGGESTION


def test_long_ai_solution_is_truncated():
    ticket = open_ticket(solution="x" * 3600)

    assert ticket.ai_solution == "x" * 3500 + TRUNCATION_MARKER


def test_solution_at_limit_is_kept():
    assert truncate_solution("y" * 3500, 3500) == "y" * 3500


def test_escalate_releases_technician():
    ticket = open_ticket()
    ticket.technician_id = 3

    ticket.escalate(TicketStatus.IN_PROGRESS)

    assert ticket.status == TicketStatus.IN_PROGRESS
    assert ticket.technician_id is None


def test_owner_closes_ticket():
    ticket = open_ticket()
    closed_at = OPENED + timedelta(hours=2)

    ticket.close_by_client(7, now=closed_at)

    assert ticket.status == TicketStatus.CLOSED
    assert ticket.closed_at == closed_at
    assert ticket.final_solution == CLOSED_BY_CLIENT
    assert ticket.resolution_minutes() == 120


def test_someone_else_cannot_close():
    ticket = open_ticket()

    with pytest.raises(PermissionDeniedException):
        ticket.close_by_client(8)

    assert ticket.status == TicketStatus.OPEN


def test_reopen_clears_technician_and_close_date():
    ticket = open_ticket()
    ticket.technician_id = 3
    ticket.close_by_client(7)

    ticket.reopen()

    assert ticket.status == TicketStatus.IN_PROGRESS
    assert ticket.technician_id is None
    assert ticket.closed_at is None
    assert ticket.resolution_minutes() is None


def test_agree_records_agreement():
    ticket = open_ticket()
    ticket.agree()
    assert ticket.final_solution == AGREEMENT_RECORDED


def test_only_closed_tickets_are_deletable():
    ticket = open_ticket()
    with pytest.raises(DomainException):
        ticket.ensure_deletable()

    ticket.close_by_client(7)
    ticket.ensure_deletable()


def test_raw_values_are_coerced_to_enums():
    ticket = Ticket(
        id=5,
        client_id=1,
        title="t",
        category="Hardware",
        description="d",
        status="Em andamento",
        opened_at=OPENED,
        priority="B",
    )
    assert ticket.category is TicketCategory.HARDWARE
    assert ticket.status is TicketStatus.IN_PROGRESS
    assert ticket.priority is Priority.LOW
