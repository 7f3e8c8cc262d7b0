"""
Tickets Infrastructure Repositories
====================================

SQLAlchemy implementation of the ticket repository.

Listings sort before paginating so the first page already shows what
matters to the viewer: their own in-progress work, then tickets free to be
picked up, then the rest.
"""

from typing import List, Optional, Tuple

from sqlalchemy import String, and_, case, cast, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from helpbox.config import TicketStatus
from helpbox.core import RepositoryException
from helpbox.tickets.application import ITicketRepository, TicketListQuery
from helpbox.tickets.domain import Ticket
from helpbox.tickets.infrastructure.models import TicketModel
from helpbox.users.infrastructure.models import UserModel

IN_PROGRESS = TicketStatus.IN_PROGRESS.value
OPEN = TicketStatus.OPEN.value
CLOSED = TicketStatus.CLOSED.value


def _full_name(first: Optional[str], last: Optional[str]) -> Optional[str]:
    if not first:
        return None
    return " ".join(part for part in (first, last) if part)


def _to_entity(
    model: TicketModel,
    client_name: Optional[str] = None,
    technician_name: Optional[str] = None
) -> Ticket:
    return Ticket(
        id=model.id,
        client_id=model.client_id,
        title=model.title,
        category=model.category,
        description=model.description,
        status=model.status,
        opened_at=model.opened_at,
        problem_at=model.problem_at,
        closed_at=model.closed_at,
        impact=model.impact,
        scope=model.scope,
        frequency=model.frequency,
        priority=model.priority,
        ai_solution=model.ai_solution,
        technician_id=model.technician_id,
        technician_solution=model.technician_solution,
        final_solution=model.final_solution,
        client_name=client_name,
        technician_name=technician_name,
    )


def _value(enum_value) -> Optional[str]:
    return enum_value.value if enum_value is not None else None


class SQLAlchemyTicketRepository(ITicketRepository):
    """SQLAlchemy implementation for tickets."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _named_select(self):
        client = aliased(UserModel, name="client")
        technician = aliased(UserModel, name="technician")
        stmt = (
            select(
                TicketModel,
                client.first_name, client.last_name,
                technician.first_name, technician.last_name,
            )
            .join(client, TicketModel.client_id == client.id)
            .outerjoin(technician, TicketModel.technician_id == technician.id)
        )
        return stmt

    @staticmethod
    def _row_to_entity(row) -> Ticket:
        model, client_first, client_last, tech_first, tech_last = row
        return _to_entity(
            model,
            client_name=_full_name(client_first, client_last),
            technician_name=_full_name(tech_first, tech_last),
        )

    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        stmt = self._named_select().where(TicketModel.id == ticket_id)
        result = await self._session.execute(stmt)
        row = result.one_or_none()
        return self._row_to_entity(row) if row else None

    async def create(self, ticket: Ticket) -> Ticket:
        model = TicketModel(
            client_id=ticket.client_id,
            title=ticket.title,
            category=ticket.category.value,
            description=ticket.description,
            status=ticket.status.value,
            opened_at=ticket.opened_at,
            problem_at=ticket.problem_at,
            closed_at=ticket.closed_at,
            impact=_value(ticket.impact),
            scope=_value(ticket.scope),
            frequency=_value(ticket.frequency),
            priority=_value(ticket.priority),
            ai_solution=ticket.ai_solution,
            technician_id=ticket.technician_id,
            technician_solution=ticket.technician_solution,
            final_solution=ticket.final_solution,
        )
        self._session.add(model)
        await self._session.flush()

        ticket.id = model.id
        return ticket

    async def save(self, ticket: Ticket) -> Ticket:
        model = await self._session.get(TicketModel, ticket.id)
        if model is None:
            raise RepositoryException(f"Ticket {ticket.id} vanished during update")

        # priority and ai_solution are never rewritten
        model.status = ticket.status.value
        model.closed_at = ticket.closed_at
        model.technician_id = ticket.technician_id
        model.technician_solution = ticket.technician_solution
        model.final_solution = ticket.final_solution

        await self._session.flush()
        return ticket

    async def delete(self, ticket_id: int) -> None:
        await self._session.execute(delete(TicketModel).where(TicketModel.id == ticket_id))
        await self._session.flush()

    def _filters(self, query: TicketListQuery) -> list:
        viewer = query.viewer_id
        conditions = []

        if query.kind == "mine":
            if query.mine_type == "created":
                conditions.append(TicketModel.client_id == viewer)
            elif query.mine_type == "assigned":
                conditions.append(TicketModel.technician_id == viewer)
            else:
                conditions.append(or_(
                    TicketModel.technician_id == viewer,
                    TicketModel.client_id == viewer
                ))
        elif query.kind == "queue":
            conditions.append(TicketModel.technician_id.is_(None))
            conditions.append(TicketModel.status == IN_PROGRESS)

        if query.status is not None:
            conditions.append(TicketModel.status == query.status.value)

        term = query.search_term
        if term:
            pattern = f"%{term}%"
            text_match = or_(
                TicketModel.title.ilike(pattern),
                TicketModel.description.ilike(pattern)
            )
            if term.isdigit():
                # All-digit input also matches ticket number prefixes
                text_match = or_(cast(TicketModel.id, String).like(f"{term}%"), text_match)
            conditions.append(text_match)

        return conditions

    def _ordering(self, query: TicketListQuery) -> list:
        viewer = query.viewer_id
        mine_in_progress = and_(
            TicketModel.status == IN_PROGRESS,
            TicketModel.technician_id == viewer
        )

        if query.kind == "mine":
            return [
                case((mine_in_progress, 0), else_=1),
                case(
                    {IN_PROGRESS: 1, OPEN: 2, CLOSED: 3},
                    value=TicketModel.status,
                    else_=9
                ),
                TicketModel.opened_at.desc(),
                TicketModel.id.desc(),
            ]

        return [
            case(
                (mine_in_progress, 0),
                (
                    and_(
                        TicketModel.status == IN_PROGRESS,
                        TicketModel.technician_id.is_(None),
                        TicketModel.client_id != viewer
                    ),
                    1
                ),
                else_=2
            ),
            case((TicketModel.status == OPEN, 0), else_=1),
            TicketModel.opened_at.desc(),
            TicketModel.id.desc(),
        ]

    async def list(self, query: TicketListQuery) -> Tuple[List[Ticket], int]:
        conditions = self._filters(query)

        count_stmt = select(func.count(TicketModel.id)).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            self._named_select()
            .where(*conditions)
            .order_by(*self._ordering(query))
            .offset(query.offset)
            .limit(query.page_size)
        )
        result = await self._session.execute(stmt)
        tickets = [self._row_to_entity(row) for row in result.all()]

        return tickets, total
