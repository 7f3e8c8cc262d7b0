"""
Tickets Infrastructure Models
==============================

SQLAlchemy ORM model for help-desk tickets.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, DateTime, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from helpbox.infrastructure.database import Base


class TicketModel(Base):
    """
    Database model for Ticket entity.

    Enum-valued columns hold the enum ``value`` (e.g. "Em andamento").
    """
    __tablename__ = "tickets"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Requester
    client_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
        index=True
    )

    # Ticket content
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Aberto", index=True)

    # Timestamps
    opened_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True
    )
    problem_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    closed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Requester's assessment
    impact: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    scope: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    frequency: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    # Triage output (write-once)
    priority: Mapped[Optional[str]] = mapped_column(String(1), nullable=True)
    ai_solution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Human handling
    technician_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
        index=True
    )
    technician_solution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    final_solution: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
