"""
User Domain Entities
====================

Pure Python domain entities for accounts and login sessions.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from helpbox.config import AccessLevel

PLACEHOLDER = "Não Definido"


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes (SQLite hands those back) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class User:
    """
    Account of someone using the help desk.

    Access levels: 1 client, 2 technician, 3 administrator.
    """
    id: Optional[int]
    first_name: str
    email: str
    department: str
    access_level: AccessLevel = AccessLevel.CLIENT
    last_name: Optional[str] = None
    job_title: Optional[str] = None
    password_hash: Optional[str] = None

    def __post_init__(self):
        self.access_level = AccessLevel(self.access_level)

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    @property
    def is_technician(self) -> bool:
        return self.access_level >= AccessLevel.TECHNICIAN

    @property
    def is_admin(self) -> bool:
        return self.access_level == AccessLevel.ADMIN

    def has_access(self, level: AccessLevel) -> bool:
        """True when this user's tier is at least ``level``."""
        return self.access_level >= level


@dataclass
class LoginSession:
    """Server-side session created at login."""
    user_id: int
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return as_utc(self.expires_at) <= now
