from typing import Optional
from datetime import datetime, timezone
from enum import Enum
import uuid

from sqlmodel import SQLModel, Field
from sqlalchemy import DateTime, LargeBinary, UniqueConstraint


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid_str() -> str:
    return str(uuid.uuid4())


class AccountKind(str, Enum):
    USER = "user"
    ADMIN = "admin"


class ComplaintStatus(str, Enum):
    YET_TO_BEGIN = "Yet to Begin"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"


# Locations that have no room concept; a submitted room number is dropped.
ROOMLESS_LOCATIONS = frozenset({"mess", "garden"})


class Account(SQLModel, table=True):
    """User and admin credentials in one table, namespaced by `kind`."""

    __tablename__ = "accounts"
    __table_args__ = (
        UniqueConstraint("kind", "username", name="uq_accounts_kind_username"),
        UniqueConstraint("kind", "email", name="uq_accounts_kind_email"),
    )
    id: Optional[str] = Field(default_factory=_uuid_str, primary_key=True)
    kind: str = Field(index=True)
    username: str
    email: str
    password_hash: str
    created_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Complaint(SQLModel, table=True):
    __tablename__ = "complaints"
    id: Optional[str] = Field(default_factory=_uuid_str, primary_key=True)
    # Free text; not a reference to accounts.
    username: str
    complaint_text: str
    # Submission date, also the lookup key for /update-status/{date}
    date: datetime = Field(sa_type=DateTime(timezone=True), index=True)
    location: str
    sub_location: Optional[str] = None
    room_no: Optional[str] = None
    image_data: Optional[bytes] = Field(default=None, sa_type=LargeBinary)
    image_content_type: Optional[str] = None
    status: str = Field(default=ComplaintStatus.YET_TO_BEGIN.value)
    created_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class StatusRecord(SQLModel, table=True):
    """Append-only snapshot of a complaint's status at one point in time."""

    __tablename__ = "status_records"
    id: Optional[int] = Field(default=None, primary_key=True)
    complaint_id: str = Field(foreign_key="complaints.id", index=True)
    complaint_text: str
    location: str
    sub_location: Optional[str] = None
    status: str
    updated_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Event(SQLModel, table=True):
    __tablename__ = "events"
    id: Optional[int] = Field(default=None, primary_key=True)
    date: str
    department: str
    title: str
    venue: str
    time: str
    time_period: str
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Feedback(SQLModel, table=True):
    __tablename__ = "feedback"
    id: Optional[int] = Field(default=None, primary_key=True)
    date: str
    description: str
    rating: float
    created_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
