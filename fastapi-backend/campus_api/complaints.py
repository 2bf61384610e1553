"""Complaint submission and status tracking.

Every write here touches two tables: the complaint itself and the append-only
status history. Both go out in one commit so the newest `StatusRecord` for a
complaint always carries the complaint's current status.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, Optional
import base64
import logging

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from .errors import BadRequestError, NotFoundError
from .models import Complaint, ComplaintStatus, StatusRecord, ROOMLESS_LOCATIONS, utcnow
from .observability import complaints_submitted_total, status_updates_total
from .schemas import ComplaintSummary, ComplaintView, StatusRecordView

logger = logging.getLogger("campus_api.complaints")

DEFAULT_IMAGE_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class ImageUpload:
    data: bytes
    content_type: Optional[str] = None


def parse_complaint_date(value) -> datetime:
    """Parse an ISO-8601 date or datetime into an aware UTC datetime.

    Naive values are taken as UTC, so "2024-03-01" and
    "2024-03-01T00:00:00Z" name the same instant.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError as exc:
            raise BadRequestError(f"Invalid date: {value}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def validate_status(value: str) -> ComplaintStatus:
    try:
        return ComplaintStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ComplaintStatus)
        raise BadRequestError(f"Invalid status. Allowed: {allowed}") from None


def normalize_room_no(location: str, room_no: Optional[str]) -> Optional[str]:
    if location.strip().lower() in ROOMLESS_LOCATIONS:
        return None
    return room_no or None


def image_data_uri(complaint: Complaint) -> Optional[str]:
    if not complaint.image_data:
        return None
    payload = base64.b64encode(complaint.image_data).decode("ascii")
    content_type = complaint.image_content_type or DEFAULT_IMAGE_CONTENT_TYPE
    return f"data:{content_type};base64,{payload}"


def to_view(complaint: Complaint) -> ComplaintView:
    return ComplaintView(
        id=complaint.id,
        username=complaint.username,
        complaint_text=complaint.complaint_text,
        date=complaint.date,
        location=complaint.location,
        sub_location=complaint.sub_location,
        room_no=complaint.room_no,
        image=image_data_uri(complaint),
        status=complaint.status,
        created_at=complaint.created_at,
        updated_at=complaint.updated_at,
    )


def _snapshot(complaint: Complaint, timestamp: datetime) -> StatusRecord:
    return StatusRecord(
        complaint_id=complaint.id,
        complaint_text=complaint.complaint_text,
        location=complaint.location,
        sub_location=complaint.sub_location,
        status=complaint.status,
        updated_at=timestamp,
    )


async def submit_complaint(
    session: AsyncSession,
    username: str,
    complaint_text: str,
    date,
    location: str,
    sub_location: Optional[str] = None,
    room_no: Optional[str] = None,
    image: Optional[ImageUpload] = None,
) -> Complaint:
    now = utcnow()
    complaint = Complaint(
        username=username,
        complaint_text=complaint_text,
        date=parse_complaint_date(date),
        location=location,
        sub_location=sub_location or None,
        room_no=normalize_room_no(location, room_no),
        status=ComplaintStatus.YET_TO_BEGIN.value,
        created_at=now,
        updated_at=now,
    )
    if image is not None and image.data:
        complaint.image_data = image.data
        complaint.image_content_type = image.content_type or DEFAULT_IMAGE_CONTENT_TYPE

    session.add(complaint)
    session.add(_snapshot(complaint, now))
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    await session.refresh(complaint)

    complaints_submitted_total.labels(has_image=str(complaint.image_data is not None).lower()).inc()
    logger.info("Complaint %s submitted by %s at %s", complaint.id, username, location)
    return complaint


async def list_complaints(session: AsyncSession) -> Iterator[ComplaintView]:
    """Read every complaint once and yield views lazily.

    The returned iterator wraps a single query result and cannot be restarted.
    """
    result = await session.exec(select(Complaint).order_by(Complaint.created_at))
    return (to_view(complaint) for complaint in result)


async def _apply_status(session: AsyncSession, complaint: Complaint, new_status: ComplaintStatus) -> Complaint:
    now = utcnow()
    previous = complaint.status
    complaint.status = new_status.value
    complaint.updated_at = now
    session.add(complaint)
    session.add(_snapshot(complaint, now))
    try:
        await session.commit()
    except Exception:
        await session.rollback()
        raise
    await session.refresh(complaint)

    status_updates_total.labels(status=new_status.value).inc()
    logger.info("Complaint %s status %r -> %r", complaint.id, previous, complaint.status)
    return complaint


async def update_status_by_date(session: AsyncSession, date, new_status: str) -> Complaint:
    """Set the status of the complaint submitted at `date`.

    Dates are not unique: when several complaints share one, only the
    earliest created is updated.
    """
    status = validate_status(new_status)
    lookup = parse_complaint_date(date)
    statement = (
        select(Complaint)
        .where(Complaint.date == lookup)
        .order_by(Complaint.created_at)
        .limit(1)
    )
    result = await session.exec(statement)
    complaint = result.first()
    if not complaint:
        raise NotFoundError("Complaint not found")
    return await _apply_status(session, complaint, status)


async def update_status_by_id(session: AsyncSession, complaint_id: str, new_status: str) -> Complaint:
    status = validate_status(new_status)
    complaint = await session.get(Complaint, complaint_id)
    if not complaint:
        raise NotFoundError("Complaint not found")
    return await _apply_status(session, complaint, status)


async def list_status_history(session: AsyncSession) -> list[StatusRecordView]:
    statement = (
        select(StatusRecord, Complaint)
        .join(Complaint, StatusRecord.complaint_id == Complaint.id, isouter=True)
        .order_by(StatusRecord.id)
    )
    result = await session.exec(statement)
    history = []
    for record, complaint in result:
        summary = None
        if complaint is not None:
            summary = ComplaintSummary(
                id=complaint.id,
                complaint_text=complaint.complaint_text,
                location=complaint.location,
                sub_location=complaint.sub_location,
            )
        history.append(
            StatusRecordView(
                id=record.id,
                complaint_id=record.complaint_id,
                complaint_text=record.complaint_text,
                location=record.location,
                sub_location=record.sub_location,
                status=record.status,
                updated_at=record.updated_at,
                complaint=summary,
            )
        )
    return history
