"""Complaint submission, listing and status tracking routes."""

from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlmodel.ext.asyncio.session import AsyncSession

from .. import complaints
from ..database import get_session
from ..errors import ServiceError
from ..schemas import ComplaintView, MessageResponse, StatusRecordView, StatusUpdateRequest

logger = logging.getLogger("campus_api.routes.complaints")

router = APIRouter()


@router.post("/submit-complaint", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def submit_complaint(
    username: str = Form(...),
    complaint_text: str = Form(..., alias="complaintText"),
    date: str = Form(...),
    location: str = Form(...),
    sub_location: Optional[str] = Form(None, alias="subLocation"),
    room_no: Optional[str] = Form(None, alias="roomNo"),
    image: Optional[UploadFile] = File(None),
    session: AsyncSession = Depends(get_session),
):
    """Store a complaint from a multipart form; the optional file part is `image`."""
    upload = None
    if image is not None:
        # Whole file is buffered; there is no size limit at this layer.
        upload = complaints.ImageUpload(data=await image.read(), content_type=image.content_type)

    try:
        await complaints.submit_complaint(
            session,
            username=username,
            complaint_text=complaint_text,
            date=date,
            location=location,
            sub_location=sub_location,
            room_no=room_no,
            image=upload,
        )
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("Complaint submission failed")
        raise HTTPException(status_code=500, detail="Failed to submit complaint") from exc
    return MessageResponse(message="Complaint submitted successfully!")


@router.get("/get-complaints", response_model=List[ComplaintView])
async def get_complaints(session: AsyncSession = Depends(get_session)):
    try:
        return list(await complaints.list_complaints(session))
    except Exception as exc:
        logger.exception("Fetching complaints failed")
        raise HTTPException(status_code=500, detail="Failed to fetch complaints") from exc


@router.post("/update-status/{date}", response_model=MessageResponse)
async def update_status(date: str, body: StatusUpdateRequest, session: AsyncSession = Depends(get_session)):
    """Update the complaint submitted at `date`.

    Submission dates are not unique; when several complaints share one only
    the earliest is updated. Prefer `/complaints/{complaint_id}/status`.
    """
    try:
        await complaints.update_status_by_date(session, date, body.status)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("Status update failed for date %s", date)
        raise HTTPException(status_code=500, detail="Failed to update status") from exc
    return MessageResponse(message="Status updated successfully")


@router.post("/complaints/{complaint_id}/status", response_model=MessageResponse)
async def update_status_by_id(
    complaint_id: str, body: StatusUpdateRequest, session: AsyncSession = Depends(get_session)
):
    try:
        await complaints.update_status_by_id(session, complaint_id, body.status)
    except ServiceError:
        raise
    except Exception as exc:
        logger.exception("Status update failed for complaint %s", complaint_id)
        raise HTTPException(status_code=500, detail="Failed to update status") from exc
    return MessageResponse(message="Status updated successfully")


@router.get("/get-status", response_model=List[StatusRecordView])
async def get_status(session: AsyncSession = Depends(get_session)):
    try:
        return await complaints.list_status_history(session)
    except Exception as exc:
        logger.exception("Fetching status history failed")
        raise HTTPException(status_code=500, detail="Error fetching status data") from exc
