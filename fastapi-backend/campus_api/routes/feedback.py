"""Anonymous feedback collection."""

from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..database import get_session
from ..models import Feedback
from ..schemas import FeedbackCreate, FeedbackView, SuccessResponse

logger = logging.getLogger("campus_api.routes.feedback")

router = APIRouter(prefix="/api")


@router.post("/feedback", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(body: FeedbackCreate, session: AsyncSession = Depends(get_session)):
    session.add(Feedback(**body.model_dump()))
    try:
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.exception("Feedback submission failed")
        raise HTTPException(status_code=500, detail="Failed to submit feedback") from exc
    return SuccessResponse(message="Feedback submitted successfully!")


@router.get("/feedback", response_model=List[FeedbackView])
async def list_feedback(session: AsyncSession = Depends(get_session)):
    try:
        result = await session.exec(select(Feedback).order_by(Feedback.id))
        return [FeedbackView.model_validate(f.model_dump()) for f in result]
    except Exception as exc:
        logger.exception("Fetching feedback failed")
        raise HTTPException(status_code=500, detail="Failed to fetch feedback") from exc
