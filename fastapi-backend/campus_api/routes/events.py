"""Campus event board."""

from typing import List
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..database import get_session
from ..models import Event
from ..schemas import EventCreate, EventList, EventView, SuccessResponse

logger = logging.getLogger("campus_api.routes.events")

router = APIRouter()


@router.post("/admin/post-event", response_model=SuccessResponse, status_code=status.HTTP_201_CREATED)
async def post_event(body: EventCreate, session: AsyncSession = Depends(get_session)):
    event = Event(**body.model_dump())
    session.add(event)
    try:
        await session.commit()
    except Exception as exc:
        await session.rollback()
        logger.exception("Event posting failed")
        raise HTTPException(status_code=500, detail="Failed to post event") from exc
    logger.info("Posted event %r for %s", event.title, event.department)
    return SuccessResponse(message="Event posted successfully!")


@router.get("/events", response_model=EventList)
async def list_events(session: AsyncSession = Depends(get_session)):
    try:
        result = await session.exec(select(Event).order_by(Event.id))
        events: List[EventView] = [EventView.model_validate(e.model_dump()) for e in result]
    except Exception as exc:
        logger.exception("Fetching events failed")
        raise HTTPException(status_code=500, detail="Failed to fetch events") from exc
    return EventList(events=events)
