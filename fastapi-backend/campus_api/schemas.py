"""Request and response bodies for the HTTP API.

The web client speaks camelCase (``complaintText``, ``roomNo``...), so every
schema derives from `CamelModel`, which aliases snake_case attributes.
"""

from typing import Literal, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class MessageResponse(CamelModel):
    message: str


class SuccessResponse(CamelModel):
    success: bool = True
    message: str


# --------- Accounts ---------
class SignupRequest(CamelModel):
    username: str
    email: str
    password: str


class AdminSignupRequest(CamelModel):
    # Optional so missing fields surface as a 400 from the service, not a 422.
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    username: str
    password: str


# --------- Complaints ---------
class ComplaintView(CamelModel):
    id: str
    username: str
    complaint_text: str
    date: datetime
    location: str
    sub_location: Optional[str] = None
    room_no: Optional[str] = None
    # data:<content-type>;base64,<payload> or None
    image: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StatusUpdateRequest(CamelModel):
    status: str


class ComplaintSummary(CamelModel):
    id: str
    complaint_text: str
    location: str
    sub_location: Optional[str] = None


class StatusRecordView(CamelModel):
    id: int
    complaint_id: str
    complaint_text: str
    location: str
    sub_location: Optional[str] = None
    status: str
    updated_at: Optional[datetime] = None
    complaint: Optional[ComplaintSummary] = None


# --------- Events ---------
class EventCreate(CamelModel):
    date: str
    department: str
    title: str
    venue: str
    time: str
    time_period: Literal["AM", "PM"]
    description: Optional[str] = None


class EventView(EventCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class EventList(CamelModel):
    success: bool = True
    events: list[EventView]


# --------- Feedback ---------
class FeedbackCreate(CamelModel):
    date: str
    description: str
    rating: float


class FeedbackView(FeedbackCreate):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
