"""
Event Router
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import get_current_user, require_club_head_or_pr, require_student
from ..auth.models import CurrentUser
from ..responses import ok
from .models import EventCreate, EventUpdate
from .service import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
async def list_events(
    clubId: Optional[str] = Query(None, description="동아리 필터"),
    user: CurrentUser = Depends(get_current_user),
):
    """전체 행사 (날짜순)"""
    return ok("Events retrieved successfully", EventService().list_events(user, clubId))


@router.get("/club/{club_id}")
async def get_club_events(club_id: str, user: CurrentUser = Depends(get_current_user)):
    return ok("Club events retrieved successfully", EventService().club_events(user, club_id))


@router.get("/{day}")
async def get_events_on_day(day: str, user: CurrentUser = Depends(get_current_user)):
    """특정 날짜 (YYYY-MM-DD) 행사, 시작 시간순"""
    return ok("Events retrieved successfully", EventService().events_on(user, day))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_event(body: EventCreate, user: CurrentUser = Depends(require_club_head_or_pr)):
    return ok("Event created successfully", EventService().create_event(user, body))


@router.put("/{event_id}")
async def update_event(event_id: str, body: EventUpdate, user: CurrentUser = Depends(require_club_head_or_pr)):
    return ok("Event updated successfully", EventService().update_event(user, event_id, body))


@router.delete("/{event_id}")
async def delete_event(event_id: str, user: CurrentUser = Depends(require_club_head_or_pr)):
    EventService().delete_event(user, event_id)
    return ok("Event deleted successfully")


@router.post("/{event_id}/register")
async def register_for_event(event_id: str, user: CurrentUser = Depends(require_student)):
    return ok("Successfully registered for event", EventService().register(user, event_id))


@router.delete("/{event_id}/register")
async def unregister_from_event(event_id: str, user: CurrentUser = Depends(require_student)):
    return ok("Successfully unregistered from event", EventService().unregister(user, event_id))
