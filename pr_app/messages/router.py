"""
Message Router

고정 경로 (/college-wide, /my-clubs) 를 /{message_id} 보다 먼저 등록한다.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..auth.dependencies import get_current_user, require_club_head_or_pr
from ..auth.models import CurrentUser
from ..responses import ok
from .models import MessageCreate, PageParams
from .service import MessageService

router = APIRouter(prefix="/messages", tags=["messages"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def send_message(body: MessageCreate, user: CurrentUser = Depends(require_club_head_or_pr)):
    return ok("Message sent successfully", MessageService().send(user, body))


@router.get("")
async def list_messages(
    type: Optional[str] = Query(None, description="college_wide | club_specific"),
    clubId: Optional[str] = None,
    page: int = 1,
    limit: int = 20,
    urgent: bool = False,
    user: CurrentUser = Depends(get_current_user),
):
    """요청자에게 보이는 메시지 (최신순)"""
    data = MessageService().list_messages(user, PageParams.clamp(page, limit), type, clubId, urgent)
    return ok("Messages retrieved successfully", data)


@router.get("/college-wide")
async def list_college_wide(
    page: int = 1,
    limit: int = 20,
    urgent: bool = False,
    user: CurrentUser = Depends(get_current_user),
):
    data = MessageService().college_wide(PageParams.clamp(page, limit), urgent)
    return ok("College-wide messages retrieved successfully", data)


@router.get("/my-clubs")
async def list_my_club_messages(
    page: int = 1,
    limit: int = 20,
    urgent: bool = False,
    user: CurrentUser = Depends(get_current_user),
):
    data = MessageService().my_club_messages(user, PageParams.clamp(page, limit), urgent)
    return ok("Club messages retrieved successfully", data)


@router.get("/club/{club_id}")
async def list_club_messages(
    club_id: str,
    page: int = 1,
    limit: int = 20,
    urgent: bool = False,
    user: CurrentUser = Depends(get_current_user),
):
    data = MessageService().club_messages(user, club_id, PageParams.clamp(page, limit), urgent)
    return ok("Club messages retrieved successfully", data)


@router.put("/{message_id}/mark-read")
async def mark_message_read(message_id: str, user: CurrentUser = Depends(get_current_user)):
    data = MessageService().mark_read(user, message_id)
    message = "Message already marked as read" if data["alreadyRead"] else "Message marked as read"
    return ok(message, data)
