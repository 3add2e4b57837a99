"""
Club Router

/my-clubs 는 /{club_id} 보다 먼저 등록해야 한다.
"""
from fastapi import APIRouter, Depends, status

from ..auth.dependencies import get_current_user, require_club_head_or_pr, require_pr_council, require_student
from ..auth.models import CurrentUser
from ..responses import ok
from .models import ClubCreate, MemberDecision, MemberRemoval
from .service import ClubService

router = APIRouter(prefix="/clubs", tags=["clubs"])


@router.get("/my-clubs")
async def get_my_clubs(user: CurrentUser = Depends(get_current_user)):
    return ok("User clubs retrieved successfully", ClubService().my_clubs(user))


@router.get("")
async def list_clubs(user: CurrentUser = Depends(get_current_user)):
    """활성 동아리 목록 (이름순)"""
    return ok("Clubs retrieved successfully", ClubService().list_clubs(user))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_club(body: ClubCreate, user: CurrentUser = Depends(require_pr_council)):
    return ok("Club created successfully", ClubService().create_club(user, body))


@router.get("/{club_id}")
async def get_club(club_id: str, user: CurrentUser = Depends(get_current_user)):
    return ok("Club details retrieved successfully", ClubService().get_club(user, club_id))


@router.get("/{club_id}/members")
async def get_club_members(club_id: str, user: CurrentUser = Depends(get_current_user)):
    return ok("Club members retrieved successfully", ClubService().get_members(user, club_id))


@router.post("/{club_id}/join-request")
async def request_join(club_id: str, user: CurrentUser = Depends(require_student)):
    return ok("Join request submitted successfully", ClubService().request_join(user, club_id))


@router.put("/{club_id}/approve-member")
async def approve_member(
    club_id: str,
    body: MemberDecision,
    user: CurrentUser = Depends(require_club_head_or_pr),
):
    """가입 신청 승인/거절 ({userId, action: approve|reject})"""
    result = ClubService().resolve_request(user, club_id, body)
    return ok(result["message"], result["data"])


@router.delete("/{club_id}/remove-member")
async def remove_member(
    club_id: str,
    body: MemberRemoval,
    user: CurrentUser = Depends(require_club_head_or_pr),
):
    return ok("Member removed from club successfully", ClubService().remove_member(user, club_id, body))
