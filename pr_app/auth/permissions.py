"""
Authorization Layer - 권한 판정

모두 부작용 없는 순수 함수다. club / event 문서는 호출하는 쪽에서 미리 읽어 넘긴다.
"""
from typing import Any, Dict, Optional

from .models import CurrentUser, Role


def _same_id(value: Any, user_id: str) -> bool:
    return value is not None and str(value) == user_id


def is_club_head_of(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    return bool(club) and user.role == Role.CLUB_HEAD and _same_id(club.get("clubHead"), user.userId)


def is_member_of(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    if not club:
        return False
    return any(_same_id(member, user.userId) for member in club.get("members", []))


def has_pending_request(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    if not club:
        return False
    return any(_same_id(req.get("userId"), user.userId) for req in club.get("pendingRequests", []))


def can_manage_club(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    """PR 위원회 또는 해당 동아리 회장"""
    if user.role == Role.PR_COUNCIL:
        return True
    return is_club_head_of(user, club)


def can_manage_event(user: CurrentUser, event: Dict[str, Any], club: Optional[Dict[str, Any]]) -> bool:
    """PR 위원회 또는 행사 주최 동아리의 회장"""
    if user.role == Role.PR_COUNCIL:
        return True
    if not club or not _same_id(event.get("clubId"), str(club.get("_id"))):
        return False
    return is_club_head_of(user, club)


def can_send_to_club(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    return can_manage_club(user, club)


def can_view_club_detail(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    """관리 권한이 있거나 멤버"""
    return can_manage_club(user, club) or is_member_of(user, club)


def can_view_club_messages(user: CurrentUser, club: Optional[Dict[str, Any]]) -> bool:
    if user.role == Role.PR_COUNCIL:
        return True
    if user.role == Role.CLUB_HEAD:
        return is_club_head_of(user, club)
    return is_member_of(user, club)
