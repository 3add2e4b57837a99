"""
Club Service

동아리 조회, 가입 신청 / 승인 / 거절 / 제명
"""
from typing import Any, Dict, Optional

from bson import ObjectId
from loguru import logger
from pymongo.errors import DuplicateKeyError

from database import ClubStore, MembershipSyncError, UserStore, to_object_id

from ..auth.models import CurrentUser, Role
from ..auth.permissions import (
    can_manage_club,
    can_view_club_detail,
    has_pending_request,
    is_member_of,
)
from ..errors import Conflict, NotFound, PermissionDenied, ValidationFailed, invalid_id
from .models import ClubCreate, MemberAction, MemberDecision, MemberRemoval

DEFAULT_CATEGORY = "general"
DEFAULT_BRAND_COLOR = "#00ff88"
DEFAULT_ESTABLISHED_YEAR = 2020


def _public_user(doc: Optional[Dict[str, Any]], user_id: Optional[ObjectId] = None) -> Optional[Dict[str, Any]]:
    if doc is None:
        return {"_id": user_id} if user_id is not None else None
    return {"_id": doc["_id"], "name": doc.get("name"), "rollNumber": doc.get("rollNumber")}


class ClubService:
    """동아리 서비스"""

    def __init__(self):
        self.clubs = ClubStore()
        self.users = UserStore()

    # =============================================
    # 공통
    # =============================================

    def load_club(self, club_id: str) -> Dict[str, Any]:
        oid = to_object_id(club_id)
        if oid is None:
            raise invalid_id("clubId")
        club = self.clubs.get(oid)
        if club is None:
            raise NotFound("CLUB_NOT_FOUND", "Club not found")
        return club

    def _presentation(self, club: Dict[str, Any], heads: Dict[ObjectId, Dict[str, Any]]) -> Dict[str, Any]:
        head_id = club.get("clubHead")
        return {
            "_id": club["_id"],
            "name": club["name"],
            "description": club.get("description"),
            "category": club.get("category") or DEFAULT_CATEGORY,
            "brandColor": club.get("brandColor") or DEFAULT_BRAND_COLOR,
            "logoUrl": club.get("logoUrl"),
            "establishedYear": club.get("establishedYear") or DEFAULT_ESTABLISHED_YEAR,
            "clubHead": _public_user(heads.get(head_id), head_id),
            "memberCount": len(club.get("members", [])),
            "isActive": club.get("isActive", True),
            "createdAt": club.get("createdAt"),
        }

    # =============================================
    # 조회
    # =============================================

    def list_clubs(self, caller: CurrentUser) -> Dict[str, Any]:
        clubs = self.clubs.list_active()
        heads = self.users.get_public_many(club.get("clubHead") for club in clubs)

        result = []
        for club in clubs:
            item = self._presentation(club, heads)
            item["pendingRequestsCount"] = len(club.get("pendingRequests", []))
            item["canJoin"] = not is_member_of(caller, club)
            result.append(item)
        return {"clubs": result, "totalCount": len(result)}

    def my_clubs(self, caller: CurrentUser) -> Dict[str, Any]:
        clubs = self.clubs.list_for_member(ObjectId(caller.userId))
        heads = self.users.get_public_many(club.get("clubHead") for club in clubs)
        result = [self._presentation(club, heads) for club in clubs]
        return {"clubs": result, "totalCount": len(result)}

    def get_club(self, caller: CurrentUser, club_id: str) -> Dict[str, Any]:
        club = self.load_club(club_id)

        can_manage = can_manage_club(caller, club)
        is_member = is_member_of(caller, club)

        pending = club.get("pendingRequests", [])
        people = self.users.get_public_many(
            [club.get("clubHead")] + list(club.get("members", [])) + [req["userId"] for req in pending]
        )

        detail = self._presentation(club, people)
        detail["userStatus"] = {
            "isMember": is_member,
            "canManage": can_manage,
            "hasPendingRequest": has_pending_request(caller, club),
        }
        if can_view_club_detail(caller, club):
            detail["members"] = [_public_user(people.get(uid), uid) for uid in club.get("members", [])]
        if can_manage:
            detail["pendingRequests"] = [
                {"userId": _public_user(people.get(req["userId"]), req["userId"]), "requestDate": req.get("requestDate")}
                for req in pending
            ]
        return {"club": detail}

    def get_members(self, caller: CurrentUser, club_id: str) -> Dict[str, Any]:
        club = self.load_club(club_id)
        if not can_view_club_detail(caller, club):
            logger.warning(f"멤버 조회 거부: user={caller.userId} club={club['_id']}")
            raise PermissionDenied("ACCESS_DENIED", "You do not have permission to view club members")

        member_ids = club.get("members", [])
        people = self.users.get_public_many(member_ids)
        members = []
        for uid in member_ids:
            member = _public_user(people.get(uid), uid)
            if uid in people:
                member["createdAt"] = people[uid].get("createdAt")
            members.append(member)

        return {
            "clubId": club["_id"],
            "clubName": club["name"],
            "members": members,
            "memberCount": len(members),
        }

    # =============================================
    # 생성 (PR 위원회)
    # =============================================

    def create_club(self, caller: CurrentUser, body: ClubCreate) -> Dict[str, Any]:
        head_id = to_object_id(body.clubHeadId)
        if head_id is None:
            raise invalid_id("clubHeadId")
        head = self.users.get(head_id)
        if head is None:
            raise NotFound("USER_NOT_FOUND", "Club head user not found")
        if head.get("role") != Role.CLUB_HEAD.value:
            raise ValidationFailed(
                "VALIDATION_ERROR", "clubHeadId must reference a club head", field="clubHeadId"
            )

        name = body.name.strip()
        if self.clubs.get_by_name(name) is not None:
            raise Conflict("DUPLICATE_ENTRY", f"Club '{name}' already exists", status_code=409, field="name")
        try:
            club = self.clubs.create(
                name=name,
                description=body.description.strip(),
                club_head=head_id,
                category=body.category,
                brand_color=body.brandColor,
                logo_url=body.logoUrl,
                established_year=body.establishedYear,
            )
        except DuplicateKeyError:
            raise Conflict("DUPLICATE_ENTRY", f"Club '{name}' already exists", status_code=409, field="name")

        logger.info(f"동아리 생성: {name} (head={head_id}, by={caller.userId})")
        return {"club": self._presentation(club, {head_id: head})}

    # =============================================
    # 가입 신청 (학생)
    # =============================================

    def request_join(self, caller: CurrentUser, club_id: str) -> Dict[str, Any]:
        club = self.load_club(club_id)
        user_id = ObjectId(caller.userId)

        updated = self.clubs.add_join_request(club["_id"], user_id)
        if updated is not None:
            logger.info(f"가입 신청: user={user_id} club={club['name']}")
            return {
                "clubId": club["_id"],
                "clubName": club["name"],
                "status": "pending",
            }

        # 조건 불일치 원인 확인
        current = self.clubs.get(club["_id"])
        if current is None:
            raise NotFound("CLUB_NOT_FOUND", "Club not found")
        if is_member_of(caller, current):
            raise Conflict("ALREADY_MEMBER", "You are already a member of this club")
        if has_pending_request(caller, current):
            raise Conflict("REQUEST_EXISTS", "You already have a pending request for this club")

        logger.warning(f"가입 신청 경합: user={user_id} club={club['name']}")
        raise Conflict("CONCURRENT_UPDATE", "Club changed during the request, please retry", status_code=409)

    # =============================================
    # 승인 / 거절 / 제명 (회장, PR 위원회)
    # =============================================

    def _require_manager(self, caller: CurrentUser, club: Dict[str, Any]) -> None:
        if not can_manage_club(caller, club):
            logger.warning(f"동아리 관리 거부: user={caller.userId} club={club['_id']}")
            raise PermissionDenied("ACCESS_DENIED", "You can only manage your own club members")

    def resolve_request(self, caller: CurrentUser, club_id: str, body: MemberDecision) -> Dict[str, Any]:
        valid_actions = [a.value for a in MemberAction]
        if not body.userId or body.action not in valid_actions:
            raise ValidationFailed("INVALID_REQUEST", "User ID and valid action (approve/reject) are required")
        user_id = to_object_id(body.userId)
        if user_id is None:
            raise invalid_id("userId")

        club = self.load_club(club_id)
        self._require_manager(caller, club)

        if body.action == MemberAction.APPROVE.value:
            try:
                updated = self.clubs.approve_request(club["_id"], user_id)
            except MembershipSyncError:
                raise NotFound("USER_NOT_FOUND", "User not found")
            if updated is None:
                raise NotFound("REQUEST_NOT_FOUND", "Join request not found")
            message = "Member request approved successfully"
            member_count = len(updated.get("members", []))
        else:
            if not self.clubs.reject_request(club["_id"], user_id):
                raise NotFound("REQUEST_NOT_FOUND", "Join request not found")
            message = "Member request rejected successfully"
            member_count = len(club.get("members", []))

        logger.info(f"가입 신청 {body.action}: user={user_id} club={club['name']} by={caller.userId}")
        return {
            "message": message,
            "data": {
                "clubId": club["_id"],
                "action": body.action,
                "userId": user_id,
                "memberCount": member_count,
            },
        }

    def remove_member(self, caller: CurrentUser, club_id: str, body: MemberRemoval) -> Dict[str, Any]:
        if not body.userId:
            raise ValidationFailed("INVALID_REQUEST", "User ID is required")
        user_id = to_object_id(body.userId)
        if user_id is None:
            raise invalid_id("userId")

        club = self.load_club(club_id)
        self._require_manager(caller, club)

        updated = self.clubs.remove_member(club["_id"], user_id)
        if updated is None:
            raise NotFound("NOT_A_MEMBER", "User is not a member of this club")

        logger.info(f"멤버 제명: user={user_id} club={club['name']} by={caller.userId}")
        return {
            "clubId": club["_id"],
            "removedUserId": user_id,
            "memberCount": len(updated.get("members", [])),
        }

