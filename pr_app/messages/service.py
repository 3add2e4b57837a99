"""
Message Service

발송 권한, 요청자별 가시성 필터, 페이지네이션, 읽음 처리
"""
import math
from typing import Any, Dict, List, Optional

from bson import ObjectId
from loguru import logger

from database import ClubStore, MessageStore, UserStore, to_object_id

from ..auth.models import CurrentUser, Role
from ..auth.permissions import can_send_to_club, can_view_club_messages
from ..errors import NotFound, PermissionDenied, ValidationFailed, invalid_id
from .models import MessageCreate, PageParams, TargetType


def pagination(params: PageParams, total: int) -> Dict[str, Any]:
    total_pages = math.ceil(total / params.limit) if total else 0
    return {
        "currentPage": params.page,
        "totalPages": total_pages,
        "totalMessages": total,
        "messagesPerPage": params.limit,
        "hasNextPage": params.page < total_pages,
        "hasPrevPage": params.page > 1,
    }


class MessageService:
    """메시지 서비스"""

    def __init__(self):
        self.messages = MessageStore()
        self.clubs = ClubStore()
        self.users = UserStore()

    # =============================================
    # 가시성
    # =============================================

    def visible_club_ids(self, caller: CurrentUser) -> Optional[List[ObjectId]]:
        """
        요청자가 볼 수 있는 club_specific 대상 동아리

        Returns:
            동아리 id 목록, PR 위원회는 제한 없음(None)
        """
        if caller.role == Role.PR_COUNCIL:
            return None
        user_id = ObjectId(caller.userId)
        if caller.role == Role.CLUB_HEAD:
            club = self.clubs.find_headed_by(user_id)
            return [club["_id"]] if club else []
        user = self.users.get(user_id)
        return list(user.get("joinedClubs", [])) if user else []

    def visibility_filter(self, caller: CurrentUser) -> Dict[str, Any]:
        clauses: List[Dict[str, Any]] = [{"targetType": TargetType.COLLEGE_WIDE.value}]
        club_ids = self.visible_club_ids(caller)
        if club_ids is None:
            clauses.append({"targetType": TargetType.CLUB_SPECIFIC.value})
        elif club_ids:
            clauses.append({"targetType": TargetType.CLUB_SPECIFIC.value, "targetId": {"$in": club_ids}})
        return {"$or": clauses}

    # =============================================
    # 응답 변환
    # =============================================

    def _format(self, messages: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        senders = self.users.get_public_many(msg.get("sender") for msg in messages)
        club_names: Dict[ObjectId, str] = {}
        for club_id in {msg.get("targetId") for msg in messages if msg.get("targetId")}:
            club = self.clubs.get(club_id)
            if club:
                club_names[club_id] = club["name"]

        result = []
        for msg in messages:
            sender = senders.get(msg.get("sender"))
            target_id = msg.get("targetId")
            result.append({
                "_id": msg["_id"],
                "content": msg["content"],
                "sender": {
                    "_id": msg.get("sender"),
                    "name": sender.get("name") if sender else None,
                    "rollNumber": sender.get("rollNumber") if sender else None,
                    "clubName": sender.get("clubName") if sender else None,
                    "role": sender.get("role") if sender else None,
                },
                "targetType": msg["targetType"],
                "targetClub": {"_id": target_id, "name": club_names.get(target_id)} if target_id else None,
                "isUrgent": msg.get("isUrgent", False),
                "createdAt": msg.get("createdAt"),
                # 개인정보 보호: 읽은 사람 목록 대신 개수만
                "readBy": len(msg.get("readBy", [])),
            })
        return result

    def _page(self, query: Dict[str, Any], params: PageParams) -> Dict[str, Any]:
        messages, total = self.messages.find_page(query, params.skip, params.limit)
        return {"messages": self._format(messages), "pagination": pagination(params, total)}

    # =============================================
    # 발송
    # =============================================

    def send(self, caller: CurrentUser, body: MessageCreate) -> Dict[str, Any]:
        content = (body.content or "").strip()
        if not content or not body.targetType:
            raise ValidationFailed("MISSING_FIELDS", "Content and targetType are required")

        valid_types = [t.value for t in TargetType]
        if body.targetType not in valid_types:
            raise ValidationFailed(
                "INVALID_TARGET_TYPE",
                "targetType must be either college_wide or club_specific",
                field="targetType",
            )

        target_id = None
        if body.targetType == TargetType.COLLEGE_WIDE.value:
            if caller.role != Role.PR_COUNCIL:
                logger.warning(f"전체 공지 발송 거부: user={caller.userId} role={caller.role.value}")
                raise PermissionDenied(
                    "INSUFFICIENT_PERMISSIONS",
                    "Only PR council members can send college-wide messages",
                )
        else:
            if not body.targetId:
                raise ValidationFailed(
                    "MISSING_TARGET_ID", "targetId is required for club-specific messages", field="targetId"
                )
            target_id = to_object_id(body.targetId)
            if target_id is None:
                raise invalid_id("targetId")
            club = self.clubs.get(target_id)
            if club is None:
                raise NotFound("CLUB_NOT_FOUND", "Target club not found")
            if not can_send_to_club(caller, club):
                logger.warning(f"동아리 공지 발송 거부: user={caller.userId} club={club['name']}")
                raise PermissionDenied("ACCESS_DENIED", "You can only send messages to your own club")

        message = self.messages.create(
            content=content,
            sender=ObjectId(caller.userId),
            target_type=body.targetType,
            target_id=target_id,
            is_urgent=body.isUrgent,
        )
        logger.info(f"메시지 발송: {body.targetType} target={target_id} by={caller.userId} urgent={body.isUrgent}")
        return {"message": self._format([message])[0]}

    # =============================================
    # 조회
    # =============================================

    def list_messages(
        self,
        caller: CurrentUser,
        params: PageParams,
        target_type: Optional[str] = None,
        club_id: Optional[str] = None,
        urgent: bool = False,
    ) -> Dict[str, Any]:
        """가시성 필터를 먼저 적용하고 type / clubId / urgent 필터를 덧붙인다"""
        query = self.visibility_filter(caller)
        if target_type in [t.value for t in TargetType]:
            query["targetType"] = target_type
        if club_id:
            club_oid = to_object_id(club_id)
            if club_oid is None:
                raise invalid_id("clubId")
            query["targetId"] = club_oid
        if urgent:
            query["isUrgent"] = True
        return self._page(query, params)

    def college_wide(self, params: PageParams, urgent: bool = False) -> Dict[str, Any]:
        query: Dict[str, Any] = {"targetType": TargetType.COLLEGE_WIDE.value}
        if urgent:
            query["isUrgent"] = True
        return self._page(query, params)

    def club_messages(self, caller: CurrentUser, club_id: str, params: PageParams, urgent: bool = False) -> Dict[str, Any]:
        club_oid = to_object_id(club_id)
        if club_oid is None:
            raise invalid_id("clubId")
        club = self.clubs.get(club_oid)
        if club is None:
            raise NotFound("CLUB_NOT_FOUND", "Club not found")
        if not can_view_club_messages(caller, club):
            logger.warning(f"동아리 공지 조회 거부: user={caller.userId} club={club['name']}")
            raise PermissionDenied("ACCESS_DENIED", "You do not have permission to view this club's messages")

        query: Dict[str, Any] = {"targetType": TargetType.CLUB_SPECIFIC.value, "targetId": club_oid}
        if urgent:
            query["isUrgent"] = True
        data = self._page(query, params)
        data["club"] = {"_id": club_oid, "name": club["name"]}
        return data

    def my_club_messages(self, caller: CurrentUser, params: PageParams, urgent: bool = False) -> Dict[str, Any]:
        club_ids = self.visible_club_ids(caller)
        if club_ids is None:
            club_ids = self.clubs.active_ids()

        query: Dict[str, Any] = {"targetType": TargetType.CLUB_SPECIFIC.value, "targetId": {"$in": club_ids}}
        if urgent:
            query["isUrgent"] = True
        return self._page(query, params)

    # =============================================
    # 읽음 처리
    # =============================================

    def mark_read(self, caller: CurrentUser, message_id: str) -> Dict[str, Any]:
        """
        읽음 처리 (멱등)

        Returns:
            {"messageId", "alreadyRead"}
        """
        oid = to_object_id(message_id)
        if oid is None:
            raise invalid_id("messageId")

        if self.messages.mark_read(oid, ObjectId(caller.userId)):
            return {"messageId": oid, "alreadyRead": False}

        if self.messages.get(oid) is None:
            raise NotFound("MESSAGE_NOT_FOUND", "Message not found")
        return {"messageId": oid, "alreadyRead": True}
