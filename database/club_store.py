"""
Membership Store - clubs 컬렉션 + users.joinedClubs

가입 신청 / 승인 / 거절 / 제명은 모두 조건부 단일 업데이트로 처리한다.
승인과 제명은 club 쪽 업데이트 후 user 쪽 업데이트를 하고,
user 쪽이 실패하면 club 쪽을 되돌린다.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from loguru import logger
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .mongo_client import CLUBS, USERS, get_database


class MembershipSyncError(Exception):
    """club 쪽은 바뀌었으나 user 쪽 업데이트가 불가능한 경우 (보상 처리 후 발생)"""

    def __init__(self, club_id: ObjectId, user_id: ObjectId, reason: str):
        super().__init__(f"membership sync failed: club={club_id} user={user_id} ({reason})")
        self.club_id = club_id
        self.user_id = user_id
        self.reason = reason


class ClubStore:
    """동아리 + 멤버십 저장소"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database if database is not None else get_database()
        self.collection = self.db[CLUBS]
        self.users = self.db[USERS]

    # ==================== 조회 ====================

    def get(self, club_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": club_id})

    def get_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"name": name})

    def list_active(self) -> List[Dict[str, Any]]:
        return list(self.collection.find({"isActive": True}).sort("name", 1))

    def list_for_member(self, user_id: ObjectId) -> List[Dict[str, Any]]:
        return list(self.collection.find({"members": user_id, "isActive": True}).sort("name", 1))

    def find_headed_by(self, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """club_head 가 맡고 있는 동아리"""
        return self.collection.find_one({"clubHead": user_id})

    def active_ids(self) -> List[ObjectId]:
        return [doc["_id"] for doc in self.collection.find({"isActive": True}, {"_id": 1})]

    # ==================== 생성 ====================

    def create(
        self,
        name: str,
        description: str,
        club_head: ObjectId,
        category: Optional[str] = None,
        brand_color: Optional[str] = None,
        logo_url: Optional[str] = None,
        established_year: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        동아리 생성

        이름 중복이면 pymongo DuplicateKeyError 가 그대로 올라간다.
        """
        now = datetime.utcnow()
        doc = {
            "name": name,
            "description": description,
            "clubHead": club_head,
            "members": [],
            "pendingRequests": [],
            "isActive": True,
            "category": category,
            "brandColor": brand_color,
            "logoUrl": logo_url,
            "establishedYear": established_year,
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def _compensate(self, club_id: ObjectId, user_id: ObjectId, update: Dict[str, Any]) -> None:
        """club 쪽 업데이트 되돌리기 (실패하면 양쪽 불일치 상태로 남는다)"""
        try:
            self.collection.update_one({"_id": club_id}, update)
        except PyMongoError:
            logger.exception(f"멤버십 되돌림 실패, 수동 복구 필요: club={club_id} user={user_id} update={update}")
            raise

    # ==================== 가입 신청 ====================

    def add_join_request(self, club_id: ObjectId, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        NONE → PENDING

        멤버도 아니고 신청 중도 아닐 때만 pendingRequests 에 추가된다.

        Returns:
            업데이트된 동아리, 조건 불일치면 None
        """
        return self.collection.find_one_and_update(
            {
                "_id": club_id,
                "members": {"$ne": user_id},
                "pendingRequests.userId": {"$ne": user_id},
            },
            {
                "$push": {"pendingRequests": {"userId": user_id, "requestDate": datetime.utcnow()}},
                "$set": {"updatedAt": datetime.utcnow()},
            },
            return_document=ReturnDocument.AFTER,
        )

    def reject_request(self, club_id: ObjectId, user_id: ObjectId) -> bool:
        """PENDING → NONE"""
        result = self.collection.update_one(
            {"_id": club_id, "pendingRequests.userId": user_id},
            {
                "$pull": {"pendingRequests": {"userId": user_id}},
                "$set": {"updatedAt": datetime.utcnow()},
            },
        )
        return result.modified_count > 0

    def approve_request(self, club_id: ObjectId, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        PENDING → MEMBER

        Returns:
            업데이트된 동아리, 신청이 없으면 None

        Raises:
            MembershipSyncError: 사용자가 없어서 joinedClubs 를 갱신할 수 없음
        """
        before = self.collection.find_one_and_update(
            {"_id": club_id, "pendingRequests.userId": user_id},
            {
                "$pull": {"pendingRequests": {"userId": user_id}},
                "$addToSet": {"members": user_id},
                "$set": {"updatedAt": datetime.utcnow()},
            },
            return_document=ReturnDocument.BEFORE,
        )
        if before is None:
            return None

        pending_entry = next(
            (req for req in before.get("pendingRequests", []) if req.get("userId") == user_id),
            {"userId": user_id, "requestDate": datetime.utcnow()},
        )

        def revert():
            self._compensate(
                club_id,
                user_id,
                {"$pull": {"members": user_id}, "$push": {"pendingRequests": pending_entry}},
            )

        try:
            result = self.users.update_one({"_id": user_id}, {"$addToSet": {"joinedClubs": club_id}})
        except PyMongoError:
            logger.exception(f"승인 중 사용자 업데이트 실패, 되돌림: club={club_id} user={user_id}")
            revert()
            raise

        if result.matched_count == 0:
            logger.warning(f"승인 대상 사용자 없음, 되돌림: club={club_id} user={user_id}")
            revert()
            raise MembershipSyncError(club_id, user_id, "user not found")

        return self.collection.find_one({"_id": club_id})

    # ==================== 제명 ====================

    def remove_member(self, club_id: ObjectId, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        MEMBER → NONE

        Returns:
            업데이트된 동아리, 멤버가 아니면 None
        """
        club = self.collection.find_one_and_update(
            {"_id": club_id, "members": user_id},
            {
                "$pull": {"members": user_id},
                "$set": {"updatedAt": datetime.utcnow()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if club is None:
            return None

        try:
            self.users.update_one({"_id": user_id}, {"$pull": {"joinedClubs": club_id}})
        except PyMongoError:
            logger.exception(f"제명 중 사용자 업데이트 실패, 되돌림: club={club_id} user={user_id}")
            self._compensate(club_id, user_id, {"$addToSet": {"members": user_id}})
            raise

        return club
