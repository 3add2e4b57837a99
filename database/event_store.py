"""
Event Store - events 컬렉션

registeredCount 는 registeredUsers 길이와 항상 같은 업데이트에서 갱신된다.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from .mongo_client import EVENTS, get_database

DEFAULT_MAX_CAPACITY = 100


class EventStore:
    """행사 저장소"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database if database is not None else get_database()
        self.collection = self.db[EVENTS]

    # ==================== 조회 ====================

    def get(self, event_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": event_id})

    def list_all(self, club_id: Optional[ObjectId] = None) -> List[Dict[str, Any]]:
        query = {"clubId": club_id} if club_id is not None else {}
        return list(self.collection.find(query).sort([("date", 1), ("startTime", 1)]))

    def list_on_day(self, day: datetime) -> List[Dict[str, Any]]:
        start = datetime(day.year, day.month, day.day)
        end = start + timedelta(days=1)
        return list(
            self.collection.find({"date": {"$gte": start, "$lt": end}}).sort("startTime", 1)
        )

    def list_for_club(self, club_id: ObjectId) -> List[Dict[str, Any]]:
        return self.list_all(club_id)

    # ==================== 생성 / 수정 / 삭제 ====================

    def create(self, fields: Dict[str, Any], created_by: ObjectId) -> Dict[str, Any]:
        now = datetime.utcnow()
        doc = {
            "title": fields["title"],
            "description": fields["description"],
            "date": fields["date"],
            "startTime": fields["startTime"],
            "endTime": fields["endTime"],
            "venue": fields["venue"],
            "clubId": fields["clubId"],
            "createdBy": created_by,
            "registeredUsers": [],
            "registeredCount": 0,
            "maxCapacity": fields.get("maxCapacity") or DEFAULT_MAX_CAPACITY,
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update(self, event_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        부분 수정

        maxCapacity 를 바꾸는 경우 현재 등록 인원 이상일 때만 적용된다.

        Returns:
            수정된 행사, 조건 불일치(없음 또는 정원 부족)면 None
        """
        query: Dict[str, Any] = {"_id": event_id}
        if "maxCapacity" in changes:
            query["registeredCount"] = {"$lte": changes["maxCapacity"]}
        return self.collection.find_one_and_update(
            query,
            {"$set": {**changes, "updatedAt": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, event_id: ObjectId) -> bool:
        return self.collection.delete_one({"_id": event_id}).deleted_count > 0

    # ==================== 참가 등록 ====================

    def register(self, event: Dict[str, Any], user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        등록 (미등록 + 정원 여유가 있을 때만)

        읽어온 maxCapacity 를 조건에 함께 걸어서 그 사이 정원이 바뀌면 실패한다.

        Returns:
            업데이트된 행사, 조건 불일치면 None
        """
        capacity = event.get("maxCapacity", DEFAULT_MAX_CAPACITY)
        return self.collection.find_one_and_update(
            {
                "_id": event["_id"],
                "maxCapacity": capacity,
                "registeredUsers": {"$ne": user_id},
                "registeredCount": {"$lt": capacity},
            },
            {
                "$addToSet": {"registeredUsers": user_id},
                "$inc": {"registeredCount": 1},
            },
            return_document=ReturnDocument.AFTER,
        )

    def unregister(self, event_id: ObjectId, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        """
        등록 취소

        Returns:
            업데이트된 행사, 등록되어 있지 않으면 None
        """
        return self.collection.find_one_and_update(
            {"_id": event_id, "registeredUsers": user_id},
            {
                "$pull": {"registeredUsers": user_id},
                "$inc": {"registeredCount": -1},
            },
            return_document=ReturnDocument.AFTER,
        )
