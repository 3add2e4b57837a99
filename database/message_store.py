"""
Message Store - messages 컬렉션
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from bson import ObjectId
from pymongo.database import Database

from .mongo_client import MESSAGES, get_database

# 최신순, 같은 시각이면 나중에 생성된 것 먼저
NEWEST_FIRST = [("createdAt", -1), ("_id", -1)]


class MessageStore:
    """메시지 저장소"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database if database is not None else get_database()
        self.collection = self.db[MESSAGES]

    def get(self, message_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": message_id})

    def create(
        self,
        content: str,
        sender: ObjectId,
        target_type: str,
        target_id: Optional[ObjectId] = None,
        is_urgent: bool = False,
    ) -> Dict[str, Any]:
        now = datetime.utcnow()
        doc = {
            "content": content,
            "sender": sender,
            "targetType": target_type,
            "targetId": target_id if target_type == "club_specific" else None,
            "isUrgent": is_urgent,
            "readBy": [],
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def find_page(self, query: Dict[str, Any], skip: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
        """
        페이지 조회

        Returns:
            (messages, 전체 개수)
        """
        total = self.collection.count_documents(query)
        cursor = self.collection.find(query).sort(NEWEST_FIRST).skip(skip).limit(limit)
        return list(cursor), total

    def mark_read(self, message_id: ObjectId, user_id: ObjectId) -> bool:
        """
        읽음 처리 (사용자당 한 번)

        Returns:
            새로 기록했으면 True, 이미 읽었거나 메시지가 없으면 False
        """
        result = self.collection.update_one(
            {"_id": message_id, "readBy.userId": {"$ne": user_id}},
            {"$push": {"readBy": {"userId": user_id, "readAt": datetime.utcnow()}}},
        )
        return result.modified_count > 0
