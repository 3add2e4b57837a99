"""
Achievement Store - hall_of_fame 컬렉션
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from .mongo_client import HALL_OF_FAME, get_database

LIST_LIMIT = 100


class AchievementStore:
    """명예의 전당 저장소"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database if database is not None else get_database()
        self.collection = self.db[HALL_OF_FAME]

    def get(self, achievement_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": achievement_id})

    def list_public(self, category: Optional[str] = None, limit: int = LIST_LIMIT) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {"isPublic": True}
        if category:
            query["category"] = category
        cursor = self.collection.find(query).sort([("date", -1), ("_id", -1)]).limit(limit)
        return list(cursor)

    def create(self, fields: Dict[str, Any], added_by: ObjectId) -> Dict[str, Any]:
        now = datetime.utcnow()
        doc = {
            "title": fields["title"],
            "description": fields["description"],
            "category": fields["category"],
            "achiever": fields["achiever"],
            "date": fields["date"],
            "imageUrl": fields.get("imageUrl"),
            "isPublic": fields.get("isPublic", True),
            "addedBy": added_by,
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update(self, achievement_id: ObjectId, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return self.collection.find_one_and_update(
            {"_id": achievement_id},
            {"$set": {**changes, "updatedAt": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER,
        )

    def delete(self, achievement_id: ObjectId) -> bool:
        return self.collection.delete_one({"_id": achievement_id}).deleted_count > 0
