"""
Credential Store - users 컬렉션
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from pymongo.database import Database

from pr_app.auth.passwords import hash_password

from .mongo_client import USERS, get_database

# 응답에 내보낼 때 사용하는 공개 필드
PUBLIC_FIELDS = {"name": 1, "rollNumber": 1, "clubName": 1, "role": 1}


class UserStore:
    """사용자 저장소"""

    def __init__(self, database: Optional[Database] = None):
        self.db = database if database is not None else get_database()
        self.collection = self.db[USERS]

    # ==================== 조회 ====================

    def get(self, user_id: ObjectId) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({"_id": user_id})

    def exists(self, user_id: ObjectId) -> bool:
        return self.collection.find_one({"_id": user_id}, {"_id": 1}) is not None

    def find_student(self, name: str, roll_number: str) -> Optional[Dict[str, Any]]:
        return self.collection.find_one({
            "name": name,
            "rollNumber": roll_number,
            "role": "student",
        })

    def find_council(self, name: str, club_name: str) -> Optional[Dict[str, Any]]:
        """club_head / pr_council 로그인 조회"""
        return self.collection.find_one({
            "name": name,
            "clubName": club_name,
            "role": {"$in": ["club_head", "pr_council"]},
        })

    def get_public_many(self, user_ids: Iterable[ObjectId]) -> Dict[ObjectId, Dict[str, Any]]:
        """id → 공개 필드 dict (populate 용)"""
        ids = list({uid for uid in user_ids if uid is not None})
        if not ids:
            return {}
        cursor = self.collection.find({"_id": {"$in": ids}}, {**PUBLIC_FIELDS, "createdAt": 1})
        return {doc["_id"]: doc for doc in cursor}

    def list_by_role(self, role: str) -> List[Dict[str, Any]]:
        return list(self.collection.find({"role": role}).sort("name", 1))

    # ==================== 쓰기 ====================

    def create(
        self,
        name: str,
        password: str,
        role: str = "student",
        roll_number: Optional[str] = None,
        club_name: Optional[str] = None,
        is_password_changed: bool = False,
    ) -> Dict[str, Any]:
        """사용자 생성 (비밀번호는 해시 후 저장)"""
        now = datetime.utcnow()
        doc = {
            "name": name,
            "rollNumber": roll_number,
            "clubName": club_name,
            "password": hash_password(password),
            "role": role,
            "isPasswordChanged": is_password_changed,
            "joinedClubs": [],
            "createdAt": now,
            "updatedAt": now,
        }
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def update_password(self, user_id: ObjectId, new_password: str) -> bool:
        result = self.collection.update_one(
            {"_id": user_id},
            {"$set": {
                "password": hash_password(new_password),
                "isPasswordChanged": True,
                "updatedAt": datetime.utcnow(),
            }},
        )
        return result.matched_count > 0
