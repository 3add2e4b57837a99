"""
Hall of Fame Service
"""
from datetime import datetime, time
from typing import Any, Dict, List, Optional

from bson import ObjectId
from loguru import logger

from database import AchievementStore, UserStore, to_object_id

from ..auth.models import CurrentUser
from ..errors import NotFound, invalid_id
from .models import AchievementCategory, AchievementCreate, AchievementUpdate


def list_categories() -> List[Dict[str, str]]:
    return [{"value": c.value, "label": c.label} for c in AchievementCategory]


def _as_datetime(value) -> datetime:
    return datetime.combine(value, time())


class HallOfFameService:
    """명예의 전당 서비스"""

    def __init__(self):
        self.achievements = AchievementStore()
        self.users = UserStore()

    def _with_added_by(self, docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        people = self.users.get_public_many(doc.get("addedBy") for doc in docs)
        result = []
        for doc in docs:
            added_by = doc.get("addedBy")
            person = people.get(added_by)
            result.append({**doc, "addedBy": {"_id": added_by, "name": person.get("name") if person else None}})
        return result

    def _load_id(self, achievement_id: str) -> ObjectId:
        oid = to_object_id(achievement_id)
        if oid is None:
            raise invalid_id("achievementId")
        return oid

    def list_public(self, category: Optional[str] = None) -> Dict[str, Any]:
        """공개 항목만 최신순 (알 수 없는 분야는 필터 없이)"""
        valid = [c.value for c in AchievementCategory]
        docs = self.achievements.list_public(category if category in valid else None)
        achievements = self._with_added_by(docs)
        return {"achievements": achievements, "totalCount": len(achievements)}

    def create(self, caller: CurrentUser, body: AchievementCreate) -> Dict[str, Any]:
        fields = body.model_dump(mode="json")
        fields["date"] = _as_datetime(body.date)
        doc = self.achievements.create(fields, added_by=ObjectId(caller.userId))
        logger.info(f"명예의 전당 등록: {doc['title']} ({doc['category']}) by={caller.userId}")
        return {"achievement": self._with_added_by([doc])[0]}

    def update(self, caller: CurrentUser, achievement_id: str, body: AchievementUpdate) -> Dict[str, Any]:
        oid = self._load_id(achievement_id)
        changes = body.model_dump(mode="json", exclude_unset=True, exclude_none=True)
        if "date" in changes:
            changes["date"] = _as_datetime(body.date)

        doc = self.achievements.update(oid, changes)
        if doc is None:
            raise NotFound("ACHIEVEMENT_NOT_FOUND", "Achievement not found")
        logger.info(f"명예의 전당 수정: {oid} fields={sorted(changes)} by={caller.userId}")
        return {"achievement": self._with_added_by([doc])[0]}

    def delete(self, caller: CurrentUser, achievement_id: str) -> None:
        oid = self._load_id(achievement_id)
        if not self.achievements.delete(oid):
            raise NotFound("ACHIEVEMENT_NOT_FOUND", "Achievement not found")
        logger.info(f"명예의 전당 삭제: {oid} by={caller.userId}")
