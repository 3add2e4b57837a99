"""
Event Service

행사 조회 / 생성 / 수정 / 삭제, 참가 등록
"""
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from bson import ObjectId
from loguru import logger

from database import ClubStore, EventStore, to_object_id

from ..auth.models import CurrentUser, Role
from ..auth.permissions import can_manage_event, is_club_head_of
from ..errors import Conflict, NotFound, PermissionDenied, StateError, ValidationFailed, invalid_id
from .models import EventCreate, EventUpdate

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

REQUIRED_FIELDS = ["title", "description", "date", "startTime", "endTime", "venue", "clubId"]


def parse_event_date(value: str, field: str = "date") -> datetime:
    """YYYY-MM-DD → 자정 datetime"""
    value = (value or "").strip()
    if "T" in value:
        value = value.split("T", 1)[0]
    if not DATE_RE.match(value):
        raise ValidationFailed("VALIDATION_ERROR", "Date must be in YYYY-MM-DD format", field=field)
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        raise ValidationFailed("VALIDATION_ERROR", "Date must be a valid calendar date", field=field)


def _check_time(value: str, field: str) -> str:
    value = value.strip()
    if not TIME_RE.match(value):
        raise ValidationFailed("VALIDATION_ERROR", f"{field} must be in HH:MM format", field=field)
    return value


class EventService:
    """행사 서비스"""

    def __init__(self):
        self.events = EventStore()
        self.clubs = ClubStore()

    # =============================================
    # 공통
    # =============================================

    def load_event(self, event_id: str) -> Dict[str, Any]:
        oid = to_object_id(event_id)
        if oid is None:
            raise invalid_id("eventId")
        event = self.events.get(oid)
        if event is None:
            raise NotFound("EVENT_NOT_FOUND", "Event not found")
        return event

    def _club_names(self, events: List[Dict[str, Any]]) -> Dict[ObjectId, str]:
        names = {}
        for club_id in {event.get("clubId") for event in events}:
            club = self.clubs.get(club_id) if club_id else None
            if club:
                names[club_id] = club["name"]
        return names

    def _to_response(self, event: Dict[str, Any], caller: CurrentUser, club_names: Dict[ObjectId, str]) -> Dict[str, Any]:
        registered = event.get("registeredUsers", [])
        club_id = event.get("clubId")
        return {
            "_id": event["_id"],
            "title": event["title"],
            "description": event["description"],
            "date": event["date"],
            "startTime": event["startTime"],
            "endTime": event["endTime"],
            "venue": event["venue"],
            "clubId": club_id,
            "clubName": club_names.get(club_id),
            "createdBy": event.get("createdBy"),
            "maxCapacity": event.get("maxCapacity"),
            "registeredCount": len(registered),
            "isRegistered": ObjectId(caller.userId) in registered,
            "createdAt": event.get("createdAt"),
            "updatedAt": event.get("updatedAt"),
        }

    def _many(self, events: List[Dict[str, Any]], caller: CurrentUser) -> List[Dict[str, Any]]:
        names = self._club_names(events)
        return [self._to_response(event, caller, names) for event in events]

    def _require_manager(self, caller: CurrentUser, event: Dict[str, Any], action: str) -> Optional[Dict[str, Any]]:
        club = self.clubs.get(event["clubId"]) if event.get("clubId") else None
        if not can_manage_event(caller, event, club):
            logger.warning(f"행사 {action} 거부: user={caller.userId} event={event['_id']}")
            raise PermissionDenied("ACCESS_DENIED", f"You can only {action} your own club events")
        return club

    # =============================================
    # 조회
    # =============================================

    def list_events(self, caller: CurrentUser, club_id: Optional[str] = None) -> Dict[str, Any]:
        club_oid = None
        if club_id:
            club_oid = to_object_id(club_id)
            if club_oid is None:
                raise invalid_id("clubId")
        events = self._many(self.events.list_all(club_oid), caller)
        return {"events": events, "totalCount": len(events)}

    def events_on(self, caller: CurrentUser, day: str) -> Dict[str, Any]:
        parsed = parse_event_date(day)
        events = self._many(self.events.list_on_day(parsed), caller)
        return {"date": parsed.strftime("%Y-%m-%d"), "events": events, "totalCount": len(events)}

    def club_events(self, caller: CurrentUser, club_id: str) -> Dict[str, Any]:
        club_oid = to_object_id(club_id)
        if club_oid is None:
            raise invalid_id("clubId")
        club = self.clubs.get(club_oid)
        if club is None:
            raise NotFound("CLUB_NOT_FOUND", "Club not found")
        events = self._many(self.events.list_for_club(club_oid), caller)
        return {"clubId": club_oid, "clubName": club["name"], "events": events, "totalCount": len(events)}

    # =============================================
    # 생성 / 수정 / 삭제
    # =============================================

    def create_event(self, caller: CurrentUser, body: EventCreate) -> Dict[str, Any]:
        values = body.model_dump()
        missing = [name for name in REQUIRED_FIELDS if not (values.get(name) or "").strip()]
        if missing:
            raise ValidationFailed("MISSING_FIELDS", "All fields are required", field=missing[0])

        fields = {
            "title": values["title"].strip(),
            "description": values["description"].strip(),
            "date": parse_event_date(values["date"]),
            "startTime": _check_time(values["startTime"], "startTime"),
            "endTime": _check_time(values["endTime"], "endTime"),
            "venue": values["venue"].strip(),
            "maxCapacity": body.maxCapacity,
        }

        club_oid = to_object_id(values["clubId"])
        if club_oid is None:
            raise invalid_id("clubId")
        club = self.clubs.get(club_oid)
        if club is None:
            raise NotFound("CLUB_NOT_FOUND", "Club not found")

        if caller.role == Role.CLUB_HEAD and not is_club_head_of(caller, club):
            logger.warning(f"다른 동아리 행사 생성 거부: user={caller.userId} club={club['name']}")
            raise PermissionDenied("ACCESS_DENIED", "You can only create events for your own club")

        fields["clubId"] = club_oid
        event = self.events.create(fields, created_by=ObjectId(caller.userId))
        logger.info(f"행사 생성: {event['title']} ({club['name']}, {fields['date']:%Y-%m-%d})")
        return {"event": self._to_response(event, caller, {club_oid: club["name"]})}

    def update_event(self, caller: CurrentUser, event_id: str, body: EventUpdate) -> Dict[str, Any]:
        event = self.load_event(event_id)
        club = self._require_manager(caller, event, "update")

        changes = body.model_dump(exclude_unset=True, exclude_none=True)
        if "date" in changes:
            changes["date"] = parse_event_date(changes["date"])
        for field in ("startTime", "endTime"):
            if field in changes:
                changes[field] = _check_time(changes[field], field)
        for field in ("title", "description", "venue"):
            if field in changes:
                changes[field] = changes[field].strip()

        updated = self.events.update(event["_id"], changes) if changes else event
        if updated is None:
            current = self.events.get(event["_id"])
            if current is None:
                raise NotFound("EVENT_NOT_FOUND", "Event not found")
            raise StateError(
                "CAPACITY_BELOW_REGISTERED",
                f"maxCapacity cannot be lower than the {current.get('registeredCount', 0)} registered users",
                field="maxCapacity",
            )

        logger.info(f"행사 수정: event={event['_id']} fields={sorted(changes)} by={caller.userId}")
        names = {club["_id"]: club["name"]} if club else {}
        return {"event": self._to_response(updated, caller, names)}

    def delete_event(self, caller: CurrentUser, event_id: str) -> None:
        event = self.load_event(event_id)
        self._require_manager(caller, event, "delete")
        if not self.events.delete(event["_id"]):
            raise NotFound("EVENT_NOT_FOUND", "Event not found")
        logger.info(f"행사 삭제: event={event['_id']} by={caller.userId}")

    # =============================================
    # 참가 등록
    # =============================================

    def register(self, caller: CurrentUser, event_id: str) -> Dict[str, Any]:
        event = self.load_event(event_id)
        user_id = ObjectId(caller.userId)

        updated = self.events.register(event, user_id)
        if updated is not None:
            logger.info(f"행사 등록: user={user_id} event={event['_id']} ({updated['registeredCount']}/{updated['maxCapacity']})")
            return {"eventId": event["_id"], "registeredCount": updated["registeredCount"]}

        # 조건 불일치 원인 확인
        current = self.events.get(event["_id"])
        if current is None:
            raise NotFound("EVENT_NOT_FOUND", "Event not found")
        if user_id in current.get("registeredUsers", []):
            raise StateError("ALREADY_REGISTERED", "You are already registered for this event")
        if current.get("registeredCount", 0) >= current.get("maxCapacity", 0):
            raise StateError("EVENT_FULL", "Event is full")

        logger.warning(f"행사 등록 경합: user={user_id} event={event['_id']}")
        raise Conflict("CONCURRENT_UPDATE", "Event changed during registration, please retry", status_code=409)

    def unregister(self, caller: CurrentUser, event_id: str) -> Dict[str, Any]:
        event = self.load_event(event_id)
        user_id = ObjectId(caller.userId)

        updated = self.events.unregister(event["_id"], user_id)
        if updated is None:
            if self.events.get(event["_id"]) is None:
                raise NotFound("EVENT_NOT_FOUND", "Event not found")
            raise StateError("NOT_REGISTERED", "You are not registered for this event")

        logger.info(f"행사 등록 취소: user={user_id} event={event['_id']}")
        return {"eventId": event["_id"], "registeredCount": updated["registeredCount"]}
