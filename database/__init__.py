"""
Database module - MongoDB 저장소
"""
from .mongo_client import (
    close_mongo_client,
    ensure_indexes,
    get_database,
    set_database,
    to_object_id,
)
from .user_store import UserStore
from .club_store import ClubStore, MembershipSyncError
from .event_store import EventStore
from .message_store import MessageStore
from .achievement_store import AchievementStore

__all__ = [
    "close_mongo_client",
    "ensure_indexes",
    "get_database",
    "set_database",
    "to_object_id",
    "UserStore",
    "ClubStore",
    "MembershipSyncError",
    "EventStore",
    "MessageStore",
    "AchievementStore",
]
