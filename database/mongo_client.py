"""
MongoDB 데이터베이스 클라이언트
"""
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from loguru import logger
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from pr_app.config import get_settings

# 컬렉션 이름
USERS = "users"
CLUBS = "clubs"
EVENTS = "events"
MESSAGES = "messages"
HALL_OF_FAME = "hall_of_fame"

# 싱글톤 클라이언트
_mongo_client: Optional[MongoClient] = None
_database: Optional[Database] = None


def get_mongo_client() -> MongoClient:
    """MongoClient 인스턴스 반환 (싱글톤)"""
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        if not settings.MONGODB_URI:
            raise ValueError("MONGODB_URI 환경변수를 설정해주세요")
        _mongo_client = MongoClient(
            settings.MONGODB_URI,
            serverSelectionTimeoutMS=settings.MONGODB_SERVER_SELECTION_TIMEOUT_MS,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            tz_aware=False,
        )
        logger.info(f"MongoDB 클라이언트 생성: db={settings.MONGODB_DB_NAME}")
    return _mongo_client


def get_database() -> Database:
    """현재 데이터베이스 반환 (테스트에서는 set_database 로 주입)"""
    global _database
    if _database is None:
        _database = get_mongo_client()[get_settings().MONGODB_DB_NAME]
    return _database


def set_database(database: Optional[Database]) -> None:
    """데이터베이스 주입/초기화 (테스트용 mongomock 등)"""
    global _database
    _database = database


def close_mongo_client() -> None:
    """연결 종료"""
    global _mongo_client, _database
    if _mongo_client is not None:
        _mongo_client.close()
        logger.info("MongoDB 연결 종료")
    _mongo_client = None
    _database = None


def ping(database: Optional[Database] = None) -> bool:
    """헬스체크용 ping"""
    db = database if database is not None else get_database()
    try:
        db.command("ping")
        return True
    except PyMongoError as e:
        logger.error(f"MongoDB ping 실패: {e}")
        return False


def ensure_indexes(database: Optional[Database] = None) -> None:
    """컬렉션 인덱스 생성 (이미 있으면 no-op)"""
    db = database if database is not None else get_database()

    db[USERS].create_index([("rollNumber", ASCENDING)], sparse=True)
    db[USERS].create_index([("clubName", ASCENDING)], sparse=True)
    db[USERS].create_index([("role", ASCENDING)])

    db[CLUBS].create_index([("name", ASCENDING)], unique=True)
    db[CLUBS].create_index([("clubHead", ASCENDING)])
    db[CLUBS].create_index([("isActive", ASCENDING)])

    db[EVENTS].create_index([("date", ASCENDING)])
    db[EVENTS].create_index([("clubId", ASCENDING)])
    db[EVENTS].create_index([("date", ASCENDING), ("clubId", ASCENDING)])

    db[MESSAGES].create_index([("targetType", ASCENDING)])
    db[MESSAGES].create_index([("createdAt", DESCENDING)])
    db[MESSAGES].create_index([("targetType", ASCENDING), ("targetId", ASCENDING)])
    db[MESSAGES].create_index([("targetType", ASCENDING), ("createdAt", DESCENDING)])

    db[HALL_OF_FAME].create_index([("category", ASCENDING)])
    db[HALL_OF_FAME].create_index([("date", DESCENDING)])

    logger.info("MongoDB 인덱스 확인 완료")


def to_object_id(value) -> Optional[ObjectId]:
    """문자열 → ObjectId (형식이 틀리면 None)"""
    if isinstance(value, ObjectId):
        return value
    if not value or not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
