"""
응답 envelope / 직렬화
"""
from datetime import date, datetime
from typing import Any, Optional

from bson import ObjectId


def to_api(value: Any) -> Any:
    """MongoDB 문서를 JSON 으로 보낼 수 있는 형태로 변환 (ObjectId → str)"""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_api(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_api(item) for item in value]
    return value


def ok(message: str, data: Optional[dict] = None) -> dict:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = to_api(data)
    return body
