"""
Session Layer - JWT 발급 / 검증 (python-jose, HS256)

토큰 자체는 stateless 이고, 사용자 존재 여부는 dependencies 쪽에서 확인한다.
"""
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt

from ..config import get_settings
from ..errors import AuthenticationFailed


def create_access_token(user: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """사용자 문서로부터 JWT 생성 (기본 만료 45일)"""
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(days=settings.JWT_EXPIRE_DAYS)

    to_encode = {
        "userId": str(user["_id"]),
        "name": user.get("name"),
        "role": user.get("role"),
        "rollNumber": user.get("rollNumber"),
        "clubName": user.get("clubName"),
        "exp": datetime.utcnow() + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    JWT 검증

    Raises:
        AuthenticationFailed: TOKEN_EXPIRED / INVALID_TOKEN
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise AuthenticationFailed("TOKEN_EXPIRED", "Access token has expired. Please login again.")
    except JWTError:
        raise AuthenticationFailed("INVALID_TOKEN", "Invalid access token")

    if not payload.get("userId") or not payload.get("role"):
        raise AuthenticationFailed("INVALID_TOKEN", "Invalid access token")
    return payload
