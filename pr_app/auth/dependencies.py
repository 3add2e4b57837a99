"""
Auth Dependencies

인증 및 역할 체크 의존성
"""
from fastapi import Depends, Request
from loguru import logger
from pydantic import ValidationError

from database import UserStore, to_object_id

from ..errors import AuthenticationFailed, PermissionDenied
from .models import CurrentUser, Role
from .session import decode_access_token


def _extract_bearer_token(request: Request) -> str:
    """Authorization: Bearer <token> 에서 토큰 추출"""
    auth_header = request.headers.get("Authorization") or ""
    scheme, _, token = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


async def get_current_user(request: Request) -> CurrentUser:
    """
    현재 요청자

    Raises:
        AuthenticationFailed: NO_TOKEN / TOKEN_EXPIRED / INVALID_TOKEN / USER_NOT_FOUND
    """
    token = _extract_bearer_token(request)
    if not token:
        raise AuthenticationFailed("NO_TOKEN", "Access token is required")

    payload = decode_access_token(token)

    user_id = to_object_id(payload.get("userId"))
    if user_id is None:
        raise AuthenticationFailed("INVALID_TOKEN", "Invalid access token")

    # 토큰 발급 후 삭제된 사용자
    if not UserStore().exists(user_id):
        raise AuthenticationFailed("USER_NOT_FOUND", "User no longer exists")

    try:
        return CurrentUser(
            userId=str(user_id),
            name=payload.get("name") or "",
            role=payload.get("role"),
            rollNumber=payload.get("rollNumber"),
            clubName=payload.get("clubName"),
        )
    except ValidationError:
        raise AuthenticationFailed("INVALID_TOKEN", "Invalid access token")


def require_roles(*roles: Role):
    """지정한 역할만 허용하는 의존성 생성"""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            logger.warning(f"권한 없음: user={user.userId} role={user.role.value} 필요={[r.value for r in roles]}")
            raise PermissionDenied(
                "INSUFFICIENT_PERMISSIONS",
                "You do not have permission to access this resource",
            )
        return user

    return checker


require_student = require_roles(Role.STUDENT)
require_pr_council = require_roles(Role.PR_COUNCIL)
require_club_head_or_pr = require_roles(Role.CLUB_HEAD, Role.PR_COUNCIL)
