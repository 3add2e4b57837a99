"""
Auth Module - 로그인, 토큰, 권한

라우터와 의존성은 database 를 참조하므로 pr_app.auth.router / pr_app.auth.dependencies 에서 직접 import 한다.
"""
from .models import Role, UserType, CurrentUser, LoginRequest, ChangePasswordRequest
from .passwords import hash_password, verify_password, password_weakness
from .session import create_access_token, decode_access_token
from .permissions import (
    can_manage_club,
    can_manage_event,
    can_send_to_club,
    can_view_club_detail,
    can_view_club_messages,
)

__all__ = [
    "Role",
    "UserType",
    "CurrentUser",
    "LoginRequest",
    "ChangePasswordRequest",
    "hash_password",
    "verify_password",
    "password_weakness",
    "create_access_token",
    "decode_access_token",
    "can_manage_club",
    "can_manage_event",
    "can_send_to_club",
    "can_view_club_detail",
    "can_view_club_messages",
]
