"""
Auth Service - 로그인 / 비밀번호 변경
"""
from typing import Any, Dict

from loguru import logger

from database import UserStore, to_object_id

from ..errors import AuthenticationFailed, ValidationFailed
from .models import ChangePasswordRequest, CurrentUser, LoginRequest, UserType
from .passwords import password_weakness, verify_password
from .session import create_access_token


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _invalid_credentials() -> AuthenticationFailed:
    return AuthenticationFailed(
        "INVALID_CREDENTIALS",
        "Invalid credentials. Please check your details and try again.",
    )


class AuthService:
    """인증 서비스"""

    def __init__(self):
        self.users = UserStore()

    def login(self, body: LoginRequest) -> Dict[str, Any]:
        """
        로그인

        - 학생: 이름 + 학번 + 비밀번호
        - 위원회 (club_head, pr_council): 이름 + 동아리명 + 비밀번호
        """
        name = _clean(body.name)
        if not name or not body.password or body.userType is None:
            raise ValidationFailed("MISSING_FIELDS", "Name, password, and user type are required")

        if body.userType == UserType.STUDENT:
            roll_number = _clean(body.rollNumber)
            if not roll_number:
                raise ValidationFailed("MISSING_ROLL_NUMBER", "Roll number is required for student login")
            user = self.users.find_student(name, roll_number)
        else:
            club_name = _clean(body.clubName)
            if not club_name:
                raise ValidationFailed("MISSING_CLUB_NAME", "Club name is required for council login")
            user = self.users.find_council(name, club_name)

        if user is None or not verify_password(body.password, user.get("password")):
            logger.warning(f"로그인 실패: name={name} type={body.userType.value}")
            raise _invalid_credentials()

        token = create_access_token(user)
        logger.info(f"로그인 성공: user={user['_id']} role={user['role']}")

        return {
            "token": token,
            "user": {
                "id": user["_id"],
                "name": user["name"],
                "role": user["role"],
                "rollNumber": user.get("rollNumber"),
                "clubName": user.get("clubName"),
                "isPasswordChanged": user.get("isPasswordChanged", False),
                "joinedClubs": user.get("joinedClubs", []),
            },
        }

    def change_password(self, caller: CurrentUser, body: ChangePasswordRequest) -> None:
        if not body.currentPassword or not body.newPassword:
            raise ValidationFailed("MISSING_FIELDS", "Current password and new password are required")

        weakness = password_weakness(body.newPassword)
        if weakness:
            raise ValidationFailed("WEAK_PASSWORD", weakness, field="newPassword")

        user_id = to_object_id(caller.userId)
        user = self.users.get(user_id) if user_id else None
        if user is None:
            raise AuthenticationFailed("USER_NOT_FOUND", "User no longer exists")

        if not verify_password(body.currentPassword, user.get("password")):
            raise AuthenticationFailed("INVALID_CURRENT_PASSWORD", "Current password is incorrect")

        self.users.update_password(user_id, body.newPassword)
        logger.info(f"비밀번호 변경: user={caller.userId}")
