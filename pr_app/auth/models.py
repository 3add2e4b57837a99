"""
Auth Models - Pydantic 모델 정의
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """사용자 역할"""
    STUDENT = "student"        # 학생
    CLUB_HEAD = "club_head"    # 동아리 회장
    PR_COUNCIL = "pr_council"  # PR 위원회


class UserType(str, Enum):
    """로그인 화면 유형"""
    STUDENT = "student"  # 이름 + 학번
    COUNCIL = "council"  # 이름 + 동아리명 (club_head, pr_council)


# =============================================
# Request Models
# =============================================

class LoginRequest(BaseModel):
    """로그인 요청"""
    name: Optional[str] = None
    rollNumber: Optional[str] = None
    clubName: Optional[str] = None
    password: Optional[str] = None
    userType: Optional[UserType] = None


class ChangePasswordRequest(BaseModel):
    """비밀번호 변경 요청"""
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None


# =============================================
# Caller
# =============================================

class CurrentUser(BaseModel):
    """토큰에서 복원한 요청자 정보"""
    userId: str
    name: str
    role: Role
    rollNumber: Optional[str] = None
    clubName: Optional[str] = None

    def is_pr_council(self) -> bool:
        return self.role == Role.PR_COUNCIL

    def is_club_head(self) -> bool:
        return self.role == Role.CLUB_HEAD

    def is_student(self) -> bool:
        return self.role == Role.STUDENT


class UserResponse(BaseModel):
    """로그인 응답의 사용자 정보"""
    id: str
    name: str
    role: Role
    rollNumber: Optional[str] = None
    clubName: Optional[str] = None
    isPasswordChanged: bool = False
    joinedClubs: list[str] = Field(default_factory=list)
