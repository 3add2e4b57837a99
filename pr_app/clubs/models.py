"""
Club Models
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class MemberAction(str, Enum):
    """가입 신청 처리"""
    APPROVE = "approve"  # 승인
    REJECT = "reject"    # 거절


class ClubCreate(BaseModel):
    """동아리 생성 (PR 위원회)"""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    clubHeadId: str
    category: Optional[str] = None
    brandColor: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    logoUrl: Optional[str] = None
    establishedYear: Optional[int] = Field(None, ge=1900, le=2100)


class MemberDecision(BaseModel):
    """가입 신청 승인/거절"""
    userId: Optional[str] = None
    action: Optional[str] = None


class MemberRemoval(BaseModel):
    """멤버 제명"""
    userId: Optional[str] = None
