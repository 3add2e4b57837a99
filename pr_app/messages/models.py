"""
Message Models
"""
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TargetType(str, Enum):
    """메시지 대상"""
    COLLEGE_WIDE = "college_wide"    # 전체 공지
    CLUB_SPECIFIC = "club_specific"  # 동아리 공지


class MessageCreate(BaseModel):
    """메시지 발송 (누락/대상 형식은 서비스에서 검사)"""
    content: Optional[str] = Field(None, max_length=2000)
    targetType: Optional[str] = None
    targetId: Optional[str] = None
    isUrgent: bool = False


class PageParams(BaseModel):
    """페이지네이션 (page ≥ 1, 1 ≤ limit ≤ 50)"""
    page: int = 1
    limit: int = 20

    @classmethod
    def clamp(cls, page: Optional[int], limit: Optional[int]) -> "PageParams":
        page = max(1, page if page is not None else 1)
        limit = min(50, max(1, limit if limit is not None else 20))
        return cls(page=page, limit=limit)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit
