"""
Event Models
"""
from typing import Optional

from pydantic import BaseModel, Field


class EventCreate(BaseModel):
    """행사 생성 (필수 항목 누락은 서비스에서 MISSING_FIELDS 로 처리)"""
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None        # YYYY-MM-DD
    startTime: Optional[str] = None   # HH:MM
    endTime: Optional[str] = None     # HH:MM
    venue: Optional[str] = None
    clubId: Optional[str] = None
    maxCapacity: Optional[int] = Field(None, ge=1)


class EventUpdate(BaseModel):
    """행사 부분 수정 (주최 동아리는 바꿀 수 없음)"""
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    date: Optional[str] = None
    startTime: Optional[str] = None
    endTime: Optional[str] = None
    venue: Optional[str] = Field(None, min_length=1)
    maxCapacity: Optional[int] = Field(None, ge=1)
