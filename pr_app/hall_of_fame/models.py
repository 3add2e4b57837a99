"""
Hall of Fame Models
"""
from datetime import date as date_type
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class AchievementCategory(str, Enum):
    """수상 분야"""
    ACADEMIC = "academic"
    SPORTS = "sports"
    CULTURAL = "cultural"
    TECHNICAL = "technical"
    LEADERSHIP = "leadership"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class AchieverType(str, Enum):
    """수상자 유형"""
    STUDENT = "student"
    CLUB = "club"
    FACULTY = "faculty"


class Achiever(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    rollNumber: Optional[str] = None
    clubName: Optional[str] = None
    type: AchieverType


# =============================================
# Request Models
# =============================================

class AchievementCreate(BaseModel):
    """명예의 전당 등록 (PR 위원회)"""
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    category: AchievementCategory
    achiever: Achiever
    date: date_type
    imageUrl: Optional[str] = None
    isPublic: bool = True

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v


class AchievementUpdate(BaseModel):
    """부분 수정"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    category: Optional[AchievementCategory] = None
    achiever: Optional[Achiever] = None
    date: Optional[date_type] = None
    imageUrl: Optional[str] = None
    isPublic: Optional[bool] = None

    @field_validator("title", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v
