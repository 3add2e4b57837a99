"""
Hall of Fame Module - 수상 / 성과 기록
"""
from .models import AchievementCategory, AchieverType, Achiever, AchievementCreate, AchievementUpdate

__all__ = [
    "AchievementCategory",
    "AchieverType",
    "Achiever",
    "AchievementCreate",
    "AchievementUpdate",
]
