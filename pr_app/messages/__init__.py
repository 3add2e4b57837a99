"""
Message Module - 전체 / 동아리 공지
"""
from .models import TargetType, MessageCreate, PageParams

__all__ = ["TargetType", "MessageCreate", "PageParams"]
