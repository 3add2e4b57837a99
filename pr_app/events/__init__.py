"""
Event Module - 행사 일정, 참가 등록
"""
from .models import EventCreate, EventUpdate

__all__ = ["EventCreate", "EventUpdate"]
