"""
Club Module - 동아리 목록, 가입 신청 / 승인 / 제명
"""
from .models import MemberAction, ClubCreate, MemberDecision, MemberRemoval

__all__ = [
    "MemberAction",
    "ClubCreate",
    "MemberDecision",
    "MemberRemoval",
]
