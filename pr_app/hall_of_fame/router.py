"""
Hall of Fame Router - 조회는 로그인 사용자, 관리는 PR 위원회
"""
from typing import Optional

from fastapi import APIRouter, Depends, status

from ..auth.dependencies import get_current_user, require_pr_council
from ..auth.models import CurrentUser
from ..responses import ok
from .models import AchievementCreate, AchievementUpdate
from .service import HallOfFameService, list_categories

router = APIRouter(prefix="/hall-of-fame", tags=["hall-of-fame"])


@router.get("/categories")
async def get_categories(user: CurrentUser = Depends(get_current_user)):
    return ok("Categories retrieved successfully", {"categories": list_categories()})


@router.get("")
async def list_achievements(category: Optional[str] = None, user: CurrentUser = Depends(get_current_user)):
    return ok("Achievements retrieved successfully", HallOfFameService().list_public(category))


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_achievement(body: AchievementCreate, user: CurrentUser = Depends(require_pr_council)):
    return ok("Achievement created", HallOfFameService().create(user, body))


@router.put("/{achievement_id}")
async def update_achievement(
    achievement_id: str,
    body: AchievementUpdate,
    user: CurrentUser = Depends(require_pr_council),
):
    return ok("Achievement updated", HallOfFameService().update(user, achievement_id, body))


@router.delete("/{achievement_id}")
async def delete_achievement(achievement_id: str, user: CurrentUser = Depends(require_pr_council)):
    HallOfFameService().delete(user, achievement_id)
    return ok("Achievement deleted")
