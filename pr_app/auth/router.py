"""
Auth Router - 로그인, 비밀번호 변경, 토큰 확인
"""
from fastapi import APIRouter, Depends

from ..responses import ok
from .dependencies import get_current_user
from .models import ChangePasswordRequest, CurrentUser, LoginRequest
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(body: LoginRequest):
    """로그인 → JWT (45일)"""
    data = AuthService().login(body)
    return ok("Login successful", data)


@router.post("/change-password")
async def change_password(body: ChangePasswordRequest, user: CurrentUser = Depends(get_current_user)):
    AuthService().change_password(user, body)
    return ok("Password changed successfully")


@router.get("/verify-token")
async def verify_token(user: CurrentUser = Depends(get_current_user)):
    return ok("Token is valid", {"user": user.model_dump(mode="json")})
