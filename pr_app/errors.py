"""
에러 정의

모든 비즈니스 에러는 AppError 를 상속하고, 서버의 exception handler 가
{"success": false, "error": {"code", "message"}} 형태로 응답한다.
"""
from typing import Optional


class AppError(Exception):
    """코드 + 메시지를 가진 비즈니스 에러"""

    status_code: int = 400

    def __init__(
        self,
        code: str,
        message: str,
        status_code: Optional[int] = None,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        error = {"code": self.code, "message": self.message}
        if self.field:
            error["field"] = self.field
        return {"success": False, "error": error}


class ValidationFailed(AppError):
    """입력 검증 실패 (400)"""
    status_code = 400


class AuthenticationFailed(AppError):
    """인증 실패 (401)"""
    status_code = 401


class PermissionDenied(AppError):
    """권한 없음 (403)"""
    status_code = 403


class NotFound(AppError):
    """대상 없음 (404)"""
    status_code = 404


class Conflict(AppError):
    """중복/상태 충돌 (400, 유니크 위반은 409)"""
    status_code = 400


class StateError(AppError):
    """정원 초과, 미등록 등 상태 에러 (400)"""
    status_code = 400


def invalid_id(field: str = "id") -> ValidationFailed:
    return ValidationFailed("INVALID_ID", "Invalid ID format", field=field)
