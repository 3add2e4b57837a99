"""
KMIT PR App - FastAPI 웹 서버

동아리 / 행사 / 공지 / 명예의 전당 REST API
데이터 소스: MongoDB
"""
from datetime import datetime

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from pymongo.errors import DuplicateKeyError, PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import close_mongo_client, ensure_indexes
from database.mongo_client import ping

from . import __version__
from .auth.router import router as auth_router
from .clubs.router import router as clubs_router
from .config import get_settings, validate_settings
from .errors import AppError
from .events.router import router as events_router
from .hall_of_fame.router import router as hall_of_fame_router
from .logging_config import setup_logging
from .messages.router import router as messages_router

# 환경변수 로드
load_dotenv()

API_ENDPOINTS = {
    "health": "/health",
    "auth": "/api/auth",
    "clubs": "/api/clubs",
    "events": "/api/events",
    "messages": "/api/messages",
    "hallOfFame": "/api/hall-of-fame",
}


def _error(status_code: int, code: str, message: str, field: str = None) -> JSONResponse:
    error = {"code": code, "message": message}
    if field:
        error["field"] = field
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


# ==================== Exception Handlers ====================

async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError):
    """pydantic 검증 실패 → VALIDATION_ERROR (첫 번째 필드)"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc) or None
    message = first.get("msg", "Invalid data provided")
    if field:
        message = f"{field}: {message}"
    return _error(400, "VALIDATION_ERROR", message, field)


async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    logger.warning(f"중복 키: {request.method} {request.url.path}")
    return _error(409, "DUPLICATE_ENTRY", "Duplicate entry found")


async def database_error_handler(request: Request, exc: PyMongoError):
    logger.exception(f"DB 오류: {request.method} {request.url.path}")
    return _error(500, "SERVER_ERROR", "Something went wrong on the server")


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(404, "NOT_FOUND", f"Route {request.url.path} not found")
    if exc.status_code == 405:
        return _error(405, "METHOD_NOT_ALLOWED", f"Method {request.method} not allowed for {request.url.path}")
    return _error(exc.status_code, "HTTP_ERROR", str(exc.detail))


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"서버 오류: {request.method} {request.url.path}")
    return _error(500, "SERVER_ERROR", "Something went wrong on the server")


# ==================== App ====================

def create_app() -> FastAPI:
    app = FastAPI(
        title="KMIT PR App",
        description="KMIT 동아리 / 행사 / 공지 / 명예의 전당 API",
        version=__version__,
    )

    app.include_router(auth_router, prefix="/api")
    app.include_router(clubs_router, prefix="/api")
    app.include_router(events_router, prefix="/api")
    app.include_router(messages_router, prefix="/api")
    app.include_router(hall_of_fame_router, prefix="/api")

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(DuplicateKeyError, duplicate_key_handler)
    app.add_exception_handler(PyMongoError, database_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.on_event("startup")
    async def startup_event():
        """설정 확인, 로깅, 인덱스"""
        settings = get_settings()
        setup_logging(settings)
        validate_settings(settings)
        try:
            ensure_indexes()
        except PyMongoError:
            logger.exception("인덱스 생성 실패 - DB 연결을 확인하세요")
        logger.info(f"서버 시작 완료 (env={settings.ENV})")

    @app.on_event("shutdown")
    async def shutdown_event():
        close_mongo_client()
        logger.info("서버 종료됨")

    @app.get("/health")
    async def health():
        """헬스체크"""
        settings = get_settings()
        return {
            "success": True,
            "message": "KMIT PR App Backend is running",
            "timestamp": datetime.utcnow().isoformat(),
            "environment": settings.ENV,
            "version": __version__,
            "database": "connected" if ping() else "disconnected",
        }

    @app.get("/api")
    async def api_index():
        return {
            "success": True,
            "message": f"KMIT PR App API v{__version__}",
            "endpoints": API_ENDPOINTS,
        }

    return app


app = create_app()
