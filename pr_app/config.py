"""
App Config - 환경변수 기반 설정
"""
from functools import lru_cache

from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "your-secret-key-change-in-production"


class AppSettings(BaseSettings):
    """서버 설정"""

    # 실행 환경 (development / test / production)
    ENV: str = "development"

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "kmit_pr_app"
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000
    MONGODB_MAX_POOL_SIZE: int = 10

    # JWT (1.5개월 = 45일)
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 45

    # 비밀번호 해시 cost factor
    BCRYPT_ROUNDS: int = 10

    # 로깅
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True

    # 서버
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def is_production(self) -> bool:
        return self.ENV.strip().lower() in ("prod", "production")


@lru_cache()
def get_settings() -> AppSettings:
    return AppSettings()


def validate_settings(settings: AppSettings) -> None:
    """
    운영 환경 필수 설정 확인

    기본 JWT 시크릿으로 운영 서버가 뜨는 것을 막는다.
    """
    if not settings.is_production:
        return
    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
        raise RuntimeError("JWT_SECRET_KEY must be set to a strong value in production.")
    if not settings.MONGODB_URI:
        raise RuntimeError("MONGODB_URI is required in production.")
