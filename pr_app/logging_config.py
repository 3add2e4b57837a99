"""
로깅 설정 (loguru)
"""
import sys
from pathlib import Path

from loguru import logger

from .config import AppSettings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

_configured = False


def setup_logging(settings: AppSettings) -> None:
    """stderr + 일별 로그 파일 싱크 등록 (한 번만)"""
    global _configured
    if _configured:
        return

    logger.remove()
    logger.add(sys.stderr, format=LOG_FORMAT, level=settings.LOG_LEVEL)

    if settings.LOG_TO_FILE:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_dir / "pr_app_{time:YYYY-MM-DD}.log"),
            rotation="1 day",
            retention="30 days",
            level="DEBUG",
        )

    _configured = True
    logger.debug(f"로깅 설정 완료 (level={settings.LOG_LEVEL}, env={settings.ENV})")
