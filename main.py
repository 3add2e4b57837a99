"""
KMIT PR App 백엔드 실행
"""
import argparse

import uvicorn
from loguru import logger

from pr_app.config import get_settings, validate_settings
from pr_app.logging_config import setup_logging


def parse_args():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="KMIT PR App API 서버")
    parser.add_argument("--host", default=settings.HOST, help="바인드 주소")
    parser.add_argument("--port", type=int, default=settings.PORT, help="포트")
    parser.add_argument("--reload", action="store_true", help="코드 변경 시 자동 재시작 (개발용)")
    return parser.parse_args()


def main():
    args = parse_args()
    settings = get_settings()
    setup_logging(settings)
    validate_settings(settings)

    logger.info(f"서버 시작: http://{args.host}:{args.port} (env={settings.ENV})")
    uvicorn.run(
        "pr_app.server:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
