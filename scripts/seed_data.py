"""
샘플 데이터 시드

사용법:
    python scripts/seed_data.py           # 없는 데이터만 생성
    python scripts/seed_data.py --reset   # 전체 삭제 후 다시 생성
"""
import argparse
import os
import sys

from loguru import logger
from pymongo.errors import PyMongoError

# 프로젝트 루트 추가
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import close_mongo_client
from database.seed import INITIAL_PASSWORD, seed_database
from pr_app.config import get_settings
from pr_app.logging_config import setup_logging


def main():
    parser = argparse.ArgumentParser(description="KMIT PR App 샘플 데이터 생성")
    parser.add_argument("--reset", action="store_true", help="기존 데이터를 모두 삭제하고 다시 생성")
    args = parser.parse_args()

    settings = get_settings()
    setup_logging(settings)

    logger.info("=" * 60)
    logger.info(f"샘플 데이터 시드 (db={settings.MONGODB_DB_NAME}, reset={args.reset})")
    logger.info("=" * 60)

    try:
        created = seed_database(reset=args.reset)
    except PyMongoError:
        logger.exception("시드 실패")
        sys.exit(1)
    finally:
        close_mongo_client()

    logger.info(f"초기 비밀번호: {INITIAL_PASSWORD}")
    for roll_number, student in created["students"].items():
        logger.info(f"  학생: {student['name']} / {roll_number}")
    for club_name, head in created["heads"].items():
        logger.info(f"  회장: {head['name']} / {club_name}")
    logger.info(f"  PR 위원회: {created['pr_council']['name']} / {created['pr_council']['clubName']}")


if __name__ == "__main__":
    main()
