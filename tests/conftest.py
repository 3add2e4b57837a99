"""
Pytest configuration and fixtures for KMIT PR App tests
"""

import os
import sys
from pathlib import Path

import mongomock
import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# 테스트 설정 (get_settings 첫 호출 전에)
os.environ["ENV"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_TO_FILE"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["MONGODB_DB_NAME"] = "kmit_pr_app_test"

from pr_app.config import get_settings  # noqa: E402

get_settings.cache_clear()

from fastapi.testclient import TestClient  # noqa: E402

from database import set_database  # noqa: E402
from database.seed import seed_database  # noqa: E402
from pr_app.auth.session import create_access_token  # noqa: E402
from pr_app.server import app  # noqa: E402


@pytest.fixture(scope="function")
def db():
    """mongomock 인메모리 DB"""
    database = mongomock.MongoClient()["kmit_pr_app_test"]
    set_database(database)
    yield database
    set_database(None)


@pytest.fixture(scope="function")
def seeded(db):
    """학생 5명, 동아리 회장 4명, PR 위원회 1명, 동아리 4개"""
    return seed_database(db)


@pytest.fixture(scope="function")
def client(db):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def auth_headers():
    """사용자 문서 → Authorization 헤더"""

    def make(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return make


@pytest.fixture(scope="function")
def users(seeded):
    """자주 쓰는 계정"""
    return {
        "john": seeded["students"]["21A91A0501"],
        "jane": seeded["students"]["21A91A0502"],
        "mike": seeded["students"]["21A91A0503"],
        "sail_head": seeded["heads"]["SAIL"],
        "vaan_head": seeded["heads"]["VAAN"],
        "pr": seeded["pr_council"],
    }


@pytest.fixture(scope="function")
def clubs(seeded):
    return seeded["clubs"]
