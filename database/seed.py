"""
초기 데이터 (학생, 동아리 회장, PR 위원회, 동아리 4개)

모든 계정의 초기 비밀번호는 INITIAL_PASSWORD 이고 isPasswordChanged=False 로 생성된다.
"""
from typing import Any, Dict, Optional

from loguru import logger
from pymongo.database import Database

from .club_store import ClubStore
from .mongo_client import CLUBS, EVENTS, HALL_OF_FAME, MESSAGES, USERS, ensure_indexes, get_database
from .user_store import UserStore

INITIAL_PASSWORD = "PR123$"

SAMPLE_STUDENTS = [
    {"name": "John Doe", "rollNumber": "21A91A0501"},
    {"name": "Jane Smith", "rollNumber": "21A91A0502"},
    {"name": "Mike Johnson", "rollNumber": "21A91A0503"},
    {"name": "Sarah Wilson", "rollNumber": "21A91A0504"},
    {"name": "David Brown", "rollNumber": "21A91A0505"},
]

SAMPLE_CLUBS = [
    {
        "name": "SAIL",
        "description": "Software and AI Learning club focused on programming, software development, "
                       "and artificial intelligence technologies.",
        "category": "technical",
        "brand_color": "#00ff88",
        "established_year": 2020,
    },
    {
        "name": "VAAN",
        "description": "Innovation and entrepreneurship club promoting startup culture and business "
                       "development among students.",
        "category": "entrepreneurship",
        "brand_color": "#3b82f6",
        "established_year": 2019,
    },
    {
        "name": "LIFE",
        "description": "Literary and cultural club organizing events, debates, creative writing, "
                       "and cultural activities.",
        "category": "cultural",
        "brand_color": "#f59e0b",
        "established_year": 2018,
    },
    {
        "name": "KRYPT",
        "description": "Cybersecurity and cryptography club focusing on information security, "
                       "ethical hacking, and digital privacy.",
        "category": "security",
        "brand_color": "#ef4444",
        "established_year": 2021,
    },
]

PR_COUNCIL_MEMBER = {"name": "PR Council Member", "clubName": "PR COUNCIL"}


def reset_database(database: Database) -> None:
    for name in (USERS, CLUBS, EVENTS, MESSAGES, HALL_OF_FAME):
        database[name].delete_many({})
    logger.warning("기존 데이터 삭제 완료")


def seed_database(database: Optional[Database] = None, reset: bool = False) -> Dict[str, Any]:
    """
    샘플 데이터 생성 (이미 있는 계정/동아리는 건너뜀)

    Returns:
        {"students": {rollNumber: doc}, "heads": {clubName: doc}, "pr_council": doc, "clubs": {name: doc}}
    """
    db = database if database is not None else get_database()
    if reset:
        reset_database(db)
    ensure_indexes(db)

    users = UserStore(db)
    clubs = ClubStore(db)
    created = {"students": {}, "heads": {}, "pr_council": None, "clubs": {}}

    for student in SAMPLE_STUDENTS:
        doc = users.find_student(student["name"], student["rollNumber"])
        if doc is None:
            doc = users.create(student["name"], INITIAL_PASSWORD, role="student", roll_number=student["rollNumber"])
            logger.info(f"학생 생성: {student['name']} ({student['rollNumber']})")
        created["students"][student["rollNumber"]] = doc

    for club in SAMPLE_CLUBS:
        head_name = f"{club['name']} Club Head"
        head = users.find_council(head_name, club["name"])
        if head is None:
            head = users.create(head_name, INITIAL_PASSWORD, role="club_head", club_name=club["name"])
            logger.info(f"동아리 회장 생성: {head_name}")
        created["heads"][club["name"]] = head

        doc = clubs.get_by_name(club["name"])
        if doc is None:
            doc = clubs.create(
                name=club["name"],
                description=club["description"],
                club_head=head["_id"],
                category=club["category"],
                brand_color=club["brand_color"],
                established_year=club["established_year"],
            )
            logger.info(f"동아리 생성: {club['name']}")
        created["clubs"][club["name"]] = doc

    council = users.find_council(PR_COUNCIL_MEMBER["name"], PR_COUNCIL_MEMBER["clubName"])
    if council is None:
        council = users.create(
            PR_COUNCIL_MEMBER["name"],
            INITIAL_PASSWORD,
            role="pr_council",
            club_name=PR_COUNCIL_MEMBER["clubName"],
        )
        logger.info(f"PR 위원회 계정 생성: {PR_COUNCIL_MEMBER['name']}")
    created["pr_council"] = council

    logger.info(
        f"시드 완료: 학생 {len(created['students'])}명, 회장 {len(created['heads'])}명, "
        f"동아리 {len(created['clubs'])}개"
    )
    return created
