"""
비밀번호 해시 / 강도 검사

저장 전에 반드시 hash_password() 를 거친다 (평문 저장 금지).
"""
import re
from typing import Optional

import bcrypt

from ..config import get_settings

MIN_PASSWORD_LENGTH = 8
# 허용 특수문자 (ASCII 구두점)
_SYMBOL_RE = re.compile(r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]""")


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """bcrypt 해시 (cost factor 는 BCRYPT_ROUNDS 설정)"""
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # 해시 형식이 깨진 경우
        return False


def password_weakness(password: str) -> Optional[str]:
    """
    새 비밀번호 규칙 검사

    Returns:
        규칙 위반 메시지, 통과하면 None
    """
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return f"New password must be at least {MIN_PASSWORD_LENGTH} characters long"
    if not _SYMBOL_RE.search(password):
        return "New password must contain at least one special character"
    return None
