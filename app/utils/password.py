"""비밀번호 해싱 유틸리티 — bcrypt 기반.

Password hashing helpers backed by bcrypt. Only hashes are stored.
"""

import bcrypt

_ENCODING = "utf-8"


def hash_password(password: str) -> str:
    """평문 비밀번호를 salt가 포함된 bcrypt 해시로 변환합니다 (Hash with a fresh salt)."""
    digest: bytes = bcrypt.hashpw(password.encode(_ENCODING), bcrypt.gensalt())
    return digest.decode(_ENCODING)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호가 저장된 해시와 일치하는지 확인합니다 (Constant-time bcrypt check)."""
    return bcrypt.checkpw(plain_password.encode(_ENCODING), hashed_password.encode(_ENCODING))
