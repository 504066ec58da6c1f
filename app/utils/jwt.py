"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.

JWT Payload Structure:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier, the only claim the server trusts)
        "roles": ["Admin"],         # 역할 이름 (Role names, informational for clients)
        "jti": "token_uuid",        # 토큰 고유 ID (Unique token id)
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"|"refresh"  # 토큰 유형 (Token type discriminator)
    }
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any
import jwt

from app.config import settings


def _encode(data: dict[str, Any], lifetime: timedelta, token_type: str) -> str:
    to_encode: dict[str, Any] = data.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + lifetime,
        "type": token_type,
        # 같은 초에 발급된 토큰도 서로 다르도록 (Keeps tokens issued in the same second distinct)
        "jti": uuid.uuid4().hex,
    })
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a JWT access token that expires after
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES.

    Example:
        token = create_access_token({"sub": str(user.id)})
    """
    lifetime = timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES)
    return _encode(data, lifetime, "access")


def create_refresh_token(data: dict[str, Any]) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a JWT refresh token that expires after
    JWT_REFRESH_TOKEN_EXPIRE_DAYS.
    """
    lifetime = timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS)
    return _encode(data, lifetime, "refresh")


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
