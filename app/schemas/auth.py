"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token issuance/refresh, and user info.
"""

from uuid import UUID

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """회원가입 요청 스키마.

    Self-registration request. New accounts hold no roles.

    Attributes:
        username: 사용자 아이디 (Desired login username, max 50 chars)
        email: 이메일 (Email address)
        password: 비밀번호 (Plain text, bcrypt-hashed on server)
    """

    username: str = Field(min_length=1, max_length=50)
    email: str = Field(min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=1)


class LoginRequest(BaseModel):
    """로그인 요청 스키마."""

    username: str
    password: str  # 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login or token refresh.
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마 (Carries the refresh token to exchange or revoke)."""

    refresh_token: str


class UserResponse(BaseModel):
    """사용자 정보 응답 스키마.

    Attributes:
        id: 사용자 UUID (User identifier)
        username: 로그인 아이디 (Login username)
        email: 이메일 (Email address)
        roles: 역할 이름 목록 (Assigned role names)
    """

    id: UUID
    username: str
    email: str
    roles: list[str]
