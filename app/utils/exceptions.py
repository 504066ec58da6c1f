"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses so services can raise domain
outcomes without specifying status codes at each call site.

Usage:
    from app.utils.exceptions import NotFoundError, ForbiddenError
    raise NotFoundError("Todo not found")
    raise ForbiddenError("")  # record denial carries no explanation
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found 예외 — 요청한 리소스를 찾을 수 없을 때 사용.

    Raised when a record does not exist, or is not visible to the caller.
    Always checked before any ownership test.
    """

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용 (e.g. duplicate username)."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden 예외 — 권한 부족 시 사용.

    Raised when the caller is neither the record owner nor an administrator,
    or when a non-administrator reaches an administrator-only route.
    """

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용 (missing, invalid or expired credentials)."""

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


class PersistenceError(HTTPException):
    """503 Service Unavailable 예외 — 데이터베이스 쓰기/읽기 실패 시 사용.

    Raised when the persistence provider fails. The session is rolled back
    before this is raised.
    """

    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)


class NotificationError(HTTPException):
    """502 Bad Gateway 예외 — 실시간 알림 전송 실패 시 사용.

    Raised when fan-out fails after a committed write. The write is not
    rolled back, so stored state and broadcast state may diverge.
    """

    def __init__(self, detail: str = "Change saved but notification failed") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
