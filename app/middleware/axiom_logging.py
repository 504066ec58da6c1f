"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Captures request/response data and sends structured logs to Axiom.
Sensitive fields (password, token, secret) are automatically masked.
Falls back to the standard ``logging`` module when Axiom is not configured.
"""

import json
import logging
import re
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from axiom_py import Client as AxiomClient

from app.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging (the event stream never completes)
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json", "/api/v1/hub/events"}


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청을 Axiom에 로깅하는 미들웨어.

    Logs method, path, masked request body, status code and duration of
    every API request.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return mask_sensitive(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.time()
        request_body: Any = await self._read_body(request) if self._client else None
        status_code: int = 500
        error_detail: str | None = None
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            duration_ms = round((time.time() - start_time) * 1000, 2)
            log_event: dict[str, Any] = {
                "method": request.method,
                "path": request.url.path,
                "status_code": status_code,
                "duration_ms": duration_ms,
            }
            if request_body is not None:
                log_event["request_body"] = request_body
            if error_detail:
                log_event["error"] = error_detail
            self._emit(log_event)

    def _emit(self, log_event: dict[str, Any]) -> None:
        if self._client is None:
            logger.info(
                "%s %s -> %s (%sms)",
                log_event["method"], log_event["path"],
                log_event["status_code"], log_event["duration_ms"],
            )
            return
        try:
            self._client.ingest_events(self._dataset, [log_event])
        except Exception as exc:
            # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure
            logger.warning("Axiom ingest failed: %s", exc)
