"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware and router registration.
Configures logging middleware, CORS, health check, and includes routers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.services.notification_hub import get_notification_hub


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    yield
    # 종료 시 모든 이벤트 스트림 구독자 연결 해제 (Disconnect stream subscribers on shutdown)
    await get_notification_hub().shutdown()


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Axiom API 로깅 미들웨어 — CORS보다 먼저 등록하여 모든 요청을 캡처
app.add_middleware(AxiomLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트 (Health check for load balancers and monitoring)."""
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.admin import admin_router  # noqa: E402
from app.api.app import app_router  # noqa: E402
from app.api.auth import router as auth_router  # noqa: E402
from app.api.hub import router as hub_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(app_router, prefix="/api/v1/app")
app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(hub_router, prefix="/api/v1/hub", tags=["Realtime"])
