"""
PvP Tier List - FastAPI 웹 서버

공개 티어리스트/리더보드 + 관리자 선수 관리 API
데이터 소스: 메모리 (데모) 또는 Supabase
"""
import json
import time
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from database.errors import TierListError
from ranking.calculator import OVERALL_TIER_THRESHOLDS, TITLE_THRESHOLDS
from ranking.tiers import (
    GAME_MODE_LABELS,
    TIER_DISPLAY_NAMES,
    TIER_ORDER,
    TIER_POINTS,
    TierLevel,
)

from .auth.router import router as auth_router
from .auth.sessions import InMemorySessionStore, SessionStore
from .config import TierListSettings, get_settings
from .dependencies import build_service
from .players import players_router
from .service import TierListService
from .tierlist import tierlist_router

# 오류 종류 → HTTP 상태
ERROR_STATUS = {
    "validation": 422,
    "conflict": 409,
    "not_found": 404,
    "duplicate_name": 409,
}

LOG_LINE_LIMIT = 80


def _log_line(method: str, path: str, status: int, duration_ms: int, body: Optional[bytes]) -> str:
    line = f"{method} {path} {status} in {duration_ms}ms"
    if body:
        try:
            line += f" :: {json.dumps(json.loads(body), ensure_ascii=False)}"
        except ValueError:
            pass
    if len(line) > LOG_LINE_LIMIT:
        line = line[:LOG_LINE_LIMIT - 1] + "…"
    return line


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TierListError)
    async def tier_list_error_handler(request: Request, exc: TierListError):
        status = ERROR_STATUS.get(exc.kind, 400)
        logger.warning(f"{request.method} {request.url.path} → {status} {exc.kind}: {exc.message}")
        return JSONResponse(status_code=status, content=exc.to_dict())

    @app.exception_handler(TimeoutError)
    async def lock_timeout_handler(request: Request, exc: TimeoutError):
        logger.warning(f"{request.method} {request.url.path} → 503 락 대기 시간 초과")
        return JSONResponse(
            status_code=503,
            content={"error": "busy", "message": "다른 변경이 진행 중입니다. 잠시 후 다시 시도하세요", "detail": {}},
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} 처리 중 오류: {exc}")
        return JSONResponse(
            status_code=500,
            content={"error": "internal", "message": "서버 오류가 발생했습니다", "detail": {}},
        )


def create_app(
    settings: Optional[TierListSettings] = None,
    service: Optional[TierListService] = None,
    session_store: Optional[SessionStore] = None,
) -> FastAPI:
    """앱 생성 (테스트에서는 서비스/세션 저장소 주입)"""
    settings = settings or get_settings()

    app = FastAPI(
        title="PvP Tier List",
        description="Minecraft PvP 티어리스트 + 관리자 API",
        version="1.0.0"
    )
    app.state.settings = settings
    app.state.service = service or build_service(settings)
    app.state.session_store = session_store or InMemorySessionStore()

    app.include_router(auth_router)
    app.include_router(players_router)
    app.include_router(tierlist_router)
    register_error_handlers(app)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        body = await request.body() if request.method in ("POST", "PUT", "PATCH") else None
        response = await call_next(request)
        if request.url.path.startswith("/api"):
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.info(_log_line(request.method, request.url.path, response.status_code, duration_ms, body))
        return response

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"✅ 서버 시작 완료 - {settings.storage_backend} 저장소 사용 중")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("서버 종료됨")

    @app.get("/api/meta")
    async def api_meta():
        """게임 모드, 티어 레벨, 코드, 포인트, 칭호"""
        return {
            "game_modes": GAME_MODE_LABELS,
            "tier_levels": [
                {"level": level.value, "key": level.key, "short_name": level.short_name, "codes": list(level.codes)}
                for level in TierLevel
            ],
            "tier_codes": [
                {"code": code, "name": TIER_DISPLAY_NAMES[code], "points": TIER_POINTS[code]}
                for code in TIER_ORDER
            ],
            "titles": [
                {"title": title, "min_points": min_points}
                for min_points, title in TITLE_THRESHOLDS.entries
            ] + [{"title": TITLE_THRESHOLDS.floor, "min_points": 0}],
            "overall_tiers": [
                {"level": level.value, "min_points": min_points}
                for min_points, level in OVERALL_TIER_THRESHOLDS.entries
            ],
            "overall_policy": app.state.service.classifier.overall_policy.name,
        }

    @app.get("/api/status")
    async def api_status():
        """데이터 소스 상태 API"""
        players = await app.state.service.repository.get_all_players()
        return {
            "data_source": settings.storage_backend,
            "players": len(players),
            "overall_policy": app.state.service.classifier.overall_policy.name,
        }

    return app


app = create_app()
