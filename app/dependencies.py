"""
API 의존성

서비스 구성 + 경로 파라미터 해석
"""
from fastapi import HTTPException, Request
from loguru import logger

from database.memory import InMemoryOrderStorage, InMemoryPlayerRepository
from ranking.classifier import TierClassifier, get_overall_policy
from ranking.tiers import GameMode, TierLevel

from .config import TierListSettings
from .service import TierListService


def build_service(settings: TierListSettings) -> TierListService:
    """설정에 맞는 저장소로 서비스 구성"""
    if settings.storage_backend == "supabase":
        from database.supabase_client import SupabaseOrderStorage, SupabasePlayerRepository

        repository = SupabasePlayerRepository()
        order_storage = SupabaseOrderStorage()
    else:
        repository = InMemoryPlayerRepository(seed=settings.seed_demo_data)
        order_storage = InMemoryOrderStorage()

    classifier = TierClassifier(overall_policy=get_overall_policy(settings.overall_tier_policy))
    logger.info(
        f"저장소: {settings.storage_backend}, overall 정책: {classifier.overall_policy.name}"
    )
    return TierListService(
        repository,
        order_storage,
        classifier=classifier,
        lock_timeout_s=settings.order_lock_timeout_seconds,
        merge_on_duplicate=settings.merge_on_duplicate_name,
    )


def get_service(request: Request) -> TierListService:
    return request.app.state.service


def game_mode_path(mode: str) -> GameMode:
    """경로의 게임 모드 (overall 포함)"""
    try:
        return GameMode.parse(mode)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


def tier_level_path(level: str) -> TierLevel:
    try:
        return TierLevel.parse(level)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
