"""
Tier List API Router

게임 모드별 티어리스트, 리더보드, 버킷 수동 정렬
"""
from typing import List

from fastapi import APIRouter, Depends

from app.auth.router import require_admin
from app.dependencies import game_mode_path, get_service, tier_level_path
from app.models import (
    OrderResponse,
    ReorderRequest,
    TierBucket,
    TierListResponse,
    tier_entry,
)
from app.service import TierListService
from ranking.classifier import LeaderboardEntry
from ranking.tiers import GameMode, TierLevel

router = APIRouter(prefix="/api", tags=["Tier List"])


@router.get("/tiers/{mode}", response_model=TierListResponse)
async def get_tier_list(
    mode: GameMode = Depends(game_mode_path),
    service: TierListService = Depends(get_service),
):
    """게임 모드별 S~D 버킷 (수동 정렬 적용)"""
    snapshot = await service.tier_list(mode)

    tiers = []
    for level in TierLevel:
        entries = []
        for position, player in enumerate(snapshot.buckets[level], 1):
            placement = service.classifier.placement(player, mode)
            entries.append(tier_entry(
                position,
                player,
                placement.code if placement else None,
                service.scoring.total_points(player),
            ))
        tiers.append(TierBucket(
            level=level,
            key=level.key,
            version=snapshot.versions.get(level, 0),
            players=entries,
        ))
    return TierListResponse(game_mode=mode, tiers=tiers)


@router.get("/leaderboard", response_model=List[LeaderboardEntry])
async def get_leaderboard(service: TierListService = Depends(get_service)):
    """overall 리더보드 (포인트 > 0)"""
    return await service.leaderboard()


# =============================================
# 수동 정렬
# =============================================

@router.get("/orders/{mode}/{level}", response_model=OrderResponse)
async def get_order(
    mode: GameMode = Depends(game_mode_path),
    level: TierLevel = Depends(tier_level_path),
    service: TierListService = Depends(get_service),
):
    return OrderResponse.from_record(await service.get_order(mode, level))


@router.put("/orders/{mode}/{level}", response_model=OrderResponse, dependencies=[Depends(require_admin)])
async def set_order(
    body: ReorderRequest,
    mode: GameMode = Depends(game_mode_path),
    level: TierLevel = Depends(tier_level_path),
    service: TierListService = Depends(get_service),
):
    """
    버킷 순서 저장

    expectedVersion이 현재 버전과 다르면 409 (최신 목록을 다시 받아 재시도).
    """
    record = await service.reorder(mode, level, body.player_ids, body.expected_version)
    return OrderResponse.from_record(record)


@router.delete("/orders/{mode}/{level}", response_model=OrderResponse, dependencies=[Depends(require_admin)])
async def reset_order(
    mode: GameMode = Depends(game_mode_path),
    level: TierLevel = Depends(tier_level_path),
    service: TierListService = Depends(get_service),
):
    return OrderResponse.from_record(await service.reset_order(mode, level))
