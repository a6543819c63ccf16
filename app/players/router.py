"""
Player API Router

선수 조회 (공개) + 선수 관리 (관리자)
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from app.auth.router import require_admin
from app.dependencies import get_service
from app.models import DeleteResponse, MoveRequest, PlayerResponse, TierChangeRequest
from app.service import TierListService
from database.models import PlayerCreate, PlayerUpdate
from ranking.calculator import PlayerScore

router = APIRouter(prefix="/api/players", tags=["Players"])


def _response(service: TierListService, player) -> PlayerResponse:
    return PlayerResponse.from_player(player, service.scoring)


# =============================================
# 조회
# =============================================

@router.get("", response_model=List[PlayerResponse])
async def list_players(service: TierListService = Depends(get_service)):
    """전체 선수 (포인트 내림차순)"""
    players = await service.list_players()
    return [_response(service, p) for p in players]


@router.get("/{player_id}", response_model=PlayerResponse)
async def get_player(player_id: str, service: TierListService = Depends(get_service)):
    return _response(service, await service.get_player(player_id))


@router.get("/{player_id}/score", response_model=PlayerScore)
async def get_player_score(player_id: str, service: TierListService = Depends(get_service)):
    """포인트, 칭호, overall 티어"""
    return await service.get_score(player_id)


# =============================================
# 관리 (관리자)
# =============================================

@router.post("", response_model=PlayerResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_player(
    body: PlayerCreate,
    response: Response,
    service: TierListService = Depends(get_service),
):
    """
    선수 생성

    같은 이름이 있으면 409. 병합 설정이 켜져 있으면 기존 선수에 티어를 병합하고 200.
    """
    player, created = await service.create_player(body)
    if not created:
        response.status_code = 200
    return _response(service, player)


@router.patch("/{player_id}", response_model=PlayerResponse, dependencies=[Depends(require_admin)])
async def update_player(
    player_id: str,
    body: PlayerUpdate,
    service: TierListService = Depends(get_service),
):
    if not body.changes():
        raise HTTPException(status_code=400, detail="변경할 항목이 없습니다")
    return _response(service, await service.update_player(player_id, body))


@router.patch("/{player_id}/tier", response_model=PlayerResponse, dependencies=[Depends(require_admin)])
async def change_player_tier(
    player_id: str,
    body: TierChangeRequest,
    service: TierListService = Depends(get_service),
):
    """한 게임 모드의 티어 변경"""
    player = await service.change_tier(player_id, body.game_mode, body.tier)
    return _response(service, player)


@router.post("/{player_id}/move", response_model=PlayerResponse, dependencies=[Depends(require_admin)])
async def move_player(
    player_id: str,
    body: MoveRequest,
    service: TierListService = Depends(get_service),
):
    """버킷으로 이동 (해당 레벨의 High 티어로 설정)"""
    player = await service.move_to_level(player_id, body.game_mode, body.tier_level)
    return _response(service, player)


@router.delete("/{player_id}", response_model=DeleteResponse, dependencies=[Depends(require_admin)])
async def delete_player(player_id: str, service: TierListService = Depends(get_service)):
    removed = await service.delete_player(player_id)
    return DeleteResponse(orders_updated=removed)
