"""
API 요청/응답 모델
"""
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from database.models import OrderRecord, Player
from ranking.calculator import DEFAULT_SCORING, ScoringPolicy
from ranking.tiers import GameMode, TierLevel, display_name, parse_tier_code


# =============================================
# Request Models
# =============================================

class TierChangeRequest(BaseModel):
    """한 게임 모드의 티어 변경"""
    game_mode: GameMode = Field(..., alias="gameMode")
    tier: str = Field(..., description="티어 코드 (HT1 ... LT5, NR)")

    class Config:
        populate_by_name = True

    @field_validator("game_mode")
    @classmethod
    def concrete_mode(cls, v: GameMode) -> GameMode:
        if v.is_overall:
            raise ValueError("overall 티어는 직접 변경할 수 없습니다")
        return v

    @field_validator("tier", mode="before")
    @classmethod
    def validate_tier(cls, v):
        return parse_tier_code(v)


class MoveRequest(BaseModel):
    """버킷으로 이동 (드래그 앤 드롭)"""
    game_mode: GameMode = Field(..., alias="gameMode")
    tier_level: TierLevel = Field(..., alias="tierLevel")

    class Config:
        populate_by_name = True

    @field_validator("game_mode")
    @classmethod
    def concrete_mode(cls, v: GameMode) -> GameMode:
        if v.is_overall:
            raise ValueError("overall 티어는 직접 변경할 수 없습니다")
        return v

    @field_validator("tier_level", mode="before")
    @classmethod
    def parse_level(cls, v):
        return TierLevel.parse(v)


class ReorderRequest(BaseModel):
    """버킷 수동 정렬"""
    player_ids: List[str] = Field(..., alias="playerIds", min_length=1)
    expected_version: Optional[int] = Field(None, alias="expectedVersion", ge=0)

    class Config:
        populate_by_name = True


# =============================================
# Response Models
# =============================================

class PlayerResponse(BaseModel):
    """선수 + 점수"""
    id: str
    name: str
    tiers: Dict[str, str]
    points: int
    title: str
    overall_tier: str

    @classmethod
    def from_player(cls, player: Player, scoring: ScoringPolicy = DEFAULT_SCORING) -> "PlayerResponse":
        score = scoring.compute_score(player)
        return cls(
            id=player.id,
            name=player.name,
            tiers={
                mode.value: player.tier_for(mode)
                for mode in GameMode if not mode.is_overall
            },
            points=score.points,
            title=score.title,
            overall_tier=score.overall_tier,
        )


class TierEntry(BaseModel):
    """버킷 안의 선수"""
    position: int
    id: str
    name: str
    tier: Optional[str] = None  # overall 포인트 정책이면 None
    tier_name: Optional[str] = None
    points: int


class TierBucket(BaseModel):
    level: TierLevel
    key: str
    version: int
    players: List[TierEntry]


class TierListResponse(BaseModel):
    game_mode: GameMode
    tiers: List[TierBucket]


class OrderResponse(BaseModel):
    game_mode: GameMode
    tier_level: TierLevel
    player_ids: List[str]
    version: int
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, record: OrderRecord) -> "OrderResponse":
        return cls(
            game_mode=record.game_mode,
            tier_level=record.tier_level,
            player_ids=list(record.player_ids),
            version=record.version,
            updated_at=record.updated_at,
        )


class DeleteResponse(BaseModel):
    success: bool = True
    orders_updated: int = 0


def tier_entry(position: int, player: Player, placement_code: Optional[str], points: int) -> TierEntry:
    return TierEntry(
        position=position,
        id=player.id,
        name=player.name,
        tier=placement_code,
        tier_name=display_name(placement_code) if placement_code else None,
        points=points,
    )
