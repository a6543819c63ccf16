"""
데이터 모델 정의 (Pydantic)
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ranking.tiers import GameMode, NR, TierLevel, normalize_tier_code, parse_tier_code

NAME_MAX_LENGTH = 32


def _clean_name(value: str) -> str:
    name = str(value or "").strip()
    if not name:
        raise ValueError("선수명은 비어 있을 수 없습니다")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"선수명은 {NAME_MAX_LENGTH}자 이하여야 합니다")
    return name


class Player(BaseModel):
    """선수 정보 (저장소에서 읽은 레코드)"""
    id: str = Field(..., description="선수 고유 ID")
    name: str = Field(..., description="선수명 (대소문자 무시 유일)")
    skywars_tier: str = Field(default=NR, description="Skywars 티어")
    midfight_tier: str = Field(default=NR, description="Midfight 티어")
    uhc_tier: str = Field(default=NR, description="UHC 티어")
    nodebuff_tier: str = Field(default=NR, description="Nodebuff 티어")
    bedfight_tier: str = Field(default=NR, description="Bedfight 티어")

    # 저장된 값이 깨져 있어도 분류가 멈추지 않도록 NR로 강등
    @field_validator(
        "skywars_tier", "midfight_tier", "uhc_tier", "nodebuff_tier", "bedfight_tier",
        mode="before",
    )
    @classmethod
    def normalize_tier(cls, v):
        return normalize_tier_code(v)

    def tier_for(self, mode: GameMode) -> str:
        return getattr(self, GameMode.parse(mode).field)


class PlayerCreate(BaseModel):
    """선수 생성 요청"""
    name: str = Field(..., description="선수명")
    skywars_tier: str = NR
    midfight_tier: str = NR
    uhc_tier: str = NR
    nodebuff_tier: str = NR
    bedfight_tier: str = NR

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        return _clean_name(v)

    @field_validator(
        "skywars_tier", "midfight_tier", "uhc_tier", "nodebuff_tier", "bedfight_tier",
        mode="before",
    )
    @classmethod
    def validate_tier(cls, v):
        return parse_tier_code(v)


class PlayerUpdate(BaseModel):
    """선수 수정 요청 (부분 수정)"""
    name: Optional[str] = None
    skywars_tier: Optional[str] = None
    midfight_tier: Optional[str] = None
    uhc_tier: Optional[str] = None
    nodebuff_tier: Optional[str] = None
    bedfight_tier: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return None
        return _clean_name(v)

    @field_validator(
        "skywars_tier", "midfight_tier", "uhc_tier", "nodebuff_tier", "bedfight_tier",
        mode="before",
    )
    @classmethod
    def validate_tier(cls, v):
        if v is None:
            return None
        return parse_tier_code(v)

    def changes(self) -> dict:
        """실제로 지정된 필드만"""
        return self.model_dump(exclude_none=True)


class OrderRecord(BaseModel):
    """수동 정렬 레코드 (game_mode, tier_level) 단위"""
    game_mode: GameMode
    tier_level: TierLevel
    player_ids: List[str] = Field(default_factory=list)
    version: int = Field(default=0, ge=0)
    updated_at: Optional[datetime] = None

    @property
    def key(self) -> tuple:
        return (self.game_mode, self.tier_level)
