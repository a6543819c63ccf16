"""
Supabase 데이터베이스 클라이언트

테이블:
- players: id, name, skywars_tier, midfight_tier, uhc_tier, nodebuff_tier, bedfight_tier
- tier_orders: game_mode, tier_level, player_ids (jsonb), version, updated_at
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from loguru import logger
from supabase import Client, create_client

from app.config import get_settings
from ordering.errors import OrderConflictError
from ranking.tiers import GameMode, MODE_FIELDS, TierLevel

from .errors import DuplicateNameError, PlayerNotFoundError
from .models import OrderRecord, Player, PlayerCreate, PlayerUpdate
from .repository import OrderStorage, PlayerRepository


# 싱글톤 클라이언트
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Supabase 클라이언트 인스턴스 반환 (싱글톤)"""
    global _supabase_client
    if _supabase_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError("SUPABASE_URL과 SUPABASE_KEY 환경변수를 설정해주세요")
        _supabase_client = create_client(settings.supabase_url, settings.supabase_key)
    return _supabase_client


def _escape_like(value: str) -> str:
    """ilike 패턴 특수문자 이스케이프"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_unique_violation(error: Exception) -> bool:
    """PostgreSQL 유일 제약 위반 (23505) 여부"""
    return getattr(error, "code", None) == "23505" or "duplicate key" in str(error)


class SupabasePlayerRepository(PlayerRepository):
    """Supabase players 테이블 저장소"""

    TABLE = "players"
    COLUMNS = "id, name, " + ", ".join(MODE_FIELDS)

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase_client()

    def _table(self):
        return self.client.table(self.TABLE)

    # ==================== 조회 ====================

    async def get_player(self, player_id: str) -> Optional[Player]:
        try:
            result = self._table().select(self.COLUMNS).eq("id", player_id).execute()
        except Exception as e:
            logger.error(f"선수 조회 실패 {player_id}: {e}")
            raise
        if not result.data:
            return None
        return Player(**result.data[0])

    async def get_player_by_name(self, name: str) -> Optional[Player]:
        target = name.strip()
        try:
            result = (
                self._table()
                .select(self.COLUMNS)
                .ilike("name", _escape_like(target))
                .execute()
            )
        except Exception as e:
            logger.error(f"선수명 조회 실패 {target}: {e}")
            raise
        for row in result.data or []:
            if str(row.get("name", "")).casefold() == target.casefold():
                return Player(**row)
        return None

    async def get_all_players(self) -> List[Player]:
        try:
            result = self._table().select(self.COLUMNS).execute()
        except Exception as e:
            logger.error(f"선수 목록 조회 실패: {e}")
            raise
        return [Player(**row) for row in result.data or []]

    # ==================== 변경 ====================

    async def create_player(self, data: PlayerCreate) -> Player:
        existing = await self.get_player_by_name(data.name)
        if existing:
            raise DuplicateNameError(data.name, existing.id)

        row = {"id": str(uuid.uuid4()), **data.model_dump()}
        try:
            result = self._table().insert(row).execute()
        except Exception as e:
            logger.error(f"선수 생성 실패 {data.name}: {e}")
            raise
        return Player(**(result.data[0] if result.data else row))

    async def update_player(self, player_id: str, data: PlayerUpdate) -> Player:
        existing = await self.get_player(player_id)
        if existing is None:
            raise PlayerNotFoundError(player_id)

        changes = data.changes()
        if "name" in changes:
            other = await self.get_player_by_name(changes["name"])
            if other and other.id != player_id:
                raise DuplicateNameError(changes["name"], other.id)
        if not changes:
            return existing

        try:
            result = self._table().update(changes).eq("id", player_id).execute()
        except Exception as e:
            logger.error(f"선수 수정 실패 {player_id}: {e}")
            raise
        if not result.data:
            # 조회와 수정 사이에 삭제됨
            raise PlayerNotFoundError(player_id)
        return Player(**result.data[0])

    async def delete_player(self, player_id: str) -> bool:
        try:
            result = self._table().delete().eq("id", player_id).execute()
        except Exception as e:
            logger.error(f"선수 삭제 실패 {player_id}: {e}")
            raise
        return bool(result.data)


class SupabaseOrderStorage(OrderStorage):
    """
    Supabase tier_orders 테이블 저장소

    저장 시 version 조건부 update로 프로세스 간 덮어쓰기를 막는다.
    """

    TABLE = "tier_orders"
    COLUMNS = "game_mode, tier_level, player_ids, version, updated_at"

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase_client()

    def _table(self):
        return self.client.table(self.TABLE)

    @staticmethod
    def _to_record(row: Dict[str, Any]) -> OrderRecord:
        return OrderRecord(
            game_mode=GameMode.parse(row["game_mode"]),
            tier_level=TierLevel.parse(row["tier_level"]),
            player_ids=[str(pid) for pid in row.get("player_ids") or []],
            version=int(row.get("version") or 0),
            updated_at=row.get("updated_at"),
        )

    async def load(self, game_mode: GameMode, tier_level: TierLevel) -> Optional[OrderRecord]:
        try:
            result = (
                self._table()
                .select(self.COLUMNS)
                .eq("game_mode", game_mode.value)
                .eq("tier_level", tier_level.value)
                .execute()
            )
        except Exception as e:
            logger.error(f"정렬 조회 실패 {game_mode.value}/{tier_level.value}: {e}")
            raise
        if not result.data:
            return None
        return self._to_record(result.data[0])

    async def save(self, record: OrderRecord, expected_version: int) -> OrderRecord:
        row = {
            "game_mode": record.game_mode.value,
            "tier_level": record.tier_level.value,
            "player_ids": list(record.player_ids),
            "version": record.version,
            "updated_at": (record.updated_at or datetime.now()).isoformat(),
        }

        try:
            if expected_version == 0:
                existing = await self.load(record.game_mode, record.tier_level)
                if existing is not None:
                    raise OrderConflictError(expected_version, existing.version)
                try:
                    result = self._table().insert(row).execute()
                except Exception as e:
                    if not _is_unique_violation(e):
                        raise
                    # 확인과 삽입 사이에 다른 프로세스가 먼저 생성함
                    current = await self.load(record.game_mode, record.tier_level)
                    raise OrderConflictError(expected_version, current.version if current else 0) from None
            else:
                result = (
                    self._table()
                    .update(row)
                    .eq("game_mode", row["game_mode"])
                    .eq("tier_level", row["tier_level"])
                    .eq("version", expected_version)
                    .execute()
                )
        except OrderConflictError:
            raise
        except Exception as e:
            logger.error(f"정렬 저장 실패 {row['game_mode']}/{row['tier_level']}: {e}")
            raise

        if not result.data:
            # 다른 프로세스가 먼저 저장함
            current = await self.load(record.game_mode, record.tier_level)
            raise OrderConflictError(expected_version, current.version if current else 0)
        return self._to_record(result.data[0])

    async def all_records(self) -> List[OrderRecord]:
        try:
            result = self._table().select(self.COLUMNS).execute()
        except Exception as e:
            logger.error(f"정렬 목록 조회 실패: {e}")
            raise
        return [self._to_record(row) for row in result.data or []]
