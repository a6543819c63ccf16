"""
메모리 저장소

개발/테스트용. 프로세스가 종료되면 데이터가 사라진다.
"""
import uuid
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from loguru import logger

from ordering.errors import OrderConflictError
from ranking.tiers import GameMode, TierLevel

from .errors import DuplicateNameError, PlayerNotFoundError
from .models import OrderRecord, Player, PlayerCreate, PlayerUpdate
from .repository import OrderStorage, PlayerRepository


# 데모 선수 (티어별)
SEED_PLAYERS: List[Dict[str, str]] = [
    # S Tier
    {"name": "D3j4411", "skywars_tier": "HT1", "midfight_tier": "HT1", "uhc_tier": "HT2"},
    {"name": "Velfair", "skywars_tier": "HT1", "midfight_tier": "HT2", "uhc_tier": "HT1", "nodebuff_tier": "HT3"},
    {"name": "DR0IDv", "skywars_tier": "HT1", "uhc_tier": "HT2", "nodebuff_tier": "HT1", "bedfight_tier": "HT3"},
    {"name": "Torqueyckpio", "skywars_tier": "MIDT1", "midfight_tier": "HT2", "uhc_tier": "HT3", "bedfight_tier": "LT1"},
    {"name": "RivaV0cals", "skywars_tier": "HT1", "midfight_tier": "HT3", "uhc_tier": "HT2"},
    # A Tier
    {"name": "ItzAaronHi", "skywars_tier": "HT2", "midfight_tier": "MIDT2", "uhc_tier": "LT1"},
    {"name": "zAmqni", "skywars_tier": "HT2", "uhc_tier": "MIDT1", "nodebuff_tier": "HT3"},
    {"name": "Mikeyandroid", "skywars_tier": "MIDT2", "midfight_tier": "HT3", "uhc_tier": "LT2", "bedfight_tier": "LT1"},
    # B Tier
    {"name": "EletricHayden", "skywars_tier": "HT3", "midfight_tier": "MIDT3"},
    {"name": "FlamePvPs", "skywars_tier": "MIDT3", "midfight_tier": "LT2", "uhc_tier": "LT3"},
    # C Tier
    {"name": "ComicBiscuit778", "skywars_tier": "LT1", "midfight_tier": "LT4"},
    {"name": "EfrazBR", "nodebuff_tier": "LT1", "bedfight_tier": "LT3"},
]


class InMemoryPlayerRepository(PlayerRepository):
    """dict 기반 선수 저장소"""

    def __init__(self, seed: bool = False):
        self._players: Dict[str, Player] = {}
        if seed:
            self._seed()

    def _seed(self):
        for data in SEED_PLAYERS:
            player = Player(id=str(uuid.uuid4()), **data)
            self._players[player.id] = player
        logger.info(f"데모 선수 {len(SEED_PLAYERS)}명 로드")

    def _find_by_name(self, name: str) -> Optional[Player]:
        target = name.strip().casefold()
        for player in self._players.values():
            if player.name.casefold() == target:
                return player
        return None

    async def get_player(self, player_id: str) -> Optional[Player]:
        return self._players.get(player_id)

    async def get_player_by_name(self, name: str) -> Optional[Player]:
        return self._find_by_name(name)

    async def get_all_players(self) -> List[Player]:
        return list(self._players.values())

    async def create_player(self, data: PlayerCreate) -> Player:
        existing = self._find_by_name(data.name)
        if existing:
            raise DuplicateNameError(data.name, existing.id)

        player = Player(id=str(uuid.uuid4()), **data.model_dump())
        self._players[player.id] = player
        return player

    async def update_player(self, player_id: str, data: PlayerUpdate) -> Player:
        existing = self._players.get(player_id)
        if existing is None:
            raise PlayerNotFoundError(player_id)

        changes = data.changes()
        if "name" in changes:
            other = self._find_by_name(changes["name"])
            if other and other.id != player_id:
                raise DuplicateNameError(changes["name"], other.id)

        updated = existing.model_copy(update=changes)
        self._players[player_id] = updated
        return updated

    async def delete_player(self, player_id: str) -> bool:
        return self._players.pop(player_id, None) is not None


class InMemoryOrderStorage(OrderStorage):
    """dict 기반 정렬 레코드 저장소"""

    def __init__(self):
        self._records: Dict[Tuple[GameMode, TierLevel], OrderRecord] = {}

    async def load(self, game_mode: GameMode, tier_level: TierLevel) -> Optional[OrderRecord]:
        record = self._records.get((game_mode, tier_level))
        return record.model_copy(deep=True) if record else None

    async def save(self, record: OrderRecord, expected_version: int) -> OrderRecord:
        current = self._records.get(record.key)
        current_version = current.version if current else 0
        if current_version != expected_version:
            raise OrderConflictError(expected_version, current_version)

        stored = record.model_copy(deep=True)
        if stored.updated_at is None:
            stored.updated_at = datetime.now()
        self._records[record.key] = stored
        return stored.model_copy(deep=True)

    async def all_records(self) -> List[OrderRecord]:
        return [record.model_copy(deep=True) for record in self._records.values()]
