"""
Supabase Adapter Tests - Supabase 저장소 테스트 (클라이언트 모킹)
"""
import pytest
from unittest.mock import MagicMock

from database.errors import DuplicateNameError, PlayerNotFoundError
from database.models import OrderRecord, PlayerCreate, PlayerUpdate
from database.supabase_client import (
    SupabaseOrderStorage,
    SupabasePlayerRepository,
    _escape_like,
    _is_unique_violation,
)
from ordering.errors import OrderConflictError
from ranking.tiers import NR, GameMode, TierLevel


def make_client(*results):
    """체이닝 쿼리를 흉내 내는 클라이언트. execute()는 results를 순서대로 반환"""
    query = MagicMock()
    for method in ("select", "eq", "ilike", "insert", "update", "delete", "limit"):
        getattr(query, method).return_value = query
    query.execute.side_effect = [MagicMock(data=data) for data in results]

    client = MagicMock()
    client.table.return_value = query
    return client, query


PLAYER_ROW = {
    "id": "p1",
    "name": "Alex",
    "skywars_tier": "HT1",
    "midfight_tier": "NR",
    "uhc_tier": "bogus",
    "nodebuff_tier": None,
    "bedfight_tier": "LT2",
}


class TestEscapeLike:
    def test_wildcards_escaped(self):
        assert _escape_like("a_b%c") == "a\\_b\\%c"


@pytest.mark.asyncio
class TestSupabasePlayerRepository:
    """players 테이블"""

    async def test_get_player(self):
        client, query = make_client([PLAYER_ROW])
        repo = SupabasePlayerRepository(client)

        player = await repo.get_player("p1")

        client.table.assert_called_with("players")
        query.eq.assert_called_with("id", "p1")
        assert player.skywars_tier == "HT1"
        assert player.uhc_tier == NR
        assert player.nodebuff_tier == NR

    async def test_get_player_missing(self):
        client, _ = make_client([])
        assert await SupabasePlayerRepository(client).get_player("x") is None

    async def test_get_by_name_exact_match(self):
        client, query = make_client([{**PLAYER_ROW, "name": "alex"}])
        player = await SupabasePlayerRepository(client).get_player_by_name(" ALEX ")
        query.ilike.assert_called_with("name", "ALEX")
        assert player.name == "alex"

    async def test_create_duplicate(self):
        client, query = make_client([PLAYER_ROW])
        with pytest.raises(DuplicateNameError):
            await SupabasePlayerRepository(client).create_player(PlayerCreate(name="alex"))
        query.insert.assert_not_called()

    async def test_create(self):
        created = {**PLAYER_ROW, "id": "new", "name": "Steve"}
        client, query = make_client([], [created])
        player = await SupabasePlayerRepository(client).create_player(
            PlayerCreate(name="Steve", skywars_tier="HT1")
        )
        row = query.insert.call_args[0][0]
        assert row["name"] == "Steve"
        assert row["skywars_tier"] == "HT1"
        assert row["id"]
        assert player.name == "Steve"

    async def test_update_missing(self):
        client, _ = make_client([])
        with pytest.raises(PlayerNotFoundError):
            await SupabasePlayerRepository(client).update_player("x", PlayerUpdate(uhc_tier="HT1"))

    async def test_update(self):
        client, query = make_client([PLAYER_ROW], [{**PLAYER_ROW, "uhc_tier": "HT1"}])
        player = await SupabasePlayerRepository(client).update_player("p1", PlayerUpdate(uhc_tier="ht1"))
        query.update.assert_called_with({"uhc_tier": "HT1"})
        assert player.uhc_tier == "HT1"

    async def test_delete(self):
        client, _ = make_client([PLAYER_ROW], [])
        repo = SupabasePlayerRepository(client)
        assert await repo.delete_player("p1") is True
        assert await repo.delete_player("p1") is False

    async def test_error_propagates(self):
        client, query = make_client()
        query.execute.side_effect = RuntimeError("connection reset")
        with pytest.raises(RuntimeError):
            await SupabasePlayerRepository(client).get_all_players()


@pytest.mark.asyncio
class TestSupabaseOrderStorage:
    """tier_orders 테이블 (버전 조건부 저장)"""

    ROW = {
        "game_mode": "skywars",
        "tier_level": "S",
        "player_ids": ["p2", "p1"],
        "version": 3,
        "updated_at": "2026-01-01T00:00:00",
    }

    def record(self, version):
        return OrderRecord(
            game_mode=GameMode.SKYWARS,
            tier_level=TierLevel.S,
            player_ids=["p1"],
            version=version,
        )

    async def test_load(self):
        client, query = make_client([self.ROW])
        record = await SupabaseOrderStorage(client).load(GameMode.SKYWARS, TierLevel.S)
        client.table.assert_called_with("tier_orders")
        assert record.player_ids == ["p2", "p1"]
        assert record.version == 3

    async def test_first_save_inserts(self):
        client, query = make_client([], [{**self.ROW, "player_ids": ["p1"], "version": 1}])
        saved = await SupabaseOrderStorage(client).save(self.record(1), expected_version=0)
        query.insert.assert_called_once()
        assert saved.version == 1

    async def test_first_save_existing_row_conflicts(self):
        client, query = make_client([self.ROW])
        with pytest.raises(OrderConflictError):
            await SupabaseOrderStorage(client).save(self.record(1), expected_version=0)
        query.insert.assert_not_called()

    async def test_update_checks_version(self):
        client, query = make_client([{**self.ROW, "version": 4}])
        saved = await SupabaseOrderStorage(client).save(self.record(4), expected_version=3)
        query.eq.assert_any_call("version", 3)
        assert saved.version == 4

    async def test_update_no_rows_is_conflict(self):
        """다른 프로세스가 먼저 저장 → 0행 갱신"""
        client, _ = make_client([], [{**self.ROW, "version": 5}])
        with pytest.raises(OrderConflictError) as exc_info:
            await SupabaseOrderStorage(client).save(self.record(4), expected_version=3)
        assert exc_info.value.current_version == 5

    async def test_first_save_insert_race_is_conflict(self):
        """확인 후 삽입 전에 다른 프로세스가 같은 키를 생성 → 유일 제약 위반"""
        client, query = make_client()
        query.execute.side_effect = [
            MagicMock(data=[]),
            UniqueViolation("duplicate key value violates unique constraint"),
            MagicMock(data=[{**self.ROW, "version": 1}]),
        ]
        with pytest.raises(OrderConflictError) as exc_info:
            await SupabaseOrderStorage(client).save(self.record(1), expected_version=0)
        assert exc_info.value.expected_version == 0
        assert exc_info.value.current_version == 1

    async def test_first_save_other_insert_error_propagates(self):
        client, query = make_client()
        query.execute.side_effect = [MagicMock(data=[]), RuntimeError("connection reset")]
        with pytest.raises(RuntimeError):
            await SupabaseOrderStorage(client).save(self.record(1), expected_version=0)


class UniqueViolation(Exception):
    """postgrest APIError처럼 code 속성을 가진 오류"""

    code = "23505"


class TestIsUniqueViolation:
    def test_by_code(self):
        assert _is_unique_violation(UniqueViolation("x"))

    def test_by_message(self):
        assert _is_unique_violation(RuntimeError('duplicate key value violates unique constraint "tier_orders_pkey"'))

    def test_other_error(self):
        assert not _is_unique_violation(RuntimeError("timeout"))
