"""
수동 정렬 저장소 (Manual Order Store)

관리자가 (게임 모드, 티어 레벨) 버킷 안의 선수 순서를 직접 지정한다.
- 버전 기반 낙관적 동시성 제어 (다른 관리자의 변경을 덮어쓰지 않음)
- 저장 시점에 버킷 소속 검증 (다른 티어로 이동한 선수가 남아 있으면 거부)
- 키 단위 락으로 load → validate → save 구간 직렬화
"""
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence

from loguru import logger

from database.models import OrderRecord, Player
from database.repository import OrderStorage, PlayerRepository
from ranking.classifier import TierClassifier
from ranking.tiers import GameMode, TierLevel

from .errors import OrderConflictError, OrderValidationError
from .locks import KeyedLock


def merge_order(players: Sequence[Player], order_ids: Sequence[str]) -> List[Player]:
    """
    저장된 순서 적용

    order_ids에 있는 선수는 그 순서대로 앞에, 나머지는 기존(자연 정렬) 순서를 유지하며 뒤에.
    order_ids에 있지만 players에 없는 ID는 무시한다.
    """
    if not order_ids:
        return list(players)

    position = {player_id: index for index, player_id in enumerate(order_ids)}
    ordered = [p for p in players if p.id in position]
    ordered.sort(key=lambda p: position[p.id])
    rest = [p for p in players if p.id not in position]
    return ordered + rest


class ManualOrderStore:
    """버킷별 수동 정렬 저장소"""

    def __init__(
        self,
        storage: OrderStorage,
        repository: PlayerRepository,
        classifier: TierClassifier,
        lock_timeout_s: Optional[float] = None,
    ):
        self._storage = storage
        self._repository = repository
        self._classifier = classifier
        self._locks = KeyedLock()
        self.lock_timeout_s = lock_timeout_s

    @property
    def locks(self) -> KeyedLock:
        return self._locks

    async def _load(self, game_mode: GameMode, tier_level: TierLevel) -> OrderRecord:
        record = await self._storage.load(game_mode, tier_level)
        if record is None:
            return OrderRecord(game_mode=game_mode, tier_level=tier_level)
        return record

    # =============================================
    # 조회
    # =============================================

    async def get(self, game_mode, tier_level) -> OrderRecord:
        """저장된 순서와 버전. 없으면 빈 목록, 버전 0"""
        return await self._load(GameMode.parse(game_mode), TierLevel.parse(tier_level))

    async def versions(self, game_mode) -> Dict[TierLevel, OrderRecord]:
        mode = GameMode.parse(game_mode)
        return {level: await self._load(mode, level) for level in TierLevel}

    # =============================================
    # 변경
    # =============================================

    async def set(
        self,
        game_mode,
        tier_level,
        player_ids: Iterable[str],
        expected_version: Optional[int] = None,
    ) -> OrderRecord:
        """
        버킷 순서 저장

        Args:
            game_mode: 게임 모드 (overall 포함)
            tier_level: 티어 레벨
            player_ids: 새 순서 (중복 불가)
            expected_version: 호출자가 마지막으로 읽은 버전 (None이면 검사 생략)

        Raises:
            OrderConflictError: expected_version이 현재 버전과 다를 때
            OrderValidationError: 중복/알 수 없는 ID/버킷 밖의 선수

        Returns:
            저장된 레코드 (버전 +1)
        """
        mode = GameMode.parse(game_mode)
        level = TierLevel.parse(tier_level)
        ids = [str(player_id) for player_id in player_ids]

        async with self._locks.hold((mode, level), timeout_s=self.lock_timeout_s, reason="reorder"):
            current = await self._load(mode, level)

            if expected_version is not None and expected_version != current.version:
                logger.warning(
                    f"정렬 충돌 {mode.value}/{level.key}: "
                    f"요청 v{expected_version}, 현재 v{current.version}"
                )
                raise OrderConflictError(expected_version, current.version)

            await self._validate(mode, level, ids)

            record = OrderRecord(
                game_mode=mode,
                tier_level=level,
                player_ids=ids,
                version=current.version + 1,
                updated_at=datetime.now(),
            )
            saved = await self._storage.save(record, expected_version=current.version)

        logger.info(f"정렬 저장 {mode.value}/{level.key} v{saved.version}: {len(ids)}명")
        return saved

    async def _validate(self, mode: GameMode, level: TierLevel, ids: List[str]) -> None:
        seen = set()
        for player_id in ids:
            if player_id in seen:
                raise OrderValidationError(
                    f"중복된 선수 ID: {player_id}",
                    player_id=player_id,
                    reason="duplicate",
                )
            seen.add(player_id)

        if not ids:
            return

        players = {p.id: p for p in await self._repository.get_all_players()}
        for player_id in ids:
            player = players.get(player_id)
            if player is None:
                raise OrderValidationError(
                    f"알 수 없는 선수 ID: {player_id}",
                    player_id=player_id,
                    reason="unknown_player",
                )
            actual = self._classifier.effective_level(player, mode)
            if actual != level:
                actual_label = actual.key if actual else "NR"
                raise OrderValidationError(
                    f"{player.name}은(는) {mode.value} {level.key}에 속하지 않습니다 "
                    f"(현재 {actual_label})",
                    player_id=player_id,
                    reason="not_in_tier",
                )

    async def reset(self, game_mode, tier_level) -> OrderRecord:
        """관리자 초기화: 빈 목록으로 되돌림 (버전 +1)"""
        mode = GameMode.parse(game_mode)
        level = TierLevel.parse(tier_level)

        async with self._locks.hold((mode, level), timeout_s=self.lock_timeout_s, reason="reset"):
            current = await self._load(mode, level)
            if current.version == 0 and not current.player_ids:
                return current
            record = OrderRecord(
                game_mode=mode,
                tier_level=level,
                player_ids=[],
                version=current.version + 1,
                updated_at=datetime.now(),
            )
            saved = await self._storage.save(record, expected_version=current.version)

        logger.info(f"정렬 초기화 {mode.value}/{level.key} v{saved.version}")
        return saved

    async def remove_player(self, player_id: str) -> int:
        """
        선수 삭제 연쇄 처리: 모든 정렬 목록에서 ID 제거

        변경된 레코드는 버전이 올라간다. 없으면 아무 일도 하지 않는다.

        Returns:
            변경된 레코드 수
        """
        # 진행 중인 set이 아직 쓰지 않은 키도 있으므로 스냅샷으로 거르지 않고 모든 키를 잠근다
        keys = [(mode, level) for mode in GameMode for level in TierLevel]
        for record in await self._storage.all_records():
            key = (record.game_mode, record.tier_level)
            if key not in keys:
                keys.append(key)

        touched = 0
        for key in keys:
            async with self._locks.hold(key, timeout_s=self.lock_timeout_s, reason="cascade"):
                current = await self._load(*key)
                if player_id not in current.player_ids:
                    continue
                updated = current.model_copy(update={
                    "player_ids": [pid for pid in current.player_ids if pid != player_id],
                    "version": current.version + 1,
                    "updated_at": datetime.now(),
                })
                await self._storage.save(updated, expected_version=current.version)
                touched += 1

        if touched:
            logger.info(f"삭제된 선수 {player_id}를 정렬 {touched}개에서 제거")
        return touched

    # =============================================
    # 적용
    # =============================================

    async def apply_order(
        self,
        players: Sequence[Player],
        game_mode,
        tier_level,
    ) -> List[Player]:
        """자연 정렬된 버킷에 저장된 순서 적용"""
        record = await self.get(game_mode, tier_level)
        return merge_order(players, record.player_ids)

    async def ordered_buckets(
        self,
        buckets: Dict[TierLevel, List[Player]],
        game_mode,
    ) -> Dict[TierLevel, List[Player]]:
        return {
            level: await self.apply_order(players, game_mode, level)
            for level, players in buckets.items()
        }
