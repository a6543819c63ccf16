"""
티어리스트 서비스

저장소 + 점수 계산 + 분류 + 수동 정렬을 묶는 진입점.
라우터와 CLI는 이 클래스만 사용한다.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from loguru import logger

from database.errors import DuplicateNameError, PlayerNotFoundError
from database.models import OrderRecord, Player, PlayerCreate, PlayerUpdate
from database.repository import OrderStorage, PlayerRepository
from ordering.store import ManualOrderStore
from ranking.calculator import PlayerScore
from ranking.classifier import LeaderboardEntry, TierClassifier
from ranking.tiers import (
    GameMode,
    NR,
    Qualifier,
    TierLevel,
    code_for,
    parse_tier_code,
)


@dataclass
class TierListSnapshot:
    """한 게임 모드의 티어리스트 (수동 정렬 적용됨)"""
    game_mode: GameMode
    buckets: Dict[TierLevel, List[Player]]
    versions: Dict[TierLevel, int] = field(default_factory=dict)


class TierListService:
    """티어리스트 엔진 파사드"""

    def __init__(
        self,
        repository: PlayerRepository,
        order_storage: OrderStorage,
        classifier: Optional[TierClassifier] = None,
        lock_timeout_s: Optional[float] = None,
        merge_on_duplicate: bool = False,
    ):
        self.repository = repository
        self.classifier = classifier or TierClassifier()
        self.orders = ManualOrderStore(
            order_storage,
            repository,
            self.classifier,
            lock_timeout_s=lock_timeout_s,
        )
        self.merge_on_duplicate = merge_on_duplicate

    @property
    def scoring(self):
        return self.classifier.scoring

    # =============================================
    # 점수
    # =============================================

    def compute_score(self, player) -> PlayerScore:
        return self.scoring.compute_score(player)

    async def get_score(self, player_id: str) -> PlayerScore:
        return self.compute_score(await self.get_player(player_id))

    # =============================================
    # 분류 / 조회
    # =============================================

    async def classify(
        self,
        players: Iterable[Player],
        game_mode,
    ) -> Dict[TierLevel, List[Player]]:
        """버킷 분류 + 저장된 수동 순서 적용"""
        mode = GameMode.parse(game_mode)
        buckets = self.classifier.classify(players, mode)
        return await self.orders.ordered_buckets(buckets, mode)

    async def tier_list(self, game_mode) -> TierListSnapshot:
        mode = GameMode.parse(game_mode)
        players = await self.repository.get_all_players()
        buckets = await self.classify(players, mode)
        records = await self.orders.versions(mode)
        return TierListSnapshot(
            game_mode=mode,
            buckets=buckets,
            versions={level: record.version for level, record in records.items()},
        )

    async def leaderboard(self) -> List[LeaderboardEntry]:
        return self.classifier.leaderboard(await self.repository.get_all_players())

    async def list_players(self) -> List[Player]:
        """포인트 내림차순 (동점은 이름순)"""
        players = await self.repository.get_all_players()
        return sorted(
            players,
            key=lambda p: (-self.scoring.total_points(p), p.name.casefold()),
        )

    async def get_player(self, player_id: str) -> Player:
        player = await self.repository.get_player(player_id)
        if player is None:
            raise PlayerNotFoundError(player_id)
        return player

    # =============================================
    # 수동 정렬
    # =============================================

    async def get_order(self, game_mode, tier_level) -> OrderRecord:
        return await self.orders.get(game_mode, tier_level)

    async def reorder(
        self,
        game_mode,
        tier_level,
        player_ids: Iterable[str],
        expected_version: Optional[int] = None,
    ) -> OrderRecord:
        return await self.orders.set(game_mode, tier_level, player_ids, expected_version)

    async def reset_order(self, game_mode, tier_level) -> OrderRecord:
        return await self.orders.reset(game_mode, tier_level)

    # =============================================
    # 선수 관리
    # =============================================

    async def create_player(
        self,
        data: PlayerCreate,
        merge_on_duplicate: Optional[bool] = None,
    ) -> Tuple[Player, bool]:
        """
        선수 생성

        merge_on_duplicate가 켜져 있으면 같은 이름의 기존 선수에
        NR이 아닌 티어만 병합한다.

        Returns:
            (선수, 새로 생성 여부)
        """
        merge = self.merge_on_duplicate if merge_on_duplicate is None else merge_on_duplicate
        try:
            player = await self.repository.create_player(data)
        except DuplicateNameError as e:
            if not merge:
                logger.warning(f"선수 생성 거부 (중복 이름): {data.name}")
                raise
            existing = await self.repository.get_player_by_name(data.name)
            if existing is None:
                raise
            tiers = {
                key: value
                for key, value in data.model_dump(exclude={"name"}).items()
                if value != NR
            }
            merged = await self.repository.update_player(existing.id, PlayerUpdate(**tiers))
            logger.info(f"기존 선수에 티어 병합: {merged.name} ({', '.join(tiers) or '변경 없음'})")
            return merged, False

        logger.info(f"선수 생성: {player.name} ({player.id})")
        return player, True

    async def update_player(self, player_id: str, data: PlayerUpdate) -> Player:
        player = await self.repository.update_player(player_id, data)
        logger.info(f"선수 수정: {player.name} {data.changes()}")
        return player

    async def change_tier(self, player_id: str, game_mode, tier_code: str) -> Player:
        """한 게임 모드의 티어 변경"""
        mode = GameMode.parse(game_mode)
        if mode.is_overall:
            raise ValueError("overall 티어는 직접 변경할 수 없습니다")
        code = parse_tier_code(tier_code)
        return await self.update_player(player_id, PlayerUpdate(**{mode.field: code}))

    async def move_to_level(self, player_id: str, game_mode, tier_level) -> Player:
        """버킷으로 이동 (해당 레벨의 High 코드로 설정)"""
        level = TierLevel.parse(tier_level)
        return await self.change_tier(player_id, game_mode, code_for(level, Qualifier.HIGH))

    async def delete_player(self, player_id: str) -> int:
        """
        선수 삭제 + 모든 수동 정렬에서 제거

        Returns:
            정리된 정렬 레코드 수
        """
        if not await self.repository.delete_player(player_id):
            raise PlayerNotFoundError(player_id)
        removed = await self.orders.remove_player(player_id)
        logger.info(f"선수 삭제: {player_id} (정렬 {removed}개 정리)")
        return removed
