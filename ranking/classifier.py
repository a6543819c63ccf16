"""
티어 분류기

선수 목록을 게임 모드별 티어 버킷(S~D)으로 나누고 버킷 안에서 자연 순위로 정렬한다.

overall 모드는 두 가지 집계 정책 중 하나를 사용한다.
- best_mode (기본): 5개 모드 중 가장 높은 티어 코드
- points: 포인트 합계 → overall 티어 임계값 테이블
"""
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from .calculator import DEFAULT_SCORING, ScoringPolicy, mode_codes
from .tiers import (
    CONCRETE_MODES,
    GameMode,
    NR,
    TierLevel,
    decompose,
    normalize_tier_code,
    tier_rank,
)


@dataclass(frozen=True)
class Placement:
    """한 모드에서 선수가 놓이는 위치"""
    level: TierLevel
    sort_key: Tuple
    code: Optional[str] = None  # 코드 기반 배치일 때만


class LeaderboardEntry(BaseModel):
    """overall 리더보드 항목"""
    rank: int
    player_id: str
    name: str
    points: int
    title: str
    overall_tier: str
    tiers: Dict[str, str]


def _player_name(player: Any) -> str:
    if isinstance(player, dict):
        return str(player.get("name", ""))
    return str(getattr(player, "name", ""))


def _player_id(player: Any) -> str:
    if isinstance(player, dict):
        return str(player.get("id", ""))
    return str(getattr(player, "id", ""))


def _mode_code(player: Any, mode: GameMode) -> str:
    if isinstance(player, dict):
        return normalize_tier_code(player.get(mode.field))
    return normalize_tier_code(getattr(player, mode.field, None))


def _code_placement(code: str) -> Optional[Placement]:
    parts = decompose(code)
    if parts is None:
        return None
    _, level = parts
    return Placement(level=level, sort_key=(tier_rank(code),), code=code)


# =====================================================
# overall 집계 정책
# =====================================================

class BestModePolicy:
    """가장 높은 단일 모드 티어 (낮은 레벨 번호 우선, 동률이면 High > Mid > Low)"""

    name = "best_mode"

    def best_code(self, player: Any) -> str:
        codes = [code for code in mode_codes(player) if code != NR]
        if not codes:
            return NR
        return min(codes, key=tier_rank)

    def place(self, player: Any, scoring: ScoringPolicy) -> Optional[Placement]:
        return _code_placement(self.best_code(player))


class PointsThresholdPolicy:
    """포인트 합계 → overall 티어 임계값 (0점은 NR)"""

    name = "points"

    def place(self, player: Any, scoring: ScoringPolicy) -> Optional[Placement]:
        points = scoring.total_points(player)
        level = scoring.overall_tier_bucket(points)
        if level is None:
            return None
        return Placement(level=level, sort_key=(-points,))


OVERALL_POLICIES = {
    BestModePolicy.name: BestModePolicy,
    PointsThresholdPolicy.name: PointsThresholdPolicy,
}


def get_overall_policy(name: str):
    """이름으로 overall 정책 생성"""
    try:
        return OVERALL_POLICIES[str(name).strip().lower()]()
    except KeyError:
        raise ValueError(
            f"알 수 없는 overall 정책: {name!r} (허용: {', '.join(OVERALL_POLICIES)})"
        ) from None


# =====================================================
# 분류기
# =====================================================

class TierClassifier:
    """게임 모드별 티어 분류기"""

    def __init__(self, scoring: ScoringPolicy = DEFAULT_SCORING, overall_policy=None):
        self.scoring = scoring
        self.overall_policy = overall_policy or BestModePolicy()

    def placement(self, player: Any, game_mode) -> Optional[Placement]:
        """선수의 모드별 배치. NR이면 None"""
        mode = GameMode.parse(game_mode)
        if mode.is_overall:
            return self.overall_policy.place(player, self.scoring)
        return _code_placement(_mode_code(player, mode))

    def effective_level(self, player: Any, game_mode) -> Optional[TierLevel]:
        placement = self.placement(player, game_mode)
        return placement.level if placement else None

    def _sort_key(self, player: Any, placement: Placement) -> Tuple:
        return (
            placement.sort_key,
            -self.scoring.total_points(player),
            _player_name(player).casefold(),
        )

    def classify(self, players: Iterable[Any], game_mode) -> Dict[TierLevel, List[Any]]:
        """
        티어 버킷 분류

        Returns:
            {TierLevel: [선수, ...]}: 5개 레벨 키는 항상 존재, NR 선수는 제외
        """
        mode = GameMode.parse(game_mode)
        placed: Dict[TierLevel, List[Tuple[Tuple, Any]]] = {level: [] for level in TierLevel}

        for player in players:
            placement = self.placement(player, mode)
            if placement is None:
                continue
            placed[placement.level].append((self._sort_key(player, placement), player))

        return {
            level: [player for _, player in sorted(entries, key=lambda e: e[0])]
            for level, entries in placed.items()
        }

    def leaderboard(self, players: Iterable[Any]) -> List[LeaderboardEntry]:
        """
        overall 리더보드

        포인트 > 0인 선수만, 포인트 내림차순 (동점은 이름순)
        """
        scored = []
        for player in players:
            score = self.scoring.compute_score(player)
            if score.points <= 0:
                continue
            scored.append((score, player))

        scored.sort(key=lambda item: (-item[0].points, _player_name(item[1]).casefold()))

        entries = []
        for rank, (score, player) in enumerate(scored, 1):
            entries.append(LeaderboardEntry(
                rank=rank,
                player_id=_player_id(player),
                name=_player_name(player),
                points=score.points,
                title=score.title,
                overall_tier=score.overall_tier,
                tiers={mode.value: _mode_code(player, mode) for mode in CONCRETE_MODES},
            ))
        return entries
