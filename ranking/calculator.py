"""
티어리스트 점수 계산 모듈

- 티어 코드별 포인트 합산 (5개 게임 모드)
- 포인트 → 칭호 (Rookie ~ Grandmaster)
- 포인트 → overall 티어 레벨 (S~D, 0점은 NR)

칭호 테이블과 overall 티어 테이블은 서로 독립된 설정이다.
두 테이블을 같은 값으로 가정하지 말 것.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, Field

from .tiers import MODE_FIELDS, NR, TIER_POINTS, TierLevel, normalize_tier_code

T = TypeVar("T")


# =====================================================
# 임계값 테이블
# =====================================================

class ThresholdTable(Generic[T]):
    """
    포인트 임계값 계단 함수

    entries: (최소 포인트, 값) 목록, 내림차순. 위에서부터 처음 만족하는 값 반환.
    floor: 어떤 임계값에도 못 미칠 때의 값
    rank_of: 값의 서열 함수 (작을수록 높은 등급). 주어지면 단조성을 검사한다.
    """

    def __init__(
        self,
        entries: Sequence[Tuple[int, T]],
        floor: T,
        rank_of: Optional[Callable[[T], int]] = None,
    ):
        entries = [(int(min_points), value) for min_points, value in entries]
        for (upper, _), (lower, _) in zip(entries, entries[1:]):
            if upper <= lower:
                raise ValueError(
                    f"임계값은 엄격한 내림차순이어야 합니다: {upper} 다음에 {lower}"
                )

        if rank_of is not None:
            ranks = [rank_of(value) for _, value in entries] + [rank_of(floor)]
            for better, worse in zip(ranks, ranks[1:]):
                if better >= worse:
                    raise ValueError("포인트가 높을수록 등급이 낮아지는 테이블입니다")

        self.entries: List[Tuple[int, T]] = entries
        self.floor = floor

    def lookup(self, points: int) -> T:
        for min_points, value in self.entries:
            if points >= min_points:
                return value
        return self.floor

    def values(self) -> List[T]:
        """등급 순서 (최상위 → floor)"""
        return [value for _, value in self.entries] + [self.floor]

    def __repr__(self) -> str:
        return f"ThresholdTable({self.entries!r}, floor={self.floor!r})"


# 칭호 (높은 순)
TITLE_ORDER = [
    "Grandmaster",
    "Master",
    "Elite",
    "Ace",
    "Specialist",
    "Cadet",
    "Rookie",
]

TITLE_THRESHOLDS: ThresholdTable[str] = ThresholdTable(
    [
        (450, "Grandmaster"),
        (350, "Master"),
        (275, "Elite"),
        (200, "Ace"),
        (125, "Specialist"),
        (50, "Cadet"),
    ],
    floor="Rookie",
    rank_of=TITLE_ORDER.index,
)

# overall 티어 (포인트 기준 정책 전용). 0점은 항상 NR.
OVERALL_TIER_THRESHOLDS: ThresholdTable[Optional[TierLevel]] = ThresholdTable(
    [
        (300, TierLevel.S),
        (200, TierLevel.A),
        (120, TierLevel.B),
        (50, TierLevel.C),
        (1, TierLevel.D),
    ],
    floor=None,
    rank_of=lambda level: level.number if level else 6,
)


# =====================================================
# 데이터 클래스
# =====================================================

class PlayerScore(BaseModel):
    """선수 점수 요약"""
    points: int = Field(..., ge=0, description="총 포인트")
    title: str = Field(..., description="칭호")
    overall_tier: str = Field(..., description="overall 티어 레벨 (S~D) 또는 NR")


def mode_codes(player: Any) -> List[str]:
    """선수의 5개 모드 티어 코드 (모델/딕셔너리 모두 지원)"""
    if isinstance(player, Mapping):
        raw = [player.get(name) for name in MODE_FIELDS]
    else:
        raw = [getattr(player, name, None) for name in MODE_FIELDS]
    return [normalize_tier_code(code) for code in raw]


@dataclass(frozen=True)
class ScoringPolicy:
    """
    점수 정책

    포인트 테이블, 칭호 테이블, overall 티어 테이블을 묶은 교체 가능한 설정 객체
    """
    tier_points: Dict[str, int] = field(default_factory=lambda: dict(TIER_POINTS))
    titles: ThresholdTable = TITLE_THRESHOLDS
    overall_tiers: ThresholdTable = OVERALL_TIER_THRESHOLDS
    name: str = "default"

    def points_for_tier(self, code: Any) -> int:
        """티어 코드 → 포인트 (알 수 없는 코드/NR = 0)"""
        return int(self.tier_points.get(normalize_tier_code(code), 0))

    def total_points(self, player: Any) -> int:
        """5개 모드 포인트 합계"""
        return sum(self.points_for_tier(code) for code in mode_codes(player))

    def title_for_points(self, points: int) -> str:
        return self.titles.lookup(points)

    def overall_tier_bucket(self, points: int) -> Optional[TierLevel]:
        """포인트 → overall 티어 레벨 (0점 이하는 None = NR)"""
        if points <= 0:
            return None
        return self.overall_tiers.lookup(points)

    def compute_score(self, player: Any) -> PlayerScore:
        points = self.total_points(player)
        level = self.overall_tier_bucket(points)
        return PlayerScore(
            points=points,
            title=self.title_for_points(points),
            overall_tier=level.value if level else NR,
        )


DEFAULT_SCORING = ScoringPolicy()


# =====================================================
# 포인트 계산 (기본 정책)
# =====================================================

def points_for_tier(code: Any) -> int:
    return DEFAULT_SCORING.points_for_tier(code)


def total_points(player: Any) -> int:
    return DEFAULT_SCORING.total_points(player)


def title_for_points(points: int) -> str:
    return DEFAULT_SCORING.title_for_points(points)


def overall_tier_bucket(points: int) -> Optional[TierLevel]:
    return DEFAULT_SCORING.overall_tier_bucket(points)


def compute_score(player: Any) -> PlayerScore:
    return DEFAULT_SCORING.compute_score(player)
