"""
PvP 티어리스트 랭킹 엔진

티어 어휘, 점수 계산, 티어 분류 모듈
"""
from .tiers import (
    NR,
    TIER_CODES,
    TIER_ORDER,
    TIER_POINTS,
    TIER_DISPLAY_NAMES,
    CONCRETE_MODES,
    GameMode,
    Qualifier,
    TierLevel,
    display_name,
    level_of,
    normalize_tier_code,
    parse_tier_code,
    tier_rank,
)
from .calculator import (
    DEFAULT_SCORING,
    OVERALL_TIER_THRESHOLDS,
    TITLE_ORDER,
    TITLE_THRESHOLDS,
    PlayerScore,
    ScoringPolicy,
    ThresholdTable,
    compute_score,
    overall_tier_bucket,
    points_for_tier,
    title_for_points,
    total_points,
)
from .classifier import (
    BestModePolicy,
    LeaderboardEntry,
    PointsThresholdPolicy,
    TierClassifier,
    get_overall_policy,
)

__all__ = [
    "NR",
    "TIER_CODES",
    "TIER_ORDER",
    "TIER_POINTS",
    "TIER_DISPLAY_NAMES",
    "CONCRETE_MODES",
    "GameMode",
    "Qualifier",
    "TierLevel",
    "display_name",
    "level_of",
    "normalize_tier_code",
    "parse_tier_code",
    "tier_rank",
    "DEFAULT_SCORING",
    "OVERALL_TIER_THRESHOLDS",
    "TITLE_ORDER",
    "TITLE_THRESHOLDS",
    "PlayerScore",
    "ScoringPolicy",
    "ThresholdTable",
    "compute_score",
    "overall_tier_bucket",
    "points_for_tier",
    "title_for_points",
    "total_points",
    "BestModePolicy",
    "LeaderboardEntry",
    "PointsThresholdPolicy",
    "TierClassifier",
    "get_overall_policy",
]
