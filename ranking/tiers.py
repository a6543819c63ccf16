"""
티어 어휘 (Tier Vocabulary)

PvP 티어리스트에서 사용하는 고정 티어 코드 16개 정의
- 5개 레벨 (S/A/B/C/D = 1~5, 1이 최상위)
- 레벨별 3개 세부 등급 (High/Mid/Low → HT/MIDT/LT)
- 미랭크 센티널 NR

알 수 없는 코드는 예외 없이 NR로 취급한다 (분류가 잘못된 데이터로 중단되지 않도록).
"""
from enum import Enum
from typing import Dict, List, Optional, Tuple

from loguru import logger


# =====================================================
# 상수 정의
# =====================================================

NR = "NR"


class Qualifier(str, Enum):
    """레벨 내 세부 등급"""
    HIGH = "HT"
    MID = "MIDT"
    LOW = "LT"

    @property
    def rank(self) -> int:
        """High=0, Mid=1, Low=2"""
        return _QUALIFIER_ORDER.index(self)

    @property
    def label(self) -> str:
        return {"HT": "High", "MIDT": "Mid", "LT": "Low"}[self.value]


_QUALIFIER_ORDER = [Qualifier.HIGH, Qualifier.MID, Qualifier.LOW]


class TierLevel(str, Enum):
    """티어 레벨 (버킷)"""
    S = "S"
    A = "A"
    B = "B"
    C = "C"
    D = "D"

    @property
    def number(self) -> int:
        """레벨 번호 (S=1 ... D=5)"""
        return _LEVEL_ORDER.index(self) + 1

    @property
    def key(self) -> str:
        """기존 API 키 ("S Tier")"""
        return f"{self.value} Tier"

    @property
    def short_name(self) -> str:
        return f"{self.value}T"

    @property
    def codes(self) -> Tuple[str, str, str]:
        """레벨에 속한 코드 3개 (High, Mid, Low 순)"""
        return tuple(code_for(self, q) for q in _QUALIFIER_ORDER)

    @classmethod
    def from_number(cls, number: int) -> "TierLevel":
        if not 1 <= number <= len(_LEVEL_ORDER):
            raise ValueError(f"레벨 번호는 1~5 사이여야 합니다: {number}")
        return _LEVEL_ORDER[number - 1]

    @classmethod
    def parse(cls, text: str) -> "TierLevel":
        """"S", "s", "S Tier", "ST", "1" 모두 허용"""
        if isinstance(text, cls):
            return text
        value = str(text or "").strip().upper()
        if value.endswith(" TIER"):
            value = value[:-5].strip()
        elif len(value) == 2 and value.endswith("T"):
            value = value[0]
        if value.isdigit():
            return cls.from_number(int(value))
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"알 수 없는 티어 레벨: {text!r}") from None


_LEVEL_ORDER = [TierLevel.S, TierLevel.A, TierLevel.B, TierLevel.C, TierLevel.D]


def code_for(level: TierLevel, qualifier: Qualifier) -> str:
    """(레벨, 세부등급) → 코드. 예: (S, HIGH) → "HT1" """
    return f"{qualifier.value}{level.number}"


# 자연 순위 (HT1 > MIDT1 > LT1 > HT2 ... > LT5 > NR)
TIER_ORDER: List[str] = [
    code_for(level, qualifier)
    for level in _LEVEL_ORDER
    for qualifier in _QUALIFIER_ORDER
] + [NR]

TIER_CODES = frozenset(TIER_ORDER)

# 티어별 포인트
TIER_POINTS: Dict[str, int] = {
    "HT1": 100, "MIDT1": 90, "LT1": 80,  # S Tier
    "HT2": 70,  "MIDT2": 65, "LT2": 60,  # A Tier
    "HT3": 50,  "MIDT3": 45, "LT3": 40,  # B Tier
    "HT4": 30,  "MIDT4": 25, "LT4": 20,  # C Tier
    "HT5": 10,  "MIDT5": 8,  "LT5": 6,   # D Tier
    NR: 0,
}

TIER_DISPLAY_NAMES: Dict[str, str] = {
    code_for(level, qualifier): f"{qualifier.label}{level.value}"
    for level in _LEVEL_ORDER
    for qualifier in _QUALIFIER_ORDER
}
TIER_DISPLAY_NAMES[NR] = "Not Ranked"

class GameMode(str, Enum):
    """게임 모드 (overall은 5개 모드를 합산한 가상 모드)"""
    OVERALL = "overall"
    SKYWARS = "skywars"
    MIDFIGHT = "midfight"
    UHC = "uhc"
    NODEBUFF = "nodebuff"
    BEDFIGHT = "bedfight"

    @property
    def is_overall(self) -> bool:
        return self is GameMode.OVERALL

    @property
    def field(self) -> str:
        """Player 모델의 티어 필드명 (skywars → skywars_tier)"""
        if self.is_overall:
            raise ValueError("overall 모드에는 저장된 티어 필드가 없습니다")
        return f"{self.value}_tier"

    @classmethod
    def parse(cls, text: str) -> "GameMode":
        if isinstance(text, cls):
            return text
        try:
            return cls(str(text or "").strip().lower())
        except ValueError:
            raise ValueError(f"알 수 없는 게임 모드: {text!r}") from None


CONCRETE_MODES: Tuple[GameMode, ...] = tuple(m for m in GameMode if not m.is_overall)
MODE_FIELDS: Tuple[str, ...] = tuple(m.field for m in CONCRETE_MODES)

GAME_MODE_LABELS: Dict[str, Dict[str, str]] = {
    "overall": {"name": "Overall", "abbr": "Overall"},
    "skywars": {"name": "Skywars", "abbr": "SW"},
    "midfight": {"name": "Midfight", "abbr": "Midf"},
    "uhc": {"name": "UHC", "abbr": "UHC"},
    "nodebuff": {"name": "Nodebuff", "abbr": "NoDb"},
    "bedfight": {"name": "Bedfight", "abbr": "Bed"},
}

# 이전 클라이언트 버전의 표기 (MT1 = MIDT1)
LEGACY_CODE_MAP: Dict[str, str] = {
    f"MT{n}": f"MIDT{n}" for n in range(1, 6)
}


# =====================================================
# 조회 함수
# =====================================================

def _canonical(code) -> Optional[str]:
    if code is None:
        return None
    value = str(code).strip().upper()
    value = LEGACY_CODE_MAP.get(value, value)
    return value if value in TIER_CODES else None


def normalize_tier_code(code) -> str:
    """
    코드 정규화 (관대한 모드)

    None/빈 값 → NR, 알 수 없는 코드 → NR (경고 로그)
    """
    if code is None or str(code).strip() == "":
        return NR
    canonical = _canonical(code)
    if canonical is None:
        logger.warning(f"알 수 없는 티어 코드를 NR로 처리: {code!r}")
        return NR
    return canonical


def parse_tier_code(code) -> str:
    """
    코드 정규화 (엄격한 모드, 입력 검증용)

    Raises:
        ValueError: 어휘에 없는 코드
    """
    if code is None or str(code).strip() == "":
        return NR
    canonical = _canonical(code)
    if canonical is None:
        raise ValueError(
            f"알 수 없는 티어 코드: {code!r} (허용: {', '.join(TIER_ORDER)})"
        )
    return canonical


def decompose(code) -> Optional[Tuple[Qualifier, TierLevel]]:
    """코드 → (세부등급, 레벨). NR/알 수 없는 코드는 None"""
    canonical = _canonical(code)
    if canonical is None or canonical == NR:
        return None
    for qualifier in _QUALIFIER_ORDER:
        prefix = qualifier.value
        suffix = canonical[len(prefix):]
        if canonical.startswith(prefix) and suffix.isdigit():
            return qualifier, TierLevel.from_number(int(suffix))
    return None


def level_of(code) -> Optional[TierLevel]:
    """코드가 속한 레벨 (NR은 None)"""
    parts = decompose(code)
    return parts[1] if parts else None


def tier_rank(code) -> int:
    """자연 순위 인덱스 (0 = HT1, NR/알 수 없음 = 마지막)"""
    canonical = _canonical(code) or NR
    return TIER_ORDER.index(canonical)


def display_name(code) -> str:
    """표시명 (HT1 → HighS, MIDT3 → MidB, NR → Not Ranked)"""
    canonical = _canonical(code) or NR
    return TIER_DISPLAY_NAMES[canonical]
