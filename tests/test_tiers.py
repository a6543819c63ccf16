"""
Tier Vocabulary Tests - 티어 어휘 테스트
"""
import pytest

from ranking.tiers import (
    NR,
    TIER_CODES,
    TIER_DISPLAY_NAMES,
    TIER_ORDER,
    TIER_POINTS,
    GameMode,
    Qualifier,
    TierLevel,
    code_for,
    decompose,
    display_name,
    level_of,
    normalize_tier_code,
    parse_tier_code,
    tier_rank,
)


class TestVocabulary:
    """고정 어휘"""

    def test_sixteen_codes(self):
        assert len(TIER_CODES) == 16
        assert NR in TIER_CODES
        assert TIER_ORDER[0] == "HT1"
        assert TIER_ORDER[-1] == NR

    def test_natural_order_within_level(self):
        """High-n > Mid-n > Low-n > High-(n+1)"""
        assert TIER_ORDER[:6] == ["HT1", "MIDT1", "LT1", "HT2", "MIDT2", "LT2"]

    def test_points_table(self):
        assert TIER_POINTS["HT1"] == 100
        assert TIER_POINTS["MIDT3"] == 45
        assert TIER_POINTS["LT5"] == 6
        assert TIER_POINTS[NR] == 0
        assert set(TIER_POINTS) == set(TIER_CODES)

    def test_display_names(self):
        assert TIER_DISPLAY_NAMES["HT1"] == "HighS"
        assert display_name("MIDT3") == "MidB"
        assert display_name("LT5") == "LowD"
        assert display_name(NR) == "Not Ranked"
        assert display_name("bogus") == "Not Ranked"

    def test_code_for(self):
        assert code_for(TierLevel.S, Qualifier.HIGH) == "HT1"
        assert code_for(TierLevel.D, Qualifier.MID) == "MIDT5"


class TestTierLevel:
    """티어 레벨 파싱"""

    @pytest.mark.parametrize("text", ["S", "s", "S Tier", "ST", "1", " s tier "])
    def test_parse_aliases(self, text):
        assert TierLevel.parse(text) is TierLevel.S

    def test_properties(self):
        assert TierLevel.B.number == 3
        assert TierLevel.B.key == "B Tier"
        assert TierLevel.B.short_name == "BT"
        assert TierLevel.B.codes == ("HT3", "MIDT3", "LT3")

    @pytest.mark.parametrize("text", ["E", "6", "0", "", None])
    def test_parse_invalid(self, text):
        with pytest.raises(ValueError):
            TierLevel.parse(text)


class TestGameMode:
    """게임 모드"""

    def test_fields(self):
        assert GameMode.SKYWARS.field == "skywars_tier"
        assert GameMode.BEDFIGHT.field == "bedfight_tier"

    def test_overall_has_no_field(self):
        assert GameMode.OVERALL.is_overall
        with pytest.raises(ValueError):
            GameMode.OVERALL.field

    def test_parse(self):
        assert GameMode.parse(" UHC ") is GameMode.UHC
        with pytest.raises(ValueError):
            GameMode.parse("bridge")


class TestCodeNormalization:
    """코드 정규화"""

    def test_case_insensitive(self):
        assert normalize_tier_code("ht1") == "HT1"
        assert parse_tier_code("midt2") == "MIDT2"

    def test_missing_is_nr(self):
        assert normalize_tier_code(None) == NR
        assert normalize_tier_code("") == NR
        assert parse_tier_code(None) == NR

    def test_unknown_degrades_to_nr(self):
        """저장된 잘못된 코드는 NR로 처리"""
        assert normalize_tier_code("HT9") == NR
        assert normalize_tier_code("garbage") == NR

    def test_strict_rejects_unknown(self):
        with pytest.raises(ValueError):
            parse_tier_code("HT9")

    def test_legacy_mid_spelling(self):
        assert normalize_tier_code("MT2") == "MIDT2"
        assert parse_tier_code("mt5") == "MIDT5"

    def test_decompose(self):
        assert decompose("MIDT4") == (Qualifier.MID, TierLevel.C)
        assert decompose("LT1") == (Qualifier.LOW, TierLevel.S)
        assert decompose(NR) is None
        assert decompose("XX") is None

    def test_level_of(self):
        assert level_of("HT2") is TierLevel.A
        assert level_of(NR) is None

    def test_rank(self):
        assert tier_rank("HT1") == 0
        assert tier_rank("HT1") < tier_rank("MIDT1") < tier_rank("LT1") < tier_rank("HT2")
        assert tier_rank("unknown") == tier_rank(NR)
