"""
티어리스트 서버 설정
"""
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

load_dotenv()


class TierListSettings(BaseSettings):
    """서버/저장소 설정"""

    # 저장소
    storage_backend: str = Field(default="memory", description="memory | supabase")
    seed_demo_data: bool = Field(default=True, description="메모리 저장소에 데모 선수 로드")
    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase anon key")

    # 랭킹
    overall_tier_policy: str = Field(default="best_mode", description="best_mode | points")
    merge_on_duplicate_name: bool = Field(
        default=False,
        description="같은 이름으로 생성 시 NR이 아닌 티어만 기존 선수에 병합",
    )
    order_lock_timeout_seconds: float = Field(default=10.0, description="정렬 락 대기 시간 (초)")

    # 서버
    log_level: str = Field(default="INFO")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=5000)

    class Config:
        env_file = ".env"
        env_prefix = ""
        case_sensitive = False
        extra = "ignore"

    @field_validator("storage_backend", "overall_tier_policy")
    @classmethod
    def lower(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("storage_backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        if v not in ("memory", "supabase"):
            raise ValueError(f"지원하지 않는 저장소: {v}")
        return v


@lru_cache()
def get_settings() -> TierListSettings:
    return TierListSettings()
