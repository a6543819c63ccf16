"""
Auth Config - 관리자 인증 설정
"""
import os
from functools import lru_cache

from pydantic_settings import BaseSettings


class AuthSettings(BaseSettings):
    """인증 관련 설정"""

    # 관리자
    ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "admin123")

    # JWT
    JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "your-secret-key-change-in-production")
    JWT_ALGORITHM: str = "HS256"

    # 세션
    SESSION_TTL_MINUTES: int = 60 * 12  # 12시간
    AUTH_COOKIE_NAME: str = "access_token"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache()
def get_auth_settings() -> AuthSettings:
    return AuthSettings()
