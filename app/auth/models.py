"""
Auth Models - Pydantic 모델 정의
"""
from datetime import datetime

from pydantic import BaseModel, Field


# =============================================
# Request Models
# =============================================

class AdminAuthRequest(BaseModel):
    """관리자 로그인 요청"""
    password: str = Field(..., min_length=1)


# =============================================
# Response Models
# =============================================

class TokenResponse(BaseModel):
    """토큰 응답"""
    success: bool = True
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class SessionInfo(BaseModel):
    """현재 관리자 세션"""
    authenticated: bool
    subject: str
    expires_at: datetime
