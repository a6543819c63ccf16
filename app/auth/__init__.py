"""
Auth Module - 관리자 인증
"""
from .router import router as auth_router, require_admin
from .models import AdminAuthRequest, SessionInfo, TokenResponse
from .sessions import InMemorySessionStore, Session, SessionStore

__all__ = [
    "auth_router",
    "require_admin",
    "AdminAuthRequest",
    "SessionInfo",
    "TokenResponse",
    "InMemorySessionStore",
    "Session",
    "SessionStore",
]
