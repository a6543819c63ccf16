"""
Auth Router - 관리자 인증 라우터
"""
import secrets
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from jose import JWTError, jwt
from loguru import logger

from .config import get_auth_settings
from .models import AdminAuthRequest, SessionInfo, TokenResponse
from .sessions import Session, SessionStore

router = APIRouter(prefix="/api/admin", tags=["admin"])

ADMIN_SUBJECT = "admin"


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """JWT 토큰 생성"""
    settings = get_auth_settings()
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.SESSION_TTL_MINUTES)

    to_encode.update({"exp": expire})
    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def _extract_token(request: Request) -> Optional[str]:
    # Authorization 헤더 또는 쿠키
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip()
    return request.cookies.get(get_auth_settings().AUTH_COOKIE_NAME)


def get_admin_session(request: Request) -> Optional[Session]:
    """유효한 관리자 세션 (없으면 None)"""
    settings = get_auth_settings()
    token = _extract_token(request)
    if not token:
        return None

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None

    session_id = payload.get("sid")
    if not session_id:
        return None
    return get_session_store(request).validate(session_id)


def require_admin(request: Request) -> Session:
    """관리자 인증 필수 의존성"""
    session = get_admin_session(request)
    if session is None:
        raise HTTPException(status_code=401, detail="관리자 인증이 필요합니다")
    return session


# =============================================
# 로그인 / 로그아웃
# =============================================

@router.post("/auth", response_model=TokenResponse)
async def admin_login(
    body: AdminAuthRequest,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """관리자 비밀번호 확인 → 세션 + 토큰 발급"""
    settings = get_auth_settings()

    if not secrets.compare_digest(body.password.encode(), settings.ADMIN_PASSWORD.encode()):
        logger.warning("관리자 로그인 실패: 잘못된 비밀번호")
        raise HTTPException(status_code=401, detail="비밀번호가 올바르지 않습니다")

    ttl = timedelta(minutes=settings.SESSION_TTL_MINUTES)
    store.expire()
    session = store.issue(ADMIN_SUBJECT, ttl)
    token = create_access_token({"sub": session.subject, "sid": session.session_id}, ttl)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite="lax",
        max_age=int(ttl.total_seconds()),
    )
    return TokenResponse(access_token=token, expires_in=int(ttl.total_seconds()))


@router.post("/logout")
async def admin_logout(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
):
    """로그아웃 (세션 즉시 무효화)"""
    session = get_admin_session(request)
    if session is not None:
        store.revoke(session.session_id)
    response.delete_cookie(get_auth_settings().AUTH_COOKIE_NAME)
    return {"success": True}


@router.get("/session", response_model=SessionInfo)
async def admin_session(session: Session = Depends(require_admin)):
    """현재 관리자 세션 확인"""
    return SessionInfo(
        authenticated=True,
        subject=session.subject,
        expires_at=session.expires_at,
    )
