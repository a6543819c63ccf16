"""
관리자 세션 저장소

토큰은 세션 ID(sid)를 담고, 세션이 살아있는 동안에만 유효하다.
로그아웃하면 즉시 무효화된다.
"""
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from loguru import logger


@dataclass(frozen=True)
class Session:
    session_id: str
    subject: str
    issued_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.utcnow()) >= self.expires_at


class SessionStore(ABC):
    """세션 저장소 인터페이스"""

    @abstractmethod
    def issue(self, subject: str, ttl: timedelta) -> Session:
        ...

    @abstractmethod
    def validate(self, session_id: str) -> Optional[Session]:
        """살아있는 세션이면 반환, 아니면 None"""

    @abstractmethod
    def revoke(self, session_id: str) -> bool:
        ...

    @abstractmethod
    def expire(self, now: Optional[datetime] = None) -> int:
        """만료된 세션 정리. 정리된 개수 반환"""


class InMemorySessionStore(SessionStore):
    """프로세스 메모리 세션 저장소 (단일 프로세스 전용)"""

    def __init__(self):
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def issue(self, subject: str, ttl: timedelta) -> Session:
        now = datetime.utcnow()
        session = Session(
            session_id=secrets.token_urlsafe(32),
            subject=subject,
            issued_at=now,
            expires_at=now + ttl,
        )
        self._sessions[session.session_id] = session
        logger.info(f"관리자 세션 발급: {subject}")
        return session

    def validate(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.is_expired():
            del self._sessions[session_id]
            return None
        return session

    def revoke(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("관리자 세션 종료")
        return removed

    def expire(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        expired = [sid for sid, s in self._sessions.items() if s.is_expired(now)]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug(f"만료된 세션 {len(expired)}개 정리")
        return len(expired)
