"""
키 단위 비동기 락

(game_mode, tier_level) 키마다 asyncio.Lock 하나.
같은 키의 read-validate-write 구간만 직렬화하고, 다른 키는 서로 막지 않는다.

주의:
- 프로세스 로컬 락이다. 여러 uvicorn worker 간 동기화는 저장소의 버전 검사가 담당한다.
- 대기자가 없는 키의 락은 해제 시 맵에서 제거된다.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Hashable, Optional

from loguru import logger


class KeyedLock:
    """키 → asyncio.Lock 맵 (참조 카운트로 정리)"""

    def __init__(self):
        self._locks: Dict[Hashable, asyncio.Lock] = {}
        self._refs: Dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def locked(self, key: Hashable) -> bool:
        lock = self._locks.get(key)
        return lock is not None and lock.locked()

    def _acquire_ref(self, key: Hashable) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        self._refs[key] = self._refs.get(key, 0) + 1
        return lock

    def _release_ref(self, key: Hashable) -> None:
        remaining = self._refs.get(key, 0) - 1
        if remaining <= 0:
            self._refs.pop(key, None)
            self._locks.pop(key, None)
        else:
            self._refs[key] = remaining

    @asynccontextmanager
    async def hold(
        self,
        key: Hashable,
        *,
        timeout_s: Optional[float] = None,
        reason: str = "",
    ) -> AsyncIterator[None]:
        """
        키 락을 획득하고 블록 종료 시 (예외 포함) 반드시 해제

        Args:
            key: 락 키
            timeout_s: 획득 타임아웃(초). None이면 무제한 대기
            reason: 디버그 로그용 설명

        Raises:
            TimeoutError: timeout_s 내에 락을 획득하지 못한 경우

        Usage:
            async with locks.hold(("skywars", "S")):
                ...  # load → validate → save
        """
        lock = self._acquire_ref(key)
        acquired = False
        try:
            if timeout_s is None:
                await lock.acquire()
            else:
                try:
                    await asyncio.wait_for(lock.acquire(), timeout=max(float(timeout_s), 0.0))
                except asyncio.TimeoutError:
                    msg = f"락 획득 타임아웃 (key={key!r}, timeout_s={timeout_s})"
                    if reason:
                        msg += f": {reason}"
                    logger.warning(msg)
                    raise TimeoutError(msg) from None
            acquired = True
            yield
        finally:
            if acquired:
                lock.release()
            self._release_ref(key)
