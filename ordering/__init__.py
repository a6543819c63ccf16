"""
수동 정렬 모듈

버킷 단위 수동 순서 + 낙관적 버전 관리 + 키 단위 락
"""
from .errors import OrderConflictError, OrderValidationError
from .locks import KeyedLock
from .store import ManualOrderStore, merge_order

__all__ = [
    "OrderConflictError",
    "OrderValidationError",
    "KeyedLock",
    "ManualOrderStore",
    "merge_order",
]
