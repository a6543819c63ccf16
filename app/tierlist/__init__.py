"""
Tier List Module - 티어리스트/리더보드/수동 정렬 API
"""

from .router import router as tierlist_router

__all__ = ["tierlist_router"]
