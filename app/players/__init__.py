"""
Player Module - 선수 조회/관리 API
"""

from .router import router as players_router

__all__ = ["players_router"]
