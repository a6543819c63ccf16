"""
수동 정렬 오류
"""
from typing import Optional

from database.errors import TierListError


class OrderValidationError(TierListError):
    """
    잘못된 정렬 요청 (중복 ID, 알 수 없는 ID, 버킷에 속하지 않는 선수)

    부분 적용되지 않는다.
    """

    kind = "validation"

    def __init__(self, message: str, player_id: Optional[str] = None, reason: str = ""):
        super().__init__(message, {"player_id": player_id, "reason": reason})
        self.player_id = player_id
        self.reason = reason


class OrderConflictError(TierListError):
    """낙관적 버전 불일치. 호출자가 최신 목록을 다시 받아 재시도해야 한다."""

    kind = "conflict"

    def __init__(self, expected_version: Optional[int], current_version: int):
        super().__init__(
            f"정렬이 다른 관리자에 의해 변경되었습니다 "
            f"(요청 버전 {expected_version}, 현재 버전 {current_version})",
            {"expected_version": expected_version, "current_version": current_version},
        )
        self.expected_version = expected_version
        self.current_version = current_version
