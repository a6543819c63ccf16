"""
티어리스트 오류 정의

모든 처리된 오류는 kind + message (+ detail) 구조로 호출자에게 전달된다.
저장소 I/O 오류는 여기 포함되지 않으며 그대로 전파된다.
"""
from typing import Any, Dict, Optional


class TierListError(Exception):
    """티어리스트 오류 기본 클래스"""

    kind = "error"

    def __init__(self, message: str, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.kind,
            "message": self.message,
            "detail": self.detail,
        }


class PlayerNotFoundError(TierListError):
    """존재하지 않는 선수 ID"""

    kind = "not_found"

    def __init__(self, player_id: str):
        super().__init__(
            f"선수를 찾을 수 없습니다: {player_id}",
            {"player_id": player_id},
        )
        self.player_id = player_id


class DuplicateNameError(TierListError):
    """이미 존재하는 선수명 (대소문자 무시)"""

    kind = "duplicate_name"

    def __init__(self, name: str, existing_id: Optional[str] = None):
        super().__init__(
            f"같은 이름의 선수가 이미 있습니다: {name}",
            {"name": name, "existing_id": existing_id},
        )
        self.name = name
        self.existing_id = existing_id
