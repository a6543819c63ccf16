"""
저장소 인터페이스

엔진은 이 인터페이스만 사용한다. 구현은 memory.py (메모리), supabase_client.py (Supabase).
모든 메서드는 비동기이며 I/O 오류는 그대로 전파된다.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from ranking.tiers import GameMode, TierLevel

from .models import OrderRecord, Player, PlayerCreate, PlayerUpdate


class PlayerRepository(ABC):
    """선수 CRUD 저장소"""

    @abstractmethod
    async def get_player(self, player_id: str) -> Optional[Player]:
        ...

    @abstractmethod
    async def get_player_by_name(self, name: str) -> Optional[Player]:
        """이름으로 조회 (대소문자 무시)"""

    @abstractmethod
    async def get_all_players(self) -> List[Player]:
        ...

    @abstractmethod
    async def create_player(self, data: PlayerCreate) -> Player:
        """
        선수 생성

        Raises:
            DuplicateNameError: 같은 이름이 이미 있을 때
        """

    @abstractmethod
    async def update_player(self, player_id: str, data: PlayerUpdate) -> Player:
        """
        선수 부분 수정

        Raises:
            PlayerNotFoundError: ID가 없을 때
            DuplicateNameError: 다른 선수의 이름으로 변경할 때
        """

    @abstractmethod
    async def delete_player(self, player_id: str) -> bool:
        """삭제 성공 여부 (ID가 없으면 False)"""


class OrderStorage(ABC):
    """수동 정렬 레코드 저장소"""

    @abstractmethod
    async def load(self, game_mode: GameMode, tier_level: TierLevel) -> Optional[OrderRecord]:
        ...

    @abstractmethod
    async def save(self, record: OrderRecord, expected_version: int) -> OrderRecord:
        """
        레코드 저장 (record.version은 새 버전)

        저장된 버전이 expected_version과 다르면 OrderConflictError.
        expected_version == 0 은 아직 레코드가 없다는 뜻이다.
        """

    @abstractmethod
    async def all_records(self) -> List[OrderRecord]:
        ...
