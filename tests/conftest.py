"""
Pytest configuration and fixtures for PvP Tier List tests
"""

import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.auth.config import get_auth_settings
from app.auth.sessions import InMemorySessionStore
from app.service import TierListService
from database.memory import InMemoryOrderStorage, InMemoryPlayerRepository
from database.models import Player


def make_player(player_id: str, name: str = None, **tiers) -> Player:
    """테스트용 선수 (지정하지 않은 모드는 NR)"""
    return Player(id=player_id, name=name or player_id, **tiers)


def seed_repository(*players: Player) -> InMemoryPlayerRepository:
    repository = InMemoryPlayerRepository()
    for player in players:
        repository._players[player.id] = player
    return repository


@pytest.fixture(scope="function")
def repository():
    """빈 메모리 저장소"""
    return InMemoryPlayerRepository()


@pytest.fixture(scope="function")
def seeded_repository():
    """데모 선수 12명"""
    return InMemoryPlayerRepository(seed=True)


@pytest.fixture(scope="function")
def order_storage():
    return InMemoryOrderStorage()


@pytest.fixture(scope="function")
def service(repository, order_storage):
    return TierListService(repository, order_storage)


@pytest.fixture(scope="function")
def seeded_service(seeded_repository, order_storage):
    return TierListService(seeded_repository, order_storage)


@pytest.fixture(scope="function")
def session_store():
    return InMemorySessionStore()


@pytest.fixture(scope="session")
def admin_password():
    return get_auth_settings().ADMIN_PASSWORD
