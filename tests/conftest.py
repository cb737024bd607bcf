"""
Pytest fixtures for the Tic Tac Toe session tests.
"""

import pytest
from fastapi.testclient import TestClient

from tictactoe_sessions.config import get_config
from tictactoe_sessions.core import GameRegistry
from tictactoe_sessions.main import create_app


@pytest.fixture(autouse=True)
def clear_config_cache():
    """Config is cached per process; tests that set env vars need a fresh read."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def registry() -> GameRegistry:
    """A fresh, empty registry."""
    return GameRegistry()


@pytest.fixture
def started_game(registry: GameRegistry):
    """A game with both players seated: (game_id, first_player, second_player)."""
    game_id = registry.create_game()
    first = registry.add_player(game_id)
    second = registry.add_player(game_id)
    return game_id, first, second


@pytest.fixture
def client(registry: GameRegistry) -> TestClient:
    """HTTP client bound to the registry fixture."""
    return TestClient(create_app(registry))
