"""Shared test fixtures."""

import random
from typing import Optional

import pytest
from fastapi.testclient import TestClient

from src.core.balance import DEFAULT_BALANCE
from src.core.character import Attributes, CharacterSnapshot
from src.core.game_data import GameData, load_game_data
from src.core.turn_engine import TurnEngine
from src.main import app


class FixedRandom(random.Random):
    """Random source with pinned random() and uniform() results.

    value=0.99 → no crit, no dodge, no loot drop, no tier bump.
    uniform() returns the midpoint unless uniform_value is given,
    so damage variance is exactly 1.0 and rarity score is 50.
    """

    def __init__(self, value: float = 0.99, uniform_value: Optional[float] = None):
        super().__init__(0)
        self.value = value
        self.uniform_value = uniform_value

    def random(self) -> float:
        return self.value

    def uniform(self, a: float, b: float) -> float:
        if self.uniform_value is not None:
            return self.uniform_value
        return (a + b) / 2


@pytest.fixture(scope="session")
def game_data() -> GameData:
    """Bundled static tables, loaded once."""
    return load_game_data()


@pytest.fixture()
def engine(game_data: GameData) -> TurnEngine:
    return TurnEngine(game_data, DEFAULT_BALANCE)


@pytest.fixture()
def fixed_rng():
    """Factory for FixedRandom instances."""
    return FixedRandom


@pytest.fixture()
def hero() -> CharacterSnapshot:
    """Level 1, full health, str/dex 5, no gear, at the origin."""
    return CharacterSnapshot(
        health=100,
        attributes=Attributes(strength=5, dexterity=5, intelligence=5),
    )


@pytest.fixture()
def client() -> TestClient:
    """FastAPI TestClient with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client
