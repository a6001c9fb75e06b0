"""Survival Engine Core"""
__version__ = "0.1.0"

from src.core.balance import DEFAULT_BALANCE, Balance
from src.core.character import Attributes, CharacterSnapshot, Equipment, apply_level_up
from src.core.combat import CombatResolver, CombatResult, derive_combat_stats
from src.core.errors import (
    ConfigurationError,
    EngineError,
    InvalidIntentError,
    InvalidSnapshotError,
)
from src.core.game_data import GameData, load_game_data
from src.core.terrain import TerrainProfile, TerrainType, classify, describe
from src.core.turn_engine import (
    CraftIntent,
    Direction,
    MoveIntent,
    Outcome,
    RestIntent,
    TurnEngine,
    parse_intent,
)

__all__ = [
    "Balance",
    "DEFAULT_BALANCE",
    "Attributes",
    "CharacterSnapshot",
    "Equipment",
    "apply_level_up",
    "CombatResolver",
    "CombatResult",
    "derive_combat_stats",
    "ConfigurationError",
    "EngineError",
    "InvalidIntentError",
    "InvalidSnapshotError",
    "GameData",
    "load_game_data",
    "TerrainProfile",
    "TerrainType",
    "classify",
    "describe",
    "CraftIntent",
    "Direction",
    "MoveIntent",
    "Outcome",
    "RestIntent",
    "TurnEngine",
    "parse_intent",
]
