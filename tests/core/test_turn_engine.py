"""Turn Engine 테스트: 이동/탐험, 휴식, 제작, 레벨업"""

from __future__ import annotations

import random
from dataclasses import replace

import pytest

from src.core.character import Attributes, CharacterSnapshot
from src.core.errors import InvalidIntentError
from src.core.item.crafting import CraftFailure
from src.core.item.models import Item, ItemCategory
from src.core.terrain import TerrainType
from src.core.turn_engine import (
    CraftIntent,
    Direction,
    ExplorationKind,
    MoveIntent,
    RestIntent,
    TurnEngine,
    parse_intent,
)


def _mat(name: str) -> Item:
    return Item(name=name, category=ItemCategory.MATERIAL)


class TestDirectionParse:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("north", Direction.NORTH),
            ("N", Direction.NORTH),
            ("s", Direction.SOUTH),
            ("West", Direction.WEST),
            ("ne", Direction.NORTH_EAST),
            ("north-east", Direction.NORTH_EAST),
            ("NorthEast", Direction.NORTH_EAST),
            ("south west", Direction.SOUTH_WEST),
            ("SE", Direction.SOUTH_EAST),
            ("north_west", Direction.NORTH_WEST),
        ],
    )
    def test_recognized(self, text: str, expected: Direction):
        assert Direction.parse(text) == expected

    @pytest.mark.parametrize("text", ["up", "", "north-south", "xyzzy", "  "])
    def test_unrecognized_defaults_to_north(self, text: str):
        assert Direction.parse(text) == Direction.NORTH


class TestParseIntent:
    def test_move(self):
        assert parse_intent({"action": "move", "direction": "e"}) == MoveIntent("e")

    def test_rest(self):
        assert parse_intent({"action": "REST"}) == RestIntent()

    def test_craft_accepts_both_keys(self):
        assert parse_intent({"action": "craft", "recipe": "Torch"}) == CraftIntent("Torch")
        assert parse_intent({"action": "craft", "recipe_name": "Torch"}) == CraftIntent("Torch")

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"action": 3},
            {"action": "fly"},
            {"action": "move"},
            {"action": "move", "direction": 7},
            {"action": "craft"},
            {"action": "craft", "recipe": "   "},
            "rest",
        ],
    )
    def test_malformed_rejected(self, payload):
        with pytest.raises(InvalidIntentError):
            parse_intent(payload)

    def test_engine_rejects_unknown_intent(self, engine: TurnEngine, hero: CharacterSnapshot):
        with pytest.raises(InvalidIntentError):
            engine.apply(hero, "dance")


class TestRest:
    def test_rest_clamped_to_max(self, engine: TurnEngine):
        outcome = engine.apply(CharacterSnapshot(health=95), RestIntent())
        assert outcome.success
        assert outcome.character.health == 100
        assert outcome.health_change == 5

    def test_rest_heals_flat_amount(self, engine: TurnEngine):
        outcome = engine.apply(CharacterSnapshot(health=10), RestIntent())
        assert outcome.character.health == 40
        assert outcome.health_change == 30
        assert outcome.encounter is None
        assert outcome.terrain is None


class TestMove:
    def test_empty_exploration(self, engine: TurnEngine, hero: CharacterSnapshot, fixed_rng):
        outcome = engine.apply(hero, MoveIntent("north"), fixed_rng(0.99))
        assert outcome.success
        assert (outcome.character.x, outcome.character.y) == (0, 1)
        assert outcome.direction == Direction.NORTH
        assert outcome.terrain.kind != TerrainType.DUNGEON
        assert outcome.exploration == ExplorationKind.EMPTY
        assert outcome.encounter is None
        assert outcome.character.inventory == ()

    def test_unrecognized_direction_moves_north(
        self, engine: TurnEngine, hero: CharacterSnapshot, fixed_rng
    ):
        outcome = engine.apply(hero, MoveIntent("sideways"), fixed_rng(0.99))
        assert (outcome.character.x, outcome.character.y) == (0, 1)

    def test_diagonal_step(self, engine: TurnEngine, hero: CharacterSnapshot, fixed_rng):
        outcome = engine.apply(hero, MoveIntent("south-west"), fixed_rng(0.99))
        assert (outcome.character.x, outcome.character.y) == (-1, -1)

    def test_gather_adds_material(self, engine: TurnEngine, hero: CharacterSnapshot, fixed_rng):
        outcome = engine.apply(hero, MoveIntent("east"), fixed_rng(0.5))
        assert outcome.exploration == ExplorationKind.GATHER
        assert len(outcome.items_gained) == 1
        gathered = outcome.items_gained[0]
        assert gathered.category == ItemCategory.MATERIAL
        assert gathered.name in outcome.terrain.resources
        assert outcome.character.inventory == (gathered,)

    def test_combat_win_applies_deltas(self, engine: TurnEngine, fixed_rng):
        champion = CharacterSnapshot(
            health=100,
            level=5,
            attributes=Attributes(strength=100, dexterity=0, intelligence=0),
        )
        # 0.1 → 조우, 치명타/회피 없음, 드롭 성공
        outcome = engine.apply(champion, MoveIntent("north"), fixed_rng(0.1))
        assert outcome.exploration == ExplorationKind.COMBAT
        encounter = outcome.encounter
        assert encounter is not None
        assert encounter.enemy in outcome.terrain.enemies
        assert outcome.win is True
        assert encounter.rounds == 1
        assert outcome.character.experience == encounter.exp_gain
        assert outcome.experience_gained == encounter.exp_gain
        assert encounter.loot is not None
        assert outcome.items_gained == (encounter.loot,)
        assert outcome.character.inventory == (encounter.loot,)

    def test_full_inventory_discards_loot(self, engine: TurnEngine, fixed_rng):
        champion = CharacterSnapshot(
            health=100,
            level=5,
            attributes=Attributes(strength=100, dexterity=0, intelligence=0),
            inventory_capacity=0,
        )
        outcome = engine.apply(champion, MoveIntent("north"), fixed_rng(0.1))
        assert outcome.items_gained == ()
        assert outcome.items_discarded == (outcome.encounter.loot,)
        assert outcome.character.inventory == ()

    def test_landmark_always_fights(self, engine: TurnEngine):
        """랜드마크 진입은 어떤 시드에서도 전투"""
        start = CharacterSnapshot(health=100, x=10, y=9)
        for seed in range(200):
            outcome = engine.apply(start, MoveIntent("n"), random.Random(seed))
            assert (outcome.character.x, outcome.character.y) == (10, 10)
            assert outcome.terrain.kind == TerrainType.DUNGEON
            assert outcome.exploration == ExplorationKind.COMBAT
            assert outcome.encounter is not None
            assert 0 <= outcome.character.health <= outcome.character.max_health

    def test_outcome_serializes(self, engine: TurnEngine, hero: CharacterSnapshot):
        outcome = engine.apply(hero, MoveIntent("ne"), random.Random(3))
        data = outcome.to_dict()
        assert data["action"] == "move"
        assert data["direction"] == "NE"
        assert data["position"] == {"x": 1, "y": 1}


class TestCraft:
    def test_craft_success(self, engine: TurnEngine):
        character = CharacterSnapshot(
            health=100, inventory=(_mat("Wood"), _mat("Stone"), _mat("Wood"), _mat("Herb"))
        )
        outcome = engine.apply(character, CraftIntent("Stone Axe"))
        assert outcome.success
        assert [i.name for i in outcome.character.inventory] == ["Herb", "Stone Axe"]
        assert [i.name for i in outcome.items_lost] == ["Wood", "Stone", "Wood"]
        assert [i.name for i in outcome.items_gained] == ["Stone Axe"]
        assert outcome.items_consumed == ()

    def test_missing_material_changes_nothing(self, engine: TurnEngine):
        character = CharacterSnapshot(health=70, inventory=(_mat("Wood"),))
        outcome = engine.apply(character, CraftIntent("Stone Axe"))
        assert not outcome.success
        assert outcome.failure == CraftFailure.MISSING_MATERIAL
        assert outcome.reason == "missing material: Wood"
        assert outcome.character == character
        assert outcome.health_change == 0

    def test_unknown_recipe(self, engine: TurnEngine, hero: CharacterSnapshot):
        outcome = engine.apply(hero, CraftIntent("Warp Drive"))
        assert not outcome.success
        assert outcome.failure == CraftFailure.UNKNOWN_RECIPE
        assert outcome.character == hero

    def test_bandage_auto_consumed(self, engine: TurnEngine):
        character = CharacterSnapshot(health=50, inventory=(_mat("Herb"), _mat("Herb")))
        outcome = engine.apply(character, CraftIntent("Bandage"))
        assert outcome.success
        assert outcome.character.health == 80
        assert outcome.health_change == 30
        assert outcome.character.inventory == ()
        assert [i.name for i in outcome.items_consumed] == ["Bandage"]

    def test_bandage_heal_capped(self, engine: TurnEngine):
        character = CharacterSnapshot(health=90, inventory=(_mat("Herb"), _mat("Herb")))
        outcome = engine.apply(character, CraftIntent("Bandage"))
        assert outcome.character.health == 100


class TestLeveling:
    def test_level_up_after_turn(self, engine: TurnEngine):
        character = CharacterSnapshot(health=60, experience=100)
        outcome = engine.apply(character, RestIntent())
        assert outcome.level_up
        assert outcome.character.level == 2
        assert outcome.character.experience == 0
        assert outcome.character.health == 110
        assert outcome.health_change == 50

    def test_no_level_up_below_threshold(self, engine: TurnEngine, hero: CharacterSnapshot):
        outcome = engine.apply(replace(hero, experience=99), RestIntent())
        assert not outcome.level_up
        assert outcome.character.level == 1

    def test_combat_exp_levels_up_same_turn(self, engine: TurnEngine, fixed_rng):
        """이동 → 전투 → 레벨업 순서: 승리 경험치로 같은 턴에 레벨업"""
        champion = CharacterSnapshot(
            health=100,
            x=10,
            y=9,
            attributes=Attributes(strength=100, dexterity=0, intelligence=0),
        )
        # 0.99 → 치명타/회피/드롭 없음, 던전 적 공격력 61 → 경험치 122
        outcome = engine.apply(champion, MoveIntent("north"), fixed_rng(0.99))
        assert outcome.win is True
        assert outcome.encounter.exp_gain == 122
        assert outcome.experience_gained == 122
        assert outcome.level_up
        assert outcome.character.level == 2
        assert outcome.character.experience == 22
        assert outcome.character.health == 110
        assert outcome.health_change == 10

    def test_no_level_up_when_defeated(self, engine: TurnEngine, fixed_rng):
        """쓰러진 턴에는 이월 경험치가 있어도 레벨업/회복 없음"""
        fallen = CharacterSnapshot(
            health=5,
            experience=500,
            x=10,
            y=9,
            attributes=Attributes(strength=0, dexterity=0, intelligence=0),
        )
        outcome = engine.apply(fallen, MoveIntent("north"), fixed_rng(0.99))
        assert outcome.win is False
        assert not outcome.level_up
        assert outcome.character.health == 0
        assert outcome.character.level == 1
        assert outcome.character.experience == 500
        assert outcome.health_change == -5

    def test_pending_level_up_applies_next_turn(self, engine: TurnEngine):
        fallen = CharacterSnapshot(health=0, experience=500)
        outcome = engine.apply(fallen, RestIntent())
        assert outcome.level_up
        assert outcome.character.level == 2
        assert outcome.character.health == 110
