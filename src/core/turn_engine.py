"""
Survival Engine - Turn Engine
=============================
의도(Move / Rest / Craft) + 캐릭터 스냅샷 → 새 스냅샷 + 결과 기록

[처리 순서]
1. 의도 검증 (형식 오류는 변경 전에 거부)
2. 이동/탐험 또는 휴식 또는 제작
3. 전투 결과 반영 (HP, 경험치, 전리품)
4. 레벨업 판정 (턴당 1회)

엔진은 I/O가 없다. 난수원만 호출마다 주입받는다.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional, Union

from src.core.balance import DEFAULT_BALANCE, Balance
from src.core.character import CharacterSnapshot, apply_level_up
from src.core.combat import CombatResolver, CombatResult
from src.core.errors import InvalidIntentError
from src.core.game_data import GameData
from src.core.item.crafting import CraftFailure, try_craft
from src.core.item.inventory import add_items
from src.core.item.loot import LootGenerator
from src.core.item.models import Item, ItemCategory, Rarity
from src.core.logging import get_logger
from src.core.terrain import TerrainProfile, classify

logger = get_logger(__name__)


# === 방향 ===


class Direction(Enum):
    """이동 방향 (단위 이동)"""

    NORTH = ("N", 0, 1)
    NORTH_EAST = ("NE", 1, 1)
    EAST = ("E", 1, 0)
    SOUTH_EAST = ("SE", 1, -1)
    SOUTH = ("S", 0, -1)
    SOUTH_WEST = ("SW", -1, -1)
    WEST = ("W", -1, 0)
    NORTH_WEST = ("NW", -1, 1)

    def __init__(self, symbol: str, dx: int, dy: int):
        self.symbol = symbol
        self.dx = dx
        self.dy = dy

    @classmethod
    def from_delta(cls, dx: int, dy: int) -> "Direction":
        for direction in cls:
            if (direction.dx, direction.dy) == (dx, dy):
                return direction
        return DEFAULT_DIRECTION

    @classmethod
    def parse(cls, text: str) -> "Direction":
        """방향 문자열 해석. 실패하지 않는다.

        "north", "n", "north-east", "ne", "northeast", "North East" 모두 허용.
        인식 불가 또는 상쇄("north-south")는 기본 방향(북).
        """
        dx = dy = 0
        for token in _tokenize_direction(text):
            step = _AXIS_TOKENS.get(token)
            if step is None:
                return DEFAULT_DIRECTION
            dx += step[0]
            dy += step[1]
        dx = max(-1, min(1, dx))
        dy = max(-1, min(1, dy))
        if dx == 0 and dy == 0:
            return DEFAULT_DIRECTION
        return cls.from_delta(dx, dy)


DEFAULT_DIRECTION = Direction.NORTH

_AXIS_TOKENS: dict[str, tuple[int, int]] = {
    "n": (0, 1),
    "north": (0, 1),
    "s": (0, -1),
    "south": (0, -1),
    "e": (1, 0),
    "east": (1, 0),
    "w": (-1, 0),
    "west": (-1, 0),
}

_WORD_SPLIT = re.compile(r"[\s\-_/]+")
_COMPOUND = re.compile(r"^(north|south)(east|west)$")


def _tokenize_direction(text: str) -> list[str]:
    tokens: list[str] = []
    for part in _WORD_SPLIT.split(text.strip().lower()):
        if not part:
            continue
        compound = _COMPOUND.match(part)
        if compound:
            tokens.extend(compound.groups())
        elif part not in _AXIS_TOKENS and len(part) == 2:
            tokens.extend(part)  # "ne" → "n", "e"
        else:
            tokens.append(part)
    return tokens


# === 의도 ===


@dataclass(frozen=True)
class MoveIntent:
    direction: str

    action = "move"


@dataclass(frozen=True)
class RestIntent:
    action = "rest"


@dataclass(frozen=True)
class CraftIntent:
    recipe_name: str

    action = "craft"


Intent = Union[MoveIntent, RestIntent, CraftIntent]


def parse_intent(payload: Mapping[str, Any]) -> Intent:
    """의사결정 소스 페이로드 → Intent.

    {"action": "move", "direction": "ne"}
    {"action": "rest"}
    {"action": "craft", "recipe": "Stone Axe"}
    """
    if not isinstance(payload, Mapping):
        raise InvalidIntentError("intent must be an object")

    action = payload.get("action")
    if not isinstance(action, str):
        raise InvalidIntentError("intent.action must be a string")

    action = action.strip().lower()
    if action == "move":
        direction = payload.get("direction")
        if not isinstance(direction, str):
            raise InvalidIntentError("move intent requires a direction string")
        return MoveIntent(direction=direction)
    if action == "rest":
        return RestIntent()
    if action == "craft":
        recipe = payload.get("recipe", payload.get("recipe_name"))
        if not isinstance(recipe, str) or not recipe.strip():
            raise InvalidIntentError("craft intent requires a recipe name")
        return CraftIntent(recipe_name=recipe.strip())
    raise InvalidIntentError(f"unknown action: {action!r}")


def _validate_intent(intent: Any) -> Intent:
    if isinstance(intent, MoveIntent):
        if not isinstance(intent.direction, str):
            raise InvalidIntentError("move direction must be a string")
        return intent
    if isinstance(intent, RestIntent):
        return intent
    if isinstance(intent, CraftIntent):
        if not isinstance(intent.recipe_name, str) or not intent.recipe_name:
            raise InvalidIntentError("craft recipe_name must be a non-empty string")
        return intent
    raise InvalidIntentError(f"unsupported intent: {type(intent).__name__}")


# === 결과 ===


class ExplorationKind(str, Enum):
    COMBAT = "combat"
    GATHER = "gather"
    EMPTY = "empty"


@dataclass(frozen=True)
class Outcome:
    """턴 결과 기록. 서술 렌더러와 저장소가 소비한다."""

    action: str
    success: bool
    character: CharacterSnapshot
    health_change: int = 0
    experience_gained: int = 0
    level_up: bool = False
    direction: Optional[Direction] = None
    terrain: Optional[TerrainProfile] = None
    exploration: Optional[ExplorationKind] = None
    encounter: Optional[CombatResult] = None
    items_gained: tuple[Item, ...] = ()
    items_lost: tuple[Item, ...] = ()
    items_consumed: tuple[Item, ...] = ()
    items_discarded: tuple[Item, ...] = ()
    failure: Optional[CraftFailure] = None
    reason: Optional[str] = None

    @property
    def win(self) -> Optional[bool]:
        return self.encounter.win if self.encounter else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "success": self.success,
            "health_change": self.health_change,
            "experience_gained": self.experience_gained,
            "level_up": self.level_up,
            "direction": self.direction.symbol if self.direction else None,
            "position": {"x": self.character.x, "y": self.character.y},
            "terrain": self.terrain.to_dict() if self.terrain else None,
            "exploration": self.exploration.value if self.exploration else None,
            "encounter": self.encounter.to_dict() if self.encounter else None,
            "win": self.win,
            "items_gained": [i.to_dict() for i in self.items_gained],
            "items_lost": [i.to_dict() for i in self.items_lost],
            "items_consumed": [i.to_dict() for i in self.items_consumed],
            "items_discarded": [i.to_dict() for i in self.items_discarded],
            "failure": self.failure.value if self.failure else None,
            "reason": self.reason,
        }


# === 엔진 ===


class TurnEngine:
    """
    턴 해결 엔진

    정적 테이블과 밸런스 수치만 보관한다. 캐릭터 상태는 호출마다
    스냅샷으로 받고 새 스냅샷을 돌려준다.
    """

    def __init__(self, data: GameData, balance: Balance = DEFAULT_BALANCE):
        self.data = data
        self.balance = balance
        self.loot = LootGenerator(data, balance)
        self.combat = CombatResolver(data, self.loot, balance)

    def apply(
        self,
        character: CharacterSnapshot,
        intent: Intent,
        rng: Optional[random.Random] = None,
    ) -> Outcome:
        """턴 1회 해결"""
        intent = _validate_intent(intent)
        rng = rng or random

        if isinstance(intent, MoveIntent):
            outcome = self._move(character, intent, rng)
        elif isinstance(intent, RestIntent):
            outcome = self._rest(character)
        else:
            outcome = self._craft(character, intent)

        return self._finish_turn(character, outcome)

    # --- 이동 / 탐험 ---

    def _move(
        self, character: CharacterSnapshot, intent: MoveIntent, rng: random.Random
    ) -> Outcome:
        direction = Direction.parse(intent.direction)
        x, y = character.x + direction.dx, character.y + direction.dy
        terrain = self.data.terrain(classify(x, y))
        moved = replace(character, x=x, y=y)

        roll = rng.random()
        if terrain.always_hostile or roll < self.balance.encounter_chance:
            enemy = rng.choice(terrain.enemies)
            result = self.combat.resolve(moved, enemy, rng)
            return self._apply_combat(moved, direction, terrain, result)

        if roll < self.balance.encounter_chance + self.balance.gather_chance:
            resource = rng.choice(terrain.resources)
            return self._gather(moved, direction, terrain, resource)

        return Outcome(
            action=MoveIntent.action,
            success=True,
            character=moved,
            direction=direction,
            terrain=terrain,
            exploration=ExplorationKind.EMPTY,
        )

    def _apply_combat(
        self,
        character: CharacterSnapshot,
        direction: Direction,
        terrain: TerrainProfile,
        result: CombatResult,
    ) -> Outcome:
        loot = (result.loot,) if result.loot else ()
        inventory, added, discarded = add_items(
            character.inventory, loot, character.inventory_capacity
        )
        updated = replace(
            character,
            health=character.clamp_health(result.hp_remaining),
            experience=character.experience + result.exp_gain,
            inventory=inventory,
        )
        return Outcome(
            action=MoveIntent.action,
            success=True,
            character=updated,
            direction=direction,
            terrain=terrain,
            exploration=ExplorationKind.COMBAT,
            encounter=result,
            items_gained=added,
            items_discarded=discarded,
        )

    def _gather(
        self,
        character: CharacterSnapshot,
        direction: Direction,
        terrain: TerrainProfile,
        resource: str,
    ) -> Outcome:
        material = Item(name=resource, category=ItemCategory.MATERIAL, rarity=Rarity.COMMON)
        inventory, added, discarded = add_items(
            character.inventory, (material,), character.inventory_capacity
        )
        return Outcome(
            action=MoveIntent.action,
            success=True,
            character=replace(character, inventory=inventory),
            direction=direction,
            terrain=terrain,
            exploration=ExplorationKind.GATHER,
            items_gained=added,
            items_discarded=discarded,
        )

    # --- 휴식 ---

    def _rest(self, character: CharacterSnapshot) -> Outcome:
        healed = character.with_health(character.health + self.balance.rest_heal_amount)
        return Outcome(action=RestIntent.action, success=True, character=healed)

    # --- 제작 ---

    def _craft(self, character: CharacterSnapshot, intent: CraftIntent) -> Outcome:
        result = try_craft(character.inventory, intent.recipe_name, self.data)
        if not result.success:
            logger.info("Craft failed: %s", result.reason)
            return Outcome(
                action=CraftIntent.action,
                success=False,
                character=character,
                failure=result.failure,
                reason=result.reason,
            )

        updated = replace(character, inventory=result.inventory)
        consumed: tuple[Item, ...] = ()
        if result.auto_consume and result.crafted is not None:
            # 결과물은 인벤토리 맨 끝에 있다
            updated = replace(
                updated,
                inventory=updated.inventory[:-1],
                health=updated.clamp_health(updated.health + result.crafted.heal),
            )
            consumed = (result.crafted,)

        return Outcome(
            action=CraftIntent.action,
            success=True,
            character=updated,
            items_gained=(result.crafted,) if result.crafted else (),
            items_lost=result.consumed_materials,
            items_consumed=consumed,
        )

    # --- 마무리 ---

    def _finish_turn(self, before: CharacterSnapshot, outcome: Outcome) -> Outcome:
        """레벨업 판정 후 HP/경험치 변화량 확정

        이번 턴에 쓰러진 캐릭터는 레벨업(완전 회복 포함)을 다음 턴으로 미룬다.
        """
        if outcome.character.is_alive:
            after, leveled = apply_level_up(outcome.character)
        else:
            after, leveled = outcome.character, False
        experience_gained = outcome.encounter.exp_gain if outcome.encounter else 0
        return replace(
            outcome,
            character=after,
            level_up=leveled,
            health_change=after.health - before.health,
            experience_gained=experience_gained,
        )
