"""정적 게임 테이블 — JSON 로드 + 검증

지형, 전리품 원형 티어, 접사, 레시피를 프로세스 시작 시 한 번 읽는다.
로드 이후에는 불변. 누락/형식 오류는 ConfigurationError로 즉시 드러낸다.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from src.core.errors import ConfigurationError
from src.core.item.models import (
    PRIMARY_AFFIX_TARGET,
    RECOGNIZED_STATS,
    Affix,
    ItemCategory,
    ItemTemplate,
    Recipe,
    validate_stats,
)
from src.core.logging import get_logger
from src.core.terrain import TerrainProfile, TerrainType

logger = get_logger(__name__)

DEFAULT_GAME_DATA_PATH = Path(__file__).resolve().parent.parent / "data" / "game_tables.json"

# 전리품으로 생성되는 카테고리
LOOT_CATEGORIES = (ItemCategory.WEAPON, ItemCategory.ARMOR)


class GameData:
    """
    정적 테이블 묶음.

    생성자는 이미 파싱된 값을 받는다. JSON에서 만들 때는
    from_dict() / load_game_data()를 사용한다.
    """

    def __init__(
        self,
        terrains: dict[TerrainType, TerrainProfile],
        templates: dict[ItemCategory, tuple[ItemTemplate, ...]],
        prefixes: tuple[Affix, ...],
        suffixes: tuple[Affix, ...],
        recipes: dict[str, Recipe],
    ) -> None:
        self._terrains = dict(terrains)
        self._templates = dict(templates)
        self._prefixes = tuple(prefixes)
        self._suffixes = tuple(suffixes)
        self._recipes = dict(recipes)
        self._enemy_index: dict[str, TerrainType] = {}
        self._validate()

    # === 검증 ===

    def _validate(self) -> None:
        missing = [t.value for t in TerrainType if t not in self._terrains]
        if missing:
            raise ConfigurationError(f"Terrain table missing entries: {missing}")

        for kind, profile in self._terrains.items():
            if not profile.enemies:
                raise ConfigurationError(f"Terrain {kind.value} has no enemies")
            if not profile.resources:
                raise ConfigurationError(f"Terrain {kind.value} has no resources")
            if profile.danger < 0:
                raise ConfigurationError(f"Terrain {kind.value} has negative danger")
            for enemy in profile.enemies:
                owner = self._enemy_index.get(enemy)
                if owner is not None and owner != kind:
                    raise ConfigurationError(
                        f"Enemy {enemy!r} listed in both {owner.value} and {kind.value}"
                    )
                self._enemy_index[enemy] = kind

        for category in LOOT_CATEGORIES:
            if not self._templates.get(category):
                raise ConfigurationError(f"No loot templates for {category.value}")

        if not self._prefixes or not self._suffixes:
            raise ConfigurationError("Affix tables must define prefixes and suffixes")
        for affix in self._suffixes:
            if affix.is_multiplicative:
                raise ConfigurationError(f"Suffix {affix.name!r} must be additive")

        for recipe in self._recipes.values():
            if not recipe.materials:
                raise ConfigurationError(f"Recipe {recipe.name!r} has no materials")
            if any(count <= 0 for count in recipe.materials.values()):
                raise ConfigurationError(
                    f"Recipe {recipe.name!r} has non-positive material count"
                )

    # === 조회 ===

    def terrain(self, kind: TerrainType) -> TerrainProfile:
        try:
            return self._terrains[kind]
        except KeyError:
            raise ConfigurationError(f"Unknown terrain: {kind}") from None

    def terrain_for_enemy(self, enemy_name: str) -> TerrainProfile:
        """적 이름이 속한 지형. 어느 목록에도 없으면 ConfigurationError."""
        kind = self._enemy_index.get(enemy_name)
        if kind is None:
            raise ConfigurationError(f"Enemy {enemy_name!r} not in any terrain roster")
        return self._terrains[kind]

    def templates(self, category: ItemCategory) -> tuple[ItemTemplate, ...]:
        try:
            return self._templates[category]
        except KeyError:
            raise ConfigurationError(f"No templates for {category.value}") from None

    def recipe(self, name: str) -> Optional[Recipe]:
        """레시피 조회. 없으면 None (미지 레시피는 제작 실패로 처리)."""
        return self._recipes.get(name)

    @property
    def terrains(self) -> list[TerrainProfile]:
        return list(self._terrains.values())

    @property
    def prefixes(self) -> tuple[Affix, ...]:
        return self._prefixes

    @property
    def suffixes(self) -> tuple[Affix, ...]:
        return self._suffixes

    @property
    def recipes(self) -> list[Recipe]:
        return list(self._recipes.values())

    # === 파싱 ===

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "GameData":
        """JSON 구조 → GameData. 형식 오류는 ConfigurationError."""
        try:
            terrains = {
                TerrainType(key): _parse_terrain(TerrainType(key), value)
                for key, value in raw["terrains"].items()
            }
            templates = {
                ItemCategory(key): tuple(
                    ItemTemplate(
                        name=entry["name"],
                        category=ItemCategory(key),
                        primary_value=int(entry["primary_value"]),
                    )
                    for entry in entries
                )
                for key, entries in raw["templates"].items()
            }
            prefixes = tuple(_parse_affix(a) for a in raw["affixes"]["prefixes"])
            suffixes = tuple(_parse_affix(a) for a in raw["affixes"]["suffixes"])
            recipes = {}
            for entry in raw["recipes"]:
                recipe = _parse_recipe(entry)
                recipes[recipe.name] = recipe
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed game tables: {e}") from e

        for category in templates:
            if category not in LOOT_CATEGORIES:
                raise ConfigurationError(
                    f"Loot templates only support weapon/armor, got {category.value}"
                )

        return cls(terrains, templates, prefixes, suffixes, recipes)


def _parse_terrain(kind: TerrainType, data: dict[str, Any]) -> TerrainProfile:
    return TerrainProfile(
        kind=kind,
        display_name=data["display_name"],
        danger=int(data["danger"]),
        enemies=tuple(data["enemies"]),
        resources=tuple(data["resources"]),
        always_hostile=bool(data.get("always_hostile", False)),
        loot_chance_bonus=float(data.get("loot_chance_bonus", 0.0)),
        rarity_bonus=float(data.get("rarity_bonus", 0.0)),
    )


def _parse_affix(data: dict[str, Any]) -> Affix:
    stat = data["stat"]
    if stat != PRIMARY_AFFIX_TARGET and stat not in RECOGNIZED_STATS:
        raise ValueError(f"affix {data.get('name')!r} targets unknown stat {stat!r}")
    return Affix(name=data["name"], stat=stat, magnitude=float(data["magnitude"]))


def _parse_recipe(data: dict[str, Any]) -> Recipe:
    stats = dict(data.get("stats", {}))
    validate_stats(stats)
    return Recipe(
        name=data["name"],
        materials={name: int(count) for name, count in data["materials"].items()},
        category=ItemCategory(data["category"]),
        stats=stats,
        heal=int(data.get("heal", 0)),
        auto_consume=bool(data.get("auto_consume", False)),
    )


def load_game_data(path: Optional[str | Path] = None) -> GameData:
    """게임 테이블 JSON 로드. 파일이 없거나 깨졌으면 ConfigurationError."""
    path = Path(path) if path is not None else DEFAULT_GAME_DATA_PATH
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read game tables from {path}: {e}") from e

    data = GameData.from_dict(raw)
    logger.info(
        "Loaded game tables from %s (%d terrains, %d recipes)",
        path,
        len(data.terrains),
        len(data.recipes),
    )
    return data
