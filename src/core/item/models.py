"""아이템 도메인 모델 (DB 무관)"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

StatValue = Union[int, float]


class ItemCategory(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    CONSUMABLE = "consumable"
    MATERIAL = "material"
    TOOL = "tool"


class Rarity(str, Enum):
    COMMON = "common"
    RARE = "rare"
    EPIC = "epic"

    @property
    def affix_count(self) -> int:
        """희귀도 티어 = 적용된 접사 수"""
        return {"common": 0, "rare": 1, "epic": 2}[self.value]


class StatKey(str, Enum):
    """인식되는 스탯 키. 이 외의 키는 Item에 들어갈 수 없다."""

    ATK = "atk"
    DEF = "def"
    CRIT_RATE = "crit_rate"
    DODGE_RATE = "dodge_rate"
    LIFESTEAL = "lifesteal"
    STR = "str"
    DEX = "dex"
    INT = "int"
    HP_MAX = "hp_max"


RECOGNIZED_STATS: frozenset[str] = frozenset(k.value for k in StatKey)

# 정수 스탯 (비율 스탯 crit_rate, dodge_rate, lifesteal 제외)
INTEGER_STATS: frozenset[str] = frozenset({"atk", "def", "str", "dex", "int", "hp_max"})

# 무기/방어구의 1차 전투 스탯
PRIMARY_STAT: dict[ItemCategory, str] = {
    ItemCategory.WEAPON: StatKey.ATK.value,
    ItemCategory.ARMOR: StatKey.DEF.value,
}

# 접두사가 1차 스탯을 대상으로 할 때의 stat 값
PRIMARY_AFFIX_TARGET = "primary"


def validate_stats(stats: dict[str, StatValue]) -> None:
    unknown = set(stats) - RECOGNIZED_STATS
    if unknown:
        raise ValueError(f"Unrecognized stat keys: {sorted(unknown)}")


@dataclass(frozen=True)
class Item:
    """인벤토리/장비 슬롯에 들어가는 단일 아이템. 불변."""

    name: str  # 기본 이름 + 접사 0~2개
    category: ItemCategory
    stats: dict[str, StatValue] = field(default_factory=dict)
    rarity: Rarity = Rarity.COMMON
    heal: int = 0  # 소모품 효과 (HP 회복량)

    def __post_init__(self) -> None:
        validate_stats(self.stats)

    def stat(self, key: str) -> StatValue:
        """스탯 조회. 없으면 0."""
        return self.stats.get(key, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category.value,
            "stats": dict(self.stats),
            "rarity": self.rarity.value,
            "heal": self.heal,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Item":
        return cls(
            name=data["name"],
            category=ItemCategory(data["category"]),
            stats=dict(data.get("stats", {})),
            rarity=Rarity(data.get("rarity", Rarity.COMMON.value)),
            heal=int(data.get("heal", 0)),
        )


@dataclass(frozen=True)
class ItemTemplate:
    """전리품 기본 원형 (티어 테이블의 한 칸)"""

    name: str
    category: ItemCategory
    primary_value: int

    @property
    def primary_stat(self) -> str:
        return PRIMARY_STAT[self.category]


@dataclass(frozen=True)
class Affix:
    """접두/접미 수식어.

    stat == "primary" 인 접두사는 1차 스탯에 곱연산,
    그 외는 해당 스탯에 합연산.
    """

    name: str
    stat: str
    magnitude: float

    @property
    def is_multiplicative(self) -> bool:
        return self.stat == PRIMARY_AFFIX_TARGET


@dataclass(frozen=True)
class Recipe:
    """제작 레시피 — 정적 설정"""

    name: str  # 결과물 이름
    materials: dict[str, int]  # 재료명 → 필요 수량 (순서 유지)
    category: ItemCategory
    stats: dict[str, StatValue] = field(default_factory=dict)
    heal: int = 0
    auto_consume: bool = False  # 제작 즉시 소모 (붕대 등)

    def build_item(self) -> Item:
        """레시피가 선언한 스탯 그대로의 결과 아이템"""
        return Item(
            name=self.name,
            category=self.category,
            stats=dict(self.stats),
            rarity=Rarity.COMMON,
            heal=self.heal,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "materials": dict(self.materials),
            "category": self.category.value,
            "stats": dict(self.stats),
            "heal": self.heal,
            "auto_consume": self.auto_consume,
        }
