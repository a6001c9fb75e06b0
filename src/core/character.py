"""
Survival Engine - Character Snapshot
====================================
턴 입력/출력이 되는 캐릭터 상태와 성장 규칙

스냅샷은 불변이다. 변경은 dataclasses.replace()로 새 스냅샷을 만든다.
생성 시 불변식(HP 범위, 인벤토리 용량, 음수 능력치 금지)을 검사한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Optional

from src.core.balance import (
    BASE_MAX_HEALTH,
    DEFAULT_INVENTORY_CAPACITY,
    EXP_PER_LEVEL,
    HEALTH_PER_LEVEL,
    LEVEL_UP_ATTRIBUTE_BONUS,
)
from src.core.errors import InvalidSnapshotError
from src.core.item.models import Item
from src.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Attributes:
    """3대 능력치"""

    strength: int = 1
    dexterity: int = 1
    intelligence: int = 1

    def __post_init__(self) -> None:
        for name in ("strength", "dexterity", "intelligence"):
            if getattr(self, name) < 0:
                raise InvalidSnapshotError(f"{name} must be non-negative")

    def raised(self, amount: int) -> "Attributes":
        return Attributes(
            strength=self.strength + amount,
            dexterity=self.dexterity + amount,
            intelligence=self.intelligence + amount,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "strength": self.strength,
            "dexterity": self.dexterity,
            "intelligence": self.intelligence,
        }


@dataclass(frozen=True)
class Equipment:
    """장비 슬롯 (비어 있으면 None)"""

    weapon: Optional[Item] = None
    armor: Optional[Item] = None
    accessory: Optional[Item] = None

    def __iter__(self) -> Iterator[Item]:
        for item in (self.weapon, self.armor, self.accessory):
            if item is not None:
                yield item

    def total(self, key: str) -> float:
        """장착 아이템 전체의 스탯 합"""
        return sum(item.stat(key) for item in self)

    def to_dict(self) -> dict[str, Optional[dict]]:
        return {
            "weapon": self.weapon.to_dict() if self.weapon else None,
            "armor": self.armor.to_dict() if self.armor else None,
            "accessory": self.accessory.to_dict() if self.accessory else None,
        }


@dataclass(frozen=True)
class CharacterSnapshot:
    """한 턴의 입력이 되는 캐릭터 상태"""

    health: int
    level: int = 1
    experience: int = 0
    attributes: Attributes = field(default_factory=Attributes)
    equipment: Equipment = field(default_factory=Equipment)
    inventory: tuple[Item, ...] = ()
    x: int = 0
    y: int = 0
    inventory_capacity: int = DEFAULT_INVENTORY_CAPACITY

    def __post_init__(self) -> None:
        # list로 들어와도 튜플로 고정
        if not isinstance(self.inventory, tuple):
            object.__setattr__(self, "inventory", tuple(self.inventory))
        if self.level < 1:
            raise InvalidSnapshotError(f"level must be >= 1, got {self.level}")
        if self.experience < 0:
            raise InvalidSnapshotError("experience must be non-negative")
        if self.inventory_capacity < 0:
            raise InvalidSnapshotError("inventory_capacity must be non-negative")
        if len(self.inventory) > self.inventory_capacity:
            raise InvalidSnapshotError(
                f"inventory holds {len(self.inventory)} items, "
                f"capacity is {self.inventory_capacity}"
            )
        if not 0 <= self.health <= self.max_health:
            raise InvalidSnapshotError(
                f"health {self.health} outside [0, {self.max_health}]"
            )

    @property
    def max_health(self) -> int:
        """레벨 기반 최대 HP + 장비 hp_max"""
        base = BASE_MAX_HEALTH + (self.level - 1) * HEALTH_PER_LEVEL
        return base + int(self.equipment.total("hp_max"))

    @property
    def strength(self) -> int:
        """장비 보너스 포함 유효 힘"""
        return self.attributes.strength + int(self.equipment.total("str"))

    @property
    def dexterity(self) -> int:
        return self.attributes.dexterity + int(self.equipment.total("dex"))

    @property
    def intelligence(self) -> int:
        return self.attributes.intelligence + int(self.equipment.total("int"))

    @property
    def exp_to_next_level(self) -> int:
        return self.level * EXP_PER_LEVEL

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    def clamp_health(self, value: float) -> int:
        """[0, max_health] 범위로 자른 정수 HP"""
        return max(0, min(self.max_health, int(value)))

    def with_health(self, value: float) -> "CharacterSnapshot":
        return replace(self, health=self.clamp_health(value))

    def to_dict(self) -> dict[str, Any]:
        return {
            "health": self.health,
            "max_health": self.max_health,
            "level": self.level,
            "experience": self.experience,
            "attributes": self.attributes.to_dict(),
            "equipment": self.equipment.to_dict(),
            "inventory": [item.to_dict() for item in self.inventory],
            "inventory_capacity": self.inventory_capacity,
            "position": {"x": self.x, "y": self.y},
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CharacterSnapshot":
        """to_dict() 역변환. max_health는 파생값이므로 무시한다."""
        attrs = data.get("attributes") or {}
        equipment = data.get("equipment") or {}
        position = data.get("position") or {}

        def _slot(name: str) -> Optional[Item]:
            raw = equipment.get(name)
            return Item.from_dict(raw) if raw else None

        return cls(
            health=int(data["health"]),
            level=int(data.get("level", 1)),
            experience=int(data.get("experience", 0)),
            attributes=Attributes(
                strength=int(attrs.get("strength", 1)),
                dexterity=int(attrs.get("dexterity", 1)),
                intelligence=int(attrs.get("intelligence", 1)),
            ),
            equipment=Equipment(
                weapon=_slot("weapon"),
                armor=_slot("armor"),
                accessory=_slot("accessory"),
            ),
            inventory=tuple(Item.from_dict(i) for i in data.get("inventory") or []),
            x=int(position.get("x", 0)),
            y=int(position.get("y", 0)),
            inventory_capacity=int(
                data.get("inventory_capacity", DEFAULT_INVENTORY_CAPACITY)
            ),
        )


def apply_level_up(character: CharacterSnapshot) -> tuple[CharacterSnapshot, bool]:
    """레벨업 판정 (턴당 최대 1회).

    임계값 = level * EXP_PER_LEVEL. 넘으면 레벨 +1, 초과 경험치 이월,
    최대 HP 상승 후 완전 회복, 능력치 일괄 상승.
    이월된 경험치가 다음 임계값을 넘더라도 다음 턴에 처리한다.
    """
    threshold = character.exp_to_next_level
    if character.experience < threshold:
        return character, False

    leveled = replace(
        character,
        level=character.level + 1,
        experience=character.experience - threshold,
        attributes=character.attributes.raised(LEVEL_UP_ATTRIBUTE_BONUS),
        health=0,
    )
    leveled = replace(leveled, health=leveled.max_health)
    logger.info(
        "Level up: %d -> %d (carry %d exp)",
        character.level,
        leveled.level,
        leveled.experience,
    )
    return leveled, True
