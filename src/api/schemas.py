"""API request/response schemas."""

from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

from src.core.item.models import RECOGNIZED_STATS, ItemCategory, Rarity


# === Shared Schemas ===


class ItemSchema(BaseModel):
    """아이템"""

    name: str = Field(..., min_length=1)
    category: ItemCategory
    stats: dict[str, Union[int, float]] = {}
    rarity: Rarity = Rarity.COMMON
    heal: int = Field(0, ge=0)

    @field_validator("stats")
    @classmethod
    def _known_stats(cls, value: dict[str, Union[int, float]]) -> dict:
        unknown = set(value) - RECOGNIZED_STATS
        if unknown:
            raise ValueError(f"unrecognized stat keys: {sorted(unknown)}")
        return value


class AttributesSchema(BaseModel):
    """능력치"""

    strength: int = Field(1, ge=0)
    dexterity: int = Field(1, ge=0)
    intelligence: int = Field(1, ge=0)


class EquipmentSchema(BaseModel):
    """장비 슬롯"""

    weapon: Optional[ItemSchema] = None
    armor: Optional[ItemSchema] = None
    accessory: Optional[ItemSchema] = None


class PositionSchema(BaseModel):
    x: int = 0
    y: int = 0


class CharacterSchema(BaseModel):
    """캐릭터 스냅샷 (요청/응답 공용)"""

    health: int = Field(..., ge=0)
    max_health: Optional[int] = Field(None, description="응답 전용 파생값, 요청 시 무시")
    level: int = Field(1, ge=1)
    experience: int = Field(0, ge=0)
    attributes: AttributesSchema = AttributesSchema()
    equipment: EquipmentSchema = EquipmentSchema()
    inventory: list[ItemSchema] = []
    inventory_capacity: int = Field(20, ge=0)
    position: PositionSchema = PositionSchema()


# === Request Schemas ===


class ActRequest(BaseModel):
    """턴 해결 요청"""

    character: CharacterSchema
    intent: dict[str, Any] = Field(
        ...,
        description='의도: {"action": "move", "direction": "ne"} | '
        '{"action": "rest"} | {"action": "craft", "recipe": "Stone Axe"}',
    )
    seed: Optional[int] = Field(None, description="재현용 난수 시드")


# === Response Schemas ===


class TerrainInfo(BaseModel):
    """지형 정보"""

    kind: str
    display_name: str
    danger: int
    enemies: list[str] = []
    resources: list[str] = []
    always_hostile: bool = False
    loot_chance_bonus: float = 0.0
    rarity_bonus: float = 0.0


class EncounterInfo(BaseModel):
    """전투 결과"""

    enemy: str
    terrain: str
    win: bool
    hp_remaining: int
    rounds: int
    exp_gain: int
    loot: Optional[ItemSchema] = None
    enemy_hp: int
    enemy_attack: float
    crits: int = 0
    dodges: int = 0


class OutcomeInfo(BaseModel):
    """턴 결과 기록"""

    action: str
    success: bool
    health_change: int = 0
    experience_gained: int = 0
    level_up: bool = False
    direction: Optional[str] = None
    position: PositionSchema
    terrain: Optional[TerrainInfo] = None
    exploration: Optional[str] = None
    encounter: Optional[EncounterInfo] = None
    win: Optional[bool] = None
    items_gained: list[ItemSchema] = []
    items_lost: list[ItemSchema] = []
    items_consumed: list[ItemSchema] = []
    items_discarded: list[ItemSchema] = []
    failure: Optional[str] = None
    reason: Optional[str] = None


class ActResponse(BaseModel):
    """턴 해결 응답"""

    success: bool
    action: str
    message: str
    character: CharacterSchema
    outcome: OutcomeInfo


class TerrainResponse(BaseModel):
    """좌표 지형 조회 응답"""

    x: int
    y: int
    landmark: bool
    terrain: TerrainInfo


class RecipeInfo(BaseModel):
    """레시피"""

    name: str
    materials: dict[str, int]
    category: str
    stats: dict[str, Union[int, float]] = {}
    heal: int = 0
    auto_consume: bool = False


class ErrorResponse(BaseModel):
    """에러 응답"""

    success: bool = False
    error: str
    detail: Optional[str] = None
