"""
Survival Engine - Terrain Oracle
================================
좌표 기반 지형 판정

격자를 저장하지 않는다. 같은 좌표는 언제나 같은 지형으로 판정되며,
지형 메타데이터(위험도, 적/자원 목록)는 정적 테이블에서 조회한다.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from src.core.game_data import GameData


class TerrainType(str, Enum):
    """지형 분류"""

    FOREST = "forest"
    MOUNTAIN = "mountain"
    DUNGEON = "dungeon"
    PLAINS = "plains"
    RUINS = "ruins"


# 랜드마크: 두 좌표 모두 0이 아닌 LANDMARK_MODULUS의 배수
LANDMARK_MODULUS = 10
LANDMARK_TERRAIN = TerrainType.DUNGEON

# 해시값 하한 → 지형 (내림차순으로 검사, 어느 것도 넘지 못하면 PLAINS)
TERRAIN_THRESHOLDS: tuple[tuple[float, TerrainType], ...] = (
    (0.8, TerrainType.RUINS),
    (0.6, TerrainType.MOUNTAIN),
    (0.3, TerrainType.FOREST),
)
FALLBACK_TERRAIN = TerrainType.PLAINS

# 해시 계수
_HASH_X = 12.9898
_HASH_Y = 78.233
_HASH_SCALE = 43758.5453

# float 변환 오버플로 방지용 접기 범위
_COORD_FOLD = 2**53


@dataclass(frozen=True)
class TerrainProfile:
    """지형 정적 메타데이터"""

    kind: TerrainType
    display_name: str
    danger: int
    enemies: tuple[str, ...]
    resources: tuple[str, ...]
    always_hostile: bool = False  # 진입 시 항상 전투
    loot_chance_bonus: float = 0.0  # 전리품 드롭 확률 가산
    rarity_bonus: float = 0.0  # 전리품 희귀도 점수 가산

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "display_name": self.display_name,
            "danger": self.danger,
            "enemies": list(self.enemies),
            "resources": list(self.resources),
            "always_hostile": self.always_hostile,
            "loot_chance_bonus": self.loot_chance_bonus,
            "rarity_bonus": self.rarity_bonus,
        }


def _fold(value: int) -> int:
    if -_COORD_FOLD <= value <= _COORD_FOLD:
        return value
    return value % _COORD_FOLD


def coordinate_hash(x: int, y: int) -> float:
    """좌표를 [0, 1) 구간의 값으로 접는다."""
    raw = math.sin(_fold(x) * _HASH_X + _fold(y) * _HASH_Y) * _HASH_SCALE
    return raw - math.floor(raw)


def is_landmark(x: int, y: int) -> bool:
    """랜드마크 좌표 여부"""
    return (
        x != 0
        and y != 0
        and x % LANDMARK_MODULUS == 0
        and y % LANDMARK_MODULUS == 0
    )


def classify(x: int, y: int) -> TerrainType:
    """좌표 → 지형. 순수 함수, 모든 정수 쌍에 대해 정의됨."""
    if is_landmark(x, y):
        return LANDMARK_TERRAIN

    value = coordinate_hash(x, y)
    for floor_value, terrain in TERRAIN_THRESHOLDS:
        if value > floor_value:
            return terrain
    return FALLBACK_TERRAIN


def describe(x: int, y: int, data: "GameData") -> TerrainProfile:
    """좌표의 지형 메타데이터 조회"""
    return data.terrain(classify(x, y))
