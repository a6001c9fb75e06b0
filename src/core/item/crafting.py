"""제작 판정 — 재료 매칭 + 인벤토리 변경

재료가 하나라도 부족하면 아무것도 바꾸지 않고 실패를 반환한다.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence

from .inventory import find_matches, remove_indices
from .models import Item

if TYPE_CHECKING:
    from src.core.game_data import GameData

logger = logging.getLogger(__name__)


class CraftFailure(str, Enum):
    UNKNOWN_RECIPE = "unknown_recipe"
    MISSING_MATERIAL = "missing_material"


@dataclass(frozen=True)
class CraftResult:
    """제작 결과"""

    success: bool
    inventory: tuple[Item, ...]  # 실패 시 입력과 동일
    crafted: Optional[Item] = None
    consumed_materials: tuple[Item, ...] = ()
    auto_consume: bool = False
    failure: Optional[CraftFailure] = None
    reason: Optional[str] = None
    removed_indices: tuple[int, ...] = ()


def try_craft(inventory: Sequence[Item], recipe_name: str, data: "GameData") -> CraftResult:
    """레시피 제작 시도.

    1. 레시피 조회 — 없으면 UNKNOWN_RECIPE
    2. 재료별로 이름이 정확히 같은 슬롯을 필요 수량만큼 예약
    3. 하나라도 모자라면 MISSING_MATERIAL, 변경 없음
    4. 예약 슬롯을 큰 인덱스부터 제거하고 결과물을 끝에 추가
    """
    original = tuple(inventory)
    recipe = data.recipe(recipe_name)
    if recipe is None:
        return CraftResult(
            success=False,
            inventory=original,
            failure=CraftFailure.UNKNOWN_RECIPE,
            reason=f"unknown recipe: {recipe_name}",
        )

    reserved: list[int] = []
    for material, count in recipe.materials.items():
        matches = find_matches(original, material, count, exclude=reserved)
        if len(matches) < count:
            logger.debug(
                "Craft %s: %s %d/%d", recipe_name, material, len(matches), count
            )
            return CraftResult(
                success=False,
                inventory=original,
                failure=CraftFailure.MISSING_MATERIAL,
                reason=f"missing material: {material}",
            )
        reserved.extend(matches)

    consumed = tuple(original[idx] for idx in sorted(reserved))
    crafted = recipe.build_item()
    new_inventory = remove_indices(original, reserved) + (crafted,)

    logger.info("Crafted %s from %d materials", crafted.name, len(consumed))
    return CraftResult(
        success=True,
        inventory=new_inventory,
        crafted=crafted,
        consumed_materials=consumed,
        auto_consume=recipe.auto_consume,
        removed_indices=tuple(sorted(reserved, reverse=True)),
    )
