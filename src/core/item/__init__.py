"""아이템 시스템 Core — 순수 Python, DB 무관"""

from .models import (
    Affix,
    Item,
    ItemCategory,
    ItemTemplate,
    Rarity,
    Recipe,
    StatKey,
    RECOGNIZED_STATS,
)
from .crafting import CraftFailure, CraftResult, try_craft

__all__ = [
    "Affix",
    "Item",
    "ItemCategory",
    "ItemTemplate",
    "Rarity",
    "Recipe",
    "StatKey",
    "RECOGNIZED_STATS",
    "CraftFailure",
    "CraftResult",
    "try_craft",
]
