"""
Survival Engine - Loot Generator
================================
레벨/희귀도 보너스 기반 장비 1개 생성

[절차]
1. 무기/방어구 동전 던지기
2. 레벨 티어 테이블에서 원형 선택 (일정 확률로 한 티어 상승)
3. 원형의 1차 스탯(atk/def) 시드
4. 희귀도 점수 = uniform(0, 100) + 보너스
   - > 80: rare, 접두사 1개
   - > 95: epic, 접미사 1개 추가 (접두사도 함께 받음)
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Optional

from src.core.balance import DEFAULT_BALANCE, Balance
from src.core.logging import get_logger

from .models import (
    INTEGER_STATS,
    Affix,
    Item,
    ItemCategory,
    ItemTemplate,
    Rarity,
    StatValue,
)

if TYPE_CHECKING:
    from src.core.game_data import GameData

logger = get_logger(__name__)

# 비율 스탯 반올림 자릿수
_RATE_PRECISION = 4


def _add_stat(stats: dict[str, StatValue], key: str, amount: float) -> None:
    current = stats.get(key, 0)
    if key in INTEGER_STATS:
        stats[key] = int(round(current + amount))
    else:
        stats[key] = round(current + amount, _RATE_PRECISION)


def apply_affix(stats: dict[str, StatValue], affix: Affix, primary_stat: str) -> None:
    """접사 적용 (in-place). 1차 스탯은 곱연산, 나머지는 합연산."""
    if affix.is_multiplicative:
        base = stats.get(primary_stat, 0)
        stats[primary_stat] = max(1, int(round(base * affix.magnitude)))
    else:
        _add_stat(stats, affix.stat, affix.magnitude)


class LootGenerator:
    """
    전리품 생성기

    테이블과 밸런스 수치는 생성 시 고정되고,
    난수원은 호출마다 주입할 수 있다 (기본: random 모듈).
    """

    def __init__(self, data: "GameData", balance: Balance = DEFAULT_BALANCE):
        self._data = data
        self._balance = balance

    def pick_template(
        self, category: ItemCategory, level: int, rng: random.Random
    ) -> ItemTemplate:
        """레벨 티어 선택. level // tier_width, 범위 밖이면 마지막 티어."""
        tiers = self._data.templates(category)
        index = min(max(0, level) // self._balance.tier_width, len(tiers) - 1)
        if rng.random() < self._balance.tier_bump_chance:
            index = min(index + 1, len(tiers) - 1)
        return tiers[index]

    def roll_rarity_score(self, rarity_bonus: float, rng: random.Random) -> float:
        return rng.uniform(0, 100) + rarity_bonus

    def generate(
        self,
        level: int,
        rarity_bonus: float = 0,
        rng: Optional[random.Random] = None,
    ) -> Item:
        rng = rng or random

        category = ItemCategory.WEAPON if rng.random() < 0.5 else ItemCategory.ARMOR
        template = self.pick_template(category, level, rng)
        primary = template.primary_stat
        stats: dict[str, StatValue] = {primary: template.primary_value}

        name = template.name
        rarity = Rarity.COMMON
        score = self.roll_rarity_score(rarity_bonus, rng)

        if score > self._balance.rare_threshold:
            rarity = Rarity.RARE
            prefix = rng.choice(self._data.prefixes)
            apply_affix(stats, prefix, primary)
            name = f"{prefix.name} {name}"

        if score > self._balance.epic_threshold:
            rarity = Rarity.EPIC
            suffix = rng.choice(self._data.suffixes)
            apply_affix(stats, suffix, primary)
            name = f"{name} {suffix.name}"

        item = Item(name=name, category=category, stats=stats, rarity=rarity)
        logger.debug("Generated %s (%s, score=%.1f)", item.name, rarity.value, score)
        return item
