"""
Survival Engine - Combat Resolver
=================================
라운드 상한이 있는 1:1 전투 시뮬레이션

[라운드 순서]
1. 캐릭터 선공: 치명타 판정 → 피해(±10% 변동) → 흡혈
2. 적 HP <= 0 이면 즉시 승리 (반격 없음)
3. 적 공격: 회피 판정 → 피해 = max(1, 적 공격력 - 방어력)
4. 어느 한쪽 HP <= 0 또는 라운드 상한 도달 시 종료

상한 도달 시 양쪽 모두 살아 있으면 캐릭터 패배로 처리한다.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Optional

from src.core.balance import DEFAULT_BALANCE, Balance
from src.core.character import CharacterSnapshot
from src.core.game_data import GameData
from src.core.item.loot import LootGenerator
from src.core.item.models import Item
from src.core.logging import get_logger
from src.core.terrain import TerrainProfile

logger = get_logger(__name__)


@dataclass(frozen=True)
class CombatStats:
    """장비 반영 캐릭터 전투 수치"""

    attack: float
    defense: float
    crit_rate: float
    dodge_rate: float
    lifesteal: float


@dataclass(frozen=True)
class EnemyStats:
    name: str
    hp: int
    attack: float


@dataclass(frozen=True)
class CombatResult:
    """전투 결과"""

    enemy: str
    terrain: TerrainProfile
    win: bool
    hp_remaining: int  # [0, max_health]
    rounds: int
    exp_gain: int
    loot: Optional[Item]
    enemy_hp: int
    enemy_attack: float
    crits: int = 0
    dodges: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "enemy": self.enemy,
            "terrain": self.terrain.kind.value,
            "win": self.win,
            "hp_remaining": self.hp_remaining,
            "rounds": self.rounds,
            "exp_gain": self.exp_gain,
            "loot": self.loot.to_dict() if self.loot else None,
            "enemy_hp": self.enemy_hp,
            "enemy_attack": self.enemy_attack,
            "crits": self.crits,
            "dodges": self.dodges,
        }


def derive_combat_stats(
    character: CharacterSnapshot, balance: Balance = DEFAULT_BALANCE
) -> CombatStats:
    """능력치 + 장비 → 전투 수치.

    공격력 = 힘 * 2 + 무기 atk
    방어력 = 민첩 * 0.5 + 방어구 def
    치명타 = 기본 + 무기 crit_rate, 회피 = 기본 + 방어구 dodge_rate
    흡혈 = 무기 lifesteal
    장신구는 모든 항목에 더해진다.
    """
    gear = character.equipment
    weapon_stat = gear.weapon.stat if gear.weapon else _zero_stat
    armor_stat = gear.armor.stat if gear.armor else _zero_stat
    trinket_stat = gear.accessory.stat if gear.accessory else _zero_stat

    return CombatStats(
        attack=character.strength * balance.attack_per_strength
        + weapon_stat("atk")
        + trinket_stat("atk"),
        defense=character.dexterity * balance.defense_per_dexterity
        + armor_stat("def")
        + trinket_stat("def"),
        crit_rate=balance.base_crit_rate
        + weapon_stat("crit_rate")
        + trinket_stat("crit_rate"),
        dodge_rate=balance.base_dodge_rate
        + armor_stat("dodge_rate")
        + trinket_stat("dodge_rate"),
        lifesteal=weapon_stat("lifesteal") + trinket_stat("lifesteal"),
    )


def _zero_stat(key: str) -> int:
    return 0


class CombatResolver:
    """
    전투 해결기

    적 능력치는 적이 속한 지형의 위험도와 캐릭터 레벨에서 선형으로 유도된다.
    """

    def __init__(
        self,
        data: GameData,
        loot: LootGenerator,
        balance: Balance = DEFAULT_BALANCE,
    ):
        self._data = data
        self._loot = loot
        self._balance = balance

    def enemy_stats(self, enemy_name: str, danger: int, level: int) -> EnemyStats:
        b = self._balance
        return EnemyStats(
            name=enemy_name,
            hp=danger * b.enemy_hp_per_danger + level * b.enemy_hp_per_level,
            attack=danger * b.enemy_attack_per_danger + level * b.enemy_attack_per_level,
        )

    def resolve(
        self,
        character: CharacterSnapshot,
        enemy_name: str,
        rng: Optional[random.Random] = None,
    ) -> CombatResult:
        """
        전투 실행

        Args:
            character: 전투 시작 시점의 스냅샷
            enemy_name: 지형 적 목록에 있는 이름 (없으면 ConfigurationError)
            rng: 난수원 (테스트에서 치명타/회피/변동 고정용)

        Returns:
            CombatResult
        """
        rng = rng or random
        b = self._balance

        terrain = self._data.terrain_for_enemy(enemy_name)
        enemy = self.enemy_stats(enemy_name, terrain.danger, character.level)
        stats = derive_combat_stats(character, b)

        player_hp = character.health
        enemy_hp = enemy.hp
        rounds = 0
        crits = 0
        dodges = 0
        enemy_down = False

        while rounds < b.max_combat_rounds:
            rounds += 1

            # 캐릭터 공격
            is_crit = rng.random() < stats.crit_rate
            if is_crit:
                crits += 1
            raw = max(1, stats.attack * (b.crit_multiplier if is_crit else 1))
            damage = max(1, int(raw * rng.uniform(*b.damage_variance)))
            enemy_hp -= damage

            if stats.lifesteal > 0:
                # 루프 안에서는 최대 HP 초과 허용, 보고 시 잘라낸다
                player_hp += int(damage * stats.lifesteal)

            if enemy_hp <= 0:
                enemy_down = True
                break

            # 적 반격
            if rng.random() < stats.dodge_rate:
                dodges += 1
            else:
                player_hp -= max(1, int(enemy.attack - stats.defense))

            if player_hp <= 0:
                break

        win = enemy_down and player_hp > 0
        hp_remaining = character.clamp_health(player_hp)

        exp_gain = 0
        loot: Optional[Item] = None
        if win:
            exp_gain = int(enemy.attack * b.exp_per_enemy_attack)
            drop_chance = b.loot_drop_chance + terrain.loot_chance_bonus
            if rng.random() < drop_chance:
                loot = self._loot.generate(character.level, terrain.rarity_bonus, rng)

        logger.info(
            "Combat vs %s (%s): %s in %d rounds, hp %d -> %d",
            enemy_name,
            terrain.kind.value,
            "win" if win else "loss",
            rounds,
            character.health,
            hp_remaining,
        )

        return CombatResult(
            enemy=enemy_name,
            terrain=terrain,
            win=win,
            hp_remaining=hp_remaining,
            rounds=rounds,
            exp_gain=exp_gain,
            loot=loot,
            enemy_hp=enemy.hp,
            enemy_attack=enemy.attack,
            crits=crits,
            dodges=dodges,
        )
