"""Combat Resolver 테스트"""

from __future__ import annotations

import random
from dataclasses import replace

import pytest

from src.core.balance import MAX_COMBAT_ROUNDS, Balance
from src.core.character import Attributes, CharacterSnapshot, Equipment
from src.core.combat import CombatResolver, derive_combat_stats
from src.core.errors import ConfigurationError
from src.core.game_data import GameData
from src.core.item.loot import LootGenerator
from src.core.item.models import Item, ItemCategory


@pytest.fixture()
def resolver(game_data: GameData) -> CombatResolver:
    balance = Balance()
    return CombatResolver(game_data, LootGenerator(game_data, balance), balance)


def _weapon(**stats) -> Item:
    return Item(name="Test Blade", category=ItemCategory.WEAPON, stats=stats)


def _armor(**stats) -> Item:
    return Item(name="Test Plate", category=ItemCategory.ARMOR, stats=stats)


class TestDerivedStats:
    def test_bare_hands(self, hero: CharacterSnapshot):
        stats = derive_combat_stats(hero)
        assert stats.attack == 10
        assert stats.defense == 2.5
        assert stats.crit_rate == pytest.approx(0.05)
        assert stats.dodge_rate == pytest.approx(0.05)
        assert stats.lifesteal == 0

    def test_gear_contributes(self, hero: CharacterSnapshot):
        equipped = replace(
            hero,
            equipment=Equipment(
                weapon=_weapon(atk=8, crit_rate=0.1, lifesteal=0.05, str=2),
                armor=_armor(**{"def": 5, "dodge_rate": 0.04}),
                accessory=Item(
                    name="Charm", category=ItemCategory.TOOL, stats={"atk": 1, "def": 1}
                ),
            ),
        )
        stats = derive_combat_stats(equipped)
        # (5 + 2) * 2 + 8 + 1
        assert stats.attack == 23
        assert stats.defense == 2.5 + 5 + 1
        assert stats.crit_rate == pytest.approx(0.15)
        assert stats.dodge_rate == pytest.approx(0.09)
        assert stats.lifesteal == pytest.approx(0.05)


class TestEnemyStats:
    def test_linear_in_danger_and_level(self, resolver: CombatResolver):
        enemy = resolver.enemy_stats("Wild Boar", danger=10, level=1)
        assert enemy.hp == 25
        assert enemy.attack == 11


class TestResolve:
    def test_basic_fight_is_fully_determined(
        self, resolver: CombatResolver, hero: CharacterSnapshot, fixed_rng
    ):
        """str 5, dex 5, 맨손 vs 위험도 10 적: 라운드당 10 피해, 8 피격"""
        result = resolver.resolve(hero, "Wild Boar", fixed_rng(0.99))
        assert result.win is True
        assert result.rounds == 3
        assert result.hp_remaining == 100 - 8 * 2
        assert result.exp_gain == 22
        assert result.loot is None
        assert result.crits == 0
        assert result.dodges == 0
        assert result.terrain.danger == 10

    def test_crit_and_dodge(self, resolver: CombatResolver, hero: CharacterSnapshot, fixed_rng):
        # 0.0 → 매번 치명타/회피, 드롭 성공, 무기, 티어 상승
        result = resolver.resolve(hero, "Wild Boar", fixed_rng(0.0))
        assert result.win is True
        assert result.rounds == 2
        assert result.crits == 2
        assert result.dodges == 1
        assert result.hp_remaining == 100
        assert result.loot is not None
        assert result.loot.name == "Iron Sword"
        assert result.loot.stats == {"atk": 8}

    def test_round_cap_is_a_loss(self, resolver: CombatResolver, fixed_rng):
        """상한 도달 시 양쪽 생존 → 패배"""
        tank = CharacterSnapshot(
            health=100,
            attributes=Attributes(strength=0, dexterity=0, intelligence=0),
            equipment=Equipment(armor=_armor(**{"def": 100})),
        )
        result = resolver.resolve(tank, "Wild Boar", fixed_rng(0.99))
        assert result.win is False
        assert result.rounds == MAX_COMBAT_ROUNDS
        assert result.hp_remaining == 90
        assert result.exp_gain == 0
        assert result.loot is None

    def test_death_floors_hp_at_zero(self, resolver: CombatResolver, fixed_rng):
        weak = CharacterSnapshot(
            health=5, attributes=Attributes(strength=0, dexterity=0, intelligence=0)
        )
        result = resolver.resolve(weak, "Rock Giant", fixed_rng(0.99))
        assert result.win is False
        assert result.rounds == 1
        assert result.hp_remaining == 0
        assert result.exp_gain == 0
        assert result.loot is None

    def test_lifesteal_heals_each_hit(
        self, resolver: CombatResolver, hero: CharacterSnapshot, fixed_rng
    ):
        vampire = replace(hero, equipment=Equipment(weapon=_weapon(atk=0, lifesteal=0.5)))
        result = resolver.resolve(vampire, "Wild Boar", fixed_rng(0.99))
        assert result.win is True
        assert result.hp_remaining == 99

    def test_overheal_clamped_on_report(self, resolver: CombatResolver, fixed_rng):
        brute = CharacterSnapshot(
            health=100,
            attributes=Attributes(strength=50, dexterity=0, intelligence=0),
            equipment=Equipment(weapon=_weapon(lifesteal=1.0)),
        )
        result = resolver.resolve(brute, "Wild Boar", fixed_rng(0.99))
        assert result.rounds == 1
        assert result.hp_remaining == brute.max_health

    def test_unknown_enemy_is_configuration_error(
        self, resolver: CombatResolver, hero: CharacterSnapshot
    ):
        with pytest.raises(ConfigurationError):
            resolver.resolve(hero, "Space Dragon", random.Random(1))


class TestBoundedness:
    def test_rounds_and_hp_bounded(self, resolver: CombatResolver, game_data: GameData):
        enemies = [e for t in game_data.terrains for e in t.enemies]
        rng = random.Random(7)
        for seed in range(300):
            character = CharacterSnapshot(
                health=rng.randint(1, 100),
                level=1,
                attributes=Attributes(
                    strength=rng.randint(0, 12),
                    dexterity=rng.randint(0, 12),
                    intelligence=1,
                ),
            )
            result = resolver.resolve(character, rng.choice(enemies), random.Random(seed))
            assert 1 <= result.rounds <= MAX_COMBAT_ROUNDS
            assert 0 <= result.hp_remaining <= character.max_health
            if not result.win:
                assert result.exp_gain == 0
                assert result.loot is None
            else:
                assert result.hp_remaining > 0
