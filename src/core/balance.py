"""밸런스 수치 — 순수 Python, 외부 의존 없음

확률과 상수는 전부 여기서 이름을 가진다.
해결 알고리즘은 Balance 인스턴스를 주입받아 사용한다.
"""

from dataclasses import dataclass

# === 탐험 확률 ===
ENCOUNTER_CHANCE = 0.30  # 일반 지형 조우
GATHER_CHANCE = 0.50  # 조우가 아닐 때 채집 (누적 0.30~0.80)

# === 전리품 ===
LOOT_DROP_CHANCE = 0.40
TIER_BUMP_CHANCE = 0.20
TIER_WIDTH = 5  # 레벨 5당 1티어
RARE_THRESHOLD = 80.0
EPIC_THRESHOLD = 95.0

# === 전투 ===
MAX_COMBAT_ROUNDS = 10
BASE_CRIT_RATE = 0.05
BASE_DODGE_RATE = 0.05
CRIT_MULTIPLIER = 2
DAMAGE_VARIANCE = (0.9, 1.1)
ATTACK_PER_STRENGTH = 2
DEFENSE_PER_DEXTERITY = 0.5
ENEMY_HP_PER_DANGER = 2
ENEMY_HP_PER_LEVEL = 5
ENEMY_ATTACK_PER_DANGER = 1.0
ENEMY_ATTACK_PER_LEVEL = 1.0
EXP_PER_ENEMY_ATTACK = 2

# === 회복 ===
REST_HEAL_AMOUNT = 30

# === 성장 (Balance 밖, 고정) ===
BASE_MAX_HEALTH = 100
HEALTH_PER_LEVEL = 10
EXP_PER_LEVEL = 100  # 임계값 = level * EXP_PER_LEVEL
LEVEL_UP_ATTRIBUTE_BONUS = 1

DEFAULT_INVENTORY_CAPACITY = 20


@dataclass(frozen=True)
class Balance:
    """턴 해결에 쓰이는 조정 가능한 수치 묶음"""

    encounter_chance: float = ENCOUNTER_CHANCE
    gather_chance: float = GATHER_CHANCE

    loot_drop_chance: float = LOOT_DROP_CHANCE
    tier_bump_chance: float = TIER_BUMP_CHANCE
    tier_width: int = TIER_WIDTH
    rare_threshold: float = RARE_THRESHOLD
    epic_threshold: float = EPIC_THRESHOLD

    max_combat_rounds: int = MAX_COMBAT_ROUNDS
    base_crit_rate: float = BASE_CRIT_RATE
    base_dodge_rate: float = BASE_DODGE_RATE
    crit_multiplier: int = CRIT_MULTIPLIER
    damage_variance: tuple[float, float] = DAMAGE_VARIANCE
    attack_per_strength: int = ATTACK_PER_STRENGTH
    defense_per_dexterity: float = DEFENSE_PER_DEXTERITY
    enemy_hp_per_danger: int = ENEMY_HP_PER_DANGER
    enemy_hp_per_level: int = ENEMY_HP_PER_LEVEL
    enemy_attack_per_danger: float = ENEMY_ATTACK_PER_DANGER
    enemy_attack_per_level: float = ENEMY_ATTACK_PER_LEVEL
    exp_per_enemy_attack: int = EXP_PER_ENEMY_ATTACK

    rest_heal_amount: int = REST_HEAL_AMOUNT

    def __post_init__(self) -> None:
        for name in (
            "encounter_chance",
            "gather_chance",
            "loot_drop_chance",
            "tier_bump_chance",
        ):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")
        if self.encounter_chance + self.gather_chance > 1.0:
            raise ValueError("encounter_chance + gather_chance must not exceed 1")
        if self.max_combat_rounds < 1:
            raise ValueError("max_combat_rounds must be >= 1")
        if self.tier_width < 1:
            raise ValueError("tier_width must be >= 1")


DEFAULT_BALANCE = Balance()
