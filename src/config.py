"""Application configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.balance import (
    ENCOUNTER_CHANCE,
    GATHER_CHANCE,
    LOOT_DROP_CHANCE,
    REST_HEAL_AMOUNT,
    TIER_BUMP_CHANCE,
    Balance,
)


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # Static content (None = bundled src/data/game_tables.json)
    GAME_DATA_PATH: Optional[str] = None

    # Balance overrides
    ENCOUNTER_CHANCE: float = ENCOUNTER_CHANCE
    GATHER_CHANCE: float = GATHER_CHANCE
    LOOT_DROP_CHANCE: float = LOOT_DROP_CHANCE
    TIER_BUMP_CHANCE: float = TIER_BUMP_CHANCE
    REST_HEAL_AMOUNT: int = REST_HEAL_AMOUNT

    def build_balance(self) -> Balance:
        """환경 변수 오버라이드를 반영한 Balance"""
        return Balance(
            encounter_chance=self.ENCOUNTER_CHANCE,
            gather_chance=self.GATHER_CHANCE,
            loot_drop_chance=self.LOOT_DROP_CHANCE,
            tier_bump_chance=self.TIER_BUMP_CHANCE,
            rest_heal_amount=self.REST_HEAL_AMOUNT,
        )


settings = Settings()
