"""턴 Service — TurnEngine 호출 + EventBus 발행

Service → Core 허용. 엔진은 버스를 모르고, 발행은 여기서만 한다.
"""

import random
from typing import Optional

from src.core.character import CharacterSnapshot
from src.core.event_bus import EventBus, GameEvent
from src.core.event_types import EventTypes
from src.core.logging import get_logger
from src.core.turn_engine import Intent, Outcome, TurnEngine

logger = get_logger(__name__)

SOURCE = "turn_service"


class TurnService:
    """턴 해결 + 결과 이벤트 발행"""

    def __init__(self, engine: TurnEngine, event_bus: EventBus):
        self._engine = engine
        self._bus = event_bus

    @property
    def engine(self) -> TurnEngine:
        return self._engine

    def act(
        self,
        character: CharacterSnapshot,
        intent: Intent,
        seed: Optional[int] = None,
    ) -> Outcome:
        """턴 1회 해결.

        seed가 주어지면 그 턴 전용 난수원을 만든다 (재현용).
        InvalidIntentError / ConfigurationError는 그대로 전파한다.
        """
        rng = random.Random(seed) if seed is not None else None
        outcome = self._engine.apply(character, intent, rng)
        self._publish(outcome)
        return outcome

    def _publish(self, outcome: Outcome) -> None:
        after = outcome.character
        self._bus.emit(
            GameEvent(
                event_type=EventTypes.TURN_RESOLVED,
                data={
                    "action": outcome.action,
                    "success": outcome.success,
                    "x": after.x,
                    "y": after.y,
                    "health": after.health,
                    "health_change": outcome.health_change,
                },
                source=SOURCE,
            )
        )

        if outcome.encounter is not None:
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.COMBAT_RESOLVED,
                    data={
                        "enemy": outcome.encounter.enemy,
                        "terrain": outcome.encounter.terrain.kind.value,
                        "win": outcome.encounter.win,
                        "rounds": outcome.encounter.rounds,
                        "loot": outcome.encounter.loot.name
                        if outcome.encounter.loot
                        else None,
                    },
                    source=SOURCE,
                )
            )

        if outcome.action == "craft":
            if outcome.success:
                self._bus.emit(
                    GameEvent(
                        event_type=EventTypes.ITEM_CRAFTED,
                        data={
                            "item": outcome.items_gained[0].name,
                            "consumed": [i.name for i in outcome.items_lost],
                            "auto_consumed": bool(outcome.items_consumed),
                        },
                        source=SOURCE,
                    )
                )
            else:
                self._bus.emit(
                    GameEvent(
                        event_type=EventTypes.CRAFT_FAILED,
                        data={
                            "failure": outcome.failure.value if outcome.failure else None,
                            "reason": outcome.reason,
                        },
                        source=SOURCE,
                    )
                )

        if outcome.level_up:
            logger.info("Level up to %d", after.level)
            self._bus.emit(
                GameEvent(
                    event_type=EventTypes.LEVEL_UP,
                    data={"level": after.level, "max_health": after.max_health},
                    source=SOURCE,
                )
            )
