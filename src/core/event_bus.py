"""EventBus - 턴 결과를 엔진 밖 협력자에게 전달하는 동기식 이벤트 버스

규칙:
- 엔진(core)은 버스를 모른다. 서비스 계층만 발행한다
- 이벤트 데이터는 가벼운 값만 담는다 (스냅샷 전체 금지)
- 전파 깊이 최대 MAX_DEPTH 단계
- 핸들러 예외는 로그로 남기고 다른 핸들러 호출을 계속한다
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from src.core.logging import get_logger

logger = get_logger(__name__)

MAX_DEPTH = 5  # 핸들러 안에서 재발행할 때의 최대 깊이


@dataclass
class GameEvent:
    """이벤트 데이터 컨테이너

    Args:
        event_type: 이벤트 유형 (예: "turn_resolved", "level_up")
        data: 이벤트 데이터 (값 위주)
        source: 발행한 서비스 이름
    """

    event_type: str
    data: Dict[str, Any]
    source: str

    _depth: int = field(default=0, repr=False)


EventHandler = Callable[[GameEvent], None]


class EventBus:
    """동기식 이벤트 버스

    사용 패턴:
        bus = EventBus()
        bus.subscribe("level_up", renderer.handle_level_up)
        bus.emit(GameEvent(event_type="level_up", data={"level": 3}, source="turn_service"))
    """

    def __init__(self) -> None:
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)
        self._current_depth: int = 0

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 등록"""
        self._handlers[event_type].append(handler)
        logger.debug(f"EventBus subscribe: {event_type} → {handler.__qualname__}")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> None:
        """이벤트 구독 해제"""
        try:
            self._handlers[event_type].remove(handler)
        except ValueError:
            logger.warning(
                f"EventBus handler not registered: {event_type} → {handler.__qualname__}"
            )

    def emit(self, event: GameEvent) -> None:
        """이벤트 발행. 등록된 핸들러를 순서대로 동기 호출."""
        if self._current_depth >= MAX_DEPTH:
            logger.warning(
                f"EventBus depth exceeded ({MAX_DEPTH}): "
                f"{event.source}:{event.event_type} dropped"
            )
            return

        event._depth = self._current_depth
        handlers = list(self._handlers.get(event.event_type, []))
        if not handlers:
            logger.debug(f"EventBus: no subscribers for {event.event_type}")
            return

        self._current_depth += 1
        try:
            for handler in handlers:
                try:
                    handler(event)
                except Exception:
                    logger.exception(
                        f"EventBus handler error: {handler.__qualname__} "
                        f"(event={event.event_type})"
                    )
        finally:
            self._current_depth -= 1

    def clear(self) -> None:
        """모든 구독 해제 (테스트용)"""
        self._handlers.clear()
        self._current_depth = 0

    @property
    def handler_count(self) -> int:
        """등록된 총 핸들러 수"""
        return sum(len(h) for h in self._handlers.values())
