"""EventBus 테스트"""

from src.core.event_bus import MAX_DEPTH, EventBus, GameEvent


class TestSubscribeEmit:
    def test_basic_emit(self):
        bus = EventBus()
        received = []
        bus.subscribe("turn_resolved", lambda e: received.append(e))
        bus.emit(GameEvent(event_type="turn_resolved", data={"x": 1}, source="test"))
        assert len(received) == 1
        assert received[0].data["x"] == 1

    def test_multiple_handlers(self):
        bus = EventBus()
        results = []
        bus.subscribe("evt", lambda e: results.append("a"))
        bus.subscribe("evt", lambda e: results.append("b"))
        bus.emit(GameEvent(event_type="evt", data={}, source="test"))
        assert results == ["a", "b"]

    def test_no_handlers(self):
        """구독자 없는 이벤트 발행 — 에러 없이 무시"""
        bus = EventBus()
        bus.emit(GameEvent(event_type="no_one_listens", data={}, source="test"))

    def test_unsubscribe(self):
        bus = EventBus()
        received = []
        handler = lambda e: received.append(e)  # noqa: E731
        bus.subscribe("evt", handler)
        bus.unsubscribe("evt", handler)
        bus.emit(GameEvent(event_type="evt", data={}, source="test"))
        assert len(received) == 0

    def test_unsubscribe_nonexistent(self):
        """미등록 핸들러 해제 — 경고만, 에러 없음"""
        bus = EventBus()
        bus.unsubscribe("evt", lambda e: None)

    def test_handler_count_and_clear(self):
        bus = EventBus()
        bus.subscribe("a", lambda e: None)
        bus.subscribe("b", lambda e: None)
        assert bus.handler_count == 2
        bus.clear()
        assert bus.handler_count == 0


class TestDepthLimit:
    def test_max_depth_prevents_infinite_loop(self):
        bus = EventBus()
        call_count = 0

        def recursive_handler(event: GameEvent):
            nonlocal call_count
            call_count += 1
            bus.emit(GameEvent(event_type="chain", data={}, source="handler"))

        bus.subscribe("chain", recursive_handler)
        bus.emit(GameEvent(event_type="chain", data={}, source="origin"))

        # MAX_DEPTH(5)까지만 전파
        assert call_count == MAX_DEPTH


class TestErrorIsolation:
    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        results = []

        def broken(event: GameEvent):
            raise RuntimeError("boom")

        bus.subscribe("evt", broken)
        bus.subscribe("evt", lambda e: results.append("ok"))
        bus.emit(GameEvent(event_type="evt", data={}, source="test"))
        assert results == ["ok"]
