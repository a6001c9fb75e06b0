"""이벤트 유형 상수

턴 해결 후 서비스 계층이 발행한다.
구독자는 서술 렌더러, 저장소 어댑터 등 엔진 밖의 협력자다.
"""


class EventTypes:
    """이벤트 유형 문자열 상수"""

    # turn
    TURN_RESOLVED = "turn_resolved"

    # combat
    COMBAT_RESOLVED = "combat_resolved"

    # item
    ITEM_CRAFTED = "item_crafted"
    CRAFT_FAILED = "craft_failed"

    # progression
    LEVEL_UP = "level_up"
