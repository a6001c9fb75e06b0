"""엔진 예외 계층

호출자 오류(InvalidIntent, InvalidSnapshot)는 상태 변경 전에 거부된다.
ConfigurationError는 정적 테이블 결함이므로 기본값으로 대체하지 않고 그대로 올린다.
제작 전제조건 실패(미지 레시피, 재료 부족)는 예외가 아니라 Outcome에 담긴다.
"""


class EngineError(Exception):
    """엔진 예외 기반 클래스"""


class InvalidIntentError(EngineError, ValueError):
    """형식이 잘못되었거나 알 수 없는 의도"""


class InvalidSnapshotError(EngineError, ValueError):
    """캐릭터 스냅샷 불변식 위반 (HP 범위, 인벤토리 용량 등)"""


class ConfigurationError(EngineError):
    """정적 테이블에 참조된 지형/적/레시피가 없거나 형식 오류"""
