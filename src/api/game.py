"""Game API endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.api.schemas import (
    ActRequest,
    ActResponse,
    CharacterSchema,
    ErrorResponse,
    OutcomeInfo,
    RecipeInfo,
    TerrainInfo,
    TerrainResponse,
)
from src.core.character import CharacterSnapshot
from src.core.errors import ConfigurationError, InvalidIntentError, InvalidSnapshotError
from src.core.game_data import GameData
from src.core.logging import get_logger
from src.core.terrain import describe, is_landmark
from src.core.turn_engine import Outcome, parse_intent
from src.services.turn_service import TurnService

logger = get_logger(__name__)

router = APIRouter(prefix="/game", tags=["game"])


def get_turn_service(request: Request) -> TurnService:
    """TurnService 인스턴스 반환 (의존성 주입)"""
    service: TurnService = request.app.state.turn_service
    return service


def get_game_data(request: Request) -> GameData:
    """정적 테이블 반환 (의존성 주입)"""
    data: GameData = request.app.state.game_data
    return data


def _to_snapshot(schema: CharacterSchema) -> CharacterSnapshot:
    """요청 스키마 → 도메인 스냅샷. 불변식 위반은 422."""
    try:
        return CharacterSnapshot.from_dict(schema.model_dump(mode="json"))
    except (InvalidSnapshotError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e))


def _build_response(outcome: Outcome) -> ActResponse:
    """Outcome → ActResponse"""
    return ActResponse(
        success=outcome.success,
        action=outcome.action,
        message=outcome.reason or "ok",
        character=CharacterSchema.model_validate(outcome.character.to_dict()),
        outcome=OutcomeInfo.model_validate(outcome.to_dict()),
    )


@router.post(
    "/act",
    response_model=ActResponse,
    responses={422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def act(
    request: ActRequest,
    service: TurnService = Depends(get_turn_service),
) -> ActResponse:
    """
    턴 1회 해결

    스냅샷과 의도를 받아 새 스냅샷과 결과 기록을 돌려준다.
    서버는 캐릭터 상태를 보관하지 않는다.
    """
    character = _to_snapshot(request.character)
    try:
        intent = parse_intent(request.intent)
        outcome = service.act(character, intent, seed=request.seed)
    except InvalidIntentError as e:
        logger.info("Rejected intent %s: %s", request.intent, e)
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigurationError as e:
        logger.error("Configuration error while resolving turn: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    return _build_response(outcome)


@router.get("/terrain", response_model=TerrainResponse)
def get_terrain(
    x: int = Query(..., description="X 좌표"),
    y: int = Query(..., description="Y 좌표"),
    data: GameData = Depends(get_game_data),
) -> TerrainResponse:
    """좌표의 지형 판정 조회"""
    profile = describe(x, y, data)
    return TerrainResponse(
        x=x,
        y=y,
        landmark=is_landmark(x, y),
        terrain=TerrainInfo.model_validate(profile.to_dict()),
    )


@router.get("/recipes", response_model=list[RecipeInfo])
def list_recipes(data: GameData = Depends(get_game_data)) -> list[RecipeInfo]:
    """레시피 목록"""
    return [RecipeInfo.model_validate(r.to_dict()) for r in data.recipes]
