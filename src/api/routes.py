"""HTTP routes for the Kred API."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.api.models import (
    BureaucracyOptionsRequest,
    BureaucracyOptionsResponse,
    ChallengeDecisionRequest,
    CorrectTileRequest,
    CreateGameRequest,
    DeleteGameRequest,
    EndBureaucracyTurnRequest,
    GameResponse,
    GetGameRequest,
    HandResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    PlayerActionRequest,
    PlayTileRequest,
    PurchaseRequest,
    ReceiverDecisionRequest,
    TakeAdvantageRequest,
    TileResponse,
    ViewTileRequest,
)
from src.core.shared_types import MoveType
from src.db.database import get_db
from src.db.sql_repository import SQLGameRepository
from src.services.kred_service import KredService

router = APIRouter(prefix="/games", tags=["games"])


def get_service(db: Annotated[Session, Depends(get_db)]) -> KredService:
    return KredService(SQLGameRepository(db))


ServiceDep = Annotated[KredService, Depends(get_service)]


@router.post("", response_model=GameResponse, status_code=status.HTTP_201_CREATED)
def create_game(request: CreateGameRequest, service: ServiceDep) -> GameResponse:
    return service.create_new_game(request)


@router.get("/{game_id}", response_model=GameResponse)
def get_game(game_id: UUID, service: ServiceDep) -> GameResponse:
    return service.get_game_state(GetGameRequest(game_id=game_id))


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(game_id: UUID, service: ServiceDep) -> None:
    service.delete_game(DeleteGameRequest(game_id=game_id))


@router.get("/{game_id}/players/{player_id}/hand", response_model=HandResponse)
def get_hand(game_id: UUID, player_id: int, service: ServiceDep) -> HandResponse:
    return service.get_hand(PlayerActionRequest(game_id=game_id, player_id=player_id))


@router.get("/{game_id}/players/{player_id}/legal-moves", response_model=LegalMovesResponse)
def get_legal_moves(
    game_id: UUID, player_id: int, service: ServiceDep, move_type: MoveType | None = None
) -> LegalMovesResponse:
    request = LegalMovesRequest(game_id=game_id, player_id=player_id, move_type=move_type)
    return service.legal_moves(request)


@router.get("/{game_id}/players/{player_id}/played-tile", response_model=TileResponse)
def view_tile(game_id: UUID, player_id: int, service: ServiceDep) -> TileResponse:
    return service.view_tile(ViewTileRequest(game_id=game_id, player_id=player_id))


@router.get(
    "/{game_id}/players/{player_id}/bureaucracy-options",
    response_model=BureaucracyOptionsResponse,
)
def get_bureaucracy_options(
    game_id: UUID, player_id: int, service: ServiceDep
) -> BureaucracyOptionsResponse:
    request = BureaucracyOptionsRequest(game_id=game_id, player_id=player_id)
    return service.bureaucracy_options(request)


# --- ACTIONS: the request body names the game and the acting player ---
@router.post("/actions/play-tile", response_model=GameResponse)
def play_tile(request: PlayTileRequest, service: ServiceDep) -> GameResponse:
    return service.play_tile(request)


@router.post("/actions/receiver-decision", response_model=GameResponse)
def receiver_decision(request: ReceiverDecisionRequest, service: ServiceDep) -> GameResponse:
    return service.receiver_decision(request)


@router.post("/actions/challenger-decision", response_model=GameResponse)
def challenger_decision(request: ChallengeDecisionRequest, service: ServiceDep) -> GameResponse:
    return service.challenger_decision(request)


@router.post("/actions/take-advantage", response_model=GameResponse)
def take_advantage(request: TakeAdvantageRequest, service: ServiceDep) -> GameResponse:
    return service.take_advantage(request)


@router.post("/actions/correct-tile", response_model=GameResponse)
def correct_tile(request: CorrectTileRequest, service: ServiceDep) -> GameResponse:
    return service.correct_tile(request)


@router.post("/actions/purchase", response_model=GameResponse)
def purchase(request: PurchaseRequest, service: ServiceDep) -> GameResponse:
    return service.purchase(request)


@router.post("/actions/end-bureaucracy-turn", response_model=GameResponse)
def end_bureaucracy_turn(request: EndBureaucracyTurnRequest, service: ServiceDep) -> GameResponse:
    return service.end_bureaucracy_turn(request)
