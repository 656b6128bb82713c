"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.shared_types import AdvantageChoice, MoveType, Status
from src.kred.location import Location
from src.kred.topology import PLAYER_COUNTS

PieceId = str
LocationId = str
TileId = str


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    player_names: list[str]
    seed: Optional[int] = None

    @field_validator("player_names")
    @classmethod
    def validate_player_names(cls, value: list[str]) -> list[str]:
        if len(value) not in PLAYER_COUNTS:
            raise InvalidRequestError(
                f"Kred is played with {', '.join(map(str, PLAYER_COUNTS))} players, got {len(value)} names."
            )
        names = [name.strip() for name in value]
        if any(not name for name in names):
            raise InvalidRequestError("Player names cannot be empty.")
        if len(set(names)) != len(names):
            raise InvalidRequestError("Player names must be unique.")
        return names


class PieceMove(BaseModel):
    """One piece put on a new location"""

    piece_id: PieceId
    to_location: LocationId

    @field_validator("to_location")
    @classmethod
    def validate_location(cls, value: str) -> str:
        if Location.from_id(value) is None:
            raise InvalidRequestError(
                f"Cannot interpret to_location: {value!r} as a location on the board."
            )
        return value

    def as_tuple(self) -> tuple[PieceId, LocationId]:
        return self.piece_id, self.to_location


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class PlayerActionRequest(BaseModel):
    """Any request made by one seated player in one game"""

    game_id: UUID
    player_id: int


class LegalMovesRequest(PlayerActionRequest):
    move_type: Optional[MoveType] = None


class PlayTileRequest(PlayerActionRequest):
    tile_id: TileId
    receiver: int
    moves: list[PieceMove] = []


class ViewTileRequest(PlayerActionRequest):
    pass


class ReceiverDecisionRequest(PlayerActionRequest):
    accept: bool


class ChallengeDecisionRequest(PlayerActionRequest):
    challenge: bool


class TakeAdvantageRequest(PlayerActionRequest):
    choice: AdvantageChoice
    item_id: Optional[str] = None
    paid_tiles: list[TileId] = []
    moves: list[PieceMove] = []
    promoted_piece: Optional[PieceId] = None


class CorrectTileRequest(PlayerActionRequest):
    moves: list[PieceMove] = []


class BureaucracyOptionsRequest(PlayerActionRequest):
    pass


class PurchaseRequest(PlayerActionRequest):
    item_id: str
    moves: list[PieceMove] = []
    promoted_piece: Optional[PieceId] = None


class EndBureaucracyTurnRequest(PlayerActionRequest):
    pass


# --- RESPONSE MODELS ---
class BankedTileResponse(BaseModel):
    tile_id: Optional[TileId]  # hidden when face down
    face_up: bool


class PlayerResponse(BaseModel):
    player_id: int
    name: str
    credibility: int
    hand_size: int
    bank: list[BankedTileResponse]


class GameResponse(BaseModel):
    game_id: UUID
    player_count: int
    status: Status
    current_player: int
    awaiting_player: Optional[int]
    pieces: dict[PieceId, str]
    players: list[PlayerResponse]
    move_history: list[str]
    winners: list[int]


class MoveResponse(BaseModel):
    piece_id: PieceId
    from_location: LocationId
    to_location: LocationId
    move_type: Optional[MoveType]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    player_id: int
    legal_moves: list[MoveResponse]


class HandResponse(BaseModel):
    game_id: UUID
    player_id: int
    hand: list[TileId]
    currency: int


class TileResponse(BaseModel):
    game_id: UUID
    player_id: int
    tile_id: TileId
    required_moves: list[MoveType]
    description: str


class MenuItemResponse(BaseModel):
    item_id: str
    price: int
    description: str


class BureaucracyOptionsResponse(BaseModel):
    game_id: UUID
    player_id: int
    remaining_currency: int
    options: list[MenuItemResponse]
