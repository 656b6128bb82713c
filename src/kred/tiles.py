"""
Tile catalogue and tile requirement resolution

Every numbered tile mandates one or two move types. The BLANK tile (5-player games only) mandates nothing:
it allows one M and one O move, or none at all.

A requirement that could not possibly have been met is excused rather than reported missing,
and the reason it was excused is kept (see `ImpossibleReason`).
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from src.core.shared_types import MoveType
from src.kred.board import Board
from src.kred.moves import MOVE_CATEGORY, Move, check_moves, validate_turn_structure
from src.kred.topology import seats_of
from src.kred.verdict import Verdict

BLANK_TILE = "BLANK"
NUMBERED_TILES: tuple[str, ...] = tuple(f"{number:02d}" for number in range(1, 25))

# tile numbers -> required moves (listed O first, then M, like the print on the tiles)
_TILE_GROUPS: list[tuple[range, tuple[MoveType, ...]]] = [
    (range(1, 3), (MoveType.REMOVE, MoveType.ADVANCE)),
    (range(3, 5), (MoveType.INFLUENCE, MoveType.ADVANCE)),
    (range(5, 7), (MoveType.ADVANCE,)),
    (range(7, 9), (MoveType.ASSIST, MoveType.ADVANCE)),
    (range(9, 11), (MoveType.REMOVE, MoveType.ORGANIZE)),
    (range(11, 12), (MoveType.INFLUENCE,)),
    (range(12, 13), (MoveType.ORGANIZE,)),
    (range(13, 15), (MoveType.ASSIST, MoveType.ORGANIZE)),
    (range(15, 17), (MoveType.REMOVE,)),
    (range(17, 19), (MoveType.INFLUENCE, MoveType.WITHDRAW)),
    (range(19, 22), (MoveType.WITHDRAW,)),
    (range(22, 25), (MoveType.ASSIST, MoveType.WITHDRAW)),
]

# Currency a tile is worth while it lies face down in a bank
TILE_VALUES: dict[str, int] = {
    "01": 1, "02": 2, "03": 0, "04": 1, "05": 2, "06": 3, "07": 4, "08": 5,
    "09": 1, "10": 2, "11": 4, "12": 5, "13": 5, "14": 6, "15": 3, "16": 4,
    "17": 3, "18": 4, "19": 6, "20": 7, "21": 8, "22": 7, "23": 8, "24": 9,
    BLANK_TILE: 0,
}  # fmt: skip


@dataclass(frozen=True)
class TileRequirement:
    tile_id: str
    required_moves: tuple[MoveType, ...]
    # NOTE: True means a play that moves pieces may always be rejected (only the BLANK tile)
    can_be_rejected: bool = False

    @property
    def is_blank(self) -> bool:
        return self.tile_id == BLANK_TILE

    @property
    def description(self) -> str:
        """e.g. '(O) Remove and (M) Advance'"""
        if self.is_blank:
            return "Blank: any one (O) move and any one (M) move, or none"
        return " and ".join(
            f"({MOVE_CATEGORY[move_type].value}) {move_type.value.capitalize()}"
            for move_type in self.required_moves
        )


def _build_catalogue() -> dict[str, TileRequirement]:
    catalogue: dict[str, TileRequirement] = {}
    for numbers, required in _TILE_GROUPS:
        for number in numbers:
            tile_id = f"{number:02d}"
            catalogue[tile_id] = TileRequirement(tile_id, required)
    catalogue[BLANK_TILE] = TileRequirement(BLANK_TILE, (), can_be_rejected=True)
    return catalogue


TILE_REQUIREMENTS: dict[str, TileRequirement] = _build_catalogue()


def requirements_for(tile_id: str) -> Optional[TileRequirement]:
    return TILE_REQUIREMENTS.get(tile_id)


def tile_value(tile_id: str) -> int:
    return TILE_VALUES.get(tile_id, 0)


def tiles_for(player_count: int) -> list[str]:
    """The tiles in play: 24 numbered tiles, plus the BLANK tile with 5 players"""
    tiles = list(NUMBERED_TILES)
    if player_count == 5:
        tiles.append(BLANK_TILE)
    return tiles


# --- EVALUATION ---
class ImpossibleReason(StrEnum):
    DOMAIN_EMPTY_AT_TURN_START = "domain empty at turn start"
    ALL_OPPONENT_SEATS_FULL = "all opponent seats full"


@dataclass(frozen=True)
class ExcusedRequirement:
    move_type: MoveType
    reason: ImpossibleReason


@dataclass(frozen=True)
class TileEvaluation:
    tile_id: str
    required: tuple[MoveType, ...]
    performed: tuple[MoveType, ...]
    missing: tuple[MoveType, ...] = ()
    impossible: tuple[ExcusedRequirement, ...] = ()
    # move types performed that the tile did not ask for
    extra: tuple[MoveType, ...] = ()
    unknown_tile: bool = False

    @property
    def satisfied(self) -> bool:
        return not self.unknown_tile and not self.missing


def is_domain_empty(board: Board, player_id: int) -> bool:
    return not board.pieces_in_domain(player_id)


def are_all_opponent_seats_full(board: Board, player_id: int) -> bool:
    return all(
        board.is_occupied(seat)
        for opponent in range(1, board.player_count + 1)
        if opponent != player_id
        for seat in seats_of(opponent)
    )


def _impossible_reason(
    move_type: MoveType, tile_player: int, board_at_start: Board, board_now: Board
) -> Optional[ImpossibleReason]:
    if move_type == MoveType.WITHDRAW and is_domain_empty(board_at_start, tile_player):
        return ImpossibleReason.DOMAIN_EMPTY_AT_TURN_START
    if move_type == MoveType.ASSIST and are_all_opponent_seats_full(board_now, tile_player):
        return ImpossibleReason.ALL_OPPONENT_SEATS_FULL
    return None


def evaluate(
    tile_id: str,
    moves: list[Move],
    tile_player: int,
    board_at_start: Board,
    board_now: Board,
) -> TileEvaluation:
    """
    Compare the moves performed with what the tile asks for.
    ----

    * a required move type that was performed is met
    * a required move type that was not performed is excused when it was impossible:
        - WITHDRAW: the tile player's domain held no piece when the turn started
        - ASSIST: every opponent seat is occupied
    * anything else required but not performed is missing
    """
    performed = tuple(dict.fromkeys(move.move_type for move in moves if move.move_type))
    requirement = requirements_for(tile_id)
    if requirement is None:
        return TileEvaluation(tile_id, (), performed, unknown_tile=True)

    missing: list[MoveType] = []
    impossible: list[ExcusedRequirement] = []
    for move_type in requirement.required_moves:
        if move_type in performed:
            continue
        reason = _impossible_reason(move_type, tile_player, board_at_start, board_now)
        if reason is None:
            missing.append(move_type)
        else:
            impossible.append(ExcusedRequirement(move_type, reason))

    extra = (
        ()
        if requirement.is_blank
        else tuple(move_type for move_type in performed if move_type not in requirement.required_moves)
    )
    return TileEvaluation(
        tile_id,
        requirement.required_moves,
        performed,
        tuple(missing),
        tuple(impossible),
        extra,
    )


def is_legitimate(
    tile_id: str,
    moves: list[Move],
    tile_player: int,
    board_at_start: Board,
    board_now: Board,
) -> Verdict:
    """
    Outcome of a challenge: was the tile play within the rules?
    ---
    turn structure valid, every move legal in the order it was made, and nothing missing (after excuses)
    """
    structure = validate_turn_structure(moves)
    if not structure:
        return structure
    legality = check_moves(moves, board_at_start)
    if not legality:
        return legality

    evaluation = evaluate(tile_id, moves, tile_player, board_at_start, board_now)
    if evaluation.unknown_tile:
        return Verdict.illegal(f"unknown tile {tile_id!r}")
    if evaluation.missing:
        missing = ", ".join(move_type.value for move_type in evaluation.missing)
        return Verdict.illegal(f"tile {tile_id} requires {missing}")
    return Verdict.ok()


def is_perfect(
    tile_id: str,
    moves: list[Move],
    tile_player: int,
    board_at_start: Board,
    board_now: Board,
) -> bool:
    """A perfect play cannot be rejected: legitimate, and nothing performed beyond what the tile asks for"""
    requirement = requirements_for(tile_id)
    if requirement is None:
        return False
    if requirement.is_blank:
        return not moves
    if not is_legitimate(tile_id, moves, tile_player, board_at_start, board_now):
        return False
    evaluation = evaluate(tile_id, moves, tile_player, board_at_start, board_now)
    return not evaluation.extra
