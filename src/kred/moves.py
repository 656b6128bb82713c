"""
Move taxonomy and movement rules

Key idea: Use strategy pattern twice.
1. CLASSIFICATION_RULES: (source kind, destination kind) -> which of the six move types (if any) the transition is
2. MOVE_RULES: move type -> the board-dependent checks that make that type of move legal

Classification only looks at the two locations, the mover, and (for removals) the rank of the piece.
Legality is always checked against the board snapshot the caller passes in.
"""

import logging
from dataclasses import asdict, dataclass
from enum import StrEnum
from typing import Any, Callable, Optional, Self

from src.core.exceptions import InvalidNotationError
from src.core.rules_config import DEFAULT_RULES
from src.core.shared_types import MoveType, Rank
from src.kred.board import Board
from src.kred.location import HIERARCHY_LEVEL, Location, LocationKind
from src.kred.pieces import Piece, is_lower_rank
from src.kred.topology import (
    LocationLike,
    are_rostrums_adjacent,
    are_seats_adjacent,
    as_location,
    domain_of,
    rostrum_supported_by,
    rostrums_of,
    supporting_seats_of,
)
from src.kred.verdict import Verdict

logger = logging.getLogger(__name__)


class MoveCategory(StrEnum):
    """M: acting on your own domain, O: acting on somebody else's"""

    M = "M"
    O = "O"


MOVE_CATEGORY: dict[MoveType, MoveCategory] = {
    MoveType.ADVANCE: MoveCategory.M,
    MoveType.WITHDRAW: MoveCategory.M,
    MoveType.ORGANIZE: MoveCategory.M,
    MoveType.ASSIST: MoveCategory.O,
    MoveType.REMOVE: MoveCategory.O,
    MoveType.INFLUENCE: MoveCategory.O,
}


@dataclass(frozen=True)
class Move:
    """
    A single piece changing location during a turn.
    ---

    `move_type` is None when the transition does not match any of the six move types.
    Such a move is recorded anyway (so it can be reported), but it is never legal.
    """

    piece_id: str
    from_location: Location
    to_location: Location
    player_id: int
    move_type: Optional[MoveType] = None

    @classmethod
    def create(
        cls,
        piece_id: str,
        from_location: Location,
        to_location: Location,
        player_id: int,
        player_count: int,
        rank: Optional[Rank] = None,
    ) -> Self:
        """Build the move and classify it right away"""
        move_type = classify(from_location, to_location, player_id, player_count, rank)
        return cls(piece_id, from_location, to_location, player_id, move_type)

    @property
    def category(self) -> Optional[MoveCategory]:
        return MOVE_CATEGORY[self.move_type] if self.move_type else None

    def to_text(self) -> str:
        """Compact log line, e.g. `p2 campaign_mark_7 community3>p2_seat4 (advance)`"""
        kind = self.move_type.value if self.move_type else "unknown"
        return f"p{self.player_id} {self.piece_id} {self.from_location}>{self.to_location} ({kind})"

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["from_location"] = self.from_location.to_id()
        data["to_location"] = self.to_location.to_id()
        data["move_type"] = self.move_type.value if self.move_type else None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        from_location = Location.from_id(data["from_location"])
        to_location = Location.from_id(data["to_location"])
        if from_location is None or to_location is None:
            raise InvalidNotationError(f"Cannot interpret stored move: {data}")
        move_type = MoveType(data["move_type"]) if data.get("move_type") else None
        return cls(
            data["piece_id"], from_location, to_location, data["player_id"], move_type
        )


# --- CLASSIFICATION RULES ---
ClassifyFn = Callable[[Location, Location, int, int, Optional[Rank]], Optional[MoveType]]


def _from_community(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    """Taking a piece out of the community: into your own domain or into somebody else's"""
    if target.owner == mover:
        return MoveType.ADVANCE
    if target.kind in (LocationKind.SEAT, LocationKind.ROSTRUM):
        return MoveType.ASSIST
    return None


def _seat_to_community(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    if source.owner == mover:
        return MoveType.WITHDRAW
    # NOTE: Pawns can never be removed from a seat
    if rank == Rank.PAWN:
        return None
    return MoveType.REMOVE


def _seat_to_seat(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    """Sliding along the ring of seats. Organizing may cross into another domain."""
    if not are_seats_adjacent(source, target, player_count):
        return None
    return MoveType.ORGANIZE if source.owner == mover else MoveType.INFLUENCE


def _seat_to_rostrum(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    if source.owner == target.owner == mover:
        return MoveType.ADVANCE
    return None


def _rostrum_to_office(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    if source.owner == target.owner == mover:
        return MoveType.ADVANCE
    return None


def _step_down(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    """rostrum -> seat and office -> rostrum, always inside your own domain"""
    if source.owner == target.owner == mover:
        return MoveType.WITHDRAW
    return None


def _leave_hierarchy(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    """rostrum / office -> community"""
    return MoveType.WITHDRAW if source.owner == mover else None


def _rostrum_to_rostrum(
    source: Location, target: Location, mover: int, player_count: int, rank: Optional[Rank]
) -> Optional[MoveType]:
    if not are_rostrums_adjacent(source, target, player_count):
        return None
    # facing rostrums belong to different domains, so the move always reaches
    # into somebody else's hierarchy
    if source.owner == target.owner == mover:
        return MoveType.ORGANIZE
    return MoveType.INFLUENCE


CLASSIFICATION_RULES: dict[tuple[LocationKind, LocationKind], ClassifyFn] = {
    (LocationKind.COMMUNITY, LocationKind.SEAT): _from_community,
    (LocationKind.COMMUNITY, LocationKind.ROSTRUM): _from_community,
    (LocationKind.COMMUNITY, LocationKind.OFFICE): _from_community,
    (LocationKind.SEAT, LocationKind.COMMUNITY): _seat_to_community,
    (LocationKind.SEAT, LocationKind.SEAT): _seat_to_seat,
    (LocationKind.SEAT, LocationKind.ROSTRUM): _seat_to_rostrum,
    (LocationKind.ROSTRUM, LocationKind.OFFICE): _rostrum_to_office,
    (LocationKind.ROSTRUM, LocationKind.SEAT): _step_down,
    (LocationKind.OFFICE, LocationKind.ROSTRUM): _step_down,
    (LocationKind.ROSTRUM, LocationKind.COMMUNITY): _leave_hierarchy,
    (LocationKind.OFFICE, LocationKind.COMMUNITY): _leave_hierarchy,
    (LocationKind.ROSTRUM, LocationKind.ROSTRUM): _rostrum_to_rostrum,
}


def classify(
    from_location: Optional[LocationLike],
    to_location: Optional[LocationLike],
    mover: int,
    player_count: int,
    rank: Optional[Rank] = None,
) -> Optional[MoveType]:
    """
    Which of the six move types is the transition from -> to, performed by `mover`?
    ----

    Total over its input: anything that does not parse, is not on the board, or matches no move type yields None.
    `rank` only matters for removals (Pawns cannot be removed). When it is not supplied the transition is classified
    as if the piece could be removed.
    """
    source = as_location(from_location)
    target = as_location(to_location)
    if source is None or target is None:
        return None
    if not (source.is_valid_for(player_count) and target.is_valid_for(player_count)):
        return None

    rule = CLASSIFICATION_RULES.get((source.kind, target.kind))
    if rule is None:
        return None
    return rule(source, target, mover, player_count, rank)


# --- COMMUNITY DRAW ORDER ---
def can_leave_community(piece: Piece, board: Board) -> bool:
    """
    Pieces are drawn from the community lowest rank first:
    Marks always, Heels only once no Mark is left, Pawns only once no Mark or Heel is left.
    """
    return not any(is_lower_rank(rank, piece.rank) for rank in board.community_ranks())


def _draw_order_verdict(piece: Piece, board: Board) -> Optional[Verdict]:
    if piece.in_community and not can_leave_community(piece, board):
        return Verdict.illegal(
            f"a {piece.rank.value} cannot leave the community while lower ranked pieces remain there"
        )
    return None


def _supporting_seats_verdict(rostrum: Location, board: Board) -> Optional[Verdict]:
    seats = supporting_seats_of(rostrum)
    occupied = sum(board.is_occupied(seat) for seat in seats)
    if occupied < len(seats):
        return Verdict.illegal(
            f"not all supporting seats are full ({occupied}/{len(seats)} for {rostrum})"
        )
    return None


# --- MOVE RULES ---
def check_advance(move: Move, piece: Piece, board: Board) -> Verdict:
    """
    Advancing climbs the hierarchy of your own domain one level at a time:
    community -> seat -> (supported) rostrum -> office
    """
    source, target = move.from_location, move.to_location
    if source.is_community:
        if not target.is_seat:
            return Verdict.illegal(
                f"a piece must enter the domain through a seat, not {target}"
            )
        return _draw_order_verdict(piece, board) or Verdict.ok()

    if source.is_seat:
        if rostrum_supported_by(source) != target:
            return Verdict.illegal(f"{source} does not support {target}")
        return _supporting_seats_verdict(target, board) or Verdict.ok()

    # rostrum -> office
    empty = [rostrum for rostrum in rostrums_of(target.owner) if not board.is_occupied(rostrum)]
    if empty:
        return Verdict.illegal("cannot move to office - not both rostrums are filled yet")
    return Verdict.ok()


def check_withdraw(move: Move, piece: Piece, board: Board) -> Verdict:
    source, target = move.from_location, move.to_location
    if source.is_rostrum and target.is_seat and target not in supporting_seats_of(source):
        return Verdict.illegal(
            f"a piece withdrawn from {source} must land on one of its supporting seats"
        )
    return Verdict.ok()


def check_organize(move: Move, piece: Piece, board: Board) -> Verdict:
    if move.to_location.is_rostrum:
        return _supporting_seats_verdict(move.to_location, board) or Verdict.ok()
    return Verdict.ok()


def check_assist(move: Move, piece: Piece, board: Board) -> Verdict:
    if not move.to_location.is_seat:
        return Verdict.illegal(
            f"a piece can only be assisted into an opponent's seat, not {move.to_location}"
        )
    return _draw_order_verdict(piece, board) or Verdict.ok()


def check_remove(move: Move, piece: Piece, board: Board) -> Verdict:
    if piece.rank == Rank.PAWN:
        return Verdict.illegal("a pawn can never be removed")
    return Verdict.ok()


def check_influence(move: Move, piece: Piece, board: Board) -> Verdict:
    if move.to_location.is_rostrum:
        return _supporting_seats_verdict(move.to_location, board) or Verdict.ok()
    return Verdict.ok()


# --- STRATEGY PATTERN: LEGALITY PER MOVE TYPE ---
MoveRuleFn = Callable[[Move, Piece, Board], Verdict]
MOVE_RULES: dict[MoveType, MoveRuleFn] = {
    MoveType.ADVANCE: check_advance,
    MoveType.WITHDRAW: check_withdraw,
    MoveType.ORGANIZE: check_organize,
    MoveType.ASSIST: check_assist,
    MoveType.REMOVE: check_remove,
    MoveType.INFLUENCE: check_influence,
}


def _unclassified_reason(source: Location, target: Location, mover: int, piece: Piece, board: Board) -> str:
    """Explain why a transition does not match any move type"""
    if source.is_community and target.is_community:
        return "moving a piece around the community is not a move"

    if source.owner is not None and source.owner == target.owner and source.owner != mover:
        if HIERARCHY_LEVEL[source.kind] != HIERARCHY_LEVEL[target.kind]:
            return f"cannot move opponent's piece between hierarchy levels (from {source} to {target})"

    if target.kind in (LocationKind.ROSTRUM, LocationKind.OFFICE) and target.owner != mover:
        if not (source.is_rostrum and target.is_rostrum):
            return f"cannot move a piece to opponent's {target.kind.value}"

    if source.kind in (LocationKind.ROSTRUM, LocationKind.OFFICE) and source.owner != mover:
        if target.is_community:
            return f"cannot take a piece out of opponent's {source.kind.value}"

    if source.kind == target.kind and source.kind in (LocationKind.SEAT, LocationKind.ROSTRUM):
        return f"{source} and {target} are not adjacent"

    if source.is_seat and target.is_community and piece.rank == Rank.PAWN:
        return "a pawn can never be removed"

    if source.owner != target.owner and not (source.is_community or target.is_community):
        return f"cannot move a piece from {source} to {target} across domains"

    return f"no move leads from {source} to {target}"


def evaluate_move(move: Move, board: Board) -> Verdict:
    """
    Is the move legal on the given board (the board BEFORE the move is made)?
    ----

    1. the piece exists and stands on the move's source location
    2. both locations exist on this board
    3. the transition is one of the six move types (re-classified here, with the piece's actual rank)
    4. the destination is free (community spaces never fill up)
    5. the rules specific to that move type hold
    """
    piece = board.piece(move.piece_id)
    if piece is None:
        return Verdict.illegal(f"unknown piece {move.piece_id!r}")
    if piece.location != move.from_location:
        return Verdict.illegal(f"{move.piece_id} is not on {move.from_location}")

    source, target = move.from_location, move.to_location
    for location in (source, target):
        if not location.is_valid_for(board.player_count):
            return Verdict.illegal(
                f"{location} is not on the {board.player_count}-player board"
            )
    if source == target:
        return Verdict.illegal(f"{move.piece_id} did not move")

    move_type = classify(source, target, move.player_id, board.player_count, piece.rank)
    if move_type is None:
        return Verdict.illegal(_unclassified_reason(source, target, move.player_id, piece, board))

    if not board.is_vacant(target):
        return Verdict.illegal(f"{target} is already occupied")

    verdict = MOVE_RULES[move_type](move, piece, board)
    if not verdict:
        return verdict
    return Verdict.ok(f"valid {move_type.value}")


def check_move(move: Move, board: Board) -> Verdict:
    """`evaluate_move()` plus a debug trace of rejected moves"""
    verdict = evaluate_move(move, board)
    if not verdict:
        logger.debug("Rejected move %s: %s", move.to_text(), verdict.reason)
    return verdict


def is_legal(move: Move, board: Board) -> Verdict:
    return check_move(move, board)


def check_moves(moves: list[Move], board: Board) -> Verdict:
    """Check a sequence of moves, each one against the board left behind by the previous one"""
    for move in moves:
        verdict = check_move(move, board)
        if not verdict:
            return verdict
        board = board.move_piece(move.piece_id, move.to_location)
    return Verdict.ok()


# --- TURN STRUCTURE ---
def validate_turn_structure(
    moves: list[Move], max_moves: int = DEFAULT_RULES.max_moves_per_tile_play
) -> Verdict:
    """At most two moves per tile play, and never two from the same category (M / O)"""
    if len(moves) > max_moves:
        return Verdict.illegal(f"a tile play allows at most {max_moves} moves, got {len(moves)}")

    seen: set[MoveCategory] = set()
    for move in moves:
        if move.category is None:
            return Verdict.illegal(
                f"{move.from_location} -> {move.to_location} is not a recognised move"
            )
        if move.category in seen:
            return Verdict.illegal(f"only one {move.category.value} move is allowed per tile play")
        seen.add(move.category)
    return Verdict.ok()


# --- DERIVING MOVES FROM SNAPSHOTS ---
def calculate_moves(before: Board, after: Board, mover: int) -> list[Move]:
    """
    Compare the pieces at the start of the tile play with the current pieces.
    ---
    Every piece that changed location is a move (reshuffling inside the community is ignored).
    Moves come out in the order the pieces are stored, so the result is deterministic.
    """
    moves: list[Move] = []
    for piece_id, initial in before.pieces.items():
        current = after.piece(piece_id)
        if current is None or current.location == initial.location:
            continue
        if initial.in_community and current.in_community:
            continue
        moves.append(
            Move.create(
                piece_id,
                initial.location,
                current.location,
                mover,
                before.player_count,
                initial.rank,
            )
        )
    return moves


# --- MOVE GENERATION ---
def candidate_destinations(board: Board) -> list[Location]:
    """Every vacant domain location plus one representative community space"""
    destinations = [
        location
        for player_id in range(1, board.player_count + 1)
        for location in domain_of(player_id)
        if not board.is_occupied(location)
    ]
    community = board.free_community_space()
    if community is not None:
        destinations.append(community)
    return destinations


def legal_moves(board: Board, mover: int, move_type: Optional[MoveType] = None) -> list[Move]:
    """
    Every legal single move `mover` could make on this board (optionally only of one type).
    Used to show options to a player; checking a submitted move goes through `check_move()`.
    """
    destinations = candidate_destinations(board)
    moves: list[Move] = []
    for piece in board.pieces.values():
        for destination in destinations:
            if destination == piece.location:
                continue
            if piece.in_community and destination.is_community:
                continue
            move = Move.create(
                piece.id, piece.location, destination, mover, board.player_count, piece.rank
            )
            if move.move_type is None or (move_type and move.move_type != move_type):
                continue
            if evaluate_move(move, board):
                moves.append(move)
    return moves
