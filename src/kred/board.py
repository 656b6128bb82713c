"""
The Board is an immutable snapshot of where every piece is.

Every change (a move, a promotion) produces a NEW Board with its `version` bumped,
so a snapshot taken at the start of a turn can simply be put back to undo the turn.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import InvalidNotationError
from src.core.shared_types import Rank
from src.kred.location import Location, LocationKind
from src.kred.notation import (
    PieceNotation,
    is_valid_notation,
    piece_from_notation,
    piece_to_notation,
)
from src.kred.pieces import PIECE_COUNTS, RANK_ORDER, Piece
from src.kred.topology import LocationLike, as_location, community_of, seats_of


# Seats that hold a Mark when the campaign starts
CAMPAIGN_SEATS: dict[int, tuple[int, ...]] = {
    3: (1, 3, 5),
    4: (2, 4, 6),
    5: (1, 3, 5),
}


@dataclass(frozen=True)
class Board:
    player_count: int
    pieces: dict[str, Piece] = field(default_factory=dict)
    version: int = 0

    @classmethod
    def campaign_setup(cls, player_count: int) -> Self:
        """
        Starting position of the campaign
        ----

        1. Marks on the campaign seats of every domain (player 1 first)
        2. the remaining Marks, then all Heels, then all Pawns fill the community spaces in order
        """
        if player_count not in PIECE_COUNTS:
            raise InvalidNotationError(
                f"No board exists for {player_count} players. Pick one of {list(PIECE_COUNTS)}"
            )
        counts = PIECE_COUNTS[player_count]
        pieces: list[Piece] = []

        seated_marks = [
            Location.seat(player_id, seat_number)
            for player_id in range(1, player_count + 1)
            for seat_number in CAMPAIGN_SEATS[player_count]
        ]
        for number, location in enumerate(seated_marks, start=1):
            pieces.append(Piece(f"campaign_mark_{number}", Rank.MARK, location))

        community = iter(community_of(player_count))
        for rank in RANK_ORDER:
            first = len(seated_marks) + 1 if rank == Rank.MARK else 1
            for number in range(first, counts[rank] + 1):
                pieces.append(
                    Piece(f"campaign_{rank.value}_{number}", rank, next(community))
                )

        return cls(player_count, {piece.id: piece for piece in pieces})

    @classmethod
    def from_notation(cls, notation: dict[str, PieceNotation], player_count: int) -> Self:
        if not is_valid_notation(notation, player_count):
            raise InvalidNotationError(
                f"Cannot interpret supplied pieces as a {player_count}-player board"
            )
        pieces: dict[str, Piece] = {}
        for piece_id, text in notation.items():
            rank, location = piece_from_notation(text)
            pieces[piece_id] = Piece(piece_id, rank, location)
        return cls(player_count, pieces)

    def to_notation(self) -> dict[str, PieceNotation]:
        return {piece.id: piece_to_notation(piece) for piece in self.pieces.values()}

    # --- QUERIES ---
    def piece(self, piece_id: str) -> Optional[Piece]:
        return self.pieces.get(piece_id)

    def pieces_at(self, location: LocationLike) -> list[Piece]:
        parsed = as_location(location)
        return [piece for piece in self.pieces.values() if piece.location == parsed]

    def occupant(self, location: LocationLike) -> Optional[Piece]:
        """The piece on a single-capacity location (first one found for community spaces)"""
        found = self.pieces_at(location)
        return found[0] if found else None

    def is_occupied(self, location: LocationLike) -> bool:
        return self.occupant(location) is not None

    def is_vacant(self, location: LocationLike) -> bool:
        """Can a piece be put down here? Community spaces never fill up."""
        parsed = as_location(location)
        if parsed is None:
            return False
        return parsed.is_community or not self.is_occupied(parsed)

    def pieces_in_domain(self, player_id: int) -> list[Piece]:
        return [piece for piece in self.pieces.values() if piece.owner == player_id]

    def pieces_at_kind(self, player_id: int, kind: LocationKind) -> list[Piece]:
        return [
            piece
            for piece in self.pieces_in_domain(player_id)
            if piece.location.kind == kind
        ]

    def community_pieces(self) -> list[Piece]:
        return [piece for piece in self.pieces.values() if piece.in_community]

    def community_ranks(self) -> set[Rank]:
        return {piece.rank for piece in self.community_pieces()}

    def community_piece_of(self, rank: Rank) -> Optional[Piece]:
        """The community piece of a rank on the lowest numbered space, if any"""
        candidates = [piece for piece in self.community_pieces() if piece.rank == rank]
        return min(candidates, key=lambda piece: piece.location.ordinal, default=None)

    def vacant_seats(self, player_id: int) -> list[Location]:
        return [seat for seat in seats_of(player_id) if not self.is_occupied(seat)]

    def free_community_space(self) -> Optional[Location]:
        """Lowest numbered community space nobody sits on (purely cosmetic, any space would do)"""
        taken = {piece.location for piece in self.community_pieces()}
        return next(
            (space for space in community_of(self.player_count) if space not in taken),
            None,
        )

    # --- NEW SNAPSHOTS ---
    def move_piece(self, piece_id: str, to_location: LocationLike) -> Self:
        """
        Move a piece without any rule checks (rules live in `moves.py`).
        Unknown pieces / unparseable locations leave the board as is.
        """
        piece = self.piece(piece_id)
        destination = as_location(to_location)
        if piece is None or destination is None:
            return self
        return self._with_piece(piece.moved_to(destination))

    def promote_piece(self, piece_id: str) -> Self:
        """
        A promoted piece trades ranks with a community piece of the next rank,
        so the number of pieces of each rank never changes.
        Without such a piece in the community the board stays as is.
        """
        piece = self.piece(piece_id)
        if piece is None:
            return self
        promoted = piece.promoted()
        stock = self.community_piece_of(promoted.rank)
        if promoted is piece or stock is None:
            return self
        pieces = dict(self.pieces)
        pieces[piece.id] = promoted
        pieces[stock.id] = stock.with_rank(piece.rank)
        return type(self)(self.player_count, pieces, self.version + 1)

    def _with_piece(self, piece: Piece) -> Self:
        pieces = dict(self.pieces)
        pieces[piece.id] = piece
        return type(self)(self.player_count, pieces, self.version + 1)
