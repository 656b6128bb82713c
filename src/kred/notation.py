"""
Text encodings used to store a game.

Pieces
----
A board is stored as `{piece_id: "<rank>@<location id>"}`, e.g.
    {"campaign_mark_1": "mark@p1_seat1", "campaign_pawn_2": "pawn@community17"}

Tiles
----
A banked tile is stored as its id, with a trailing "*" when it lies face up:
    "07"  -> tile 07, face down (counts towards currency)
    "07*" -> tile 07, face up (does not count)
"""

from typing import Optional

from src.core.exceptions import InvalidNotationError
from src.core.shared_types import Rank
from src.kred.location import Location
from src.kred.pieces import PIECE_COUNTS, Piece

PieceNotation = str
TileNotation = str

RANK_SEPARATOR = "@"
FACE_UP_MARKER = "*"
RANK_NAMES: frozenset[str] = frozenset(rank.value for rank in Rank)


def is_valid_piece_notation(text: str, player_count: int) -> bool:
    rank_name, separator, location_id = text.partition(RANK_SEPARATOR)
    if not separator or rank_name not in RANK_NAMES:
        return False
    location = Location.from_id(location_id)
    return location is not None and location.is_valid_for(player_count)


def is_valid_notation(notation: dict[str, PieceNotation], player_count: int) -> bool:
    """
    Check a stored board:
    * every piece is written as `<rank>@<location>` on the board for this player count
    * no two pieces share a domain location (community spaces hold any number)
    * never more pieces than there are in the box (promotion changes ranks, not the total)
    """
    if player_count not in PIECE_COUNTS:
        return False

    taken: set[Location] = set()
    for text in notation.values():
        if not is_valid_piece_notation(text, player_count):
            return False
        _, location = piece_from_notation(text)
        if location.single_capacity:
            if location in taken:
                return False
            taken.add(location)
    return len(notation) <= sum(PIECE_COUNTS[player_count].values())


def piece_from_notation(text: PieceNotation) -> tuple[Rank, Location]:
    rank_name, _, location_id = text.partition(RANK_SEPARATOR)
    location = Location.from_id(location_id)
    if rank_name not in RANK_NAMES or location is None:
        raise InvalidNotationError(f"Cannot interpret supplied piece notation: {text!r}")
    return Rank(rank_name), location


def piece_to_notation(piece: Piece) -> PieceNotation:
    return f"{piece.rank.value}{RANK_SEPARATOR}{piece.location.to_id()}"


def tile_from_notation(text: TileNotation) -> tuple[str, bool]:
    """-> (tile id, face up?)"""
    if text.endswith(FACE_UP_MARKER):
        return text[: -len(FACE_UP_MARKER)], True
    return text, False


def tile_to_notation(tile_id: str, face_up: bool) -> TileNotation:
    return f"{tile_id}{FACE_UP_MARKER}" if face_up else tile_id


def parse_location(location_id: Optional[str], player_count: int) -> Optional[Location]:
    """Location on the board for this player count, None otherwise"""
    location = Location.from_id(location_id)
    if location is None or not location.is_valid_for(player_count):
        return None
    return location
