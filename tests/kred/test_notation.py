"""Unit tests for src/kred/notation.py"""

import pytest

from src.core.exceptions import InvalidNotationError
from src.core.shared_types import Rank
from src.kred.location import Location
from src.kred.notation import (
    is_valid_notation,
    is_valid_piece_notation,
    parse_location,
    piece_from_notation,
    tile_from_notation,
    tile_to_notation,
)


@pytest.mark.parametrize(
    "text, player_count, expected",
    [
        ("mark@p1_seat1", 3, True),
        ("pawn@community40", 5, True),
        ("pawn@community40", 4, False),
        ("heel@p5_office", 4, False),
        ("heel", 3, False),
        ("queen@p1_seat1", 3, False),
        ("mark@", 3, False),
    ],
)
def test_piece_notation(text: str, player_count: int, expected: bool) -> None:
    assert is_valid_piece_notation(text, player_count) is expected


def test_piece_from_notation() -> None:
    assert piece_from_notation("heel@p2_rostrum2") == (Rank.HEEL, Location.rostrum(2, 2))
    with pytest.raises(InvalidNotationError):
        piece_from_notation("heel@p2_rostrum9")


def test_board_notation_cannot_hold_more_pieces_than_the_box() -> None:
    """24 pieces in a 3-player box"""
    full = {f"piece_{n}": "mark@community1" for n in range(24)}
    assert is_valid_notation(full, 3)
    full["one_too_many"] = "mark@community2"
    assert not is_valid_notation(full, 3)


def test_board_notation_for_unknown_board() -> None:
    assert not is_valid_notation({}, 2)


@pytest.mark.parametrize(
    "text, tile_id, face_up",
    [("07", "07", False), ("07*", "07", True), ("BLANK*", "BLANK", True)],
)
def test_tile_notation(text: str, tile_id: str, face_up: bool) -> None:
    assert tile_from_notation(text) == (tile_id, face_up)
    assert tile_to_notation(tile_id, face_up) == text


def test_parse_location() -> None:
    assert parse_location("p3_seat1", 3) == Location.seat(3, 1)
    assert parse_location("p4_seat1", 3) is None
    assert parse_location(None, 3) is None
