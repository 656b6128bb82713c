"""Unit tests for src/kred/moves.py"""

from typing import Optional

import pytest

from src.core.shared_types import MoveType, Rank
from src.kred.board import Board
from src.kred.location import Location
from src.kred.moves import (
    Move,
    MoveCategory,
    calculate_moves,
    check_moves,
    classify,
    evaluate_move,
    is_legal,
    legal_moves,
    validate_turn_structure,
)


def make_move(board: Board, piece_id: str, to_location: str, player_id: int) -> Move:
    """Move of a piece from wherever it stands on the board"""
    return Move.create(
        piece_id,
        board.piece(piece_id).location,
        Location.from_id(to_location),
        player_id,
        board.player_count,
        board.piece(piece_id).rank,
    )


# --- CLASSIFICATION ---
@pytest.mark.parametrize(
    "from_id, to_id, mover, rank, expected",
    [
        ("community1", "p1_seat1", 1, None, MoveType.ADVANCE),
        ("community1", "p1_rostrum1", 1, None, MoveType.ADVANCE),
        ("community1", "p2_seat1", 1, None, MoveType.ASSIST),
        ("community1", "p2_rostrum1", 1, None, MoveType.ASSIST),
        ("community1", "p2_office", 1, None, None),
        ("p1_seat1", "community1", 1, Rank.PAWN, MoveType.WITHDRAW),
        ("p2_seat1", "community1", 1, Rank.HEEL, MoveType.REMOVE),
        ("p2_seat1", "community1", 1, Rank.PAWN, None),  # pawns cannot be removed
        ("p1_seat1", "p1_seat2", 1, None, MoveType.ORGANIZE),
        ("p1_seat6", "p3_seat1", 1, None, MoveType.ORGANIZE),  # organize may cross domains
        ("p2_seat1", "p2_seat2", 1, None, MoveType.INFLUENCE),
        ("p3_seat1", "p1_seat6", 1, None, MoveType.INFLUENCE),
        ("p1_seat1", "p1_seat3", 1, None, None),
        ("p1_seat1", "p1_rostrum1", 1, None, MoveType.ADVANCE),
        ("p2_seat1", "p2_rostrum1", 1, None, None),
        ("p1_rostrum1", "p1_office", 1, None, MoveType.ADVANCE),
        ("p1_rostrum1", "p1_seat2", 1, None, MoveType.WITHDRAW),
        ("p1_rostrum1", "community2", 1, None, MoveType.WITHDRAW),
        ("p1_office", "p1_rostrum2", 1, None, MoveType.WITHDRAW),
        ("p1_office", "community4", 1, None, MoveType.WITHDRAW),
        ("p2_office", "community4", 1, None, None),
        ("p1_rostrum2", "p3_rostrum1", 1, None, MoveType.INFLUENCE),  # rostrums face across domains
        ("p3_rostrum1", "p1_rostrum2", 1, None, MoveType.INFLUENCE),
        ("p3_rostrum1", "p1_rostrum2", 3, None, MoveType.INFLUENCE),
        ("p1_rostrum1", "p1_rostrum2", 1, None, None),
        ("community1", "community2", 1, None, None),
        ("nonsense", "p1_seat1", 1, None, None),
        ("p1_seat1", "p4_seat1", 1, None, None),  # no player 4 on the 3-player board
    ],
)
def test_classify(
    from_id: str, to_id: str, mover: int, rank: Optional[Rank], expected: Optional[MoveType]
) -> None:
    assert classify(from_id, to_id, mover, 3, rank) == expected


def test_classify_is_deterministic() -> None:
    results = {classify("p2_seat3", "p2_seat4", 1, 3) for _ in range(10)}
    assert results == {MoveType.INFLUENCE}


@pytest.mark.parametrize(
    "move_type, category",
    [
        (MoveType.ADVANCE, MoveCategory.M),
        (MoveType.WITHDRAW, MoveCategory.M),
        (MoveType.ORGANIZE, MoveCategory.M),
        (MoveType.ASSIST, MoveCategory.O),
        (MoveType.REMOVE, MoveCategory.O),
        (MoveType.INFLUENCE, MoveCategory.O),
    ],
)
def test_move_category(move_type: MoveType, category: MoveCategory) -> None:
    move = Move("a", Location.community(1), Location.seat(1, 1), 1, move_type)
    assert move.category == category


def test_move_log_line() -> None:
    move = Move.create("m7", Location.community(3), Location.seat(2, 4), 2, 3)
    assert move.to_text() == "p2 m7 community3>p2_seat4 (advance)"


# --- LEGALITY ---
def test_advance_from_community() -> None:
    board = Board.from_notation({"m1": "mark@community1"}, 3)
    assert is_legal(make_move(board, "m1", "p1_seat1", 1), board)


def test_community_draw_order() -> None:
    """A heel cannot leave the community while a mark is still in there"""
    board = Board.from_notation({"m1": "mark@community1", "h1": "heel@community2"}, 3)
    verdict = evaluate_move(make_move(board, "h1", "p1_seat1", 1), board)
    assert not verdict
    assert "lower ranked" in verdict.reason
    assert evaluate_move(make_move(board, "m1", "p1_seat1", 1), board)

    # same for assisting
    assert not evaluate_move(make_move(board, "h1", "p2_seat1", 1), board)


def test_pieces_enter_domain_through_a_seat() -> None:
    board = Board.from_notation({"m1": "mark@community1"}, 3)
    verdict = evaluate_move(make_move(board, "m1", "p1_rostrum1", 1), board)
    assert not verdict
    assert "through a seat" in verdict.reason


def test_advance_to_rostrum_needs_supporting_seats() -> None:
    board = Board.from_notation({"m1": "mark@p1_seat1", "m2": "mark@p1_seat2"}, 3)
    verdict = evaluate_move(make_move(board, "m1", "p1_rostrum1", 1), board)
    assert not verdict
    assert "not all supporting seats are full" in verdict.reason

    board = Board.from_notation(
        {"m1": "mark@p1_seat1", "m2": "mark@p1_seat2", "m3": "mark@p1_seat3"}, 3
    )
    assert evaluate_move(make_move(board, "m1", "p1_rostrum1", 1), board)


def test_advance_to_rostrum_it_does_not_support() -> None:
    board = Board.from_notation(
        {"m4": "mark@p1_seat4", "m1": "mark@p1_seat1", "m2": "mark@p1_seat2", "m3": "mark@p1_seat3"},
        3,
    )
    verdict = evaluate_move(make_move(board, "m4", "p1_rostrum1", 1), board)
    assert not verdict
    assert "does not support" in verdict.reason


def test_advance_to_office_needs_both_rostrums() -> None:
    board = Board.from_notation({"h1": "heel@p1_rostrum1"}, 3)
    verdict = evaluate_move(make_move(board, "h1", "p1_office", 1), board)
    assert verdict.reason == "cannot move to office - not both rostrums are filled yet"

    board = Board.from_notation({"h1": "heel@p1_rostrum1", "h2": "heel@p1_rostrum2"}, 3)
    assert evaluate_move(make_move(board, "h1", "p1_office", 1), board)


def test_destination_must_be_free() -> None:
    board = Board.from_notation({"m1": "mark@p1_seat1", "m2": "mark@p1_seat2"}, 3)
    verdict = evaluate_move(make_move(board, "m1", "p1_seat2", 1), board)
    assert verdict.reason == "p1_seat2 is already occupied"


@pytest.mark.parametrize(
    "notation, piece_id, to_location, reason",
    [
        ({"p": "pawn@p2_seat1"}, "p", "community1", "a pawn can never be removed"),
        (
            {"m": "mark@p2_seat1"},
            "m",
            "p2_rostrum1",
            "cannot move opponent's piece between hierarchy levels (from p2_seat1 to p2_rostrum1)",
        ),
        ({"m": "mark@p1_seat1"}, "m", "p2_rostrum1", "cannot move a piece to opponent's rostrum"),
        ({"m": "mark@p1_seat1"}, "m", "p1_seat3", "p1_seat1 and p1_seat3 are not adjacent"),
        ({"h": "heel@p2_office"}, "h", "community1", "cannot take a piece out of opponent's office"),
    ],
)
def test_unclassified_moves_explain_why(
    notation: dict[str, str], piece_id: str, to_location: str, reason: str
) -> None:
    board = Board.from_notation(notation, 3)
    verdict = evaluate_move(make_move(board, piece_id, to_location, 1), board)
    assert not verdict
    assert verdict.reason == reason


def test_assist_only_into_seats() -> None:
    board = Board.from_notation({"m1": "mark@community1"}, 3)
    verdict = evaluate_move(make_move(board, "m1", "p2_rostrum1", 1), board)
    assert not verdict
    assert "opponent's seat" in verdict.reason
    assert evaluate_move(make_move(board, "m1", "p2_seat1", 1), board)


def test_withdraw_from_rostrum_lands_on_supporting_seat() -> None:
    board = Board.from_notation({"h": "heel@p1_rostrum1"}, 3)
    assert not evaluate_move(make_move(board, "h", "p1_seat5", 1), board)
    assert evaluate_move(make_move(board, "h", "p1_seat2", 1), board)
    assert evaluate_move(make_move(board, "h", "community1", 1), board)


def test_own_piece_across_to_facing_rostrum_is_influence() -> None:
    board = Board.from_notation({"h": "heel@p1_rostrum2"}, 3)
    move = make_move(board, "h", "p3_rostrum1", 1)
    assert move.move_type == MoveType.INFLUENCE
    assert move.category == MoveCategory.O

    verdict = evaluate_move(move, board)
    assert not verdict
    assert "not all supporting seats are full" in verdict.reason

    board = Board.from_notation(
        {
            "h": "heel@p1_rostrum2",
            "a": "mark@p3_seat1",
            "b": "mark@p3_seat2",
            "c": "mark@p3_seat3",
        },
        3,
    )
    assert evaluate_move(make_move(board, "h", "p3_rostrum1", 1), board)


def test_influence_opponent_seats() -> None:
    board = Board.from_notation({"m": "mark@p2_seat3"}, 3)
    move = make_move(board, "m", "p2_seat4", 1)
    assert move.move_type == MoveType.INFLUENCE
    assert evaluate_move(move, board)


def test_piece_must_stand_on_source() -> None:
    board = Board.from_notation({"m1": "mark@p1_seat1"}, 3)
    move = Move.create("m1", Location.seat(1, 2), Location.seat(1, 3), 1, 3)
    assert evaluate_move(move, board).reason == "m1 is not on p1_seat2"

    unknown = Move.create("x", Location.seat(1, 2), Location.seat(1, 3), 1, 3)
    assert not evaluate_move(unknown, board)


def test_moves_are_checked_in_sequence() -> None:
    """The second move is only legal once the first one filled the last supporting seat"""
    board = Board.from_notation(
        {"m1": "mark@p1_seat1", "m2": "mark@p1_seat2", "m3": "mark@community1"}, 3
    )
    fill_seat = make_move(board, "m3", "p1_seat3", 1)
    climb = make_move(board, "m1", "p1_rostrum1", 1)

    assert check_moves([fill_seat, climb], board)
    assert not check_moves([climb, fill_seat], board)


# --- TURN STRUCTURE ---
def test_turn_structure() -> None:
    advance = Move("a", Location.community(1), Location.seat(1, 1), 1, MoveType.ADVANCE)
    organize = Move("b", Location.seat(1, 2), Location.seat(1, 3), 1, MoveType.ORGANIZE)
    remove = Move("c", Location.seat(2, 1), Location.community(1), 1, MoveType.REMOVE)
    unknown = Move("d", Location.seat(1, 1), Location.seat(1, 4), 1)

    assert validate_turn_structure([])
    assert validate_turn_structure([advance, remove])
    assert not validate_turn_structure([advance, organize])  # two M moves
    assert not validate_turn_structure([advance, remove, organize])
    assert not validate_turn_structure([unknown])


# --- MOVES FROM SNAPSHOTS ---
def test_calculate_moves() -> None:
    before = Board.from_notation(
        {"m1": "mark@community1", "m2": "mark@community2", "m3": "mark@p2_seat1"}, 3
    )
    after = before.move_piece("m1", "p1_seat1").move_piece("m2", "community5").move_piece(
        "m3", "community3"
    )
    moves = calculate_moves(before, after, 1)

    assert [move.piece_id for move in moves] == ["m1", "m3"]  # community shuffle ignored
    assert [move.move_type for move in moves] == [MoveType.ADVANCE, MoveType.REMOVE]


def test_classification_agrees_with_simulated_transition() -> None:
    """Classifying a move and re-deriving it from the resulting snapshot gives the same move"""
    board = Board.from_notation({"m1": "mark@p1_seat1"}, 3)
    move = make_move(board, "m1", "p1_seat2", 1)
    after = board.move_piece(move.piece_id, move.to_location)
    assert calculate_moves(board, after, 1) == [move]
    assert calculate_moves(board, after, 1) == calculate_moves(board, after, 1)


# --- MOVE GENERATION ---
def test_legal_moves_from_community() -> None:
    board = Board.from_notation({"m1": "mark@community1"}, 3)

    advances = legal_moves(board, 1, MoveType.ADVANCE)
    assert {str(move.to_location) for move in advances} == {f"p1_seat{n}" for n in range(1, 7)}

    # 6 own seats + 12 opponent seats
    assert len(legal_moves(board, 1)) == 18
    assert all(evaluate_move(move, board) for move in legal_moves(board, 1))
