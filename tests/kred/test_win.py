"""Unit tests for src/kred/win.py"""

import pytest

from src.core.shared_types import PromotionTier, Rank
from src.kred.board import Board
from src.kred.win import can_promote, has_won, promote, winners

WINNING_DOMAIN = {
    "office": "pawn@p1_office",
    "rostrum1": "heel@p1_rostrum1",
    "rostrum2": "heel@p1_rostrum2",
    **{f"seat{n}": f"{'pawn' if n == 1 else 'mark'}@p1_seat{n}" for n in range(1, 7)},
}


def test_winning_configuration() -> None:
    board = Board.from_notation(WINNING_DOMAIN, 3)
    assert has_won(1, board)
    assert not has_won(2, board)
    assert winners(board) == [1]


@pytest.mark.parametrize("missing_piece", sorted(WINNING_DOMAIN))
def test_removing_any_piece_breaks_the_win(missing_piece: str) -> None:
    notation = {key: value for key, value in WINNING_DOMAIN.items() if key != missing_piece}
    board = Board.from_notation(notation, 3)
    assert not has_won(1, board)


@pytest.mark.parametrize(
    "key, replacement",
    [
        ("office", "heel@p1_office"),
        ("rostrum1", "mark@p1_rostrum1"),
        ("rostrum2", "pawn@p1_rostrum2"),
    ],
)
def test_wrong_rank_breaks_the_win(key: str, replacement: str) -> None:
    board = Board.from_notation({**WINNING_DOMAIN, key: replacement}, 3)
    assert not has_won(1, board)


def test_shared_win() -> None:
    notation = dict(WINNING_DOMAIN)
    notation.update(
        {f"p2_{key}": value.replace("p1_", "p2_") for key, value in WINNING_DOMAIN.items()}
    )
    board = Board.from_notation(notation, 4)
    assert winners(board) == [1, 2]
    assert winners(board, [2, 3]) == [2]


def test_nobody_won_yet() -> None:
    assert winners(Board.campaign_setup(5)) == []


# --- PROMOTION ---
@pytest.mark.parametrize(
    "piece_id, tier, reason",
    [
        ("seat", PromotionTier.SEAT, ""),
        ("rostrum", PromotionTier.ROSTRUM, ""),
        ("seat", PromotionTier.ROSTRUM, "piece must be in a rostrum for this promotion"),
        ("office", PromotionTier.OFFICE, "only marks and heels can be promoted"),
        ("other", PromotionTier.SEAT, "piece must be in player 1's domain"),
        ("community", PromotionTier.SEAT, "piece must be in player 1's domain"),
        ("ghost", PromotionTier.SEAT, "unknown piece 'ghost'"),
    ],
)
def test_can_promote(piece_id: str, tier: PromotionTier, reason: str) -> None:
    board = Board.from_notation(
        {
            "seat": "mark@p1_seat2",
            "rostrum": "heel@p1_rostrum1",
            "office": "pawn@p1_office",
            "other": "mark@p2_seat1",
            "community": "mark@community1",
            "heels": "heel@community2",
            "pawns": "pawn@community3",
        },
        3,
    )
    verdict = can_promote(piece_id, tier, 1, board)
    assert bool(verdict) is (reason == "")
    if reason:
        assert verdict.reason == reason


def test_promotion_needs_community_stock() -> None:
    board = Board.from_notation(
        {"a": "heel@p1_rostrum1", "b": "heel@p1_rostrum2", "stock": "pawn@community1"}, 3
    )
    assert can_promote("b", PromotionTier.ROSTRUM, 1, board)

    board = board.promote_piece("a")  # uses up the only pawn in the community
    verdict = can_promote("b", PromotionTier.ROSTRUM, 1, board)
    assert not verdict
    assert verdict.reason == "no pawn left in the community to promote to"


def test_promote() -> None:
    board = Board.from_notation({"rostrum": "heel@p1_rostrum1", "stock": "pawn@community1"}, 3)
    verdict, promoted = promote("rostrum", PromotionTier.ROSTRUM, 1, board)
    assert verdict
    assert promoted.piece("rostrum").rank == Rank.PAWN
    assert promoted.piece("stock").rank == Rank.HEEL

    verdict, unchanged = promote("rostrum", PromotionTier.ROSTRUM, 1, promoted)
    assert not verdict  # already a pawn
    assert unchanged is promoted

    verdict, unchanged = promote("rostrum", PromotionTier.OFFICE, 1, board)
    assert not verdict
    assert unchanged is board
