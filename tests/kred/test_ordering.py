"""Unit tests for src/kred/ordering.py"""

from typing import Optional

import pytest

from src.kred.ordering import OrderCursor, bureaucracy_order, challenge_order
from src.kred.players import BankedTile, Player


@pytest.mark.parametrize(
    "tile_player, player_count, receiver, expected",
    [
        (1, 4, 3, [2, 4]),
        (1, 4, None, [2, 3, 4]),
        (1, 3, None, [3, 2]),  # 3-player rotation 1 -> 3 -> 2
        (1, 3, 3, [2]),
        (2, 3, 1, [3]),
        (4, 5, 2, [5, 1, 3]),
    ],
)
def test_challenge_order(
    tile_player: int, player_count: int, receiver: Optional[int], expected: list[int]
) -> None:
    assert challenge_order(tile_player, player_count, receiver) == expected


@pytest.mark.parametrize("tile_player, player_count", [(1, 2), (1, 6), (0, 4), (5, 4)])
def test_challenge_order_for_malformed_input(tile_player: int, player_count: int) -> None:
    assert challenge_order(tile_player, player_count) == []


def test_bureaucracy_order_richest_first() -> None:
    players = [
        Player(1, "Ada", bank=(BankedTile("05"),)),  # 2
        Player(2, "Bo", bank=(BankedTile("24"),)),  # 9
        Player(3, "Cy", bank=(BankedTile("01"), BankedTile("01"))),  # 2
        Player(4, "Di", bank=(BankedTile("24", face_up=True),)),  # 0
    ]
    assert bureaucracy_order(players) == [2, 1, 3, 4]


def test_order_cursor() -> None:
    cursor = OrderCursor((2, 4))
    assert cursor.current == 2
    cursor = cursor.advanced()
    assert cursor.current == 4
    cursor = cursor.advanced()
    assert not cursor.has_more
    assert cursor.current is None
    assert cursor.advanced() == cursor  # never runs past the end


def test_empty_cursor() -> None:
    assert OrderCursor(()).current is None
