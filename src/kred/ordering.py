"""
Turn and challenge ordering

Both orders are recomputed on demand. The only state kept is the cursor walking the challenge order,
which only ever moves forward and is replaced when a new tile play starts.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Self

from src.kred.players import Player
from src.kred.topology import is_supported_player_count, next_player_clockwise


def challenge_order(
    tile_player: int, player_count: int, receiver: Optional[int] = None
) -> list[int]:
    """
    Bystanders allowed to challenge, in the order they are asked:
    clockwise, starting with the player after the tile player, skipping the tile player and the receiver.

    ex) challenge_order(1, 4, receiver=3) -> [2, 4]
    """
    if not is_supported_player_count(player_count):
        return []
    if not 1 <= tile_player <= player_count:
        return []

    order: list[int] = []
    player = next_player_clockwise(tile_player, player_count)
    while player is not None and player != tile_player:
        if player != receiver:
            order.append(player)
        player = next_player_clockwise(player, player_count)
    return order


def bureaucracy_order(players: Iterable[Player]) -> list[int]:
    """Richest player first. Ties are broken by the lowest player id."""
    return [
        player.id
        for player in sorted(players, key=lambda player: (-player.currency, player.id))
    ]


@dataclass(frozen=True)
class OrderCursor:
    """Position within a challenge / bureaucracy order"""

    order: tuple[int, ...]
    index: int = 0

    @property
    def current(self) -> Optional[int]:
        return self.order[self.index] if self.has_more else None

    @property
    def has_more(self) -> bool:
        return self.index < len(self.order)

    def advanced(self) -> Self:
        return type(self)(self.order, min(self.index + 1, len(self.order)))
