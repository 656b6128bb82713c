"""Players, their hands of tiles, and the banks of tiles they received"""

import random
from dataclasses import dataclass, field, replace
from typing import Iterable, Optional, Self

from src.core.models import PlayerModel
from src.core.rules_config import DEFAULT_RULES
from src.kred.notation import tile_from_notation, tile_to_notation
from src.kred.tiles import tile_value, tiles_for


@dataclass(frozen=True)
class BankedTile:
    """A received tile. Face down it is worth its currency value, face up it is worth nothing."""

    tile_id: str
    face_up: bool = False

    @property
    def value(self) -> int:
        return 0 if self.face_up else tile_value(self.tile_id)


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    credibility: int = DEFAULT_RULES.starting_credibility
    hand: tuple[str, ...] = field(default_factory=tuple)
    bank: tuple[BankedTile, ...] = field(default_factory=tuple)

    @classmethod
    def from_model(cls, player_id: int, model: PlayerModel) -> Self:
        bank = tuple(BankedTile(*tile_from_notation(text)) for text in model.bank)
        return cls(player_id, model.name, model.credibility, tuple(model.hand), bank)

    def to_model(self) -> PlayerModel:
        return PlayerModel(
            name=self.name,
            credibility=self.credibility,
            hand=list(self.hand),
            bank=[tile_to_notation(tile.tile_id, tile.face_up) for tile in self.bank],
        )

    @property
    def currency(self) -> int:
        """Sum of the face-down tiles in the bank"""
        return sum(tile.value for tile in self.bank)

    def face_down_tiles(self) -> list[str]:
        return [tile.tile_id for tile in self.bank if not tile.face_up]

    def holds(self, tile_id: str) -> bool:
        return tile_id in self.hand

    # --- NEW SNAPSHOTS ---
    def with_credibility(self, credibility: int) -> Self:
        return replace(self, credibility=credibility)

    def without_tile(self, tile_id: str) -> Self:
        hand = list(self.hand)
        hand.remove(tile_id)
        return replace(self, hand=tuple(hand))

    def with_banked(self, tile_id: str, face_up: bool) -> Self:
        return replace(self, bank=self.bank + (BankedTile(tile_id, face_up),))

    def spend(self, tile_ids: Iterable[str]) -> Self:
        """Hand over face-down tiles from the bank (they leave the game)"""
        bank = list(self.bank)
        for tile_id in tile_ids:
            bank.remove(BankedTile(tile_id, face_up=False))
        return replace(self, bank=tuple(bank))

    def with_hand(self, hand: Iterable[str]) -> Self:
        return replace(self, hand=tuple(hand))

    def with_empty_bank(self) -> Self:
        return replace(self, bank=())


def deal_tiles(player_count: int, seed: Optional[int] = None) -> dict[int, list[str]]:
    """Shuffle the tiles in play and deal them round-robin, starting with player 1"""
    tiles = tiles_for(player_count)
    random.Random(seed).shuffle(tiles)
    hands: dict[int, list[str]] = {player_id: [] for player_id in range(1, player_count + 1)}
    for index, tile_id in enumerate(tiles):
        hands[index % player_count + 1].append(tile_id)
    return hands


def seat_players(names: list[str], seed: Optional[int] = None) -> dict[int, Player]:
    """Player ids follow the order of the names (1-based), each with a freshly dealt hand"""
    hands = deal_tiles(len(names), seed)
    return {
        player_id: Player(player_id, name, hand=tuple(hands[player_id]))
        for player_id, name in enumerate(names, start=1)
    }
