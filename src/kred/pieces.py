"""Defines the ranks of Kred pieces and the piece stock per player count"""

from dataclasses import dataclass, replace
from typing import Optional, Self

from src.core.shared_types import Rank
from src.kred.location import Location

# Promotion order, lowest first
RANK_ORDER: tuple[Rank, ...] = (Rank.MARK, Rank.HEEL, Rank.PAWN)

RANK_LEVEL: dict[Rank, int] = {rank: level for level, rank in enumerate(RANK_ORDER)}

# Number of (Mark, Heel, Pawn) pieces in the box for each board
PIECE_COUNTS: dict[int, dict[Rank, int]] = {
    3: {Rank.MARK: 12, Rank.HEEL: 9, Rank.PAWN: 3},
    4: {Rank.MARK: 14, Rank.HEEL: 13, Rank.PAWN: 4},
    5: {Rank.MARK: 18, Rank.HEEL: 17, Rank.PAWN: 5},
}


def is_lower_rank(rank: Rank, other: Rank) -> bool:
    return RANK_LEVEL[rank] < RANK_LEVEL[other]


def next_rank(rank: Rank) -> Optional[Rank]:
    """Rank reached after a single promotion step. None for the highest rank."""
    level = RANK_LEVEL[rank]
    if level + 1 >= len(RANK_ORDER):
        return None
    return RANK_ORDER[level + 1]


@dataclass(frozen=True)
class Piece:
    id: str
    rank: Rank
    location: Location

    @property
    def owner(self) -> Optional[int]:
        """Player whose domain the piece currently sits in (None while in the community)"""
        return self.location.owner

    @property
    def in_community(self) -> bool:
        return self.location.is_community

    def moved_to(self, location: Location) -> Self:
        return replace(self, location=location)

    def with_rank(self, rank: Rank) -> Self:
        return replace(self, rank=rank)

    def promoted(self) -> Self:
        """
        Rank only ever goes up, one step at a time.
        The highest rank stays where it is (callers check `next_rank()` first).
        """
        new_rank = next_rank(self.rank)
        return replace(self, rank=new_rank) if new_rank else self
