"""
A location on the board (seat, rostrum, office, or community space)

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from src.core.rules_config import DEFAULT_RULES

# ASCII digits without leading zeros, so every location has exactly one id
_DOMAIN_PATTERN = re.compile(r"p([1-9][0-9]*)_(seat|rostrum|office)([1-9][0-9]*)?")
_COMMUNITY_PATTERN = re.compile(r"community([1-9][0-9]*)")

SEATS_PER_DOMAIN = DEFAULT_RULES.seats_per_domain
ROSTRUMS_PER_DOMAIN = DEFAULT_RULES.rostrums_per_domain

# Number of community spaces printed on each board
COMMUNITY_SPACES: dict[int, int] = {3: 18, 4: 27, 5: 40}


class LocationKind(StrEnum):
    SEAT = "seat"
    ROSTRUM = "rostrum"
    OFFICE = "office"
    COMMUNITY = "community"


# Promotion hierarchy within a domain: seat (low) -> rostrum (mid) -> office (high)
HIERARCHY_LEVEL: dict[LocationKind, int] = {
    LocationKind.SEAT: 1,
    LocationKind.ROSTRUM: 2,
    LocationKind.OFFICE: 3,
}


@dataclass(frozen=True)
class Location:
    """
    Tagged location identifier
    ---

    The string ids used by the front end ("p1_seat3", "p2_rostrum1", "p4_office", "community12")
    are parsed ONCE at the boundary into this value object. Everything downstream compares Locations.

    * owner is None for community spaces
    * ordinal is 1 for the office (a domain has a single office)
    """

    owner: Optional[int]
    kind: LocationKind
    ordinal: int = 1

    @classmethod
    def from_id(cls, location_id: Optional[str]) -> Optional[Location]:
        """Parse a location id. Returns None for anything that cannot be a location."""
        if not location_id:
            return None

        community = _COMMUNITY_PATTERN.fullmatch(location_id)
        if community:
            ordinal = int(community.group(1))
            return cls(None, LocationKind.COMMUNITY, ordinal)

        domain = _DOMAIN_PATTERN.fullmatch(location_id)
        if not domain:
            return None
        owner = int(domain.group(1))
        kind = LocationKind(domain.group(2))
        number = domain.group(3)

        # the office carries no number, seats and rostrums must carry one
        if kind == LocationKind.OFFICE:
            return cls(owner, kind) if number is None else None
        if number is None:
            return None

        ordinal = int(number)
        limit = SEATS_PER_DOMAIN if kind == LocationKind.SEAT else ROSTRUMS_PER_DOMAIN
        if not 1 <= ordinal <= limit:
            return None
        return cls(owner, kind, ordinal)

    @classmethod
    def seat(cls, owner: int, ordinal: int) -> Location:
        return cls(owner, LocationKind.SEAT, ordinal)

    @classmethod
    def rostrum(cls, owner: int, ordinal: int) -> Location:
        return cls(owner, LocationKind.ROSTRUM, ordinal)

    @classmethod
    def office(cls, owner: int) -> Location:
        return cls(owner, LocationKind.OFFICE)

    @classmethod
    def community(cls, ordinal: int) -> Location:
        return cls(None, LocationKind.COMMUNITY, ordinal)

    def to_id(self) -> str:
        if self.kind == LocationKind.COMMUNITY:
            return f"community{self.ordinal}"
        if self.kind == LocationKind.OFFICE:
            return f"p{self.owner}_office"
        return f"p{self.owner}_{self.kind.value}{self.ordinal}"

    @property
    def is_community(self) -> bool:
        return self.kind == LocationKind.COMMUNITY

    @property
    def is_seat(self) -> bool:
        return self.kind == LocationKind.SEAT

    @property
    def is_rostrum(self) -> bool:
        return self.kind == LocationKind.ROSTRUM

    @property
    def single_capacity(self) -> bool:
        """Domain locations hold one piece. Community spaces hold any number."""
        return not self.is_community

    def is_valid_for(self, player_count: int) -> bool:
        """Does this location exist on the board used for `player_count` players?"""
        if player_count not in COMMUNITY_SPACES:
            return False
        if self.is_community:
            return 1 <= self.ordinal <= COMMUNITY_SPACES[player_count]
        return self.owner is not None and 1 <= self.owner <= player_count

    def __str__(self) -> str:
        return self.to_id()
