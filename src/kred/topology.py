"""
Static board graph for each supported player count.

Every domain is laid out the same way:
* seats 1-3 support rostrum 1, seats 4-6 support rostrum 2
* both rostrums support the office

What differs per player count is how the domains are glued together around the table
(which seat 6 touches which seat 1, and which rostrums face each other across a domain boundary).
Pure lookup tables: nothing in here depends on the pieces on the board.
"""

from typing import Optional

from src.core.rules_config import DEFAULT_RULES
from src.kred.location import (
    COMMUNITY_SPACES,
    ROSTRUMS_PER_DOMAIN,
    SEATS_PER_DOMAIN,
    Location,
)

PLAYER_COUNTS: tuple[int, ...] = DEFAULT_RULES.supported_player_counts
SEATS_PER_ROSTRUM = DEFAULT_RULES.seats_per_rostrum

# Order of the domains when walking clockwise around the table.
# NOTE: the 3-player board is printed with the domains in the order 1 -> 3 -> 2.
CLOCKWISE_SEATING: dict[int, tuple[int, ...]] = {
    3: (1, 3, 2),
    4: (1, 2, 3, 4),
    5: (1, 2, 3, 4, 5),
}

# Rostrum pairs facing each other across a domain boundary (bidirectional), as printed on each board.
ROSTRUM_ADJACENCY: dict[int, tuple[tuple[str, str], ...]] = {
    3: (
        ("p1_rostrum2", "p3_rostrum1"),
        ("p3_rostrum2", "p2_rostrum1"),
        ("p2_rostrum2", "p1_rostrum1"),
    ),
    4: (
        ("p1_rostrum2", "p4_rostrum1"),
        ("p4_rostrum2", "p3_rostrum1"),
        ("p3_rostrum2", "p2_rostrum1"),
        ("p2_rostrum2", "p1_rostrum1"),
    ),
    5: (
        ("p1_rostrum2", "p5_rostrum1"),
        ("p5_rostrum2", "p4_rostrum1"),
        ("p4_rostrum2", "p3_rostrum1"),
        ("p3_rostrum2", "p2_rostrum1"),
        ("p2_rostrum2", "p1_rostrum1"),
    ),
}

LocationLike = Location | str


def as_location(location: Optional[LocationLike]) -> Optional[Location]:
    """Accept either a parsed Location or a raw location id"""
    if isinstance(location, Location):
        return location
    return Location.from_id(location)


def is_supported_player_count(player_count: int) -> bool:
    return player_count in PLAYER_COUNTS


# --- PLAYER ROTATION ---
def next_player_clockwise(player_id: int, player_count: int) -> Optional[int]:
    seating = CLOCKWISE_SEATING.get(player_count)
    if seating is None or player_id not in seating:
        return None
    return seating[(seating.index(player_id) + 1) % len(seating)]


def previous_player_clockwise(player_id: int, player_count: int) -> Optional[int]:
    seating = CLOCKWISE_SEATING.get(player_count)
    if seating is None or player_id not in seating:
        return None
    return seating[(seating.index(player_id) - 1) % len(seating)]


# --- DOMAIN CONTENTS ---
def seats_of(player_id: int) -> tuple[Location, ...]:
    return tuple(Location.seat(player_id, n) for n in range(1, SEATS_PER_DOMAIN + 1))


def rostrums_of(player_id: int) -> tuple[Location, ...]:
    return tuple(
        Location.rostrum(player_id, n) for n in range(1, ROSTRUMS_PER_DOMAIN + 1)
    )


def office_of(player_id: int) -> Location:
    return Location.office(player_id)


def domain_of(player_id: int) -> tuple[Location, ...]:
    """All nine locations of a domain (6 seats, 2 rostrums, 1 office)"""
    return seats_of(player_id) + rostrums_of(player_id) + (office_of(player_id),)


def community_of(player_count: int) -> tuple[Location, ...]:
    return tuple(
        Location.community(n)
        for n in range(1, COMMUNITY_SPACES.get(player_count, 0) + 1)
    )


def locations_for(player_count: int) -> frozenset[Location]:
    """Every location of the board used for the given number of players (empty for unsupported counts)"""
    if not is_supported_player_count(player_count):
        return frozenset()
    locations: set[Location] = set(community_of(player_count))
    for player_id in range(1, player_count + 1):
        locations.update(domain_of(player_id))
    return frozenset(locations)


def owner_of(location: Optional[LocationLike]) -> Optional[int]:
    """Player owning the location, None for community spaces or unparseable ids"""
    parsed = as_location(location)
    return parsed.owner if parsed else None


# --- HIERARCHY ---
def supporting_seats_of(rostrum: LocationLike) -> tuple[Location, ...]:
    """The three seats a rostrum rests on. Empty tuple if the location is not a rostrum."""
    parsed = as_location(rostrum)
    if parsed is None or not parsed.is_rostrum:
        return ()
    first = (parsed.ordinal - 1) * SEATS_PER_ROSTRUM + 1
    return tuple(
        Location.seat(parsed.owner, n) for n in range(first, first + SEATS_PER_ROSTRUM)
    )


def rostrum_supported_by(seat: LocationLike) -> Optional[Location]:
    """Inverse of `supporting_seats_of()`"""
    parsed = as_location(seat)
    if parsed is None or not parsed.is_seat:
        return None
    return Location.rostrum(parsed.owner, (parsed.ordinal - 1) // SEATS_PER_ROSTRUM + 1)


# --- ADJACENCY ---
def adjacent_seats(seat: LocationLike, player_count: int) -> tuple[Location, ...]:
    """
    The two seats next to a seat.
    ----

    * Inside a domain, seat n touches seats n-1 and n+1.
    * Seat 1 touches seat 6 of the previous domain (clockwise), seat 6 touches seat 1 of the next domain.

    Returns an empty tuple for malformed ids / unsupported player counts.
    """
    parsed = as_location(seat)
    if parsed is None or not parsed.is_seat or not parsed.is_valid_for(player_count):
        return ()

    owner, number = parsed.owner, parsed.ordinal
    neighbours: list[Location] = []
    if number > 1:
        neighbours.append(Location.seat(owner, number - 1))
    else:
        previous_player = previous_player_clockwise(owner, player_count)
        neighbours.append(Location.seat(previous_player, SEATS_PER_DOMAIN))

    if number < SEATS_PER_DOMAIN:
        neighbours.append(Location.seat(owner, number + 1))
    else:
        next_player = next_player_clockwise(owner, player_count)
        neighbours.append(Location.seat(next_player, 1))
    return tuple(neighbours)


def are_seats_adjacent(
    first: LocationLike, second: LocationLike, player_count: int
) -> bool:
    other = as_location(second)
    return other is not None and other in adjacent_seats(first, player_count)


def adjacent_rostrum(rostrum: LocationLike, player_count: int) -> Optional[Location]:
    """The rostrum facing this one across a domain boundary, if any"""
    parsed = as_location(rostrum)
    if parsed is None or not parsed.is_rostrum:
        return None
    rostrum_id = parsed.to_id()
    for first, second in ROSTRUM_ADJACENCY.get(player_count, ()):
        if first == rostrum_id:
            return Location.from_id(second)
        if second == rostrum_id:
            return Location.from_id(first)
    return None


def are_rostrums_adjacent(
    first: LocationLike, second: LocationLike, player_count: int
) -> bool:
    other = as_location(second)
    return other is not None and adjacent_rostrum(first, player_count) == other

