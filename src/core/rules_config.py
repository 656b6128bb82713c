"""Declarative rule constants. Kept in one place so alternative rule sets stay a one-line change."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class KredRules:
    """Numbers the rules engine relies on."""

    starting_credibility: int = 3
    max_credibility: int = 3
    min_credibility: int = 0
    seats_per_domain: int = 6
    rostrums_per_domain: int = 2
    seats_per_rostrum: int = 3
    max_moves_per_tile_play: int = 2
    supported_player_counts: tuple[int, ...] = (3, 4, 5)


DEFAULT_RULES = KredRules()
