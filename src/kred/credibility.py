"""
Credibility state machine

Every player holds 0-3 credibility (starting at 3). The tile-play protocol triggers fixed losses:

| event                                   | loses credibility        |
|-----------------------------------------|--------------------------|
| receiver rejects the tile               | tile player              |
| a challenge proves the play illegitimate| tile player AND receiver |
| a challenge fails                       | challenger               |

A successful challenger may recover one point instead of taking another advantage (see bureaucracy.py).
Every change is clamped to the allowed range.
"""

import logging
from enum import StrEnum
from typing import Optional

from src.core.rules_config import DEFAULT_RULES, KredRules
from src.kred.players import Player

logger = logging.getLogger(__name__)


class CredibilityLoss(StrEnum):
    TILE_REJECTED = "tile rejected"
    CHALLENGE_SUCCEEDED = "challenge succeeded"
    CHALLENGE_FAILED = "challenge failed"


class Role(StrEnum):
    TILE_PLAYER = "tile player"
    RECEIVER = "receiver"
    CHALLENGER = "challenger"


CREDIBILITY_LOSSES: dict[CredibilityLoss, tuple[Role, ...]] = {
    CredibilityLoss.TILE_REJECTED: (Role.TILE_PLAYER,),
    CredibilityLoss.CHALLENGE_SUCCEEDED: (Role.TILE_PLAYER, Role.RECEIVER),
    CredibilityLoss.CHALLENGE_FAILED: (Role.CHALLENGER,),
}


def clamp(credibility: int, rules: KredRules = DEFAULT_RULES) -> int:
    return max(rules.min_credibility, min(rules.max_credibility, credibility))


def deduct(credibility: int, amount: int = 1, rules: KredRules = DEFAULT_RULES) -> int:
    return clamp(credibility - amount, rules)


def restore(credibility: int, amount: int = 1, rules: KredRules = DEFAULT_RULES) -> int:
    return clamp(credibility + amount, rules)


def apply_loss(
    players: dict[int, Player],
    loss: CredibilityLoss,
    tile_player: int,
    receiver: int,
    challenger: Optional[int] = None,
    rules: KredRules = DEFAULT_RULES,
) -> dict[int, Player]:
    """Return the players after the credibility consequence of `loss` (input is left untouched)"""
    role_holders = {
        Role.TILE_PLAYER: tile_player,
        Role.RECEIVER: receiver,
        Role.CHALLENGER: challenger,
    }
    updated = dict(players)
    for role in CREDIBILITY_LOSSES[loss]:
        player_id = role_holders[role]
        if player_id is None or player_id not in updated:
            continue
        player = updated[player_id]
        new_credibility = deduct(player.credibility, rules=rules)
        updated[player_id] = player.with_credibility(new_credibility)
        logger.info(
            "Player %s (%s) credibility %s -> %s: %s",
            player_id,
            role.value,
            player.credibility,
            new_credibility,
            loss.value,
        )
    return updated


def can_challenge(player: Player, rules: KredRules = DEFAULT_RULES) -> bool:
    return player.credibility > rules.min_credibility


def can_inspect_tile(player: Player, rules: KredRules = DEFAULT_RULES) -> bool:
    """Privately viewing a tile received face down also costs trust you no longer have at 0"""
    return player.credibility > rules.min_credibility


def can_recover(player: Player, rules: KredRules = DEFAULT_RULES) -> bool:
    return player.credibility < rules.max_credibility
