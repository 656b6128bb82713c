"""
Played tile and challenge state

Lifecycle of one tile play:
    PENDING (waiting for the receiver) -> [receiver accepts] -> bystanders are asked in challenge order
        -> CHALLENGED (somebody contests) -> RESOLVED
        -> RESOLVED (nobody contests / the receiver rejected)

Both objects are immutable: every transition returns a new value, and the state is thrown away once the turn ends.
"""

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Optional, Self

from src.kred.board import Board
from src.kred.moves import Move
from src.kred.ordering import OrderCursor, challenge_order


class ChallengeStatus(StrEnum):
    PENDING = "pending"
    CHALLENGED = "challenged"
    RESOLVED = "resolved"


class ChallengeOutcome(StrEnum):
    REJECTED = "rejected"
    UNCHALLENGED = "unchallenged"
    CHALLENGE_FAILED = "challenge failed"
    CHALLENGE_SUCCEEDED = "challenge succeeded"


@dataclass(frozen=True)
class PlayedTile:
    """A tile handed to a receiver, with the moves made and the board as it was before them"""

    tile_id: str
    tile_player: int
    receiver: int
    moves: tuple[Move, ...]
    board_at_start: Board

    def to_dict(self) -> dict[str, Any]:
        return {
            "tile_id": self.tile_id,
            "tile_player": self.tile_player,
            "receiver": self.receiver,
            "moves": [move.to_dict() for move in self.moves],
            "board_at_start": self.board_at_start.to_notation(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], player_count: int) -> Self:
        return cls(
            tile_id=data["tile_id"],
            tile_player=data["tile_player"],
            receiver=data["receiver"],
            moves=tuple(Move.from_dict(move) for move in data["moves"]),
            board_at_start=Board.from_notation(data["board_at_start"], player_count),
        )


@dataclass(frozen=True)
class ChallengeState:
    status: ChallengeStatus = ChallengeStatus.PENDING
    receiver_accepted: bool = False
    challenger: Optional[int] = None
    cursor: OrderCursor = field(default_factory=lambda: OrderCursor(()))
    outcome: Optional[ChallengeOutcome] = None

    # --- TRANSITIONS ---
    def accepted(self, tile_player: int, player_count: int, receiver: int) -> Self:
        """The receiver accepts: line up the bystanders who may challenge"""
        order = tuple(challenge_order(tile_player, player_count, receiver))
        return replace(self, receiver_accepted=True, cursor=OrderCursor(order))

    def rejected(self) -> Self:
        return replace(self, status=ChallengeStatus.RESOLVED, outcome=ChallengeOutcome.REJECTED)

    def passed(self) -> Self:
        """The bystander currently asked declines to challenge"""
        return replace(self, cursor=self.cursor.advanced())

    def challenged_by(self, challenger: int) -> Self:
        return replace(self, status=ChallengeStatus.CHALLENGED, challenger=challenger)

    def resolved(self, outcome: ChallengeOutcome) -> Self:
        return replace(self, status=ChallengeStatus.RESOLVED, outcome=outcome)

    # --- QUERIES ---
    @property
    def next_challenger(self) -> Optional[int]:
        return self.cursor.current

    @property
    def has_more_challengers(self) -> bool:
        return self.cursor.has_more

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "receiver_accepted": self.receiver_accepted,
            "challenger": self.challenger,
            "order": list(self.cursor.order),
            "index": self.cursor.index,
            "outcome": self.outcome.value if self.outcome else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            status=ChallengeStatus(data["status"]),
            receiver_accepted=data["receiver_accepted"],
            challenger=data.get("challenger"),
            cursor=OrderCursor(tuple(data.get("order", ())), data.get("index", 0)),
            outcome=ChallengeOutcome(data["outcome"]) if data.get("outcome") else None,
        )
