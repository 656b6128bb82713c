"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Any, Optional

# Type aliases to make GameModel easier to read
PieceId = str
PieceNotation = str  # "<rank>@<location id>", see src/kred/notation.py
PlayerKey = str  # player id as a string (JSON object keys are always strings)
TileNotation = str  # "07" (face down) or "07*" (face up)


@dataclass
class PlayerModel:
    """Transport-safe representation of one player."""

    name: str
    credibility: int
    hand: list[str]
    bank: list[TileNotation]


@dataclass
class GameModel:
    """Transport-safe representation of a Kred game used between API, Service, DB, and Game layers."""

    player_count: int
    pieces: dict[PieceId, PieceNotation]
    players: dict[PlayerKey, PlayerModel]
    current_player: int
    status: str
    history: list[dict[PieceId, PieceNotation]] = field(default_factory=list)
    move_log: list[str] = field(default_factory=list)
    # Transient state of the tile play / bureaucracy round in progress (None outside of those phases)
    tile_play: Optional[dict[str, Any]] = None
    bureaucracy: Optional[dict[str, Any]] = None
    winners: list[int] = field(default_factory=list)
