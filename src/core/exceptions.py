"""
Exceptions raised by the orchestration layers (Game, Service, Repository, API models).

NOTE: the rule engine itself never raises for an illegal move. It returns a verdict.
These errors are for callers that break the protocol (wrong phase, wrong player, ...).
"""


class GameError(Exception):
    """Base class for everything the service layer should translate into a client error."""


class GameStateError(GameError):
    """Action is not allowed in the current phase of the game."""


class NotYourTurnError(GameError):
    """Another player is expected to act."""


class IllegalMoveError(GameError):
    """A move / tile play / purchase was checked and found illegal."""


class CredibilityError(GameError):
    """Player does not have the credibility required for the action."""


class InsufficientFundsError(GameError):
    """Player cannot pay for the requested bureaucracy item."""


class RepositoryError(GameError):
    """Record could not be found / stored."""


class InvalidRequestError(GameError):
    """Request payload could not be interpreted."""


class InvalidNotationError(GameError):
    """Stored board / tile notation cannot be interpreted."""
