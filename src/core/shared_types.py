"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    CAMPAIGN = "campaign"
    PENDING_ACCEPTANCE = "pending acceptance"
    PENDING_CHALLENGE = "pending challenge"
    TAKE_ADVANTAGE = "take advantage"
    CORRECTION_REQUIRED = "correction required"
    BUREAUCRACY = "bureaucracy"
    FINISHED = "finished"


# --- The API layer and the domain layer use the same names for ranks and move types.
# --- NOTE Historically the ranks were called Mark / Heel / Pawn (low / mid / high). We keep the historical names.


class Rank(StrEnum):
    MARK = "mark"
    HEEL = "heel"
    PAWN = "pawn"


class MoveType(StrEnum):
    ADVANCE = "advance"
    WITHDRAW = "withdraw"
    ORGANIZE = "organize"
    ASSIST = "assist"
    REMOVE = "remove"
    INFLUENCE = "influence"


class PromotionTier(StrEnum):
    OFFICE = "office"
    ROSTRUM = "rostrum"
    SEAT = "seat"


class AdvantageChoice(StrEnum):
    DECLINE = "decline"
    RECOVER_CREDIBILITY = "recover credibility"
    PURCHASE = "purchase"
