"""Win condition and promotion checks"""

from typing import Iterable, Optional

from src.core.shared_types import PromotionTier, Rank
from src.kred.board import Board
from src.kred.location import LocationKind
from src.kred.pieces import next_rank
from src.kred.topology import office_of, rostrums_of, seats_of
from src.kred.verdict import Verdict

PromotionVerdict = Verdict

PROMOTION_LOCATION: dict[PromotionTier, LocationKind] = {
    PromotionTier.OFFICE: LocationKind.OFFICE,
    PromotionTier.ROSTRUM: LocationKind.ROSTRUM,
    PromotionTier.SEAT: LocationKind.SEAT,
}


def has_won(player_id: int, board: Board) -> bool:
    """
    The winning configuration of a domain:
    * a Pawn in the office
    * a Heel on each rostrum
    * all six seats occupied (any rank)
    """
    office = board.occupant(office_of(player_id))
    if office is None or office.rank != Rank.PAWN:
        return False

    for rostrum in rostrums_of(player_id):
        piece = board.occupant(rostrum)
        if piece is None or piece.rank != Rank.HEEL:
            return False

    return all(board.is_occupied(seat) for seat in seats_of(player_id))


def winners(board: Board, player_ids: Optional[Iterable[int]] = None) -> list[int]:
    """All players in a winning configuration (empty: nobody, several: a shared win)"""
    if player_ids is None:
        player_ids = range(1, board.player_count + 1)
    return [player_id for player_id in player_ids if has_won(player_id, board)]


def can_promote(
    piece_id: str, tier: PromotionTier, player_id: int, board: Board
) -> PromotionVerdict:
    """
    A purchased promotion raises one piece a single rank by trading ranks with a community piece
    of that rank, so it is only possible while the community still holds one.
    The piece must sit in the buyer's own domain, on the kind of location the purchased tier names.
    """
    piece = board.piece(piece_id)
    if piece is None:
        return Verdict.illegal(f"unknown piece {piece_id!r}")
    if piece.owner != player_id:
        return Verdict.illegal(f"piece must be in player {player_id}'s domain")

    expected_kind = PROMOTION_LOCATION[tier]
    if piece.location.kind != expected_kind:
        return Verdict.illegal(f"piece must be in a {expected_kind.value} for this promotion")

    promoted_rank = next_rank(piece.rank)
    if promoted_rank is None:
        return Verdict.illegal("only marks and heels can be promoted")
    if board.community_piece_of(promoted_rank) is None:
        return Verdict.illegal(f"no {promoted_rank.value} left in the community to promote to")
    return Verdict.ok("valid promotion")


def promote(piece_id: str, tier: PromotionTier, player_id: int, board: Board) -> tuple[PromotionVerdict, Board]:
    """Check and perform a promotion. The board comes back unchanged when the promotion is not allowed."""
    verdict = can_promote(piece_id, tier, player_id, board)
    if not verdict:
        return verdict, board
    return verdict, board.promote_piece(piece_id)
