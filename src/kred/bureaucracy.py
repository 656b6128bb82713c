"""
Bureaucracy economy

Once every hand is empty, players take turns (richest first, see `bureaucracy_order()`) buying items off a menu
with the currency of the face-down tiles in their bank. A purchased move or promotion is then performed on the
board and checked here: legal, and of the type that was paid for.

The same menu is used by a successful challenger who takes advantage of the challenge.
"""

from collections import Counter
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any, Iterable, Optional, Self

from src.core.shared_types import AdvantageChoice, MoveType, PromotionTier
from src.kred.board import Board
from src.kred.credibility import can_recover
from src.kred.moves import Move, check_moves
from src.kred.ordering import OrderCursor, bureaucracy_order
from src.kred.players import Player
from src.kred.tiles import tile_value
from src.kred.verdict import Verdict
from src.kred.win import can_promote

PurchaseVerdict = Verdict


class MenuItemKind(StrEnum):
    MOVE = "move"
    PROMOTION = "promotion"
    CREDIBILITY = "credibility"


@dataclass(frozen=True)
class MenuItem:
    item_id: str
    kind: MenuItemKind
    price: int
    move_type: Optional[MoveType] = None
    tier: Optional[PromotionTier] = None

    @property
    def description(self) -> str:
        if self.kind == MenuItemKind.PROMOTION and self.tier:
            return f"Promote a piece in a {self.tier.value.capitalize()} from Mark to Heel OR Heel to Pawn"
        if self.kind == MenuItemKind.MOVE and self.move_type:
            return f"Perform one {self.move_type.value.capitalize()} move"
        return "Recover one point of credibility"


# Menu, most expensive first: (item, kind, move type / promotion tier)
_MENU_LAYOUT: list[tuple[str, MenuItemKind, Optional[MoveType], Optional[PromotionTier]]] = [
    ("promote_office", MenuItemKind.PROMOTION, None, PromotionTier.OFFICE),
    ("move_assist", MenuItemKind.MOVE, MoveType.ASSIST, None),
    ("move_remove", MenuItemKind.MOVE, MoveType.REMOVE, None),
    ("move_influence", MenuItemKind.MOVE, MoveType.INFLUENCE, None),
    ("promote_rostrum", MenuItemKind.PROMOTION, None, PromotionTier.ROSTRUM),
    ("move_advance", MenuItemKind.MOVE, MoveType.ADVANCE, None),
    ("move_withdraw", MenuItemKind.MOVE, MoveType.WITHDRAW, None),
    ("move_organize", MenuItemKind.MOVE, MoveType.ORGANIZE, None),
    ("promote_seat", MenuItemKind.PROMOTION, None, PromotionTier.SEAT),
    ("credibility", MenuItemKind.CREDIBILITY, None, None),
]

# Prices drop with more players at the table
_PRICES_THREE_FOUR: dict[str, int] = {
    "promote_office": 18,
    "move_assist": 15,
    "move_remove": 15,
    "move_influence": 15,
    "promote_rostrum": 12,
    "move_advance": 9,
    "move_withdraw": 9,
    "move_organize": 9,
    "promote_seat": 6,
    "credibility": 3,
}
_PRICES_FIVE: dict[str, int] = {
    "promote_office": 12,
    "move_assist": 10,
    "move_remove": 10,
    "move_influence": 10,
    "promote_rostrum": 8,
    "move_advance": 6,
    "move_withdraw": 6,
    "move_organize": 6,
    "promote_seat": 4,
    "credibility": 2,
}
MENU_PRICES: dict[int, dict[str, int]] = {
    3: _PRICES_THREE_FOUR,
    4: _PRICES_THREE_FOUR,
    5: _PRICES_FIVE,
}


def bureaucracy_menu(player_count: int) -> list[MenuItem]:
    prices = MENU_PRICES.get(player_count)
    if prices is None:
        return []
    return [
        MenuItem(item_id, kind, prices[item_id], move_type, tier)
        for item_id, kind, move_type, tier in _MENU_LAYOUT
    ]


def menu_item(item_id: str, player_count: int) -> Optional[MenuItem]:
    return next(
        (item for item in bureaucracy_menu(player_count) if item.item_id == item_id),
        None,
    )


def can_afford(item: MenuItem, remaining_currency: int) -> bool:
    return item.price <= remaining_currency


def affordable_items(menu: Iterable[MenuItem], remaining_currency: int) -> list[MenuItem]:
    return [item for item in menu if can_afford(item, remaining_currency)]


# --- PURCHASED ACTIONS ---
@dataclass(frozen=True)
class BureaucracyPurchase:
    buyer: int
    item: MenuItem
    moves: tuple[Move, ...] = ()
    promoted_piece: Optional[str] = None


def validate_purchased_action(purchase: BureaucracyPurchase, board: Board) -> PurchaseVerdict:
    """
    Check the action performed for a purchase against the board BEFORE the action.
    ----

    * MOVE: at least one move, all made by the buyer, all legal in order, and at least one of the purchased type
    * PROMOTION: a promotable piece of the buyer's, on the location kind of the purchased tier
    * CREDIBILITY: nothing is performed on the board
    """
    item = purchase.item
    if item.kind == MenuItemKind.MOVE:
        return _validate_purchased_moves(purchase, board)

    if purchase.moves:
        return Verdict.illegal(f"{item.item_id} does not allow moving pieces")

    if item.kind == MenuItemKind.PROMOTION:
        if purchase.promoted_piece is None or item.tier is None:
            return Verdict.illegal("no piece was selected for promotion")
        return can_promote(purchase.promoted_piece, item.tier, purchase.buyer, board)

    if purchase.promoted_piece is not None:
        return Verdict.illegal(f"{item.item_id} does not allow promoting a piece")
    return Verdict.ok()


def _validate_purchased_moves(purchase: BureaucracyPurchase, board: Board) -> Verdict:
    moves = purchase.moves
    if not moves:
        return Verdict.illegal("no moves were performed")
    if purchase.promoted_piece is not None:
        return Verdict.illegal(f"{purchase.item.item_id} does not allow promoting a piece")
    if any(move.player_id != purchase.buyer for move in moves):
        return Verdict.illegal("only the buyer may perform the purchased move")

    legality = check_moves(list(moves), board)
    if not legality:
        return legality

    purchased = purchase.item.move_type
    if not any(move.move_type == purchased for move in moves):
        name = purchased.value if purchased else "move"
        return Verdict.illegal(f"expected a {name} move, but none was found")
    if len(moves) > 1:
        return Verdict.illegal(
            f"{purchase.item.item_id} buys a single {purchased.value} move, not {len(moves)} moves"
        )
    return Verdict.ok()


# --- TAKING ADVANTAGE OF A SUCCESSFUL CHALLENGE ---
def tiles_value(tile_ids: Iterable[str]) -> int:
    return sum(tile_value(tile_id) for tile_id in tile_ids)


def validate_payment(player: Player, tile_ids: list[str], price: int) -> Verdict:
    """Paying with tiles: they must all lie face down in the bank and cover the price"""
    available = Counter(player.face_down_tiles())
    offered = Counter(tile_ids)
    if any(offered[tile_id] > available[tile_id] for tile_id in offered):
        return Verdict.illegal("can only pay with face-down tiles from your own bank")
    if tiles_value(tile_ids) < price:
        return Verdict.illegal(
            f"selected tiles are worth {tiles_value(tile_ids)}, the price is {price}"
        )
    return Verdict.ok()


def validate_take_advantage(
    choice: AdvantageChoice,
    challenger: Player,
    item: Optional[MenuItem] = None,
    paid_tiles: Optional[list[str]] = None,
) -> Verdict:
    if choice == AdvantageChoice.DECLINE:
        return Verdict.ok()
    if choice == AdvantageChoice.RECOVER_CREDIBILITY:
        if not can_recover(challenger):
            return Verdict.illegal("credibility is already at its maximum")
        return Verdict.ok()

    if item is None:
        return Verdict.illegal("select a menu item to purchase")
    if item.kind == MenuItemKind.CREDIBILITY and not can_recover(challenger):
        return Verdict.illegal("credibility is already at its maximum")
    return validate_payment(challenger, paid_tiles or [], item.price)


# --- BUREAUCRACY ROUND ---
@dataclass(frozen=True)
class BureaucracyState:
    """Whose turn it is in the bureaucracy, and how much they have left to spend"""

    cursor: OrderCursor
    remaining_currency: int = 0
    purchases: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def start(cls, players: Iterable[Player]) -> Self:
        players = list(players)
        cursor = OrderCursor(tuple(bureaucracy_order(players)))
        return cls(cursor, _starting_currency(cursor, players))

    @property
    def current_player(self) -> Optional[int]:
        return self.cursor.current

    @property
    def is_over(self) -> bool:
        return not self.cursor.has_more

    def after_purchase(self, item: MenuItem) -> Self:
        return replace(
            self,
            remaining_currency=self.remaining_currency - item.price,
            purchases=self.purchases + (item.item_id,),
        )

    def next_turn(self, players: Iterable[Player]) -> Self:
        cursor = self.cursor.advanced()
        return type(self)(cursor, _starting_currency(cursor, list(players)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "order": list(self.cursor.order),
            "index": self.cursor.index,
            "remaining_currency": self.remaining_currency,
            "purchases": list(self.purchases),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            OrderCursor(tuple(data["order"]), data["index"]),
            data["remaining_currency"],
            tuple(data.get("purchases", ())),
        )


def _starting_currency(cursor: OrderCursor, players: list[Player]) -> int:
    current = cursor.current
    return next((player.currency for player in players if player.id == current), 0)
