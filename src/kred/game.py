"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating the tile-play protocol and the bureaucracy phase -->
the rule modules it calls never raise, the Game turns their verdicts into exceptions the service layer can report.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import (
    CredibilityError,
    GameStateError,
    IllegalMoveError,
    InsufficientFundsError,
    InvalidRequestError,
    NotYourTurnError,
)
from src.core.models import GameModel
from src.core.rules_config import DEFAULT_RULES, KredRules
from src.core.shared_types import AdvantageChoice, MoveType, Status
from src.kred.board import Board
from src.kred.bureaucracy import (
    BureaucracyPurchase,
    BureaucracyState,
    MenuItem,
    MenuItemKind,
    affordable_items,
    bureaucracy_menu,
    can_afford,
    menu_item,
    validate_purchased_action,
    validate_take_advantage,
)
from src.kred.challenge import ChallengeOutcome, ChallengeState, PlayedTile
from src.kred.credibility import (
    CredibilityLoss,
    apply_loss,
    can_challenge,
    can_inspect_tile,
    can_recover,
    restore,
)
from src.kred.moves import Move, legal_moves
from src.kred.notation import parse_location
from src.kred.players import Player, deal_tiles, seat_players
from src.kred.tiles import is_legitimate, is_perfect
from src.kred.topology import PLAYER_COUNTS, next_player_clockwise
from src.kred.win import winners as find_winners

logger = logging.getLogger(__name__)

# (piece id, destination location id), as submitted by a player
MoveRequest = tuple[str, str]


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board
    players: dict[int, Player]
    current_player: int
    status: Status
    history: list[dict[str, str]] = field(default_factory=list)  # board notation before every tile play
    move_log: list[str] = field(default_factory=list)
    played_tile: Optional[PlayedTile] = None
    challenge: Optional[ChallengeState] = None
    bureaucracy: Optional[BureaucracyState] = None
    winners: list[int] = field(default_factory=list)
    rules: KredRules = DEFAULT_RULES

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.status not in {status.value for status in Status}:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(status.value for status in Status)}"
            )

        board = Board.from_notation(model.pieces, model.player_count)
        players = {
            int(key): Player.from_model(int(key), player)
            for key, player in model.players.items()
        }
        tile_play = model.tile_play or {}
        played_tile = (
            PlayedTile.from_dict(tile_play["played_tile"], model.player_count)
            if tile_play.get("played_tile")
            else None
        )
        challenge = (
            ChallengeState.from_dict(tile_play["challenge"])
            if tile_play.get("challenge")
            else None
        )
        bureaucracy = (
            BureaucracyState.from_dict(model.bureaucracy) if model.bureaucracy else None
        )
        return cls(
            board=board,
            players=players,
            current_player=model.current_player,
            status=Status(model.status),
            history=list(model.history),
            move_log=list(model.move_log),
            played_tile=played_tile,
            challenge=challenge,
            bureaucracy=bureaucracy,
            winners=list(model.winners),
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        tile_play = None
        if self.played_tile is not None:
            tile_play = {
                "played_tile": self.played_tile.to_dict(),
                "challenge": self.challenge.to_dict() if self.challenge else None,
            }
        return GameModel(
            player_count=self.player_count,
            pieces=self.board.to_notation(),
            players={
                str(player_id): player.to_model()
                for player_id, player in self.players.items()
            },
            current_player=self.current_player,
            status=self.status.value,
            history=list(self.history),
            move_log=list(self.move_log),
            tile_play=tile_play,
            bureaucracy=self.bureaucracy.to_dict() if self.bureaucracy else None,
            winners=list(self.winners),
        )

    @classmethod
    def new_game(cls, names: list[str], seed: Optional[int] = None) -> Self:
        """Set up the campaign: pieces in their starting position, tiles dealt, player 1 to play."""
        if len(names) not in PLAYER_COUNTS:
            raise GameStateError(
                f"Cannot create new game for {len(names)} players. Kred is played with {', '.join(map(str, PLAYER_COUNTS))} players."
            )
        return cls(
            board=Board.campaign_setup(len(names)),
            players=seat_players(names, seed),
            current_player=1,
            status=Status.CAMPAIGN,
        )

    @property
    def player_count(self) -> int:
        return self.board.player_count

    @property
    def awaiting_player(self) -> Optional[int]:
        """Who the game is waiting for in the current phase (None once finished)"""
        if self.status == Status.PENDING_ACCEPTANCE and self.played_tile:
            return self.played_tile.receiver
        if self.status == Status.PENDING_CHALLENGE and self.challenge:
            return self.challenge.next_challenger
        if self.status == Status.TAKE_ADVANTAGE and self.challenge:
            return self.challenge.challenger
        if self.status == Status.CORRECTION_REQUIRED and self.played_tile:
            return self.played_tile.tile_player
        if self.status == Status.BUREAUCRACY and self.bureaucracy:
            return self.bureaucracy.current_player
        if self.status == Status.FINISHED:
            return None
        return self.current_player

    def legal_moves(self, player_id: int, move_type: Optional[MoveType] = None) -> list[Move]:
        """
        Service will request the set of legal moves.
        ----
        Only for the player who is expected to move pieces right now (campaign, correction, bureaucracy).
        """
        if self.status not in (Status.CAMPAIGN, Status.CORRECTION_REQUIRED, Status.BUREAUCRACY):
            raise GameStateError(f"No pieces can be moved right now. status: {self.status}")
        self._assert_your_turn(player_id, self.awaiting_player)
        return legal_moves(self.board, player_id, move_type)

    def seated_player(self, player_id: int) -> Player:
        if player_id not in self.players:
            raise InvalidRequestError(f"Unknown player: {player_id}")
        return self.players[player_id]

    # --- CAMPAIGN: TILE PLAY ---
    def play_tile(
        self, player_id: int, tile_id: str, receiver: int, moves: list[MoveRequest]
    ) -> None:
        """
        Play a tile face down to a receiver, and move pieces.
        -----

        The moves are NOT checked against the tile here: the receiver and the other players decide whether to trust it.
        Only what is physically impossible is refused (unknown pieces, locations off the board, occupied destinations).
        """
        self._assert_status(Status.CAMPAIGN)
        self._assert_your_turn(player_id, self.current_player)
        player = self.players[player_id]
        if not player.holds(tile_id):
            raise IllegalMoveError(f"Tile {tile_id} is not in player {player_id}'s hand")
        if receiver == player_id or receiver not in self.players:
            raise IllegalMoveError(f"Cannot play a tile to player {receiver}")

        board_at_start = self.board
        performed, board_after = self._perform_moves(player_id, moves, board_at_start)

        self.history.append(board_at_start.to_notation())
        self.board = board_after
        self.players[player_id] = player.without_tile(tile_id)
        self.played_tile = PlayedTile(tile_id, player_id, receiver, tuple(performed), board_at_start)
        self.challenge = ChallengeState()
        self._log_moves(performed)
        self._change_status(Status.PENDING_ACCEPTANCE)
        logger.info(
            "Player %s played a tile to player %s with %s move(s)", player_id, receiver, len(performed)
        )

    def view_played_tile(self, player_id: int) -> str:
        """The receiver may privately look at the tile before deciding (not at 0 credibility)"""
        self._assert_status(Status.PENDING_ACCEPTANCE)
        played = self._require_played_tile()
        self._assert_your_turn(player_id, played.receiver)
        if not can_inspect_tile(self.players[player_id], self.rules):
            raise CredibilityError("Player without credibility cannot look at the tile")
        return played.tile_id

    def receiver_decision(self, player_id: int, accept: bool) -> None:
        self._assert_status(Status.PENDING_ACCEPTANCE)
        played = self._require_played_tile()
        self._assert_your_turn(player_id, played.receiver)

        if accept:
            self._accept_tile(played)
        else:
            self._reject_tile(played)

    def challenger_decision(self, player_id: int, challenge: bool) -> None:
        """The bystander whose turn it is either passes or challenges the tile play"""
        self._assert_status(Status.PENDING_CHALLENGE)
        played = self._require_played_tile()
        state = self._require_challenge()
        self._assert_your_turn(player_id, state.next_challenger)

        if not challenge:
            self.challenge = state.passed()
            if not self.challenge.has_more_challengers:
                self._finalize_tile_play(played)
            return

        if not can_challenge(self.players[player_id], self.rules):
            raise CredibilityError("Player without credibility cannot challenge")
        self.challenge = state.challenged_by(player_id)
        self._resolve_challenge(played, player_id)

    def take_advantage(
        self,
        player_id: int,
        choice: AdvantageChoice,
        item_id: Optional[str] = None,
        paid_tiles: Optional[list[str]] = None,
        moves: Optional[list[MoveRequest]] = None,
        promoted_piece: Optional[str] = None,
    ) -> None:
        """A successful challenger may recover credibility or buy a menu item, paying with face-down bank tiles"""
        self._assert_status(Status.TAKE_ADVANTAGE)
        state = self._require_challenge()
        self._assert_your_turn(player_id, state.challenger)
        challenger = self.players[player_id]

        item = menu_item(item_id, self.player_count) if item_id else None
        if choice == AdvantageChoice.PURCHASE and item_id and item is None:
            raise InvalidRequestError(f"Unknown menu item: {item_id}")

        verdict = validate_take_advantage(choice, challenger, item, paid_tiles)
        if not verdict:
            raise IllegalMoveError(verdict.reason)

        if choice == AdvantageChoice.RECOVER_CREDIBILITY:
            self._recover_credibility(player_id)
        elif choice == AdvantageChoice.PURCHASE and item is not None:
            self._apply_purchase(player_id, item, moves or [], promoted_piece)
            self.players[player_id] = self.players[player_id].spend(paid_tiles or [])
        logger.info("Player %s took advantage of the challenge: %s", player_id, choice.value)

        self._change_status(Status.CORRECTION_REQUIRED)

    def correct_tile(self, player_id: int, moves: list[MoveRequest]) -> None:
        """After a rejection / successful challenge the tile player must redo the play, this time within the rules"""
        self._assert_status(Status.CORRECTION_REQUIRED)
        played = self._require_played_tile()
        self._assert_your_turn(player_id, played.tile_player)

        board_at_start = self.board
        performed, board_after = self._perform_moves(player_id, moves, board_at_start)
        verdict = is_legitimate(played.tile_id, performed, player_id, board_at_start, board_after)
        if not verdict:
            raise IllegalMoveError(f"Correction is not a valid play of the tile: {verdict.reason}")

        self.board = board_after
        self._log_moves(performed)
        logger.info("Player %s corrected the play of tile %s", player_id, played.tile_id)
        # the tile already lies face up in the receiver's bank
        self._finish_turn(played)

    # --- BUREAUCRACY ---
    def bureaucracy_options(self, player_id: int) -> list[MenuItem]:
        """Menu items the player can still pay for this turn"""
        self._assert_status(Status.BUREAUCRACY)
        state = self._require_bureaucracy()
        self._assert_your_turn(player_id, state.current_player)
        return affordable_items(bureaucracy_menu(self.player_count), state.remaining_currency)

    def purchase(
        self,
        player_id: int,
        item_id: str,
        moves: Optional[list[MoveRequest]] = None,
        promoted_piece: Optional[str] = None,
    ) -> None:
        self._assert_status(Status.BUREAUCRACY)
        state = self._require_bureaucracy()
        self._assert_your_turn(player_id, state.current_player)

        item = menu_item(item_id, self.player_count)
        if item is None:
            raise InvalidRequestError(f"Unknown menu item: {item_id}")
        if not can_afford(item, state.remaining_currency):
            raise InsufficientFundsError(
                f"{item_id} costs {item.price}, only {state.remaining_currency} left to spend"
            )
        if item.kind == MenuItemKind.CREDIBILITY and not can_recover(self.players[player_id], self.rules):
            raise CredibilityError("Credibility is already at its maximum")

        self._apply_purchase(player_id, item, moves or [], promoted_piece)
        self.bureaucracy = state.after_purchase(item)
        logger.info("Player %s purchased %s for %s", player_id, item_id, item.price)

    def end_bureaucracy_turn(self, player_id: int) -> None:
        self._assert_status(Status.BUREAUCRACY)
        state = self._require_bureaucracy()
        self._assert_your_turn(player_id, state.current_player)

        self.bureaucracy = state.next_turn(self.players.values())
        if self.bureaucracy.is_over:
            self._end_bureaucracy()

    # -- PRIVATE HELPERS ---
    def _assert_status(self, expected: Status) -> None:
        if self.status != expected:
            raise GameStateError(f"Expected game status {expected}, but status is: {self.status}")

    def _assert_your_turn(self, player_id: int, expected: Optional[int]) -> None:
        """You must wait for your turn before acting."""
        if player_id not in self.players:
            raise InvalidRequestError(f"Unknown player: {player_id}")
        if player_id != expected:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for player {expected} to act first."
            )

    def _require_played_tile(self) -> PlayedTile:
        if self.played_tile is None:
            raise GameStateError("No tile is being played")
        return self.played_tile

    def _require_challenge(self) -> ChallengeState:
        if self.challenge is None:
            raise GameStateError("No tile play is open for challenges")
        return self.challenge

    def _require_bureaucracy(self) -> BureaucracyState:
        if self.bureaucracy is None:
            raise GameStateError("The bureaucracy has not started")
        return self.bureaucracy

    def _perform_moves(
        self, player_id: int, requests: list[MoveRequest], board: Board
    ) -> tuple[list[Move], Board]:
        """Turn submitted (piece, destination) pairs into classified moves, one after the other"""
        if len(requests) > self.rules.max_moves_per_tile_play:
            raise IllegalMoveError(
                f"At most {self.rules.max_moves_per_tile_play} moves can be made, got {len(requests)}"
            )
        performed: list[Move] = []
        for piece_id, destination_id in requests:
            piece = board.piece(piece_id)
            if piece is None:
                raise InvalidRequestError(f"Unknown piece: {piece_id}")
            destination = parse_location(destination_id, self.player_count)
            if destination is None:
                raise InvalidRequestError(
                    f"{destination_id!r} is not a location on the {self.player_count}-player board"
                )
            if not board.is_vacant(destination):
                raise IllegalMoveError(f"{destination} is already occupied")
            move = Move.create(
                piece_id, piece.location, destination, player_id, self.player_count, piece.rank
            )
            performed.append(move)
            board = board.move_piece(piece_id, destination)
        return performed, board

    def _log_moves(self, moves: list[Move]) -> None:
        self.move_log.extend(move.to_text() for move in moves)

    def _accept_tile(self, played: PlayedTile) -> None:
        self.challenge = self._require_challenge().accepted(
            played.tile_player, self.player_count, played.receiver
        )
        logger.info("Player %s accepted the tile", played.receiver)
        if not self.challenge.has_more_challengers:
            self._finalize_tile_play(played)
            return
        self._change_status(Status.PENDING_CHALLENGE)

    def _reject_tile(self, played: PlayedTile) -> None:
        if is_perfect(
            played.tile_id, list(played.moves), played.tile_player, played.board_at_start, self.board
        ):
            raise IllegalMoveError("A perfect tile play cannot be rejected")

        self._undo_tile_play(played)
        self.players = apply_loss(
            self.players, CredibilityLoss.TILE_REJECTED, played.tile_player, played.receiver, rules=self.rules
        )
        self._bank_tile(played, face_up=True)
        self.challenge = self._require_challenge().rejected()
        logger.info("Player %s rejected the tile of player %s", played.receiver, played.tile_player)
        self._change_status(Status.CORRECTION_REQUIRED)

    def _resolve_challenge(self, played: PlayedTile, challenger: int) -> None:
        verdict = is_legitimate(
            played.tile_id, list(played.moves), played.tile_player, played.board_at_start, self.board
        )
        state = self._require_challenge()
        if verdict:
            self.players = apply_loss(
                self.players,
                CredibilityLoss.CHALLENGE_FAILED,
                played.tile_player,
                played.receiver,
                challenger,
                self.rules,
            )
            self.challenge = state.resolved(ChallengeOutcome.CHALLENGE_FAILED)
            logger.info("Challenge by player %s failed", challenger)
            self._finalize_tile_play(played)
            return

        self.players = apply_loss(
            self.players,
            CredibilityLoss.CHALLENGE_SUCCEEDED,
            played.tile_player,
            played.receiver,
            challenger,
            self.rules,
        )
        self._undo_tile_play(played)
        self._bank_tile(played, face_up=True)
        self.challenge = state.resolved(ChallengeOutcome.CHALLENGE_SUCCEEDED)
        logger.info("Challenge by player %s succeeded: %s", challenger, verdict.reason)
        self._change_status(Status.TAKE_ADVANTAGE)

    def _undo_tile_play(self, played: PlayedTile) -> None:
        """Put back the snapshot taken before the tile was played (nothing is reverse-executed)"""
        self.board = played.board_at_start

    def _bank_tile(self, played: PlayedTile, face_up: bool) -> None:
        receiver = self.players[played.receiver]
        self.players[played.receiver] = receiver.with_banked(played.tile_id, face_up)

    def _finalize_tile_play(self, played: PlayedTile) -> None:
        """The play stands: the receiver banks the tile face down"""
        self._bank_tile(played, face_up=False)
        self._finish_turn(played)

    def _finish_turn(self, played: PlayedTile) -> None:
        self.played_tile = None
        self.challenge = None
        self.current_player = self._next_player_with_tiles(played.receiver)

        self.winners = find_winners(self.board)
        if self.winners:
            logger.info("Winner(s): %s", self.winners)
            self._change_status(Status.FINISHED)
            return

        if all(not player.hand for player in self.players.values()):
            self._start_bureaucracy()
            return
        self._change_status(Status.CAMPAIGN)

    def _next_player_with_tiles(self, player_id: int) -> int:
        """The receiver plays next, or the first player clockwise from them who still holds tiles"""
        candidate = player_id
        for _ in range(self.player_count):
            if self.players[candidate].hand:
                return candidate
            candidate = next_player_clockwise(candidate, self.player_count) or player_id
        return player_id

    def _recover_credibility(self, player_id: int) -> None:
        player = self.players[player_id]
        self.players[player_id] = player.with_credibility(restore(player.credibility, rules=self.rules))

    def _apply_purchase(
        self,
        player_id: int,
        item: MenuItem,
        requests: list[MoveRequest],
        promoted_piece: Optional[str],
    ) -> None:
        """Validate the action performed for a purchase and put it on the board"""
        moves, board_after = self._perform_moves(player_id, requests, self.board)
        purchase = BureaucracyPurchase(player_id, item, tuple(moves), promoted_piece)
        verdict = validate_purchased_action(purchase, self.board)
        if not verdict:
            raise IllegalMoveError(verdict.reason)

        if item.kind == MenuItemKind.CREDIBILITY:
            self._recover_credibility(player_id)
        elif item.kind == MenuItemKind.PROMOTION and promoted_piece is not None:
            self.board = self.board.promote_piece(promoted_piece)
        else:
            self.board = board_after
            self._log_moves(moves)

    def _start_bureaucracy(self) -> None:
        self.bureaucracy = BureaucracyState.start(self.players.values())
        logger.info("Bureaucracy starts. Order: %s", list(self.bureaucracy.cursor.order))
        self._change_status(Status.BUREAUCRACY)

    def _end_bureaucracy(self) -> None:
        """Winners end the game, otherwise a new campaign round starts (credibility carries over)"""
        self.bureaucracy = None
        self.winners = find_winners(self.board)
        if self.winners:
            logger.info("Winner(s): %s", self.winners)
            self._change_status(Status.FINISHED)
            return

        self.history.append(self.board.to_notation())
        self.board = Board.campaign_setup(self.player_count)
        hands = deal_tiles(self.player_count)
        self.players = {
            player_id: player.with_empty_bank().with_hand(hands[player_id])
            for player_id, player in self.players.items()
        }
        self.current_player = 1
        logger.info("Nobody won the bureaucracy. A new campaign round starts.")
        self._change_status(Status.CAMPAIGN)

    def _change_status(self, new_status: Status) -> None:
        self.status = new_status
