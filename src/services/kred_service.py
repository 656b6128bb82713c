"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

from uuid import UUID

from src.api.models import (
    BankedTileResponse,
    BureaucracyOptionsRequest,
    BureaucracyOptionsResponse,
    ChallengeDecisionRequest,
    CorrectTileRequest,
    CreateGameRequest,
    DeleteGameRequest,
    EndBureaucracyTurnRequest,
    GameResponse,
    GetGameRequest,
    HandResponse,
    LegalMovesRequest,
    LegalMovesResponse,
    MenuItemResponse,
    MoveResponse,
    PieceMove,
    PlayerActionRequest,
    PlayerResponse,
    PlayTileRequest,
    PurchaseRequest,
    ReceiverDecisionRequest,
    TakeAdvantageRequest,
    TileResponse,
    ViewTileRequest,
)
from src.core.exceptions import RepositoryError
from src.core.models import GameModel
from src.db.repository import GameRepository
from src.kred.game import Game, MoveRequest
from src.kred.tiles import requirements_for


class KredService:
    """Orchestration of layers for a game of Kred."""

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """All players are known up front: seat them, deal the tiles and set up the campaign."""

        # Use info in CreateGameRequest to create a new Game, and convert into GameModel
        new_game = Game.new_game(request.player_names, seed=request.seed)
        created_game_data = new_game.to_model()

        # Store the GameModel in the repository
        stored_game, game_id = self.repo.create_game(created_game_data)

        # Return a GameResponse
        return self._create_game_response(game_id, Game.from_model(stored_game))

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check whose action the game is waiting for.
        """
        game = Game.from_model(self._fetch_game(request.game_id))
        return self._create_game_response(request.game_id, game)

    def get_hand(self, request: PlayerActionRequest) -> HandResponse:
        """A player's own tiles and spendable currency"""
        game = Game.from_model(self._fetch_game(request.game_id))
        player = game.seated_player(request.player_id)
        return HandResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            hand=list(player.hand),
            currency=player.currency,
        )

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """retrieve set of legal moves."""

        game = Game.from_model(self._fetch_game(request.game_id))
        legal_moves = game.legal_moves(request.player_id, request.move_type)
        return LegalMovesResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            legal_moves=[
                MoveResponse(
                    piece_id=move.piece_id,
                    from_location=str(move.from_location),
                    to_location=str(move.to_location),
                    move_type=move.move_type,
                )
                for move in legal_moves
            ],
        )

    def play_tile(self, request: PlayTileRequest) -> GameResponse:
        """Play a tile face down to another player, moving pieces."""
        game = Game.from_model(self._fetch_game(request.game_id))
        game.play_tile(
            request.player_id, request.tile_id, request.receiver, _as_requests(request.moves)
        )
        return self._store(request.game_id, game)

    def view_tile(self, request: ViewTileRequest) -> TileResponse:
        """The receiver looks at the tile that was played to them."""
        game = Game.from_model(self._fetch_game(request.game_id))
        tile_id = game.view_played_tile(request.player_id)
        requirement = requirements_for(tile_id)
        return TileResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            tile_id=tile_id,
            required_moves=list(requirement.required_moves) if requirement else [],
            description=requirement.description if requirement else "",
        )

    def receiver_decision(self, request: ReceiverDecisionRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.receiver_decision(request.player_id, request.accept)
        return self._store(request.game_id, game)

    def challenger_decision(self, request: ChallengeDecisionRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.challenger_decision(request.player_id, request.challenge)
        return self._store(request.game_id, game)

    def take_advantage(self, request: TakeAdvantageRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.take_advantage(
            request.player_id,
            request.choice,
            item_id=request.item_id,
            paid_tiles=request.paid_tiles,
            moves=_as_requests(request.moves),
            promoted_piece=request.promoted_piece,
        )
        return self._store(request.game_id, game)

    def correct_tile(self, request: CorrectTileRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.correct_tile(request.player_id, _as_requests(request.moves))
        return self._store(request.game_id, game)

    def bureaucracy_options(self, request: BureaucracyOptionsRequest) -> BureaucracyOptionsResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        options = game.bureaucracy_options(request.player_id)
        remaining = game.bureaucracy.remaining_currency if game.bureaucracy else 0
        return BureaucracyOptionsResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            remaining_currency=remaining,
            options=[
                MenuItemResponse(item_id=item.item_id, price=item.price, description=item.description)
                for item in options
            ],
        )

    def purchase(self, request: PurchaseRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.purchase(
            request.player_id,
            request.item_id,
            moves=_as_requests(request.moves),
            promoted_piece=request.promoted_piece,
        )
        return self._store(request.game_id, game)

    def end_bureaucracy_turn(self, request: EndBureaucracyTurnRequest) -> GameResponse:
        game = Game.from_model(self._fetch_game(request.game_id))
        game.end_bureaucracy_turn(request.player_id)
        return self._store(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")

    # -- Internal helpers --
    def _store(self, game_id: UUID, game: Game) -> GameResponse:
        """Capture updated state in GameModel, store in repository, and respond with it"""
        self.repo.update_game(game_id, game.to_model())
        return self._create_game_response(game_id, game)

    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert a Game into a GameResponse (for game with given ID.). Face-down bank tiles stay hidden."""
        return GameResponse(
            game_id=game_id,
            player_count=game.player_count,
            status=game.status,
            current_player=game.current_player,
            awaiting_player=game.awaiting_player,
            pieces=game.board.to_notation(),
            players=[
                PlayerResponse(
                    player_id=player_id,
                    name=player.name,
                    credibility=player.credibility,
                    hand_size=len(player.hand),
                    bank=[
                        BankedTileResponse(
                            tile_id=banked.tile_id if banked.face_up else None,
                            face_up=banked.face_up,
                        )
                        for banked in player.bank
                    ],
                )
                for player_id, player in sorted(game.players.items())
            ],
            move_history=list(game.move_log),
            winners=list(game.winners),
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return game_model


def _as_requests(moves: list[PieceMove]) -> list[MoveRequest]:
    return [move.as_tuple() for move in moves]
