"""Implementation of (Game)Repository using SQLAlchemy"""

from dataclasses import asdict
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.core.models import GameModel, PlayerModel
from src.db.schema import DBGame


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(id=new_id, **self._to_columns(game))
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Overwrite the state of an existing record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        for column, value in self._to_columns(game).items():
            setattr(game_db, column, value)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_columns(self, game: GameModel) -> dict[str, Any]:
        """Data transfer model -> column values (JSON columns get plain dicts / lists)"""
        return {
            "player_count": game.player_count,
            "pieces": dict(game.pieces),
            "players": {key: asdict(player) for key, player in game.players.items()},
            "current_player": game.current_player,
            "status": str(game.status),
            "history": [dict(snapshot) for snapshot in game.history],
            "move_log": list(game.move_log),
            "tile_play": game.tile_play,
            "bureaucracy": game.bureaucracy,
            "winners": list(game.winners),
        }

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            player_count=game_db.player_count,
            pieces=game_db.pieces,
            players={
                key: PlayerModel(**player) for key, player in game_db.players.items()
            },
            current_player=game_db.current_player,
            status=game_db.status,
            history=game_db.history,
            move_log=game_db.move_log,
            tile_play=game_db.tile_play,
            bureaucracy=game_db.bureaucracy,
            winners=game_db.winners,
        )
