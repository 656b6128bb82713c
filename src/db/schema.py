"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    player_count: Mapped[int]
    pieces: Mapped[dict[str, str]] = mapped_column(JSON)
    # {"1": {"name": ..., "credibility": ..., "hand": [...], "bank": [...]}, ...}
    players: Mapped[dict[str, Any]] = mapped_column(JSON)
    current_player: Mapped[int]
    status: Mapped[str]
    history: Mapped[list[dict[str, str]]] = mapped_column(JSON, default=list)
    move_log: Mapped[list[str]] = mapped_column(JSON, default=list)
    tile_play: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    bureaucracy: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    winners: Mapped[list[int]] = mapped_column(JSON, default=list)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)
