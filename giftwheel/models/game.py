"""Database models for a gift exchange game and its roster."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional

from sqlalchemy import (
    CheckConstraint,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    select,
)
from sqlalchemy.orm import Mapped, Session, mapped_column, relationship

from giftwheel.db.utils import dt_iso, utcnow
from giftwheel.eligibility.engine import remaining_spinners
from giftwheel.game.state import GamePhase, GameState

from .base import Base

if TYPE_CHECKING:
    from .draw import GameDraw, GameGift


GAME_STATUSES = ("setup", "in_progress", "completed", "aborted")

_PHASE_BY_STATUS = {
    "setup": GamePhase.SETUP,
    "in_progress": GamePhase.DASHBOARD,
    "completed": GamePhase.GAME_OVER,
}


class Game(Base):
    """One round of the gift exchange, from roster entry to the last draw."""

    __tablename__ = "games"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    """Primary key."""

    label: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    """Optional human readable name, e.g. ``"Office party 2026"``."""

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="setup")
    """Lifecycle status: ``setup``, ``in_progress``, ``completed`` or ``aborted``."""

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    """Timestamp when the game was created."""

    started_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    """Timestamp when the gift pool was created."""

    completed_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)
    """Timestamp of the last confirmed draw, or of the abort."""

    participants: Mapped[list["GameParticipant"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameParticipant.position",
    )
    """Roster in the order names were entered."""

    gifts: Mapped[list["GameGift"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameGift.id",
    )
    """Gift pool, one per participant once the game has started."""

    draws: Mapped[list["GameDraw"]] = relationship(
        back_populates="game",
        cascade="all, delete-orphan",
        order_by="GameDraw.sequence",
    )
    """Confirmed draws in the order they happened."""

    __table_args__ = (
        UniqueConstraint("label", name="uq_games_label"),
        CheckConstraint(
            "status IN ('setup','in_progress','completed','aborted')",
            name="status_enum",
        ),
    )

    def __init__(
        self,
        *,
        label: Optional[str] = None,
        status: str = "setup",
        created_at: Optional[datetime] = None,
    ) -> None:
        if status not in GAME_STATUSES:
            raise ValueError(f"Unknown game status '{status}'")
        self.label = label
        self.status = status
        if created_at is not None:
            self.created_at = created_at

    def __repr__(self) -> str:
        return (
            f"<Game(id={self.id}, label={self.label!r}, status='{self.status}', "
            f"participants={len(self.participants)}, draws={len(self.draws)})>"
        )

    @classmethod
    def get_by_label(cls, session: Session, label: str) -> Optional["Game"]:
        """Return the game named ``label`` if it exists."""

        return session.scalar(select(cls).where(cls.label == label))

    def participant_names(self) -> list[str]:
        return [p.name for p in self.participants]

    def participant_by_name(self, name: str) -> Optional["GameParticipant"]:
        for participant in self.participants:
            if participant.name == name:
                return participant
        return None

    def gift_owned_by(self, name: str) -> Optional["GameGift"]:
        for gift in self.gifts:
            if gift.owner.name == name:
                return gift
        return None

    def remaining_spinner_names(self) -> list[str]:
        """Names of participants who have not drawn yet, in roster order."""
        return remaining_spinners(
            self.participant_names(), (d.to_record() for d in self.draws)
        )

    def to_state(self) -> GameState:
        """Build the immutable snapshot the eligibility engine works on.

        Raises
        ------
        ValueError
            If the game was aborted; aborted games cannot be resumed.
        """
        phase = _PHASE_BY_STATUS.get(self.status)
        if phase is None:
            raise ValueError(f"Game {self.id} is {self.status} and has no playable state")
        return GameState(
            phase=phase,
            participants=tuple(self.participant_names()),
            gifts=tuple(g.to_record() for g in self.gifts),
            history=tuple(d.to_record() for d in self.draws),
        )

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable summary of the game."""

        return {
            "id": self.id,
            "label": self.label,
            "status": self.status,
            "participants": self.participant_names(),
            "gifts": [
                {"owner": g.owner.name, "taken": g.taken, "taken_at": dt_iso(g.taken_at)}
                for g in self.gifts
            ],
            "draws": [
                {
                    "sequence": d.sequence,
                    "spinner": d.spinner.name,
                    "receiver": d.receiver_name,
                    "drawn_at": dt_iso(d.drawn_at),
                }
                for d in self.draws
            ],
            "remaining_spinners": self.remaining_spinner_names(),
            "created_at": dt_iso(self.created_at),
            "started_at": dt_iso(self.started_at),
            "completed_at": dt_iso(self.completed_at),
        }


class GameParticipant(Base):
    """A named player of one game."""

    __tablename__ = "game_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    """Display name, unique within the game."""

    position: Mapped[int] = mapped_column(Integer, nullable=False)
    """Zero-based roster position."""

    game: Mapped["Game"] = relationship(back_populates="participants")
    gift: Mapped[Optional["GameGift"]] = relationship(
        back_populates="owner", uselist=False
    )
    """Gift this participant brought."""

    draw: Mapped[Optional["GameDraw"]] = relationship(
        back_populates="spinner", uselist=False
    )
    """The draw this participant made, once they have spun."""

    __table_args__ = (
        UniqueConstraint("game_id", "name", name="uq_game_participants_game_name"),
        UniqueConstraint(
            "game_id", "position", name="uq_game_participants_game_position"
        ),
    )

    def __init__(self, *, name: str, position: int, game: Optional[Game] = None) -> None:
        self.name = name
        self.position = position
        if game is not None:
            self.game = game

    def __repr__(self) -> str:
        return f"<GameParticipant(id={self.id}, game_id={self.game_id}, name={self.name!r})>"

    @property
    def has_spun(self) -> bool:
        return self.draw is not None


__all__ = ["GAME_STATUSES", "Game", "GameParticipant"]
