"""Database models for the gift pool and the draw history."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Integer, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from giftwheel.db.utils import utcnow
from giftwheel.eligibility.records import DrawRecord, Gift

from .base import Base

if TYPE_CHECKING:
    from .game import Game, GameParticipant


class GameGift(Base):
    """A gift in the pool, brought by exactly one participant."""

    __tablename__ = "game_gifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_participant_id: Mapped[int] = mapped_column(
        ForeignKey("game_participants.id", ondelete="CASCADE"), nullable=False
    )
    """Participant who brought the gift. Never reassigned."""

    taken: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    """Flipped once, when a draw for this gift is confirmed."""

    taken_at: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    game: Mapped["Game"] = relationship(back_populates="gifts")
    owner: Mapped["GameParticipant"] = relationship(back_populates="gift")
    draw: Mapped[Optional["GameDraw"]] = relationship(
        back_populates="gift", uselist=False
    )

    __table_args__ = (
        UniqueConstraint("owner_participant_id", name="uq_game_gifts_owner"),
    )

    def __init__(self, *, game: "Game", owner: "GameParticipant") -> None:
        self.game = game
        self.owner = owner
        self.taken = False

    def __repr__(self) -> str:
        return (
            f"<GameGift(id={self.id}, game_id={self.game_id}, "
            f"owner={self.owner.name!r}, taken={self.taken})>"
        )

    def to_record(self) -> Gift:
        return Gift(owner=self.owner.name, taken=self.taken)

    def mark_taken(self, at: Optional[datetime] = None) -> None:
        if self.taken:
            raise ValueError(f"Gift owned by '{self.owner.name}' has already been taken")
        self.taken = True
        self.taken_at = at or utcnow()


class GameDraw(Base):
    """Append-only record of one confirmed spin."""

    __tablename__ = "game_draws"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    game_id: Mapped[int] = mapped_column(
        ForeignKey("games.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)
    """One-based position of the draw within the game."""

    spinner_participant_id: Mapped[int] = mapped_column(
        ForeignKey("game_participants.id", ondelete="CASCADE"), nullable=False
    )
    gift_id: Mapped[int] = mapped_column(
        ForeignKey("game_gifts.id", ondelete="CASCADE"), nullable=False
    )
    drawn_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    game: Mapped["Game"] = relationship(back_populates="draws")
    spinner: Mapped["GameParticipant"] = relationship(back_populates="draw")
    gift: Mapped["GameGift"] = relationship(back_populates="draw")

    __table_args__ = (
        # Each participant spins once and each gift is drawn once.
        UniqueConstraint("spinner_participant_id", name="uq_game_draws_spinner"),
        UniqueConstraint("gift_id", name="uq_game_draws_gift"),
        UniqueConstraint("game_id", "sequence", name="uq_game_draws_game_sequence"),
    )

    def __init__(
        self,
        *,
        game: "Game",
        sequence: int,
        spinner: "GameParticipant",
        gift: GameGift,
        drawn_at: Optional[datetime] = None,
    ) -> None:
        self.game = game
        self.sequence = sequence
        self.spinner = spinner
        self.gift = gift
        if drawn_at is not None:
            self.drawn_at = drawn_at

    def __repr__(self) -> str:
        return (
            f"<GameDraw(game_id={self.game_id}, sequence={self.sequence}, "
            f"spinner={self.spinner.name!r}, receiver={self.receiver_name!r})>"
        )

    @property
    def receiver_name(self) -> str:
        """Owner of the drawn gift."""
        return self.gift.owner.name

    def to_record(self) -> DrawRecord:
        return DrawRecord(spinner=self.spinner.name, receiver=self.receiver_name)


__all__ = ["GameDraw", "GameGift"]
