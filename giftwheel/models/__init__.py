from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .game import Game, GameParticipant  # noqa: F401
from .draw import GameDraw, GameGift  # noqa: F401

__all__ = [
    "Base",
    "Game",
    "GameParticipant",
    "GameGift",
    "GameDraw",
]
