"""Seed the development database with a finished demo game and an open one."""

from __future__ import annotations

import argparse
import logging
import os
import random

from dotenv import load_dotenv
from sqlalchemy.orm import sessionmaker

from giftwheel.db.engine import make_engine
from giftwheel.models import Base, Game
from giftwheel.workflows import create_game, play_out_game, start_game

DEMO_ROSTER = ["Alice", "Bob", "Carol", "Dave", "Erin", "Frank"]


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--seed", type=int, default=None, help="seed for the wheel")
    args = parser.parse_args()

    engine = make_engine()

    # Start from a clean schema every time.
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    rng = random.Random(args.seed)

    with Session.begin() as session:
        finished = create_game(session, DEMO_ROSTER, label="demo-finished")
        start_game(session, finished)
        play_out_game(session, finished, rng)

        open_game = create_game(session, DEMO_ROSTER[:3], label="demo-open")
        start_game(session, open_game)

    with Session() as session:
        for label in ("demo-finished", "demo-open"):
            game = Game.get_by_label(session, label)
            if game is None:
                continue
            print(f"{game.label}: {game.status}")
            for draw in game.draws:
                print(f"  {draw.sequence}. {draw.spinner.name} -> {draw.receiver_name}'s gift")
            remaining = game.remaining_spinner_names()
            if remaining:
                print(f"  still to spin: {', '.join(remaining)}")

    engine.dispose()


if __name__ == "__main__":
    main()
