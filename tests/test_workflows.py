from __future__ import annotations

import random
import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from giftwheel.eligibility import EmptyEligibleSetError, InvalidSpinnerError
from giftwheel.models import Base, Game, GameDraw
from giftwheel.workflows import (
    abort_game,
    confirm_draw,
    create_game,
    draw_gift,
    eligible_gifts,
    play_out_game,
    start_game,
)


class GameWorkflowTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self) -> None:
        self.engine.dispose()

    def _started_game(self, session, names=("A", "B", "C"), label=None) -> Game:
        game = create_game(session, names, label=label)
        return start_game(session, game)

    def test_create_game_persists_roster(self) -> None:
        with self.Session.begin() as session:
            game = create_game(session, [" Alice", "Bob ", "Carol"], label="office")
            self.assertIsNotNone(game.id)
            self.assertEqual(game.status, "setup")
            self.assertEqual(game.participant_names(), ["Alice", "Bob", "Carol"])
            self.assertEqual(game.gifts, [])

    def test_create_game_rejects_bad_rosters(self) -> None:
        with self.Session.begin() as session:
            with self.assertRaises(ValueError):
                create_game(session, ["Solo"])
            with self.assertRaises(ValueError):
                create_game(session, ["A", "B", "A"])
            with self.assertRaises(ValueError):
                create_game(session, ["A", ""])

    def test_create_game_rejects_duplicate_label(self) -> None:
        with self.Session.begin() as session:
            create_game(session, ["A", "B"], label="same")
            with self.assertRaises(ValueError):
                create_game(session, ["C", "D"], label="same")

    def test_start_game_creates_pool(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            self.assertEqual(game.status, "in_progress")
            self.assertIsNotNone(game.started_at)
            self.assertEqual([g.owner.name for g in game.gifts], ["A", "B", "C"])
            self.assertTrue(all(not g.taken for g in game.gifts))
            with self.assertRaises(RuntimeError):
                start_game(session, game)

    def test_eligible_gifts_excludes_own_gift(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            gifts = eligible_gifts(session, game, "A")
            self.assertEqual([g.owner.name for g in gifts], ["B", "C"])

    def test_eligible_gifts_applies_lookahead(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            confirm_draw(session, game, "A", game.gift_owned_by("B"))

            gifts = eligible_gifts(session, game, "B")
            self.assertEqual([g.owner.name for g in gifts], ["C"])

    def test_draw_gift_does_not_mutate(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            candidates = eligible_gifts(session, game, "B")
            expected = candidates[random.Random(5).randrange(len(candidates))]

            gift = draw_gift(session, game, "B", random.Random(5))

            self.assertIs(gift, expected)
            self.assertFalse(gift.taken)
            self.assertEqual(game.draws, [])

    def test_confirm_draw_records_history(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            draw = confirm_draw(session, game, "A", game.gift_owned_by("C"))

            self.assertIsInstance(draw, GameDraw)
            self.assertEqual(draw.sequence, 1)
            self.assertEqual(draw.spinner.name, "A")
            self.assertEqual(draw.receiver_name, "C")
            self.assertTrue(game.gift_owned_by("C").taken)
            self.assertIsNotNone(game.gift_owned_by("C").taken_at)
            self.assertEqual(game.remaining_spinner_names(), ["B", "C"])
            self.assertEqual(game.status, "in_progress")

    def test_confirm_draw_rejects_ineligible_gift(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            with self.assertRaises(ValueError):
                confirm_draw(session, game, "A", game.gift_owned_by("A"))

            confirm_draw(session, game, "A", game.gift_owned_by("B"))
            # B taking A's gift would leave C with only their own.
            with self.assertRaises(ValueError):
                confirm_draw(session, game, "B", game.gift_owned_by("A"))
            with self.assertRaises(InvalidSpinnerError):
                confirm_draw(session, game, "A", game.gift_owned_by("C"))

    def test_confirm_draw_rejects_gift_from_other_game(self) -> None:
        with self.Session.begin() as session:
            first = self._started_game(session, label="first")
            second = self._started_game(session, label="second")
            with self.assertRaises(ValueError):
                confirm_draw(session, first, "A", second.gift_owned_by("B"))

    def test_play_out_game_completes(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session, names=("A", "B", "C", "D", "E", "F"))
            draws = play_out_game(session, game, random.Random(99))

            self.assertEqual(len(draws), 6)
            self.assertEqual([d.sequence for d in draws], [1, 2, 3, 4, 5, 6])
            self.assertEqual(game.status, "completed")
            self.assertIsNotNone(game.completed_at)
            self.assertTrue(all(g.taken for g in game.gifts))
            self.assertTrue(all(d.spinner.name != d.receiver_name for d in draws))
            self.assertEqual(
                sorted(d.receiver_name for d in draws), ["A", "B", "C", "D", "E", "F"]
            )
            with self.assertRaises(RuntimeError):
                eligible_gifts(session, game, "A")

    def test_play_out_game_is_reproducible_with_seed(self) -> None:
        outcomes = []
        for label in ("run-1", "run-2"):
            with self.Session.begin() as session:
                game = self._started_game(session, names=("A", "B", "C", "D"), label=label)
                draws = play_out_game(session, game, random.Random(42))
                outcomes.append([(d.spinner.name, d.receiver_name) for d in draws])
        self.assertEqual(outcomes[0], outcomes[1])

    def test_history_survives_reload(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session, label="persisted")
            play_out_game(session, game, random.Random(1))
            expected = [(d.spinner.name, d.receiver_name) for d in game.draws]

        with self.Session() as session:
            loaded = Game.get_by_label(session, "persisted")
            self.assertEqual(loaded.status, "completed")
            self.assertEqual(
                [(d.to_record().spinner, d.to_record().receiver) for d in loaded.draws],
                expected,
            )

    def test_inconsistent_history_is_fatal(self) -> None:
        with self.Session.begin() as session:
            game = self._started_game(session)
            # Bypass the engine: A and B swap, stranding C.
            for spinner, owner, sequence in (("A", "B", 1), ("B", "A", 2)):
                gift = game.gift_owned_by(owner)
                gift.mark_taken()
                session.add(
                    GameDraw(
                        game=game,
                        sequence=sequence,
                        spinner=game.participant_by_name(spinner),
                        gift=gift,
                    )
                )
            session.flush()

            self.assertEqual(eligible_gifts(session, game, "C"), [])
            with self.assertRaises(EmptyEligibleSetError):
                draw_gift(session, game, "C", random.Random(0))

            abort_game(session, game)
            self.assertEqual(game.status, "aborted")
            with self.assertRaises(ValueError):
                game.to_state()
            with self.assertRaises(RuntimeError):
                abort_game(session, game)


if __name__ == "__main__":
    unittest.main()
