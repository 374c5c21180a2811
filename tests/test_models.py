import unittest
from datetime import datetime, timezone

from sqlalchemy import create_engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from giftwheel.eligibility import DrawRecord, Gift
from giftwheel.game import GamePhase
from giftwheel.models import Base, Game, GameDraw, GameGift, GameParticipant


class GameModelTestCase(unittest.TestCase):
    def setUp(self):
        # In-memory SQLite for isolation
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )

    def tearDown(self):
        self.engine.dispose()

    def _seed_game(self, session, names=("A", "B", "C"), label="party"):
        game = Game(label=label, status="in_progress")
        for position, name in enumerate(names):
            game.participants.append(GameParticipant(name=name, position=position))
        session.add(game)
        session.flush()
        for participant in game.participants:
            session.add(GameGift(game=game, owner=participant))
        session.flush()
        return game

    def test_game_defaults(self):
        with self.Session() as session:
            game = Game(label="defaults")
            session.add(game)
            session.flush()
            self.assertEqual(game.status, "setup")
            self.assertIsNotNone(game.created_at)
            self.assertIsNone(game.started_at)
            self.assertEqual(game.participants, [])

    def test_unknown_status_rejected(self):
        with self.assertRaises(ValueError):
            Game(status="paused")

    def test_participants_ordered_by_position(self):
        with self.Session() as session:
            game = Game(label="order")
            game.participants.append(GameParticipant(name="Zed", position=1))
            game.participants.append(GameParticipant(name="Amy", position=0))
            session.add(game)
            session.commit()
            game_id = game.id

        with self.Session() as session:
            loaded = session.get(Game, game_id)
            self.assertEqual(loaded.participant_names(), ["Amy", "Zed"])

    def test_duplicate_participant_name_violates_constraint(self):
        with self.Session() as session:
            game = Game(label="dupes")
            game.participants.append(GameParticipant(name="A", position=0))
            game.participants.append(GameParticipant(name="A", position=1))
            session.add(game)
            with self.assertRaises(IntegrityError):
                session.flush()

    def test_to_state_mirrors_pool_and_history(self):
        with self.Session() as session:
            game = self._seed_game(session)
            gift_b = game.gift_owned_by("B")
            gift_b.mark_taken()
            session.add(
                GameDraw(
                    game=game,
                    sequence=1,
                    spinner=game.participant_by_name("A"),
                    gift=gift_b,
                )
            )
            session.flush()

            state = game.to_state()
            self.assertEqual(state.phase, GamePhase.DASHBOARD)
            self.assertEqual(state.participants, ("A", "B", "C"))
            self.assertEqual(state.gifts, (Gift("A"), Gift("B", taken=True), Gift("C")))
            self.assertEqual(state.history, (DrawRecord("A", "B"),))
            self.assertEqual(game.remaining_spinner_names(), ["B", "C"])
            self.assertTrue(game.participant_by_name("A").has_spun)
            self.assertFalse(game.participant_by_name("B").has_spun)

    def test_aborted_game_has_no_state(self):
        game = Game(label="gone", status="aborted")
        with self.assertRaises(ValueError):
            game.to_state()

    def test_gift_cannot_be_taken_twice(self):
        with self.Session() as session:
            game = self._seed_game(session)
            gift = game.gift_owned_by("A")
            at = datetime(2026, 12, 24, 18, 0, tzinfo=timezone.utc)
            gift.mark_taken(at)
            self.assertTrue(gift.taken)
            self.assertEqual(gift.taken_at, at)
            with self.assertRaises(ValueError):
                gift.mark_taken()

    def test_gift_drawn_once_enforced_by_schema(self):
        with self.Session() as session:
            game = self._seed_game(session)
            gift = game.gift_owned_by("C")
            session.add(
                GameDraw(game=game, sequence=1, spinner=game.participant_by_name("A"), gift=gift)
            )
            session.flush()
            session.add(
                GameDraw(game=game, sequence=2, spinner=game.participant_by_name("B"), gift=gift)
            )
            with self.assertRaises(IntegrityError):
                session.flush()

    def test_get_by_label(self):
        with self.Session.begin() as session:
            self._seed_game(session, label="findme")
        with self.Session() as session:
            found = Game.get_by_label(session, "findme")
            self.assertIsNotNone(found)
            self.assertEqual(found.participant_names(), ["A", "B", "C"])
            self.assertIsNone(Game.get_by_label(session, "missing"))

    def test_to_json_shape(self):
        with self.Session() as session:
            game = self._seed_game(session, names=("A", "B"))
            gift = game.gift_owned_by("B")
            gift.mark_taken()
            session.add(
                GameDraw(game=game, sequence=1, spinner=game.participant_by_name("A"), gift=gift)
            )
            session.flush()

            data = game.to_json()
            self.assertEqual(data["label"], "party")
            self.assertEqual(data["status"], "in_progress")
            self.assertEqual(data["participants"], ["A", "B"])
            self.assertEqual(
                [(g["owner"], g["taken"]) for g in data["gifts"]],
                [("A", False), ("B", True)],
            )
            self.assertEqual(data["draws"][0]["spinner"], "A")
            self.assertEqual(data["draws"][0]["receiver"], "B")
            self.assertIsInstance(data["draws"][0]["drawn_at"], str)
            self.assertEqual(data["remaining_spinners"], ["B"])
            self.assertIsInstance(data["created_at"], str)
            self.assertIsNone(data["completed_at"])

    def test_deleting_game_cascades(self):
        with self.Session() as session:
            game = self._seed_game(session)
            session.delete(game)
            session.flush()
            self.assertEqual(session.scalars(select(GameParticipant)).all(), [])
            self.assertEqual(session.scalars(select(GameGift)).all(), [])


if __name__ == "__main__":
    unittest.main()
