import unittest

from luckydraw.draw import roster
from luckydraw.draw.engine import DrawSession, RoundStatus, start_round
from luckydraw.draw.entities import Participant, Prize, WinnerRecord


class ParseNamesTests(unittest.TestCase):
    def test_splits_on_commas_and_newlines(self) -> None:
        self.assertEqual(
            roster.parse_names(" Alice, Bob\nCarol ,,\n\n  Dave  "),
            ["Alice", "Bob", "Carol", "Dave"],
        )

    def test_empty_input(self) -> None:
        self.assertEqual(roster.parse_names(""), [])
        self.assertEqual(roster.parse_names(" , \n "), [])


class RosterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.prizes = (Prize("p0", "Third", 3, 2), Prize("p1", "First", 1, 1))
        self.session = DrawSession.new([Participant("a", "Alice")], self.prizes)

    def test_add_and_batch_add(self) -> None:
        session = roster.add_participant(self.session, "  Bob ")
        session = roster.batch_add(session, "Carol,Dave\nBob")
        self.assertEqual([p.name for p in session.pool], ["Alice", "Bob", "Carol", "Dave", "Bob"])
        self.assertEqual(len({p.id for p in session.pool}), 5)

    def test_batch_add_accepts_list(self) -> None:
        session = roster.batch_add(self.session, ["Eve", "  ", "Frank"])
        self.assertEqual([p.name for p in session.pool], ["Alice", "Eve", "Frank"])

    def test_remove_by_id(self) -> None:
        session = roster.remove_participant(self.session, "a")
        self.assertEqual(session.pool, ())
        self.assertEqual(len(self.session.pool), 1)

    def test_clear_all_resets_everything(self) -> None:
        record = WinnerRecord(Participant("z", "Zed"), self.prizes[0], 1)
        session = DrawSession(
            pool=self.session.pool,
            prizes=self.prizes,
            current_prize_index=1,
            winner_records=(record,),
        )
        cleared = roster.clear_all(session)
        self.assertEqual(cleared.pool, ())
        self.assertEqual(cleared.winner_records, ())
        self.assertEqual(cleared.current_prize_index, 0)
        self.assertEqual(cleared.prizes, self.prizes)
        self.assertEqual(cleared.status, RoundStatus.IDLE)

    def test_clear_all_leaves_running_round_alone(self) -> None:
        started = start_round(self.session).session
        self.assertEqual(started.phase, RoundStatus.IN_PROGRESS)
        cleared = roster.clear_all(started)
        self.assertIs(cleared, started)
        self.assertEqual(cleared.phase, RoundStatus.IN_PROGRESS)
        self.assertEqual(cleared.draw_count, 1)
        self.assertEqual(len(cleared.pool), 1)

    def test_update_prize_keeps_order(self) -> None:
        session = roster.update_prize(self.session, "p0", name="Bronze", count=4)
        self.assertEqual([p.id for p in session.prizes], ["p0", "p1"])
        self.assertEqual(session.prizes[0].name, "Bronze")
        self.assertEqual(session.prizes[0].count, 4)

    def test_update_prize_validation(self) -> None:
        with self.assertRaises(KeyError):
            roster.update_prize(self.session, "missing", count=2)
        with self.assertRaises(ValueError):
            roster.update_prize(self.session, "p0", count=0)


if __name__ == "__main__":
    unittest.main()
