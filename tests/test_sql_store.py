from __future__ import annotations

import unittest

from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import sessionmaker

from luckydraw.draw.entities import PLACEHOLDER_ICON, Participant, Prize, WinnerRecord
from luckydraw.models import Base, LotteryParticipant, LotteryWinner
from luckydraw.store import SqlActivityStore


class SqlActivityStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )
        self.store = SqlActivityStore(self.Session)
        self.prizes = [
            Prize("third", "Third Prize", 3, 2, "#CD7F32", "fa-medal"),
            Prize("first", "First Prize", 1, 1, "#FFD700", "fa-crown"),
        ]

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_create_and_list_activities(self) -> None:
        activity_id = self.store.create_activity("Gala", self.prizes)
        self.assertEqual(len(activity_id), 20)

        summaries = self.store.list_activities()
        self.assertEqual([s.id for s in summaries], [activity_id])
        self.assertEqual(summaries[0].name, "Gala")
        self.assertEqual(list(summaries[0].prizes), self.prizes)
        self.assertEqual(summaries[0].prizes[1].icon, "fa-crown")
        self.assertIsInstance(summaries[0].created_at, int)

        with self.assertRaises(ValueError):
            self.store.list_activities(0)

    def test_list_respects_limit(self) -> None:
        for idx in range(3):
            self.store.create_activity(f"Activity {idx}", self.prizes)
        self.assertEqual(len(self.store.list_activities(limit=2)), 2)

    def test_save_participants_replaces_list(self) -> None:
        activity_id = self.store.create_activity("Gala", self.prizes)
        self.store.save_participants(
            activity_id, [Participant("a", "Alice"), Participant("b", "Bob")]
        )
        self.store.save_participants(
            activity_id,
            [Participant("c", "Carol"), Participant("a", "Alice"), Participant("c", "Dup")],
        )
        loaded = self.store.load_participants(activity_id)
        self.assertEqual([(p.id, p.name) for p in loaded], [("c", "Carol"), ("a", "Alice")])

    def test_winner_records_are_not_duplicated(self) -> None:
        activity_id = self.store.create_activity("Gala", self.prizes)
        records = [
            WinnerRecord(Participant("a", "Alice"), self.prizes[0], 200),
            WinnerRecord(Participant("b", "Bob"), self.prizes[0], 200),
        ]
        self.store.save_winner_records(activity_id, records)
        self.store.save_winner_records(
            activity_id,
            records + [WinnerRecord(Participant("c", "Carol"), self.prizes[1], 300)],
        )

        with self.Session() as session:
            count = session.scalar(
                select(func.count()).select_from(LotteryWinner).where(
                    LotteryWinner.activity_id == activity_id
                )
            )
        self.assertEqual(count, 3)

        loaded = self.store.load_winner_records(activity_id, self.prizes)
        self.assertEqual([r.participant.id for r in loaded], ["a", "b", "c"])
        self.assertIs(loaded[0].prize, self.prizes[0])
        self.assertEqual(loaded[2].timestamp, 300)

    def test_unknown_prize_becomes_placeholder(self) -> None:
        activity_id = self.store.create_activity("Gala", self.prizes)
        retired = Prize("retired", "Retired Prize", 5, 3, "#000000", "fa-gift")
        self.store.save_winner_records(
            activity_id, [WinnerRecord(Participant("a", "Alice"), retired, 1)]
        )
        (record,) = self.store.load_winner_records(activity_id, self.prizes)
        self.assertEqual(record.prize.id, "retired")
        self.assertEqual(record.prize.name, "Retired Prize")
        self.assertEqual(record.prize.level, 5)
        self.assertEqual(record.prize.color, "#000000")
        self.assertEqual(record.prize.count, 1)
        self.assertEqual(record.prize.icon, PLACEHOLDER_ICON)

    def test_unknown_activity_raises(self) -> None:
        with self.assertRaises(KeyError):
            self.store.save_participants("missing", [Participant("a", "Alice")])
        with self.assertRaises(KeyError):
            self.store.load_winner_records("missing", self.prizes)
        with self.assertRaises(KeyError):
            self.store.delete_activity("missing")

    def test_delete_activity_removes_children(self) -> None:
        keep_id = self.store.create_activity("Keep", self.prizes)
        drop_id = self.store.create_activity("Drop", self.prizes)
        for activity_id in (keep_id, drop_id):
            self.store.save_participants(activity_id, [Participant("a", "Alice")])
            self.store.save_winner_records(
                activity_id, [WinnerRecord(Participant("b", "Bob"), self.prizes[0], 1)]
            )

        self.store.delete_activity(drop_id)

        self.assertIsNone(self.store.get_activity(drop_id))
        self.assertIsNotNone(self.store.get_activity(keep_id))
        with self.Session() as session:
            participant_owners = set(session.scalars(select(LotteryParticipant.activity_id)))
            winner_owners = set(session.scalars(select(LotteryWinner.activity_id)))
        self.assertEqual(participant_owners, {keep_id})
        self.assertEqual(winner_owners, {keep_id})


if __name__ == "__main__":
    unittest.main()
