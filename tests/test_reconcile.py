import random
import unittest

from luckydraw.draw.engine import DrawEngine, DrawSession, RoundStatus
from luckydraw.draw.entities import Participant, Prize, WinnerRecord
from luckydraw.draw.reconcile import (
    reconcile,
    reconcile_pool,
    reconcile_prize_index,
    reconciled_session,
    unique_records,
)


def _record(participant_id: str, prize: Prize, timestamp: int = 0) -> WinnerRecord:
    return WinnerRecord(Participant(participant_id, participant_id.upper()), prize, timestamp)


class ReconcilePrizeIndexTests(unittest.TestCase):
    def setUp(self) -> None:
        self.prizes = [
            Prize("third", "Third", 3, 2),
            Prize("second", "Second", 2, 1),
            Prize("first", "First", 1, 1),
        ]

    def test_fully_drawn_prize_is_skipped(self) -> None:
        records = [_record("a", self.prizes[0]), _record("b", self.prizes[0])]
        self.assertEqual(reconcile_prize_index(records, self.prizes), 1)

    def test_partial_prize_stays_current(self) -> None:
        records = [_record("a", self.prizes[0])]
        self.assertEqual(reconcile_prize_index(records, self.prizes), 0)

    def test_never_skips_past_unfinished_prize(self) -> None:
        records = [
            _record("a", self.prizes[0]),
            _record("b", self.prizes[0]),
            _record("c", self.prizes[2]),
        ]
        self.assertEqual(reconcile_prize_index(records, self.prizes), 1)

    def test_partial_prize_halts_even_if_later_is_full(self) -> None:
        records = [_record("a", self.prizes[0]), _record("c", self.prizes[1])]
        self.assertEqual(reconcile_prize_index(records, self.prizes), 0)

    def test_all_drawn(self) -> None:
        records = [
            _record("a", self.prizes[0]),
            _record("b", self.prizes[0]),
            _record("c", self.prizes[1]),
            _record("d", self.prizes[2]),
        ]
        self.assertEqual(reconcile_prize_index(records, self.prizes), 3)

    def test_empty_log(self) -> None:
        self.assertEqual(reconcile_prize_index([], self.prizes), 0)

    def test_placeholder_prize_only_counts_for_itself(self) -> None:
        ghost = Prize.placeholder(id="ghost", name="Ghost", level=9, color="")
        records = [_record("a", ghost), _record("b", ghost)]
        self.assertEqual(reconcile_prize_index(records, self.prizes), 0)


class ReconcilePoolTests(unittest.TestCase):
    def test_winners_are_removed_by_id(self) -> None:
        prize = Prize("p", "P", 1, 1)
        participants = [Participant("a", "A"), Participant("b", "B"), Participant("c", "A")]
        records = [WinnerRecord(Participant("a", "renamed"), prize, 0)]
        pool = reconcile_pool(participants, records)
        self.assertEqual([p.id for p in pool], ["b", "c"])


class RepeatedRecordTests(unittest.TestCase):
    def setUp(self) -> None:
        self.prizes = [Prize("p0", "P0", 2, 3), Prize("p1", "P1", 1, 1)]
        self.participants = [Participant(x, x.upper()) for x in "abcde"]

    def test_unique_records_keeps_first_occurrence(self) -> None:
        first = _record("a", self.prizes[0], 10)
        records = [first, _record("b", self.prizes[0], 10), _record("a", self.prizes[0], 20)]
        unique = unique_records(records)
        self.assertEqual([r.key for r in unique], [("a", "p0"), ("b", "p0")])
        self.assertIs(unique[0], first)

    def test_same_participant_for_different_prizes_is_kept(self) -> None:
        records = [_record("a", self.prizes[0]), _record("a", self.prizes[1])]
        self.assertEqual(len(unique_records(records)), 2)

    def test_repeated_pairs_do_not_advance_partial_prize(self) -> None:
        round_one = [_record("a", self.prizes[0], 1), _record("b", self.prizes[0], 1)]
        saved_twice = round_one + round_one

        session = reconciled_session(saved_twice, self.prizes, self.participants)
        keys = [r.key for r in session.winner_records]
        self.assertEqual(len(keys), len(set(keys)))
        self.assertEqual(len(session.winner_records), 2)
        self.assertEqual(session.current_prize_index, 0)
        self.assertEqual(session.remaining_slots, 1)
        self.assertEqual([p.id for p in session.pool], ["c", "d", "e"])

    def test_repeated_pairs_match_clean_log(self) -> None:
        log = [_record("a", self.prizes[0]), _record("b", self.prizes[0]), _record("c", self.prizes[0])]
        clean = reconcile(log, self.prizes, self.participants)
        doubled = reconcile(log + log[:2], self.prizes, self.participants)
        self.assertEqual(doubled, clean)


class RoundTripTests(unittest.TestCase):
    def _run_all(self, names, counts, seed):
        prizes = [Prize(f"p{i}", f"P{i}", i, c) for i, c in enumerate(counts)]
        participants = [Participant(n, n) for n in names]
        engine = DrawEngine(DrawSession.new(participants, prizes), rng=random.Random(seed))
        while engine.start_round().started:
            engine.complete_round()
            engine.confirm_round()
        return participants, prizes, engine.session

    def test_reconcile_reproduces_completed_session(self) -> None:
        participants, prizes, final = self._run_all(list("ABCDEFGH"), [3, 2, 1], seed=11)
        self.assertEqual(final.status, RoundStatus.COMPLETED)

        progress = reconcile(final.winner_records, prizes, participants)
        self.assertEqual(progress.current_prize_index, len(prizes))
        self.assertEqual(set(progress.pool), set(final.pool))
        self.assertEqual(len(progress.pool), 2)

    def test_pool_empty_when_prizes_exceed_participants(self) -> None:
        participants, prizes, final = self._run_all(list("ABC"), [2, 5], seed=3)
        self.assertEqual(final.pool, ())
        self.assertEqual(final.current_prize_index, 2)

        session = reconciled_session(final.winner_records, prizes, participants)
        self.assertEqual(session.pool, ())
        self.assertEqual(session.current_prize_index, len(prizes))
        self.assertEqual(session.status, RoundStatus.COMPLETED)

    def test_scenario_first_prize_drawn(self) -> None:
        prizes = [Prize("p0", "P0", 2, 2), Prize("p1", "P1", 1, 1)]
        records = [_record("a", prizes[0]), _record("b", prizes[0])]
        participants = [Participant(x, x) for x in "abcde"]
        session = reconciled_session(records, prizes, participants)
        self.assertEqual(session.current_prize_index, 1)
        self.assertEqual(session.current_prize, prizes[1])
        self.assertEqual([p.id for p in session.pool], ["c", "d", "e"])


if __name__ == "__main__":
    unittest.main()
