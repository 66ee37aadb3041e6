import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence, Union

from .draw.defaults import default_prizes
from .draw.engine import Clock, DrawEngine, DrawSession, RoundStart, RoundStatus
from .draw.entities import Participant, Prize, WinnerRecord
from .draw.reconcile import reconcile_pool, reconciled_session
from .draw.selection import RandomSource
from .draw import roster
from .store.base import DEFAULT_ACTIVITY_LIMIT, ActivityStore, ActivitySummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SyncResult:
    """Success/failure signal of a store operation.

    ``failures`` names the individual store calls that raised; a result can
    be partially successful, in which case ``ok`` is ``False`` and the calls
    not listed went through.
    """

    ok: bool
    message: str
    activity_id: Optional[str] = None
    failures: tuple[str, ...] = ()


def _default_activity_name() -> str:
    return "Lucky Draw " + datetime.now(timezone.utc).strftime("%Y-%m-%d")


class LotteryController:
    """Drive a lucky draw and mirror it to an activity store.

    Local state is the source of truth. Store calls are best effort: a failing
    call is logged and reported through :class:`SyncResult`, never rolled back
    into the local session and never retried.
    """

    def __init__(
        self,
        participants: Optional[Iterable[Participant]] = None,
        prizes: Optional[Iterable[Prize]] = None,
        *,
        store: Optional[ActivityStore] = None,
        activity_id: Optional[str] = None,
        rng: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """Create a controller.

        Parameters
        ----------
        participants : Optional[Iterable[Participant]], default: None
            Initial pool. Empty when omitted.
        prizes : Optional[Iterable[Prize]], default: None
            Prize tiers in draw order. :func:`default_prizes` when omitted.
        store : Optional[ActivityStore], default: None
            Remote mirror. Without one, save/load report a failure and
            confirmations stay local.
        activity_id : Optional[str], default: None
            Activity the session is already bound to, if any.
        rng : Optional[RandomSource], default: None
            Random source for winner selection.
        clock : Optional[Clock], default: None
            Epoch-millisecond clock for confirmation timestamps.
        """

        session = DrawSession.new(
            participants or (),
            default_prizes() if prizes is None else prizes,
        )
        self._engine = DrawEngine(session, rng=rng, clock=clock)
        self._store = store
        self.activity_id = activity_id
        self.last_sync: Optional[SyncResult] = None

    # -------- state --------
    @property
    def session(self) -> DrawSession:
        return self._engine.session

    @property
    def participants(self) -> list[Participant]:
        return list(self.session.pool)

    @property
    def prizes(self) -> list[Prize]:
        return list(self.session.prizes)

    @property
    def winner_records(self) -> list[WinnerRecord]:
        return list(self.session.winner_records)

    @property
    def pending_winners(self) -> list[Participant]:
        return list(self.session.pending_winners)

    @property
    def current_prize(self) -> Optional[Prize]:
        return self.session.current_prize

    @property
    def all_prizes_drawn(self) -> bool:
        return self.session.all_prizes_drawn

    @property
    def is_round_in_progress(self) -> bool:
        return self.session.is_round_in_progress

    def bind_activity(self, activity_id: Optional[str]) -> None:
        self.activity_id = activity_id

    # -------- configuration --------
    def add_participant(self, name: str) -> Participant:
        self._engine.replace_session(roster.add_participant(self.session, name))
        return self.session.pool[-1]

    def batch_add(self, names: Union[str, Iterable[str]]) -> list[Participant]:
        before = len(self.session.pool)
        self._engine.replace_session(roster.batch_add(self.session, names))
        return list(self.session.pool[before:])

    def remove_participant(self, participant_id: str) -> None:
        self._engine.replace_session(roster.remove_participant(self.session, participant_id))

    def clear_all(self) -> None:
        self._engine.replace_session(roster.clear_all(self.session))

    def update_prize(
        self,
        prize_id: str,
        *,
        name: Optional[str] = None,
        count: Optional[int] = None,
    ) -> Prize:
        self._engine.replace_session(
            roster.update_prize(self.session, prize_id, name=name, count=count)
        )
        return next(p for p in self.session.prizes if p.id == prize_id)

    # -------- draw --------
    def start_lottery(self) -> RoundStart:
        """Begin a round for the current prize; see :func:`~luckydraw.draw.engine.start_round`."""
        outcome = self._engine.start_round()
        if not outcome.started:
            logger.info(f"Cannot start round: {outcome.reason}")
        return outcome

    def complete_spin(self) -> list[Participant]:
        """Select the winners once the presentation of the round has finished."""
        return self._engine.complete_round()

    def confirm_winners(self) -> list[WinnerRecord]:
        """Commit the pending winners and move on to the next prize.

        Repeated calls for the same round return an empty list. When the
        session is bound to an activity, the new records are mirrored to the
        store; the outcome of that call is kept in :attr:`last_sync`.
        """

        records = self._engine.confirm_round()
        if records and self.activity_id and self._store is not None:
            self.last_sync = self._run_all(
                [("save_winner_records", lambda: self._store.save_winner_records(self.activity_id, records))],
                success="Winner records saved",
            )
        return records

    def reset_progress(self) -> DrawSession:
        """Clear the winner log and go back to the first prize.

        Winners removed from the pool by earlier rounds stay removed. Ignored
        while a round is in progress.
        """
        return self._engine.reset_progress()

    # -------- store --------
    def _run_all(self, calls, *, success: str) -> SyncResult:
        failures: list[str] = []
        for label, call in calls:
            try:
                call()
            except Exception as exc:
                logger.error(f"Store call {label} failed for activity {self.activity_id}: {exc}")
                failures.append(label)
        if failures:
            return SyncResult(
                ok=False,
                message="Failed: " + ", ".join(failures),
                activity_id=self.activity_id,
                failures=tuple(failures),
            )
        return SyncResult(ok=True, message=success, activity_id=self.activity_id)

    def save_to_store(self, name: Optional[str] = None) -> SyncResult:
        """Mirror the activity, the remaining pool and the winner log.

        The activity is created on the first save. Participant and winner
        saves run independently; a failure of one does not stop the other.
        """

        if self._store is None:
            self.last_sync = SyncResult(ok=False, message="No store configured")
            return self.last_sync

        if not self.activity_id:
            try:
                self.activity_id = self._store.create_activity(
                    name or _default_activity_name(), self.prizes
                )
            except Exception as exc:
                logger.error(f"Store call create_activity failed: {exc}")
                self.last_sync = SyncResult(
                    ok=False,
                    message="Failed to create activity",
                    failures=("create_activity",),
                )
                return self.last_sync

        activity_id = self.activity_id
        participants = self.participants
        records = self.winner_records
        calls = [("save_participants", lambda: self._store.save_participants(activity_id, participants))]
        if records:
            calls.append(
                ("save_winner_records", lambda: self._store.save_winner_records(activity_id, records))
            )
        self.last_sync = self._run_all(calls, success="Saved")
        return self.last_sync

    def load_from_store(self) -> SyncResult:
        """Restore the pool and progress of the bound activity.

        An empty participant list or winner log from the store leaves the
        corresponding local state as it is. Progress is recomputed with
        :func:`~luckydraw.draw.reconcile.reconciled_session`.
        """

        if self._store is None:
            self.last_sync = SyncResult(ok=False, message="No store configured")
            return self.last_sync
        if not self.activity_id:
            self.last_sync = SyncResult(ok=False, message="Save the activity to the store first")
            return self.last_sync
        if self.session.phase is not RoundStatus.IDLE:
            self.last_sync = SyncResult(
                ok=False, message="Cannot load while a round is running", activity_id=self.activity_id
            )
            return self.last_sync

        loaded_participants: list[Participant] = []
        loaded_records: list[WinnerRecord] = []
        prizes = self.prizes

        def _load_participants() -> None:
            loaded_participants.extend(self._store.load_participants(self.activity_id))

        def _load_records() -> None:
            loaded_records.extend(self._store.load_winner_records(self.activity_id, prizes))

        result = self._run_all(
            [("load_participants", _load_participants), ("load_winner_records", _load_records)],
            success="Loaded",
        )

        session = self.session
        participants: Sequence[Participant] = loaded_participants or session.pool
        if loaded_records:
            session = reconciled_session(loaded_records, prizes, participants)
        else:
            session = replace(session, pool=reconcile_pool(participants, session.winner_records))
        self._engine.replace_session(session)
        logger.debug(
            f"Loaded activity {self.activity_id}: {len(session.pool)} participant(s), "
            f"{len(session.winner_records)} record(s), prize index {session.current_prize_index}"
        )
        self.last_sync = result
        return result

    def list_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> list[ActivitySummary]:
        """Newest activities in the store; empty when the store is unreachable."""
        if self._store is None:
            return []
        try:
            return self._store.list_activities(limit)
        except Exception as exc:
            logger.error(f"Store call list_activities failed: {exc}")
            return []

    def delete_activity(self, activity_id: str) -> SyncResult:
        if self._store is None:
            return SyncResult(ok=False, message="No store configured")
        try:
            self._store.delete_activity(activity_id)
        except Exception as exc:
            logger.error(f"Store call delete_activity failed for activity {activity_id}: {exc}")
            return SyncResult(
                ok=False,
                message="Failed to delete activity",
                activity_id=activity_id,
                failures=("delete_activity",),
            )
        if self.activity_id == activity_id:
            self.activity_id = None
        return SyncResult(ok=True, message="Deleted", activity_id=activity_id)


__all__ = ["LotteryController", "SyncResult"]
