"""Round-by-round draw state machine.

A session moves through ``IDLE -> IN_PROGRESS -> AWAITING_CONFIRMATION`` and
back to ``IDLE`` on the next prize, until every prize has been drawn
(``COMPLETED``). Selection is split from the start of a round so callers can
run an arbitrarily long presentation between :meth:`DrawEngine.start_round`
and :meth:`DrawEngine.complete_round`.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional, Sequence

from .entities import Participant, Prize, WinnerRecord, now_ms
from .selection import RandomSource, draw_count_for, sample_without_replacement

logger = logging.getLogger(__name__)

Clock = Callable[[], int]

REASON_EMPTY_POOL = "empty_pool"
REASON_NO_PRIZE = "no_current_prize"
REASON_NON_POSITIVE_COUNT = "non_positive_count"
REASON_ROUND_ACTIVE = "round_active"


class RoundStatus(str, enum.Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    COMPLETED = "completed"


@dataclass(frozen=True)
class DrawSession:
    """Snapshot of a draw session.

    Sessions are never mutated; every transition returns a new snapshot.

    Attributes
    ----------
    pool : tuple[Participant, ...]
        Participants still eligible to be drawn.
    prizes : tuple[Prize, ...]
        Prize tiers in draw order.
    current_prize_index : int
        Position of the prize being drawn. Equal to ``len(prizes)`` once
        everything has been drawn.
    winner_records : tuple[WinnerRecord, ...]
        Append-only winner log.
    pending_winners : tuple[Participant, ...]
        Winners selected by the current round and not yet confirmed.
    phase : RoundStatus
        ``IDLE``, ``IN_PROGRESS`` or ``AWAITING_CONFIRMATION``; use
        :attr:`status` to also see ``COMPLETED``.
    draw_count : int
        Number of winners the active round will select.
    """

    pool: tuple[Participant, ...] = ()
    prizes: tuple[Prize, ...] = ()
    current_prize_index: int = 0
    winner_records: tuple[WinnerRecord, ...] = ()
    pending_winners: tuple[Participant, ...] = ()
    phase: RoundStatus = RoundStatus.IDLE
    draw_count: int = 0

    @classmethod
    def new(
        cls,
        participants: Iterable[Participant] = (),
        prizes: Iterable[Prize] = (),
    ) -> "DrawSession":
        return cls(pool=tuple(participants), prizes=tuple(prizes))

    @property
    def current_prize(self) -> Optional[Prize]:
        if 0 <= self.current_prize_index < len(self.prizes):
            return self.prizes[self.current_prize_index]
        return None

    @property
    def all_prizes_drawn(self) -> bool:
        return self.current_prize_index >= len(self.prizes)

    @property
    def status(self) -> RoundStatus:
        if self.phase is RoundStatus.IDLE and self.all_prizes_drawn:
            return RoundStatus.COMPLETED
        return self.phase

    @property
    def is_round_in_progress(self) -> bool:
        return self.phase is RoundStatus.IN_PROGRESS

    def winners_for(self, prize_id: str) -> list[WinnerRecord]:
        """Winner records logged for ``prize_id``, in log order."""
        return [r for r in self.winner_records if r.prize.id == prize_id]

    @property
    def remaining_slots(self) -> int:
        """Winners still to draw for the current prize."""
        prize = self.current_prize
        if prize is None:
            return 0
        return max(0, prize.count - len(self.winners_for(prize.id)))


@dataclass(frozen=True)
class RoundStart:
    """Outcome of :func:`start_round`.

    ``started`` is ``False`` when the round could not begin; ``reason`` then
    holds one of the ``REASON_*`` constants and ``session`` is unchanged.
    """

    session: DrawSession
    started: bool
    draw_count: int = 0
    reason: Optional[str] = None


@dataclass(frozen=True)
class RoundConfirmation:
    """Outcome of :func:`confirm_round`; ``records`` is empty for a no-op."""

    session: DrawSession
    records: tuple[WinnerRecord, ...] = field(default_factory=tuple)

    @property
    def applied(self) -> bool:
        return bool(self.records)


def start_round(session: DrawSession) -> RoundStart:
    """Begin drawing the current prize.

    Never raises for an invalid request; a refused start comes back with
    ``started=False`` and a reason.
    """

    if session.phase is not RoundStatus.IDLE:
        return RoundStart(session, False, reason=REASON_ROUND_ACTIVE)
    if not session.pool:
        return RoundStart(session, False, reason=REASON_EMPTY_POOL)
    prize = session.current_prize
    if prize is None:
        return RoundStart(session, False, reason=REASON_NO_PRIZE)
    draw_count = draw_count_for(prize.count, len(session.pool))
    if draw_count < 1:
        return RoundStart(session, False, reason=REASON_NON_POSITIVE_COUNT)

    started = replace(
        session,
        phase=RoundStatus.IN_PROGRESS,
        pending_winners=(),
        draw_count=draw_count,
    )
    logger.debug(f"Round started for prize {prize.id} drawing {draw_count}")
    return RoundStart(started, True, draw_count=draw_count)


def select_winners(
    pool: Sequence[Participant],
    draw_count: int,
    rng: Optional[RandomSource] = None,
) -> list[Participant]:
    """Pick ``draw_count`` distinct participants from ``pool`` uniformly.

    ``draw_count`` is capped at the pool size. ``pool`` itself is left as is.
    """
    return sample_without_replacement(pool, draw_count_for(draw_count, len(pool)), rng)


def complete_round(
    session: DrawSession,
    rng: Optional[RandomSource] = None,
) -> DrawSession:
    """Select the round's winners and wait for confirmation.

    Outside of ``IN_PROGRESS`` this is a no-op. The pool is not touched here;
    winners leave it on confirmation.
    """

    if session.phase is not RoundStatus.IN_PROGRESS:
        logger.debug(f"complete_round ignored in phase {session.phase.value}")
        return session
    winners = select_winners(session.pool, session.draw_count, rng)
    return replace(
        session,
        phase=RoundStatus.AWAITING_CONFIRMATION,
        pending_winners=tuple(winners),
    )


def confirm_round(session: DrawSession, *, timestamp: Optional[int] = None) -> RoundConfirmation:
    """Commit the pending winners of the current prize.

    Appends one record per pending winner, removes the winners from the pool,
    advances to the next prize and clears the pending set. Calling it again on
    the resulting session (or on any session without pending winners) changes
    nothing.
    """

    prize = session.current_prize
    if (
        session.phase is not RoundStatus.AWAITING_CONFIRMATION
        or not session.pending_winners
        or prize is None
    ):
        return RoundConfirmation(session)

    stamp = now_ms() if timestamp is None else timestamp
    winners = session.pending_winners
    seen = {record.key for record in session.winner_records}
    new_records: list[WinnerRecord] = []
    for winner in winners:
        record = WinnerRecord(participant=winner, prize=prize, timestamp=stamp)
        if record.key in seen:
            continue
        seen.add(record.key)
        new_records.append(record)

    winner_ids = {w.id for w in winners}
    confirmed = replace(
        session,
        pending_winners=(),
        phase=RoundStatus.IDLE,
        draw_count=0,
        pool=tuple(p for p in session.pool if p.id not in winner_ids),
        winner_records=session.winner_records + tuple(new_records),
        current_prize_index=session.current_prize_index + 1,
    )
    logger.debug(
        f"Confirmed {len(new_records)} winner(s) for prize {prize.id}; "
        f"{len(confirmed.pool)} participant(s) left"
    )
    return RoundConfirmation(confirmed, tuple(new_records))


def reset_progress(session: DrawSession) -> DrawSession:
    """Forget every winner and restart from the first prize.

    Participants removed by earlier rounds are *not* put back into the pool.
    A session in ``IN_PROGRESS`` is returned unchanged.
    """
    if session.phase is RoundStatus.IN_PROGRESS:
        logger.debug("reset_progress ignored while a round is in progress")
        return session
    return replace(
        session,
        winner_records=(),
        pending_winners=(),
        current_prize_index=0,
        phase=RoundStatus.IDLE,
        draw_count=0,
    )


class DrawEngine:
    """Stateful wrapper that holds the latest :class:`DrawSession`.

    Because the engine always works on its newest snapshot, a repeated
    confirmation finds an empty pending set and is dropped.
    """

    def __init__(
        self,
        session: Optional[DrawSession] = None,
        *,
        rng: Optional[RandomSource] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """Create an engine.

        Parameters
        ----------
        session : Optional[DrawSession], default: None
            Starting snapshot; an empty session when omitted.
        rng : Optional[RandomSource], default: None
            Random source used for winner selection.
        clock : Optional[Clock], default: None
            Callable returning epoch milliseconds for confirmation stamps.
        """

        self._session = session or DrawSession()
        self._rng = rng
        self._clock = clock or now_ms

    @property
    def session(self) -> DrawSession:
        return self._session

    def replace_session(self, session: DrawSession) -> None:
        self._session = session

    def start_round(self) -> RoundStart:
        outcome = start_round(self._session)
        self._session = outcome.session
        return outcome

    def complete_round(self) -> list[Participant]:
        self._session = complete_round(self._session, self._rng)
        return list(self._session.pending_winners)

    def confirm_round(self) -> list[WinnerRecord]:
        if self._session.phase is not RoundStatus.AWAITING_CONFIRMATION:
            return []
        outcome = confirm_round(self._session, timestamp=self._clock())
        self._session = outcome.session
        return list(outcome.records)

    def reset_progress(self) -> DrawSession:
        self._session = reset_progress(self._session)
        return self._session


__all__ = [
    "Clock",
    "DrawEngine",
    "DrawSession",
    "REASON_EMPTY_POOL",
    "REASON_NON_POSITIVE_COUNT",
    "REASON_NO_PRIZE",
    "REASON_ROUND_ACTIVE",
    "RoundConfirmation",
    "RoundStart",
    "RoundStatus",
    "complete_round",
    "confirm_round",
    "reset_progress",
    "select_winners",
    "start_round",
]
