"""Rebuild draw progress from a stored winner log."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from .engine import DrawSession
from .entities import Participant, Prize, WinnerRecord


@dataclass(frozen=True)
class ReconciledProgress:
    current_prize_index: int
    pool: tuple[Participant, ...]
    winner_records: tuple[WinnerRecord, ...]


def reconcile_prize_index(
    records: Iterable[WinnerRecord],
    prizes: Sequence[Prize],
    *,
    pool_exhausted: bool = False,
) -> int:
    """Return the index of the prize to draw next.

    Prizes are walked in order. A prize whose recorded winners reach its
    ``count`` is skipped; the first prize short of its count (partially drawn
    or untouched) is the current one. Later prizes are never looked at, even
    if they already have records.

    With ``pool_exhausted`` set, a prize that has some winners but fewer than
    its count is also skipped: its round was capped because the pool ran dry,
    and the live session moved past it on confirmation.
    """

    counts = Counter(record.prize.id for record in records)
    index = 0
    for prize in prizes:
        drawn = counts[prize.id]
        if drawn >= prize.count or (pool_exhausted and drawn > 0):
            index += 1
            continue
        break
    return index


def reconcile_pool(
    participants: Iterable[Participant],
    records: Iterable[WinnerRecord],
) -> tuple[Participant, ...]:
    """Loaded participants minus everyone who already appears as a winner."""
    winner_ids = {record.participant.id for record in records}
    return tuple(p for p in participants if p.id not in winner_ids)


def unique_records(records: Iterable[WinnerRecord]) -> tuple[WinnerRecord, ...]:
    """Drop repeated (participant, prize) pairs, keeping the first occurrence."""
    seen: set[tuple[str, str]] = set()
    unique: list[WinnerRecord] = []
    for record in records:
        if record.key in seen:
            continue
        seen.add(record.key)
        unique.append(record)
    return tuple(unique)


def reconcile(
    records: Sequence[WinnerRecord],
    prizes: Sequence[Prize],
    participants: Optional[Iterable[Participant]] = None,
) -> ReconciledProgress:
    """Recompute the prize pointer and the pool after a reload.

    Parameters
    ----------
    records : Sequence[WinnerRecord]
        Winner log as loaded from storage. Records pointing at prizes missing
        from ``prizes`` carry placeholder prizes and only count towards their
        own id. A store that appends on every save can hand back the same
        (participant, prize) pair more than once; only the first is kept.
    prizes : Sequence[Prize]
        Current prize configuration, in draw order.
    participants : Optional[Iterable[Participant]], default: None
        Full participant list as loaded from storage. When given and nothing
        is left after removing the winners, short prizes that already have
        winners are treated as capped rounds and passed over.

    Returns
    -------
    ReconciledProgress
        Prize index, remaining pool and the log without repeated pairs.
    """

    log = unique_records(records)
    pool = reconcile_pool(participants or (), log)
    exhausted = participants is not None and not pool
    return ReconciledProgress(
        current_prize_index=reconcile_prize_index(log, prizes, pool_exhausted=exhausted),
        pool=pool,
        winner_records=log,
    )


def reconciled_session(
    records: Sequence[WinnerRecord],
    prizes: Sequence[Prize],
    participants: Optional[Iterable[Participant]] = None,
) -> DrawSession:
    """Fresh idle :class:`DrawSession` positioned after ``records``."""
    progress = reconcile(records, prizes, participants)
    return DrawSession(
        pool=progress.pool,
        prizes=tuple(prizes),
        current_prize_index=progress.current_prize_index,
        winner_records=progress.winner_records,
    )


__all__ = [
    "ReconciledProgress",
    "reconcile",
    "reconcile_pool",
    "reconcile_prize_index",
    "reconciled_session",
    "unique_records",
]
