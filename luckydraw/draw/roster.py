"""Participant and prize configuration helpers.

Every helper takes a :class:`DrawSession` and returns an updated copy.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Iterable, Optional

from .engine import DrawSession, RoundStatus
from .entities import Participant, Prize

_NAME_SEPARATORS = re.compile(r"[,\n]")


def parse_names(text: str) -> list[str]:
    """Split batch input on commas and newlines, trim, and drop empty entries."""
    if not text:
        return []
    return [part.strip() for part in _NAME_SEPARATORS.split(text) if part.strip()]


def add_participant(session: DrawSession, name: str) -> DrawSession:
    participant = Participant.create(name)
    return replace(session, pool=session.pool + (participant,))


def batch_add(session: DrawSession, names: Iterable[str]) -> DrawSession:
    """Add one participant per non-blank name.

    ``names`` may also be raw text, in which case it is run through
    :func:`parse_names` first.
    """
    if isinstance(names, str):
        names = parse_names(names)
    added = tuple(Participant.create(name) for name in names if name and name.strip())
    return replace(session, pool=session.pool + added)


def remove_participant(session: DrawSession, participant_id: str) -> DrawSession:
    return replace(session, pool=tuple(p for p in session.pool if p.id != participant_id))


def clear_all(session: DrawSession) -> DrawSession:
    """Empty the pool and the winner log and go back to the first prize.

    No-op while a round is in progress.
    """
    if session.phase is RoundStatus.IN_PROGRESS:
        return session
    return replace(
        session,
        pool=(),
        winner_records=(),
        pending_winners=(),
        current_prize_index=0,
        phase=RoundStatus.IDLE,
        draw_count=0,
    )


def update_prize(
    session: DrawSession,
    prize_id: str,
    *,
    name: Optional[str] = None,
    count: Optional[int] = None,
) -> DrawSession:
    """Rename a prize or change its winner count, keeping its position.

    Raises
    ------
    KeyError
        If no prize with ``prize_id`` is configured.
    ValueError
        If ``count`` is below 1 or ``name`` is blank.
    """

    prizes = list(session.prizes)
    for idx, prize in enumerate(prizes):
        if prize.id != prize_id:
            continue
        updated: Prize = prize
        if name is not None:
            updated = updated.renamed(name)
        if count is not None:
            updated = updated.with_count(count)
        prizes[idx] = updated
        return replace(session, prizes=tuple(prizes))
    raise KeyError(f"Unknown prize '{prize_id}'")


__all__ = [
    "add_participant",
    "batch_add",
    "clear_all",
    "parse_names",
    "remove_participant",
    "update_prize",
]
