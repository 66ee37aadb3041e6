"""Activity store backed by the SQLAlchemy models."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session, sessionmaker

from .base import DEFAULT_ACTIVITY_LIMIT, ActivitySummary
from ..draw.entities import Participant, Prize, WinnerRecord, generate_id
from ..models import LotteryActivity, LotteryParticipant, LotteryWinner

logger = logging.getLogger(__name__)


def _unique_participants_preserve_insertion(
    participants: Iterable[Participant],
) -> list[Participant]:
    """Return participants unique by id while preserving the first-seen order."""

    unique: list[Participant] = []
    seen: set[str] = set()
    for participant in participants:
        if participant.id in seen:
            continue
        seen.add(participant.id)
        unique.append(participant)
    return unique


class SqlActivityStore:
    """Persist activities, participant snapshots and winner logs in SQL tables."""

    def __init__(self, session_factory: sessionmaker, *, id_length: int = 20) -> None:
        """Bind the store to a session factory.

        Parameters
        ----------
        session_factory : sessionmaker
            Factory producing sessions for each store call. Every call runs in
            its own transaction.
        id_length : int, default: 20
            Length of generated activity ids.
        """

        self._Session = session_factory
        self._id_length = id_length

    def _require_activity(self, session: Session, activity_id: str) -> LotteryActivity:
        activity = session.get(LotteryActivity, activity_id)
        if activity is None:
            raise KeyError(f"Unknown activity '{activity_id}'")
        return activity

    def _new_activity_id(self, session: Session, max_attempts: int = 32) -> str:
        for _ in range(max_attempts):
            candidate = generate_id(self._id_length)
            if session.get(LotteryActivity, candidate) is None:
                return candidate
        raise RuntimeError("Unable to generate a unique activity id after multiple attempts")

    def create_activity(self, name: str, prizes: Sequence[Prize]) -> str:
        with self._Session.begin() as session:
            activity = LotteryActivity(
                id=self._new_activity_id(session),
                name=name,
                prizes=prizes,
            )
            session.add(activity)
            session.flush()
            logger.debug(f"Created activity {activity.id} with {len(prizes)} prize(s)")
            return activity.id

    def get_activity(self, activity_id: str) -> Optional[ActivitySummary]:
        with self._Session() as session:
            activity = session.get(LotteryActivity, activity_id)
            if activity is None:
                return None
            return ActivitySummary.from_json(activity.to_json())

    def list_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> list[ActivitySummary]:
        """Most recently created activities first."""
        if limit <= 0:
            raise ValueError("limit must be a positive integer")
        stmt = (
            select(LotteryActivity)
            .order_by(LotteryActivity.created_at.desc(), LotteryActivity.id.asc())
            .limit(limit)
        )
        with self._Session() as session:
            return [
                ActivitySummary.from_json(activity.to_json())
                for activity in session.scalars(stmt).all()
            ]

    def delete_activity(self, activity_id: str) -> None:
        """Remove an activity together with its participants and winners."""
        with self._Session.begin() as session:
            activity = self._require_activity(session, activity_id)
            session.execute(
                delete(LotteryParticipant).where(LotteryParticipant.activity_id == activity_id)
            )
            session.execute(
                delete(LotteryWinner).where(LotteryWinner.activity_id == activity_id)
            )
            session.delete(activity)

    def save_participants(self, activity_id: str, participants: Sequence[Participant]) -> None:
        """Replace the stored participant list of ``activity_id``."""
        with self._Session.begin() as session:
            self._require_activity(session, activity_id)
            session.execute(
                delete(LotteryParticipant).where(LotteryParticipant.activity_id == activity_id)
            )
            rows = [
                LotteryParticipant(
                    activity_id=activity_id,
                    participant_id=participant.id,
                    name=participant.name,
                    position=position,
                )
                for position, participant in enumerate(
                    _unique_participants_preserve_insertion(participants)
                )
            ]
            session.add_all(rows)
            logger.debug(f"Saved {len(rows)} participant(s) for activity {activity_id}")

    def load_participants(self, activity_id: str) -> list[Participant]:
        stmt = (
            select(LotteryParticipant)
            .where(LotteryParticipant.activity_id == activity_id)
            .order_by(LotteryParticipant.position.asc(), LotteryParticipant.id.asc())
        )
        with self._Session() as session:
            self._require_activity(session, activity_id)
            return [row.to_participant() for row in session.scalars(stmt).all()]

    def save_winner_records(self, activity_id: str, records: Sequence[WinnerRecord]) -> None:
        """Append winner records, skipping (participant, prize) pairs already stored.

        Saving the same log twice therefore leaves a single copy of each
        record.
        """

        with self._Session.begin() as session:
            self._require_activity(session, activity_id)
            existing = {
                (participant_id, prize_id)
                for participant_id, prize_id in session.execute(
                    select(LotteryWinner.participant_id, LotteryWinner.prize_id).where(
                        LotteryWinner.activity_id == activity_id
                    )
                )
            }
            added = 0
            for record in records:
                if record.key in existing:
                    continue
                existing.add(record.key)
                session.add(LotteryWinner.from_record(activity_id, record))
                added += 1
            logger.debug(
                f"Saved {added} new winner record(s) for activity {activity_id} "
                f"({len(records) - added} already stored)"
            )

    def load_winner_records(
        self, activity_id: str, known_prizes: Sequence[Prize]
    ) -> list[WinnerRecord]:
        stmt = (
            select(LotteryWinner)
            .where(LotteryWinner.activity_id == activity_id)
            .order_by(LotteryWinner.timestamp.asc(), LotteryWinner.id.asc())
        )
        with self._Session() as session:
            self._require_activity(session, activity_id)
            return [row.to_winner_record(known_prizes) for row in session.scalars(stmt).all()]


__all__ = ["SqlActivityStore"]
