"""Stored documents of a lottery activity."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy import (
    BigInteger,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base
from ..db.utils import datetime_to_ms
from ..draw.entities import Participant, Prize, WinnerRecord


class LotteryActivity(Base):
    """A named draw with its prize configuration."""

    __tablename__ = "lottery_activities"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    """Activity id handed back to callers by ``create_activity``."""

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    prizes: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    """Prize tiers as a list of flat prize records, in draw order."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    participants: Mapped[list["LotteryParticipant"]] = relationship(
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="LotteryParticipant.position",
    )
    winners: Mapped[list["LotteryWinner"]] = relationship(
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __init__(
        self,
        *,
        id: str,
        name: str,
        prizes: Iterable[Prize] = (),
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ) -> None:
        self.id = id
        self.name = name
        self.prizes = [prize.to_record() for prize in prizes]
        if created_at is not None:
            self.created_at = created_at
        if updated_at is not None:
            self.updated_at = updated_at

    def to_json(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "prizes": list(self.prizes or []),
            "createdAt": datetime_to_ms(self.created_at),
            "updatedAt": datetime_to_ms(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return f"<LotteryActivity(id={self.id}, name={self.name})>"


class LotteryParticipant(Base):
    """One entry of an activity's saved participant list."""

    __tablename__ = "lottery_participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_id: Mapped[str] = mapped_column(
        ForeignKey("lottery_activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    """Order of the participant in the saved list."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    activity: Mapped["LotteryActivity"] = relationship(back_populates="participants")

    __table_args__ = (
        UniqueConstraint(
            "activity_id", "participant_id", name="uq_lottery_participant_per_activity"
        ),
    )

    def to_participant(self) -> Participant:
        return Participant(id=self.participant_id, name=self.name)


class LotteryWinner(Base):
    """Flat snapshot of a confirmed winner record."""

    __tablename__ = "lottery_winners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    activity_id: Mapped[str] = mapped_column(
        ForeignKey("lottery_activities.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    participant_id: Mapped[str] = mapped_column(String(64), nullable=False)
    participant_name: Mapped[str] = mapped_column(String(255), nullable=False)
    prize_id: Mapped[str] = mapped_column(String(64), nullable=False)
    prize_name: Mapped[str] = mapped_column(String(255), nullable=False)
    prize_level: Mapped[int] = mapped_column(Integer, nullable=False)
    prize_color: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    """Confirmation time in epoch milliseconds."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    activity: Mapped["LotteryActivity"] = relationship(back_populates="winners")

    __table_args__ = (
        UniqueConstraint(
            "activity_id",
            "participant_id",
            "prize_id",
            name="uq_lottery_winner_per_prize",
        ),
        Index("ix_lottery_winners_activity_timestamp", "activity_id", "timestamp"),
    )

    @classmethod
    def from_record(cls, activity_id: str, record: WinnerRecord) -> "LotteryWinner":
        data = record.to_record()
        return cls(
            activity_id=activity_id,
            participant_id=data["participantId"],
            participant_name=data["participantName"],
            prize_id=data["prizeId"],
            prize_name=data["prizeName"],
            prize_level=data["prizeLevel"],
            prize_color=data["prizeColor"],
            timestamp=data["timestamp"],
        )

    def to_json(self) -> dict:
        return {
            "participantId": self.participant_id,
            "participantName": self.participant_name,
            "prizeId": self.prize_id,
            "prizeName": self.prize_name,
            "prizeLevel": self.prize_level,
            "prizeColor": self.prize_color,
            "timestamp": self.timestamp,
        }

    def to_winner_record(self, known_prizes: Iterable[Prize] = ()) -> WinnerRecord:
        return WinnerRecord.from_record(self.to_json(), known_prizes)


__all__ = ["LotteryActivity", "LotteryParticipant", "LotteryWinner"]
