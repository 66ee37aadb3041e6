"""Value types for participants, prize tiers and winner records."""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Optional

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase

PLACEHOLDER_ICON = "fa-medal"


def generate_id(length: int = 9) -> str:
    """Return a random base62 identifier of ``length`` characters."""

    if length < 1:
        raise ValueError("length must be a positive integer")
    return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))


def now_ms() -> int:
    """Current wall-clock time as integer epoch milliseconds."""
    return int(time.time() * 1000)


def _normalize_name(name: str, *, what: str) -> str:
    if name is None:
        raise ValueError(f"{what} name must not be None")
    if not isinstance(name, str):
        raise TypeError(f"{what} name must be a string")
    normalized = name.strip()
    if not normalized:
        raise ValueError(f"{what} name must not be empty")
    return normalized


def _validate_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError("prize count must be an integer")
    if count < 1:
        raise ValueError("prize count must be at least 1")
    return count


@dataclass(frozen=True, eq=False)
class Participant:
    """Someone who can be drawn.

    Identity is the ``id`` alone; two participants sharing a name are still
    distinct entries.
    """

    id: str
    name: str

    @classmethod
    def create(cls, name: str, *, id: Optional[str] = None) -> "Participant":
        """Build a participant from a raw name, assigning a fresh id."""
        return cls(id=id or generate_id(), name=_normalize_name(name, what="participant"))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Participant):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("participant", self.id))

    def to_record(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> "Participant":
        return cls(id=str(data["id"]), name=str(data["name"]))


@dataclass(frozen=True, eq=False)
class Prize:
    """A prize tier.

    Attributes
    ----------
    id : str
        Identity of the tier. Equality and hashing only look at this field.
    name : str
        Display name, e.g. ``"First Prize"``.
    level : int
        Display rank. Draw order follows the prize sequence, not this value.
    count : int
        Number of winners drawn for this tier; always at least 1.
    color : str
        Display colour.
    icon : str
        Display icon key.
    """

    id: str
    name: str
    level: int
    count: int
    color: str = "#FFD700"
    icon: str = "fa-award"

    def __post_init__(self) -> None:
        _validate_count(self.count)

    @classmethod
    def create(
        cls,
        name: str,
        *,
        level: int,
        count: int,
        color: str = "#FFD700",
        icon: str = "fa-award",
        id: Optional[str] = None,
    ) -> "Prize":
        return cls(
            id=id or generate_id(),
            name=_normalize_name(name, what="prize"),
            level=level,
            count=count,
            color=color,
            icon=icon,
        )

    @classmethod
    def placeholder(
        cls,
        id: str,
        name: str,
        level: int,
        color: str,
    ) -> "Prize":
        """Stand-in for a prize that is no longer configured.

        Used when a stored winner record points to a prize id missing from the
        current prize list, so that the history can still be shown.
        """
        return cls(id=id, name=name, level=level, count=1, color=color, icon=PLACEHOLDER_ICON)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Prize):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(("prize", self.id))

    def with_count(self, count: int) -> "Prize":
        return replace(self, count=_validate_count(count))

    def renamed(self, name: str) -> "Prize":
        return replace(self, name=_normalize_name(name, what="prize"))

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "count": self.count,
            "color": self.color,
            "icon": self.icon,
        }

    @classmethod
    def from_record(cls, data: Mapping[str, Any]) -> "Prize":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            level=int(data["level"]),
            count=int(data["count"]),
            color=str(data.get("color") or "#FFD700"),
            icon=str(data.get("icon") or "fa-award"),
        )


@dataclass(frozen=True)
class WinnerRecord:
    """Immutable entry of the winner log.

    ``timestamp`` is epoch milliseconds of the confirmation. A confirmation
    stamps all of its records with the same instant, so the log is ordered by
    insertion rather than by time.
    """

    participant: Participant
    prize: Prize
    timestamp: int

    def __post_init__(self) -> None:
        if self.participant is None:
            raise ValueError("winner record requires a participant")
        if self.prize is None:
            raise ValueError("winner record requires a prize")
        if self.timestamp is None:
            raise ValueError("winner record requires a timestamp")

    @property
    def key(self) -> tuple[str, str]:
        """``(participant id, prize id)`` pair that must be unique in a log."""
        return (self.participant.id, self.prize.id)

    def to_record(self) -> dict[str, Any]:
        """Flatten into the persisted field set."""
        return {
            "participantId": self.participant.id,
            "participantName": self.participant.name,
            "prizeId": self.prize.id,
            "prizeName": self.prize.name,
            "prizeLevel": self.prize.level,
            "prizeColor": self.prize.color,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_record(
        cls,
        data: Mapping[str, Any],
        known_prizes: Iterable[Prize] = (),
    ) -> "WinnerRecord":
        """Rebuild a record from its flat form.

        The prize is resolved against ``known_prizes`` by id; an unknown id
        yields :meth:`Prize.placeholder` built from the embedded snapshot.
        """
        prize_id = str(data["prizeId"])
        prize = next((p for p in known_prizes if p.id == prize_id), None)
        if prize is None:
            prize = Prize.placeholder(
                id=prize_id,
                name=str(data.get("prizeName") or ""),
                level=int(data.get("prizeLevel") or 0),
                color=str(data.get("prizeColor") or ""),
            )
        participant = Participant(
            id=str(data["participantId"]),
            name=str(data.get("participantName") or ""),
        )
        return cls(participant=participant, prize=prize, timestamp=int(data["timestamp"]))


__all__ = [
    "BASE62_ALPHABET",
    "PLACEHOLDER_ICON",
    "Participant",
    "Prize",
    "WinnerRecord",
    "generate_id",
    "now_ms",
]
