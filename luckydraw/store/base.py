"""Interface shared by activity store backends."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..draw.entities import Participant, Prize, WinnerRecord

DEFAULT_ACTIVITY_LIMIT = 20
"""Number of activities returned by ``list_activities`` when no limit is given."""


@dataclass(frozen=True)
class ActivitySummary:
    """Activity metadata as returned by ``list_activities``.

    Attributes
    ----------
    id : str
        Store-assigned activity id.
    name : str
        Display name.
    prizes : tuple[Prize, ...]
        Prize configuration saved with the activity, in draw order.
    created_at : Optional[int]
        Creation time in epoch milliseconds, when known.
    updated_at : Optional[int]
        Last update time in epoch milliseconds, when known.
    """

    id: str
    name: str
    prizes: tuple[Prize, ...] = field(default_factory=tuple)
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "ActivitySummary":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            prizes=tuple(Prize.from_record(p) for p in data.get("prizes") or []),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )


class ActivityStore(Protocol):
    """Remote mirror of draw sessions, keyed by activity id.

    Every method may raise; callers treat each call as independent and
    best-effort.
    """

    def create_activity(self, name: str, prizes: Sequence[Prize]) -> str: ...

    def list_activities(self, limit: int = DEFAULT_ACTIVITY_LIMIT) -> list[ActivitySummary]: ...

    def delete_activity(self, activity_id: str) -> None: ...

    def save_participants(self, activity_id: str, participants: Sequence[Participant]) -> None: ...

    def load_participants(self, activity_id: str) -> list[Participant]: ...

    def save_winner_records(self, activity_id: str, records: Sequence[WinnerRecord]) -> None: ...

    def load_winner_records(
        self, activity_id: str, known_prizes: Sequence[Prize]
    ) -> list[WinnerRecord]: ...


__all__ = ["ActivityStore", "ActivitySummary", "DEFAULT_ACTIVITY_LIMIT"]
