"""Remote mirrors for draw sessions."""

from .base import ActivityStore, ActivitySummary, DEFAULT_ACTIVITY_LIMIT
from .http import HttpActivityStore
from .sql import SqlActivityStore

__all__ = [
    "ActivityStore",
    "ActivitySummary",
    "DEFAULT_ACTIVITY_LIMIT",
    "HttpActivityStore",
    "SqlActivityStore",
]
