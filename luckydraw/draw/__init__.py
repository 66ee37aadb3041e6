"""Draw state machine, winner selection and progress reconciliation."""

from .defaults import default_prizes
from .engine import (
    DrawEngine,
    DrawSession,
    RoundConfirmation,
    RoundStart,
    RoundStatus,
    complete_round,
    confirm_round,
    reset_progress,
    select_winners,
    start_round,
)
from .entities import Participant, Prize, WinnerRecord, generate_id
from .reconcile import ReconciledProgress, reconcile, reconciled_session, unique_records
from .roster import parse_names
from .selection import RandomSource, sample_without_replacement

__all__ = [
    "DrawEngine",
    "DrawSession",
    "Participant",
    "Prize",
    "RandomSource",
    "ReconciledProgress",
    "RoundConfirmation",
    "RoundStart",
    "RoundStatus",
    "WinnerRecord",
    "complete_round",
    "confirm_round",
    "default_prizes",
    "generate_id",
    "parse_names",
    "reconcile",
    "reconciled_session",
    "reset_progress",
    "sample_without_replacement",
    "select_winners",
    "start_round",
    "unique_records",
]
