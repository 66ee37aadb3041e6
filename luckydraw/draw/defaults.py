"""Prize tiers a new activity starts with."""

from __future__ import annotations

from .entities import Prize


def default_prizes() -> list[Prize]:
    """Third, second and first prize, drawn in that order."""
    return [
        Prize.create("Third Prize", level=3, count=5, color="#CD7F32", icon="fa-medal"),
        Prize.create("Second Prize", level=2, count=3, color="#C0C0C0", icon="fa-award"),
        Prize.create("First Prize", level=1, count=1, color="#FFD700", icon="fa-crown"),
    ]


__all__ = ["default_prizes"]
