from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .activity import (  # noqa: F401
    LotteryActivity,
    LotteryParticipant,
    LotteryWinner,
)

__all__ = [
    "Base",
    "LotteryActivity",
    "LotteryParticipant",
    "LotteryWinner",
]
