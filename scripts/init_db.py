from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import func, inspect, select

from luckydraw.db.engine import get_sessionmaker, make_engine
from luckydraw.models import Base


def upgrade_db(target_revision: str = "head") -> None:
    """Migrate the configured database to ``target_revision``."""
    project_root = Path(__file__).resolve().parents[1]
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    command.upgrade(alembic_cfg, target_revision)


def lottery_table_counts(engine) -> dict[str, int | None]:
    """Row count per lottery table; ``None`` for a table the database lacks."""
    existing = set(inspect(engine).get_table_names())
    Session = get_sessionmaker(engine)
    counts: dict[str, int | None] = {}
    with Session() as session:
        for name, table in sorted(Base.metadata.tables.items()):
            if name not in existing:
                counts[name] = None
                continue
            counts[name] = session.scalar(select(func.count()).select_from(table))
    return counts


def main() -> None:
    upgrade_db()
    for name, count in lottery_table_counts(make_engine()).items():
        print(f"{name}: {'missing' if count is None else f'{count} row(s)'}")


if __name__ == "__main__":
    main()
