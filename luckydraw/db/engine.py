import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from .utils import resolve_sqlite_url

load_dotenv()
# Repo root; relative SQLite paths in DB_URL are anchored here.
ROOT_DIR = Path(__file__).resolve().parents[2]
DEFAULT_SQLITE_URL = resolve_sqlite_url(
    os.getenv("DB_URL", "sqlite:///./dev.db"), ROOT_DIR
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # Winner and participant rows rely on ON DELETE CASCADE.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def make_engine(database_url: Optional[str] = None, echo: Optional[bool] = None) -> Engine:
    """Engine for the activity store database.

    ``echo`` defaults to the ``DB_ECHO`` environment variable.
    """
    url = database_url or DEFAULT_SQLITE_URL
    if echo is None:
        echo = os.getenv("DB_ECHO", "").lower() in ("1", "true", "yes")
    engine = create_engine(url, echo=echo, future=True)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def get_sessionmaker(engine: Engine) -> sessionmaker:
    # Stores hand ORM rows back after commit.
    return sessionmaker(bind=engine, expire_on_commit=False, future=True)
