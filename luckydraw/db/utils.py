from pathlib import Path
from datetime import datetime, timezone
from typing import Optional


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Resolve 'sqlite:///./relative/path' to an absolute sqlite:/// URL.

    Keeps other URL forms unchanged.
    """
    prefix = "sqlite:///./"
    if not url.startswith(prefix):
        return url
    rel = url[len(prefix) :]
    return f"sqlite:///{(project_root / rel).resolve()}"


def datetime_to_ms(dt: Optional[datetime]) -> Optional[int]:
    """Convert a datetime to epoch milliseconds, or return None.

    Naive datetimes (as returned by SQLite) are taken to be UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)
