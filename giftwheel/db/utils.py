from datetime import datetime, timezone
from pathlib import Path
from typing import Optional


def resolve_sqlite_url(url: str, project_root: Path) -> str:
    """Turn ``sqlite:///./games.db`` into an absolute ``sqlite:///`` URL.

    Paths are resolved against ``project_root``; other URLs pass through.
    """
    prefix = "sqlite:///./"
    if not url.startswith(prefix):
        return url
    return f"sqlite:///{(project_root / url[len(prefix):]).resolve()}"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def dt_iso(dt: Optional[datetime]) -> Optional[str]:
    """Serialize ``dt`` as an ISO 8601 string in UTC, or return None.

    SQLite hands back naive datetimes even for timezone-aware columns; those
    are assumed to already be in UTC.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()
