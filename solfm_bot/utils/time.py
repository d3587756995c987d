from __future__ import annotations

from datetime import datetime, timedelta, timezone


def utc_ts() -> float:
    return datetime.now(timezone.utc).timestamp()


def trailing_window(days: int, now: float | None = None) -> tuple[int, int]:
    """Return (from_ts, to_ts) unix seconds covering the last ``days`` days."""
    end = int(now if now is not None else utc_ts())
    return end - int(timedelta(days=days).total_seconds()), end


def format_timestamp(timestamp: int, utc_offset_hours: int = 0, fmt: str = "%m/%d %H:%M:%S") -> str:
    tz = timezone(timedelta(hours=utc_offset_hours))
    return datetime.fromtimestamp(timestamp, tz=tz).strftime(fmt)
