from datetime import date, datetime, time, timezone

def parse_hhmm(s: str) -> time:
    """Parses a 24h 'HH:MM' clock string."""
    if not isinstance(s, str):
        raise ValueError(f"Expected an 'HH:MM' string, got {s!r}.")
    hours, sep, minutes = s.strip().partition(":")
    if not sep or len(hours) != 2 or len(minutes) != 2:
        raise ValueError(f"Expected an 'HH:MM' string, got {s!r}.")
    return time(int(hours), int(minutes))

def format_hhmm(t: time) -> str:
    return t.strftime("%H:%M")

def to_minutes(t: time) -> int:
    """Minutes since midnight."""
    return t.hour * 60 + t.minute

def from_minutes(total: int) -> time:
    return time(total // 60, total % 60)

def parse_date(s: str) -> date:
    """Parses a 'YYYY-MM-DD' calendar date."""
    return date.fromisoformat(s.strip())

def to_utc(dt: datetime) -> datetime:
    """Converts a naive datetime to a timezone-aware UTC datetime."""
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=timezone.utc)

def api_iso_z(dt: datetime) -> str:
    """Formats a datetime into an ISO 8601 string ending in 'Z' for API responses."""
    return to_utc(dt).astimezone(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")

def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)
