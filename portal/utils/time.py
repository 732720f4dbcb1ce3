"""
time.py - time utilities
Single responsibility: common time helpers.
"""
from datetime import datetime, timezone


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


def format_clock(iso_str: str | None) -> str:
    """ISO 8601 string to "HH:MM"; empty on error."""
    try:
        return datetime.fromisoformat(iso_str).strftime("%H:%M")
    except (ValueError, TypeError):
        return ""


def parse_iso(iso_str: str | None) -> datetime | None:
    """ISO 8601 (``Z`` suffix allowed) to an aware datetime; None on error."""
    try:
        dt = datetime.fromisoformat(iso_str.replace("Z", "+00:00"))
    except (ValueError, TypeError, AttributeError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def time_ago(iso_str: str | None, now: datetime | None = None) -> str:
    """Relative label such as "5 minutes ago"; older than a week prints YYYY-MM-DD."""
    dt = parse_iso(iso_str)
    if dt is None:
        return "Unknown"
    now = now or datetime.now(timezone.utc)
    seconds = (now - dt).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)
    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if days < 7:
        return f"{days} day{'s' if days > 1 else ''} ago"
    return dt.strftime("%Y-%m-%d")
