"""
helpers.py - UI helper functions
Single responsibility: small formatting helpers used across UI.
"""
from datetime import datetime

import flet as ft

from portal.config import (
    COLOR_ACCENT,
    COLOR_DANGER,
    COLOR_PRIMARY,
    COLOR_SUCCESS,
    COLOR_TEXT_MUTED,
    COLOR_WARNING,
)
from portal.domain.filters import ALL

_STATUS_COLORS = {
    "pending": COLOR_WARNING,
    "in-progress": COLOR_PRIMARY,
    "in_progress": COLOR_PRIMARY,
    "resolved": COLOR_SUCCESS,
    "approved": COLOR_SUCCESS,
    "rejected": COLOR_DANGER,
    "active": COLOR_SUCCESS,
    "inactive": COLOR_TEXT_MUTED,
}


def format_datetime(iso_str: str | None) -> str:
    """ISO 8601 string to "YYYY-MM-DD HH:MM"; fallback to raw on error."""
    try:
        dt = datetime.fromisoformat(iso_str.replace("Z", "+00:00"))
        return dt.strftime("%Y-%m-%d %H:%M")
    except (ValueError, TypeError, AttributeError):
        return iso_str or ""


def format_date(iso_str: str | None) -> str:
    return format_datetime(iso_str)[:10]


def status_color(status: str | None) -> str:
    return _STATUS_COLORS.get((status or "").lower(), COLOR_ACCENT)


def status_label(status: str | None) -> str:
    text = (status or "").replace("_", " ").replace("-", " ")
    return text.title() or "Unknown"


def dropdown_options(
    options: list[tuple[str, str]], all_label: str | None = None, all_value: str = ALL
) -> list[ft.dropdown.Option]:
    """(value, label) pairs to Dropdown options, optionally led by an "All" entry."""
    result = []
    if all_label is not None:
        result.append(ft.dropdown.Option(key=all_value, text=all_label))
    result.extend(ft.dropdown.Option(key=v, text=t) for v, t in options)
    return result


def same_options(values: list[str]) -> list[tuple[str, str]]:
    return [(v, v) for v in values]
