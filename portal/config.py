"""
config.py - Path resolution and application constants
Campus Portal v1.0
"""

import os


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------

API_BASE_URL = os.environ.get("PORTAL_API_URL", "http://localhost:3001/api")
HTTP_TIMEOUT = _env_float("PORTAL_HTTP_TIMEOUT", 30.0)

# Quiet period before a filter change triggers a fetch
DEBOUNCE_SECONDS = _env_float("PORTAL_DEBOUNCE_MS", 500.0) / 1000

SESSION_PATH = os.environ.get(
    "PORTAL_SESSION_PATH",
    os.path.join(os.path.expanduser("~"), ".campus_portal", "session.json"),
)

NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."
GENERIC_ERROR_MESSAGE = "An error occurred"

# ---------------------------------------------------------------------------
# App constants
# ---------------------------------------------------------------------------

APP_TITLE = "Campus Portal"
APP_VERSION = "1.0.0"

ROLE_ADMIN = "admin"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"

# ---------------------------------------------------------------------------
# Color palette
# ---------------------------------------------------------------------------

COLOR_SUCCESS = "#2da44e"  # green
COLOR_ACCENT = "#8250df"  # purple
COLOR_WARNING = "#BF8700"  # amber
COLOR_BG = "#F0F2F5"  # page background
COLOR_CARD = "#FFFFFF"  # card background
COLOR_BORDER = "#D0D7DE"
COLOR_TEXT_MUTED = "#656D76"
COLOR_TEXT_MAIN = "#1F2328"
COLOR_PRIMARY = "#4F46E5"  # indigo
COLOR_DANGER = "#CF222E"

# AppBar
COLOR_APPBAR_BG = "#FFFFFF"
COLOR_APPBAR_FG = "#1F2328"

# UI constants
BORDER_RADIUS_CARD = 10
BORDER_RADIUS_BTN = 6
SHADOW_ELEVATION = 2

DEFAULT_PAGE_SIZE = 100
