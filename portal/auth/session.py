"""
session.py - Stored credentials (token, user, role)
Campus Portal v1.0
"""
import json
import logging
import os

from portal.config import ROLE_ADMIN, ROLE_STUDENT, ROLE_TEACHER, SESSION_PATH

logger = logging.getLogger(__name__)


class Session:
    """
    Bearer token and signed-in user, persisted as JSON between launches.

    The role defaults to "student" when the stored user carries none.
    """

    def __init__(self, path: str = SESSION_PATH):
        self.path = path
        self.token: str | None = None
        self.user: dict | None = None
        self.role: str = ROLE_STUDENT

    # ------------------------------------------------------------------
    # File I/O
    # ------------------------------------------------------------------

    def load(self) -> "Session":
        """Read the session file. Missing or broken files leave it signed out."""
        if not os.path.exists(self.path):
            return self
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError):
            logger.warning("Ignoring unreadable session file: %s", self.path)
            return self
        self.token = data.get("token")
        self.user = data.get("user")
        self.role = data.get("role") or (self.user or {}).get("role") or ROLE_STUDENT
        return self

    def save(self) -> None:
        data = {"token": self.token, "user": self.user, "role": self.role}
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    # ------------------------------------------------------------------
    # State changes
    # ------------------------------------------------------------------

    def sign_in(self, token: str, user: dict | None) -> None:
        self.token = token
        self.user = user or {}
        self.role = self.user.get("role") or ROLE_STUDENT
        self.save()

    def clear(self) -> None:
        """Forget credentials in memory and on disk."""
        self.token = None
        self.user = None
        self.role = ROLE_STUDENT
        if os.path.exists(self.path):
            try:
                os.remove(self.path)
                logger.debug(f"Session file deleted: {self.path}")
            except OSError as e:
                logger.debug(f"Failed to delete session file: {e}")

    # ------------------------------------------------------------------
    # Role helpers
    # ------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_teacher(self) -> bool:
        return self.role == ROLE_TEACHER

    @property
    def is_student(self) -> bool:
        return self.role == ROLE_STUDENT

    def permits(self, roles) -> bool:
        """Signed in, and the role is one of ``roles`` (empty: any role)."""
        return self.is_authenticated and (not roles or self.role in roles)

    @property
    def display_name(self) -> str:
        user = self.user or {}
        return user.get("fullName") or user.get("email") or "Guest"
