"""
errors.py - API error type
Single responsibility: carry status and server message of a failed request.
"""
from typing import Any

from portal.config import GENERIC_ERROR_MESSAGE


class ApiError(Exception):
    """A rejected or undeliverable request.

    ``status`` is None when no response was received (transport failure).
    ``server_message`` is the message the backend sent, if any.
    """

    def __init__(
        self,
        message: str | None = None,
        status: int | None = None,
        data: Any = None,
        server_message: str | None = None,
    ):
        self.message = message or server_message or GENERIC_ERROR_MESSAGE
        super().__init__(self.message)
        self.status = status
        self.data = data
        self.server_message = server_message

    @property
    def is_network_error(self) -> bool:
        return self.status is None

    def user_message(self, fallback: str) -> str:
        """Text for a failure notification: server message, else ``fallback``."""
        if self.is_network_error:
            return self.message
        return self.server_message or fallback

    def __repr__(self) -> str:
        return f"ApiError(status={self.status!r}, message={self.message!r})"
