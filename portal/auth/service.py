"""
service.py - Sign in / sign out
Single responsibility: exchange credentials for a token and keep the session.
"""

import logging

from portal.api.errors import ApiError
from portal.domain.forms import LoginForm

logger = logging.getLogger(__name__)


async def login(client, form: LoginForm) -> dict:
    """POST /auth/login and store the token and user in the client's session.

    Returns the signed-in user. Raises ApiError on rejection or when the
    response carries no token.
    """
    body = await client.post("/auth/login", form.to_payload())
    body = body if isinstance(body, dict) else {}
    token = body.get("accessToken") or body.get("token")
    if not token:
        logger.error("Login response without token")
        raise ApiError("Login failed")
    user = body.get("user") or {}
    client.session.sign_in(token, user)
    logger.info("Signed in as %s (%s)", user.get("email"), client.session.role)
    return user


def logout(session) -> None:
    session.clear()
    logger.info("Signed out")
