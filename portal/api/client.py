"""
client.py - REST client for the portal backend
Single responsibility: send requests, attach credentials, normalize errors.
"""

import logging
from typing import Any, Callable

import httpx

from portal.api.errors import ApiError
from portal.auth.session import Session
from portal.config import (
    API_BASE_URL,
    HTTP_TIMEOUT,
    NETWORK_ERROR_MESSAGE,
)

logger = logging.getLogger(__name__)


def _error_message(body: Any) -> str | None:
    """Pick the server-provided message out of an error body."""
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, list):
                value = ", ".join(str(v) for v in value if v)
            if value:
                return str(value)
    return None


def _parse_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class ApiClient:
    """
    Thin async wrapper over httpx.AsyncClient.

    Every successful call returns the parsed JSON body. Failures raise
    ApiError. A 401 clears the session and fires ``on_unauthorized`` before
    raising, so individual screens never handle expiry themselves.
    """

    def __init__(
        self,
        session: Session,
        base_url: str = API_BASE_URL,
        timeout: float = HTTP_TIMEOUT,
        on_unauthorized: Callable[[], None] | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.session = session
        self.on_unauthorized = on_unauthorized
        self._http = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _auth_headers(self) -> dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        params: dict | None = None,
        payload: Any = None,
    ) -> Any:
        logger.debug("%s %s params=%s", method, path, params)
        try:
            response = await self._http.request(
                method,
                path,
                params=params or None,
                json=payload,
                headers=self._auth_headers(),
            )
        except httpx.RequestError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(NETWORK_ERROR_MESSAGE) from exc

        body = _parse_body(response)
        if response.is_success:
            return body

        status = response.status_code
        if status == 401:
            self._handle_unauthorized()
        server_message = _error_message(body)
        logger.warning("%s %s -> %s: %s", method, path, status, server_message)
        raise ApiError(status=status, data=body, server_message=server_message)

    def _handle_unauthorized(self) -> None:
        logger.info("Authentication expired; clearing session")
        self.session.clear()
        if self.on_unauthorized:
            try:
                self.on_unauthorized()
            except Exception:
                logger.exception("on_unauthorized hook failed")

    async def get(self, path: str, params: dict | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, payload: Any = None) -> Any:
        return await self.request("POST", path, payload=payload)

    async def put(self, path: str, payload: Any = None) -> Any:
        return await self.request("PUT", path, payload=payload)

    async def patch(self, path: str, payload: Any = None) -> Any:
        return await self.request("PATCH", path, payload=payload)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)
