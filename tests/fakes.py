"""
Test doubles for the HTTP client and notifier
"""
import inspect
from dataclasses import dataclass
from typing import Any

from portal.auth.session import Session


@dataclass
class Call:
    method: str
    path: str
    params: dict | None = None
    payload: Any = None


class FakeClient:
    """
    Stand-in for ApiClient. ``routes`` maps (method, path) to a body, an
    exception instance to raise, or a callable returning either (awaitables
    are awaited).
    """

    def __init__(self, routes: dict | None = None, session: Session | None = None):
        self.routes = dict(routes or {})
        self.calls: list[Call] = []
        self.session = session

    async def _call(self, method, path, params=None, payload=None):
        self.calls.append(Call(method, path, params, payload))
        result = self.routes.get((method, path))
        if callable(result) and not isinstance(result, BaseException):
            result = result(params=params, payload=payload)
        if inspect.isawaitable(result):
            result = await result
        if isinstance(result, BaseException):
            raise result
        return result

    async def get(self, path, params=None):
        return await self._call("GET", path, params=params)

    async def post(self, path, payload=None):
        return await self._call("POST", path, payload=payload)

    async def put(self, path, payload=None):
        return await self._call("PUT", path, payload=payload)

    async def patch(self, path, payload=None):
        return await self._call("PATCH", path, payload=payload)

    async def delete(self, path):
        return await self._call("DELETE", path)

    def calls_to(self, method: str, path: str | None = None) -> list[Call]:
        return [
            c for c in self.calls if c.method == method and (path is None or c.path == path)
        ]


class FakeNotifier:
    def __init__(self):
        self.successes: list[str] = []
        self.errors: list[str] = []

    def success(self, message: str) -> None:
        self.successes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)
