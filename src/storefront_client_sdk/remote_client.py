from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

from .exceptions import UnauthorizedError
from .http_client import HttpClient
from .navigation import Navigator, Route
from .session import SessionStore

logger = logging.getLogger(__name__)


@dataclass
class RemoteClient:
    """Async request layer that owns the credential and 401 handling.

    The credential is read from the session immediately before each send. A
    401 clears the session and redirects to login before the caller sees the
    error; every other failure propagates untouched. 403 is left to callers.
    """

    http: HttpClient
    session: SessionStore
    navigator: Navigator

    def auth_headers(self) -> dict[str, str]:
        token = self.session.token
        if token:
            return {"Authorization": f"Bearer {token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any] | list[Any] | None:
        merged = {**self.auth_headers(), **(headers or {})}
        try:
            return await asyncio.to_thread(self.http.request, method, path, headers=merged, **kwargs)
        except UnauthorizedError:
            self._handle_unauthorized(method, path)
            raise

    def _handle_unauthorized(self, method: str, path: str) -> None:
        cleared = self.session.expire()
        redirected = False
        if not self.navigator.is_at(Route.LOGIN):
            self.navigator.push(Route.LOGIN)
            redirected = True
        logger.warning(
            "auth_rejected",
            extra={"method": method, "path": path, "session_cleared": cleared, "redirected": redirected},
        )
