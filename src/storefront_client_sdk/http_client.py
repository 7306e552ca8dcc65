from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import TransportError

logger = logging.getLogger(__name__)

JsonBody = dict[str, Any] | list[Any] | None
RequestHook = Callable[[str, str, dict[str, Any]], None]
ResponseHook = Callable[[requests.Response], None]


@dataclass
class LastOperation:
    module: str
    operation: str
    duration_ms: int
    result: str


@dataclass
class HttpClient:
    """Blocking JSON transport over a pooled ``requests.Session``.

    Each call makes exactly one attempt. Non-2xx responses are raised as the
    matching ``ApiError`` subclass; failures before a response arrives are
    raised as ``TransportError``, flagged ``unreachable`` when the connection
    itself could not be made.
    """

    config: ClientConfig
    session: requests.Session | None = None
    before_request: RequestHook | None = None
    after_response: ResponseHook | None = None
    last_operation: LastOperation | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
            pool = HTTPAdapter(pool_connections=self.config.max_connections, pool_maxsize=self.config.max_connections)
            for scheme in ("http://", "https://"):
                self.session.mount(scheme, pool)

    def url_for(self, path: str) -> str:
        return urljoin(self.config.api_base_url.rstrip("/") + "/", path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        module: str = "unknown",
        operation: str = "unknown",
    ) -> JsonBody:
        if self.session is None:
            raise RuntimeError("HTTP session not initialized")
        verb = method.upper()
        url = self.url_for(path)
        outgoing = {"headers": {"Accept": "application/json", **(headers or {})}, "json_body": json_body, "params": params}
        if self.before_request:
            self.before_request(verb, url, outgoing)

        started = time.monotonic()
        try:
            response = self._send(verb, url, outgoing)
        except TransportError:
            self._record(module, operation, started, "transport_error")
            logger.warning("http_transport_error", extra={"method": verb, "path": path})
            raise
        if self.after_response:
            self.after_response(response)

        if not response.ok:
            self._record(module, operation, started, "error")
            logger.info("http_error_response", extra={"method": verb, "path": path, "status_code": response.status_code})
            raise map_error(response.status_code, _error_payload(response))
        self._record(module, operation, started, "success")
        return _json_or_none(response)

    def close(self) -> None:
        if self.session is not None:
            self.session.close()

    def _send(self, verb: str, url: str, outgoing: dict[str, Any]) -> requests.Response:
        try:
            return self.session.request(
                method=verb,
                url=url,
                headers=outgoing["headers"],
                json=outgoing["json_body"],
                params=outgoing["params"],
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            raise TransportError(
                code="TIMEOUT" if isinstance(exc, requests.Timeout) else "TRANSPORT_ERROR",
                message=str(exc) or "Request failed before a response was received",
                details={"type": type(exc).__name__, "unreachable": isinstance(exc, requests.ConnectionError)},
                status_code=0,
            ) from exc

    def _record(self, module: str, operation: str, started: float, result: str) -> None:
        self.last_operation = LastOperation(
            module=module,
            operation=operation,
            duration_ms=int((time.monotonic() - started) * 1000),
            result=result,
        )


def _json_or_none(response: requests.Response) -> JsonBody:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None


def _error_payload(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError:
        return {"message": response.text}
    if isinstance(payload, dict):
        return payload
    return {"message": str(payload)}
