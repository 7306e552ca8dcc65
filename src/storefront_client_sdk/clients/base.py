from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..remote_client import RemoteClient


@dataclass
class BaseClient:
    remote: RemoteClient
    module: str = "unknown"

    async def _request(self, method: str, path: str, *, operation: str = "unknown", **kwargs: Any):
        return await self.remote.request(method, path, module=self.module, operation=operation, **kwargs)


def expect_object(data: Any, what: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"Expected {what} response to be a JSON object")
    return data


def expect_list(data: Any, what: str) -> list[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise ValueError(f"Expected {what} response to be a JSON array")
    return data
