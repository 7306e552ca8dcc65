from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import UserProfile
from .base import BaseClient, expect_object


@dataclass
class UsersClient(BaseClient):
    module: str = "users"

    async def me(self) -> UserProfile:
        data = await self._request("GET", "/users/me", operation="me")
        return UserProfile.model_validate(expect_object(data, "profile"))

    async def update_profile(self, changes: UserProfile | Mapping[str, Any]) -> UserProfile:
        if isinstance(changes, UserProfile):
            payload = changes.to_payload()
        else:
            payload = dict(changes)
        data = await self._request("PUT", "/users/me", json_body=payload, operation="update_profile")
        return UserProfile.model_validate(expect_object(data, "profile"))
