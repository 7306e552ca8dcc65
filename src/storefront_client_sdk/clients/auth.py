from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..models import AuthResponse, LoginRequest, RegisterRequest
from .base import BaseClient, expect_object


@dataclass
class AuthClient(BaseClient):
    module: str = "auth"

    async def login(self, username_or_email: str, password: str) -> AuthResponse:
        payload = LoginRequest(username_or_email=username_or_email, password=password)
        data = await self._request("POST", "/auth/login", json_body=payload.to_payload(), operation="login")
        return AuthResponse.model_validate(expect_object(data, "login"))

    async def register(self, payload: RegisterRequest | Mapping[str, Any]) -> dict[str, Any] | None:
        request = payload if isinstance(payload, RegisterRequest) else RegisterRequest.model_validate(payload)
        data = await self._request("POST", "/auth/register", json_body=request.to_payload(), operation="register")
        return data if isinstance(data, dict) else None
