from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError as ModelValidationError

from ..error_mapper import normalize_error
from ..exceptions import ApiError
from ..models import AuthResponse, RegisterRequest
from ..navigation import Route
from ..ui_errors import to_user_facing_error
from .base import ViewController

logger = logging.getLogger(__name__)


class LoginView(ViewController):
    module = "auth"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.form_errors: list[str] = []
        self.submitting = False

    async def submit(self, username_or_email: str, password: str) -> bool:
        self.form_errors = [
            name
            for name, value in (("username_or_email", username_or_email), ("password", password))
            if not value.strip()
        ]
        if self.form_errors:
            return False
        self.submitting = True
        try:
            auth = await self.clients.auth.login(username_or_email.strip(), password)
        except (ApiError, ValueError) as exc:
            logger.info("login_failure", extra={"code": normalize_error(exc).code})
            self.notifier.notify_error(_failure_message(exc, "Login failed"))
            return False
        finally:
            self.submitting = False
        await establish_session(self, auth)
        self.notifier.notify_success("Welcome back!")
        self.navigator.push(Route.HOME)
        return True


class RegisterView(ViewController):
    module = "auth"

    def __init__(self, context) -> None:
        super().__init__(context)
        self.form_errors: list[str] = []
        self.registered = False
        self.submitting = False

    async def submit(self, payload: RegisterRequest | Mapping[str, Any]) -> bool:
        try:
            request = payload if isinstance(payload, RegisterRequest) else RegisterRequest.model_validate(payload)
        except ModelValidationError as exc:
            self.form_errors = sorted({str(error["loc"][0]) for error in exc.errors() if error["loc"]})
            return False
        self.form_errors = [
            name
            for name in ("username", "email", "password", "first_name", "last_name")
            if not str(getattr(request, name)).strip()
        ]
        if self.form_errors:
            return False

        self.submitting = True
        try:
            await self.clients.auth.register(request)
        except (ApiError, ValueError) as exc:
            logger.info("register_failure", extra={"code": normalize_error(exc).code})
            self.notifier.notify_error(_failure_message(exc, "Registration failed"))
            self.submitting = False
            return False
        self.registered = True

        try:
            auth = await self.clients.auth.login(request.username, request.password)
        except (ApiError, ValueError) as exc:
            logger.info("register_auto_login_failed", extra={"code": normalize_error(exc).code})
            self.navigator.push(Route.LOGIN)
            return True
        finally:
            self.submitting = False
        await establish_session(self, auth)
        self.navigator.push(Route.HOME)
        return True


async def establish_session(view: ViewController, auth: AuthResponse) -> None:
    view.session.login(auth.access_token, auth.user)
    logger.info("login_success", extra={"username": auth.user.username if auth.user else None})
    await view.context.cart.resync()


def _failure_message(exc: Exception, fallback: str) -> str:
    if isinstance(exc, ApiError):
        return to_user_facing_error(exc, fallback).message
    return fallback
