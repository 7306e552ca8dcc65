from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from .exceptions import (
    ApiError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)

GATEWAY_STATUSES = {502, 503, 504}


@dataclass(frozen=True)
class NormalizedError:
    code: str
    message: str
    type: str
    status_code: int


def map_error(status_code: int, payload: Mapping[str, object] | None) -> ApiError:
    payload = payload or {}
    code = str(payload.get("code") or f"HTTP_{status_code}")
    message = str(payload.get("message") or "Request failed")
    details = payload.get("errors") or payload.get("details")
    mapped: type[ApiError]
    if status_code == 401:
        mapped = UnauthorizedError
    elif status_code == 403:
        mapped = ForbiddenError
    elif status_code == 404:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = ValidationError
    elif status_code == 409:
        mapped = ConflictError
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=details,
        status_code=status_code,
        raw_payload=dict(payload),
    )


def is_unreachable(error: BaseException) -> bool:
    """True when the failure means the API as a whole cannot be reached."""
    if isinstance(error, TransportError):
        return error.unreachable
    if isinstance(error, ServerError):
        return error.status_code in GATEWAY_STATUSES
    return False


def _error_type(error: BaseException) -> str:
    if isinstance(error, TransportError):
        return "network"
    if isinstance(error, UnauthorizedError):
        return "auth"
    if isinstance(error, ForbiddenError):
        return "forbidden"
    if isinstance(error, ConflictError):
        return "conflict"
    if isinstance(error, (ValidationError, NotFoundError)):
        return "validation"
    return "internal"


def normalize_error(error: BaseException) -> NormalizedError:
    if isinstance(error, ApiError):
        return NormalizedError(
            code=error.code,
            message=error.message,
            type=_error_type(error),
            status_code=error.status_code,
        )
    return NormalizedError(
        code="UNKNOWN_ERROR",
        message=str(error) or type(error).__name__,
        type="internal",
        status_code=0,
    )
