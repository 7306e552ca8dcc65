from __future__ import annotations

from dataclasses import dataclass

from .exceptions import ApiError


@dataclass(frozen=True)
class UserFacingError:
    message: str
    details: str | None = None

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None

    def __str__(self) -> str:
        return self.message


def to_user_facing_error(exc: ApiError, fallback: str = "Request failed") -> UserFacingError:
    primary = exc.message.strip()
    if not primary or primary == "Request failed":
        primary = fallback
    details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    return UserFacingError(message=primary, details=details)
