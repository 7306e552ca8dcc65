"""Opt-in JSONL telemetry for session, navigation, cart and mutation activity.

Events never carry credentials or personal data: context keys that look like
PII are rejected when the event is built.
"""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

if TYPE_CHECKING:
    from .navigation import Location
    from .session import SessionChange


class TelemetryCategory(str, Enum):
    AUTH = "auth"
    NAVIGATION = "navigation"
    API_CALL_RESULT = "api_call_result"
    CART = "cart"
    ERROR = "error"


_SENSITIVE_KEYS = frozenset(
    {
        "email",
        "password",
        "phone",
        "phone_number",
        "first_name",
        "last_name",
        "address",
        "address_line1",
        "token",
        "access_token",
        "authorization",
        "username",
    }
)


@dataclass(frozen=True)
class TelemetryEvent:
    category: TelemetryCategory
    name: str
    module: str
    action: str
    timestamp_utc: str
    duration_ms: int | None = None
    success: bool | None = None
    error_code: str | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_record(self, app_name: str) -> dict[str, Any]:
        record: dict[str, Any] = {
            "app_name": app_name,
            "category": self.category.value,
            "name": self.name,
            "module": self.module,
            "action": self.action,
            "timestamp_utc": self.timestamp_utc,
        }
        for key in ("duration_ms", "success", "error_code"):
            value = getattr(self, key)
            if value is not None:
                record[key] = value
        if self.context:
            record["context"] = dict(self.context)
        return record


def build_event(
    *,
    category: TelemetryCategory | str,
    name: str,
    module: str,
    action: str,
    duration_ms: int | None = None,
    success: bool | None = None,
    error_code: str | None = None,
    context: dict[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    try:
        category = TelemetryCategory(category)
    except ValueError:
        raise ValueError(f"Unsupported telemetry category: {category}") from None
    sensitive = sorted(key for key in context or {} if key.lower() in _SENSITIVE_KEYS)
    if sensitive:
        raise ValueError(f"Telemetry context must not carry personal data: {sensitive}")
    return TelemetryEvent(
        category=category,
        name=name,
        module=module,
        action=action,
        timestamp_utc=(now or datetime.now(timezone.utc)).isoformat(),
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context=dict(context or {}),
    )


def session_event(change: SessionChange) -> TelemetryEvent:
    return build_event(
        category=TelemetryCategory.AUTH,
        name=f"session_{change.reason}",
        module="session",
        action=change.reason,
        success=change.logged_in,
    )


def navigation_event(location: Location) -> TelemetryEvent:
    return build_event(
        category=TelemetryCategory.NAVIGATION,
        name="screen_view",
        module="storefront",
        action=location.route.name.lower(),
        success=True,
    )


def cart_count_event(count: int) -> TelemetryEvent:
    return build_event(
        category=TelemetryCategory.CART,
        name="cart_count_changed",
        module="cart",
        action="count",
        context={"count": count},
    )


def mutation_event(
    mutation: str,
    module: str,
    *,
    duration_ms: int,
    success: bool,
    error_code: str | None = None,
    discarded: bool = False,
) -> TelemetryEvent:
    return build_event(
        category=TelemetryCategory.API_CALL_RESULT,
        name=f"{mutation}_result",
        module=module,
        action=mutation,
        duration_ms=duration_ms,
        success=success,
        error_code=error_code,
        context={"discarded": True} if discarded else None,
    )


class TelemetryLogger:
    """Appends one JSON object per event to ``log_file``; a no-op unless enabled."""

    def __init__(
        self,
        *,
        app_name: str,
        enabled: bool = False,
        log_file: str | Path | None = None,
        stdout_sink: bool = False,
        stdout_stream: TextIO | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = enabled
        self.log_file = Path(log_file) if log_file else Path("artifacts") / "telemetry" / f"{app_name}.jsonl"
        self.stdout_sink = stdout_sink
        self.stdout_stream = stdout_stream

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False
        line = json.dumps(event.to_record(self.app_name), sort_keys=True)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        with self.log_file.open("a", encoding="utf-8") as fp:
            fp.write(line + "\n")
        if self.stdout_sink:
            stream = self.stdout_stream or sys.stdout
            print(line, file=stream, flush=True)
        return True
