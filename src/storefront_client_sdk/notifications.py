from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Protocol

logger = logging.getLogger(__name__)

DEGRADED_MESSAGE = (
    "Backend temporarily unavailable. Cart and some features may not work until the server is back."
)


class Notifier(Protocol):
    def notify_success(self, message: str) -> None: ...

    def notify_error(self, message: str) -> None: ...

    def notify_degraded(self, active: bool) -> None: ...


@dataclass(frozen=True)
class Notification:
    level: Literal["success", "error"]
    message: str


@dataclass
class RecordingNotifier:
    notifications: list[Notification] = field(default_factory=list)
    degraded: bool = False
    degraded_changes: list[bool] = field(default_factory=list)

    def notify_success(self, message: str) -> None:
        self.notifications.append(Notification("success", message))

    def notify_error(self, message: str) -> None:
        self.notifications.append(Notification("error", message))

    def notify_degraded(self, active: bool) -> None:
        self.degraded = active
        self.degraded_changes.append(active)

    @property
    def errors(self) -> list[str]:
        return [item.message for item in self.notifications if item.level == "error"]

    @property
    def successes(self) -> list[str]:
        return [item.message for item in self.notifications if item.level == "success"]


class LoggingNotifier:
    def notify_success(self, message: str) -> None:
        logger.info("notify_success", extra={"notification": message})

    def notify_error(self, message: str) -> None:
        logger.warning("notify_error", extra={"notification": message})

    def notify_degraded(self, active: bool) -> None:
        if active:
            logger.warning("degraded_mode_on", extra={"notification": DEGRADED_MESSAGE})
        else:
            logger.info("degraded_mode_off")
