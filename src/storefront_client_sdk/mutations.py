"""Optimistic mutation protocol shared by every view that changes server state.

Each mutation applies its local delta synchronously, issues exactly one remote
call, then runs exactly one of reconcile (success) or rollback (failure).
Independent mutations are not ordered against each other: whichever response
settles last decides the final local state. Passing a ``resource_key`` opts a
mutation into per-resource versions so superseded responses are discarded.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from time import perf_counter
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .error_mapper import is_unreachable, normalize_error
from .exceptions import ApiError, ConflictError, ForbiddenError, UnauthorizedError
from .navigation import Navigator, Route
from .notifications import Notifier
from .telemetry import TelemetryLogger, mutation_event

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MutationStatus(str, Enum):
    RECONCILED = "reconciled"
    ROLLED_BACK = "rolled_back"
    DISCARDED = "discarded"


@dataclass
class OptimisticMutation(Generic[T]):
    name: str
    apply: Callable[[], None]
    remote: Callable[[], Awaitable[T]]
    reconcile: Callable[[T], Awaitable[None] | None] | None = None
    rollback: Callable[[BaseException], Awaitable[None] | None] | None = None
    module: str = "mutation"
    success_message: str | None = None
    failure_message: str = "Request failed"
    conflict_message: str | None = None
    forbidden_message: str = "Please login to continue"
    resource_key: str | None = None
    is_active: Callable[[], bool] | None = None


@dataclass(frozen=True)
class MutationOutcome(Generic[T]):
    status: MutationStatus
    result: T | None = None
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is MutationStatus.RECONCILED


class ResourceVersions:
    def __init__(self) -> None:
        self._versions: dict[str, int] = {}

    def issue(self, key: str) -> int:
        version = self._versions.get(key, 0) + 1
        self._versions[key] = version
        return version

    def is_current(self, key: str, version: int) -> bool:
        return self._versions.get(key, 0) == version


async def _maybe_await(value: Awaitable[None] | None) -> None:
    if inspect.isawaitable(value):
        await value


class MutationCoordinator:
    def __init__(
        self,
        notifier: Notifier,
        navigator: Navigator,
        *,
        telemetry: TelemetryLogger | None = None,
        versions: ResourceVersions | None = None,
        on_unreachable: Callable[[], None] | None = None,
    ) -> None:
        self.notifier = notifier
        self.navigator = navigator
        self.telemetry = telemetry
        self.versions = versions or ResourceVersions()
        self.on_unreachable = on_unreachable
        self._pending: set[asyncio.Task[Any]] = set()

    def dispatch(self, mutation: OptimisticMutation[T]) -> asyncio.Task[MutationOutcome[T]]:
        """Apply now and settle in the background. Must be called inside a running loop."""
        version = self._begin(mutation)
        task = asyncio.get_running_loop().create_task(self._settle(mutation, version))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def run(self, mutation: OptimisticMutation[T]) -> MutationOutcome[T]:
        version = self._begin(mutation)
        return await self._settle(mutation, version)

    async def drain(self) -> None:
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _begin(self, mutation: OptimisticMutation[Any]) -> int | None:
        mutation.apply()
        if mutation.resource_key is None:
            return None
        return self.versions.issue(mutation.resource_key)

    async def _settle(self, mutation: OptimisticMutation[T], version: int | None) -> MutationOutcome[T]:
        started = perf_counter()
        try:
            result = await mutation.remote()
        except (ApiError, ValueError) as exc:
            return await self._fail(mutation, exc, version, started)

        if self._is_stale(mutation, version):
            return self._discard(mutation, started, success=True)
        if mutation.reconcile is not None:
            await _maybe_await(mutation.reconcile(result))
        if mutation.success_message:
            self.notifier.notify_success(mutation.success_message)
        self._emit(mutation, started, success=True)
        return MutationOutcome(MutationStatus.RECONCILED, result=result)

    async def _fail(
        self,
        mutation: OptimisticMutation[T],
        exc: BaseException,
        version: int | None,
        started: float,
    ) -> MutationOutcome[T]:
        error = normalize_error(exc)
        if self._is_stale(mutation, version):
            return self._discard(mutation, started, success=False, error_code=error.code)
        logger.warning(
            "mutation_failed",
            extra={"mutation": mutation.name, "code": error.code, "type": error.type},
        )
        if mutation.rollback is not None:
            await _maybe_await(mutation.rollback(exc))
        self._report_failure(mutation, exc)
        self._emit(mutation, started, success=False, error_code=error.code)
        return MutationOutcome(MutationStatus.ROLLED_BACK, error=exc)

    def _report_failure(self, mutation: OptimisticMutation[Any], exc: BaseException) -> None:
        if isinstance(exc, UnauthorizedError):
            # The remote client already cleared the session and redirected.
            return
        if isinstance(exc, ForbiddenError):
            self.notifier.notify_error(mutation.forbidden_message)
            if not self.navigator.is_at(Route.LOGIN):
                self.navigator.push(Route.LOGIN)
            return
        if isinstance(exc, ConflictError) and mutation.conflict_message:
            self.notifier.notify_error(mutation.conflict_message)
            return
        if is_unreachable(exc):
            if self.on_unreachable is not None:
                self.on_unreachable()
            else:
                self.notifier.notify_degraded(True)
            return
        self.notifier.notify_error(mutation.failure_message)

    def _is_stale(self, mutation: OptimisticMutation[Any], version: int | None) -> bool:
        if mutation.is_active is not None and not mutation.is_active():
            return True
        if mutation.resource_key is not None and version is not None:
            return not self.versions.is_current(mutation.resource_key, version)
        return False

    def _discard(
        self,
        mutation: OptimisticMutation[T],
        started: float,
        *,
        success: bool,
        error_code: str | None = None,
    ) -> MutationOutcome[T]:
        logger.info("mutation_discarded", extra={"mutation": mutation.name})
        self._emit(mutation, started, success=success, error_code=error_code, discarded=True)
        return MutationOutcome(MutationStatus.DISCARDED)

    def _emit(
        self,
        mutation: OptimisticMutation[Any],
        started: float,
        *,
        success: bool,
        error_code: str | None = None,
        discarded: bool = False,
    ) -> None:
        if self.telemetry is None:
            return
        self.telemetry.emit(
            mutation_event(
                mutation.name,
                mutation.module,
                duration_ms=int((perf_counter() - started) * 1000),
                success=success,
                error_code=error_code,
                discarded=discarded,
            )
        )
