from __future__ import annotations

import asyncio
import json

import pytest

from storefront_client_sdk.exceptions import (
    ConflictError,
    ForbiddenError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from storefront_client_sdk.mutations import (
    MutationCoordinator,
    MutationStatus,
    OptimisticMutation,
    ResourceVersions,
)
from storefront_client_sdk.navigation import Route
from storefront_client_sdk.telemetry import TelemetryLogger


@pytest.fixture
def coordinator(notifier, navigator) -> MutationCoordinator:
    return MutationCoordinator(notifier, navigator)


def _error(cls, status: int, **details):
    return cls(code=f"HTTP_{status}", message="failed", details=details or None, status_code=status)


def _recording_mutation(log: list[str], *, error: Exception | None = None, result: object = "ok", **kwargs):
    async def remote():
        log.append("remote")
        if error is not None:
            raise error
        return result

    return OptimisticMutation(
        name="sample",
        apply=lambda: log.append("apply"),
        remote=remote,
        reconcile=lambda value: log.append(f"reconcile:{value}"),
        rollback=lambda exc: log.append("rollback"),
        **kwargs,
    )


def test_success_applies_then_reconciles(coordinator, notifier) -> None:
    log: list[str] = []
    outcome = asyncio.run(coordinator.run(_recording_mutation(log, success_message="Saved")))

    assert log == ["apply", "remote", "reconcile:ok"]
    assert outcome.status is MutationStatus.RECONCILED
    assert outcome.succeeded
    assert notifier.successes == ["Saved"]


def test_failure_rolls_back_once_and_never_reconciles(coordinator, notifier) -> None:
    log: list[str] = []
    error = _error(ServerError, 500)
    outcome = asyncio.run(coordinator.run(_recording_mutation(log, error=error, failure_message="Failed to save")))

    assert log == ["apply", "remote", "rollback"]
    assert outcome.status is MutationStatus.ROLLED_BACK
    assert outcome.error is error
    assert notifier.errors == ["Failed to save"]


def test_async_reconcile_and_rollback_are_awaited(coordinator) -> None:
    log: list[str] = []

    async def reconcile(value):
        await asyncio.sleep(0)
        log.append("reconciled")

    async def remote():
        return 1

    mutation = OptimisticMutation(name="x", apply=lambda: None, remote=remote, reconcile=reconcile)
    asyncio.run(coordinator.run(mutation))
    assert log == ["reconciled"]


def test_dispatch_applies_before_returning(coordinator) -> None:
    log: list[str] = []

    async def scenario():
        task = coordinator.dispatch(_recording_mutation(log))
        assert log == ["apply"]
        return await task

    outcome = asyncio.run(scenario())
    assert outcome.succeeded
    assert log == ["apply", "remote", "reconcile:ok"]


def test_unauthorized_is_silent(coordinator, notifier, navigator) -> None:
    log: list[str] = []
    asyncio.run(coordinator.run(_recording_mutation(log, error=_error(UnauthorizedError, 401))))

    assert "rollback" in log
    assert notifier.notifications == []
    assert navigator.is_at(Route.HOME)


def test_forbidden_prompts_login_without_logout(coordinator, notifier, navigator, logged_in_session) -> None:
    log: list[str] = []
    mutation = _recording_mutation(
        log,
        error=_error(ForbiddenError, 403),
        forbidden_message="Please login to add items to cart",
    )

    asyncio.run(coordinator.run(mutation))

    assert notifier.errors == ["Please login to add items to cart"]
    assert navigator.is_at(Route.LOGIN)
    assert logged_in_session.is_logged_in


def test_conflict_uses_conflict_message_when_given(coordinator, notifier) -> None:
    asyncio.run(
        coordinator.run(
            _recording_mutation([], error=_error(ConflictError, 409), conflict_message="Item already in wishlist")
        )
    )
    asyncio.run(coordinator.run(_recording_mutation([], error=_error(ConflictError, 409), failure_message="Nope")))

    assert notifier.errors == ["Item already in wishlist", "Nope"]


def test_unreachable_failure_signals_degraded_mode(notifier, navigator) -> None:
    signals: list[bool] = []
    coordinator = MutationCoordinator(notifier, navigator, on_unreachable=lambda: signals.append(True))
    error = _error(TransportError, 0, unreachable=True)

    asyncio.run(coordinator.run(_recording_mutation([], error=error)))

    assert signals == [True]
    assert notifier.errors == []


def test_unreachable_without_handler_uses_notifier(coordinator, notifier) -> None:
    asyncio.run(coordinator.run(_recording_mutation([], error=_error(ServerError, 503))))
    assert notifier.degraded is True


def test_malformed_response_rolls_back(coordinator, notifier) -> None:
    log: list[str] = []
    asyncio.run(coordinator.run(_recording_mutation(log, error=ValueError("bad shape"), failure_message="Oops")))

    assert log[-1] == "rollback"
    assert notifier.errors == ["Oops"]


def _gated(state: dict, value: int, gate: asyncio.Event, **kwargs) -> OptimisticMutation[int]:
    async def remote():
        await gate.wait()
        return value

    def reconcile(result: int) -> None:
        state["value"] = result

    def apply() -> None:
        state["value"] = value

    return OptimisticMutation(name="set_quantity", apply=apply, remote=remote, reconcile=reconcile, **kwargs)


def _race(coordinator: MutationCoordinator, **kwargs):
    state = {"value": 0}

    async def scenario():
        first, second = asyncio.Event(), asyncio.Event()
        older = coordinator.dispatch(_gated(state, 1, first, **kwargs))
        newer = coordinator.dispatch(_gated(state, 2, second, **kwargs))
        assert state["value"] == 2
        second.set()
        await newer
        first.set()
        return await older, await newer

    older, newer = asyncio.run(scenario())
    return state["value"], older, newer


def test_unordered_mutations_are_last_write_wins(coordinator) -> None:
    value, older, newer = _race(coordinator)

    assert value == 1
    assert older.status is MutationStatus.RECONCILED
    assert newer.status is MutationStatus.RECONCILED


def test_resource_versions_discard_superseded_responses(coordinator) -> None:
    value, older, newer = _race(coordinator, resource_key="cart-item:11")

    assert value == 2
    assert older.status is MutationStatus.DISCARDED
    assert newer.status is MutationStatus.RECONCILED


def test_resource_versions() -> None:
    versions = ResourceVersions()
    first = versions.issue("a")
    second = versions.issue("a")

    assert not versions.is_current("a", first)
    assert versions.is_current("a", second)
    assert versions.is_current("b", 0)


def test_dismissed_view_discards_settlement(coordinator, notifier) -> None:
    log: list[str] = []
    active = {"value": True}

    async def scenario():
        gate = asyncio.Event()

        async def remote():
            await gate.wait()
            raise _error(ServerError, 500)

        mutation = OptimisticMutation(
            name="load_more",
            apply=lambda: log.append("apply"),
            remote=remote,
            rollback=lambda exc: log.append("rollback"),
            is_active=lambda: active["value"],
        )
        task = coordinator.dispatch(mutation)
        active["value"] = False
        gate.set()
        return await task

    outcome = asyncio.run(scenario())

    assert outcome.status is MutationStatus.DISCARDED
    assert log == ["apply"]
    assert notifier.notifications == []


def test_drain_waits_for_pending(coordinator) -> None:
    log: list[str] = []

    async def scenario():
        coordinator.dispatch(_recording_mutation(log))
        coordinator.dispatch(_recording_mutation(log))
        await coordinator.drain()

    asyncio.run(scenario())
    assert log.count("reconcile:ok") == 2


def test_results_are_reported_to_telemetry(notifier, navigator, tmp_path) -> None:
    log_file = tmp_path / "telemetry.jsonl"
    telemetry = TelemetryLogger(app_name="storefront", enabled=True, log_file=log_file)
    coordinator = MutationCoordinator(notifier, navigator, telemetry=telemetry)

    asyncio.run(coordinator.run(_recording_mutation([], module="cart")))
    asyncio.run(coordinator.run(_recording_mutation([], error=_error(ServerError, 500), module="cart")))

    events = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert [event["success"] for event in events] == [True, False]
    assert events[1]["error_code"] == "HTTP_500"
    assert {event["category"] for event in events} == {"api_call_result"}
    assert events[0]["module"] == "cart"
