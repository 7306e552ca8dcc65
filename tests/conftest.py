from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from storefront_client_sdk.auth_store import MemoryAuthStore
from storefront_client_sdk.clients import ApiClients
from storefront_client_sdk.config import ClientConfig
from storefront_client_sdk.http_client import HttpClient
from storefront_client_sdk.navigation import Navigator
from storefront_client_sdk.notifications import RecordingNotifier
from storefront_client_sdk.remote_client import RemoteClient
from storefront_client_sdk.session import SessionStore

BASE_URL = "https://api.example.com"


@dataclass
class CountingAuthStore(MemoryAuthStore):
    removed: list[str] = field(default_factory=list)

    def remove(self, key: str) -> None:
        self.removed.append(key)
        super().remove(key)


@pytest.fixture(autouse=True)
def _set_api_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_API_BASE_URL", BASE_URL)
    monkeypatch.delenv("STOREFRONT_ENV", raising=False)
    monkeypatch.delenv("STOREFRONT_TELEMETRY_ENABLED", raising=False)


@pytest.fixture
def config(tmp_path) -> ClientConfig:
    return ClientConfig(env_name="test", api_base_url=BASE_URL, data_dir=str(tmp_path))


@pytest.fixture
def store() -> CountingAuthStore:
    return CountingAuthStore()


@pytest.fixture
def navigator() -> Navigator:
    return Navigator()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def session(store: CountingAuthStore, navigator: Navigator) -> SessionStore:
    return SessionStore(store, navigator)


@pytest.fixture
def logged_in_session(session: SessionStore) -> SessionStore:
    session.initialize()
    session.login("token-123")
    return session


@pytest.fixture
def http(config: ClientConfig):
    client = HttpClient(config)
    yield client
    client.close()


@pytest.fixture
def remote(http, session: SessionStore, navigator: Navigator) -> RemoteClient:
    return RemoteClient(http, session, navigator)


@pytest.fixture
def clients(remote: RemoteClient) -> ApiClients:
    return ApiClients.from_remote(remote)
