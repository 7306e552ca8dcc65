from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from dotenv import load_dotenv

ENV_PREFIX = "STOREFRONT_"
_TRUTHY = {"1", "true", "yes", "on"}

N = TypeVar("N", int, float)


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    max_connections: int = 20
    verify_ssl: bool = True
    data_dir: str | None = None
    telemetry_enabled: bool = False

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    @property
    def timeout(self) -> tuple[float, float]:
        """(connect, read) pair in the shape ``requests`` expects."""
        return (self.connect_timeout_seconds, self.read_timeout_seconds)


class _Env:
    """Reads ``STOREFRONT_*`` variables; every error names the offending variable."""

    def text(self, name: str) -> str | None:
        value = (os.getenv(ENV_PREFIX + name) or "").strip()
        return value or None

    def flag(self, name: str, default: bool) -> bool:
        raw = self.text(name)
        if raw is None:
            return default
        return raw.lower() in _TRUTHY

    def positive(self, name: str, parse: Callable[[str], N], default: N, *, minimum: N) -> N:
        key = ENV_PREFIX + name
        raw = self.text(name)
        if raw is None:
            value = default
        else:
            try:
                value = parse(raw)
            except ValueError as exc:
                kind = "an integer" if parse is int else "a number"
                raise ConfigError(f"Invalid {key}: expected {kind}, got {raw!r}") from exc
        if value < minimum:
            raise ConfigError(f"Invalid {key}: expected >= {minimum}, got {value}")
        return value


def load_config(env_file: str | None = None) -> ClientConfig:
    """Build the client config from the environment, after applying an optional .env file.

    The API base URL has no built-in default: set ``STOREFRONT_API_BASE_URL``
    or the per-environment ``STOREFRONT_API_BASE_URL_<ENV>``.
    """
    load_dotenv(env_file)
    env = _Env()

    env_name = env.text("ENV") or "dev"
    api_base_url = env.text(f"API_BASE_URL_{env_name.upper()}") or env.text("API_BASE_URL")
    if not api_base_url:
        raise ConfigError(f"Missing required config value: {ENV_PREFIX}API_BASE_URL")

    smallest = 0.001
    timeout = env.positive("TIMEOUT_SECONDS", float, 10.0, minimum=smallest)
    connect = env.positive("CONNECT_TIMEOUT_SECONDS", float, min(timeout, 5.0), minimum=smallest)
    read = env.positive("READ_TIMEOUT_SECONDS", float, max(timeout, connect), minimum=smallest)

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect,
        read_timeout_seconds=read,
        max_connections=env.positive("MAX_CONNECTIONS", int, 20, minimum=1),
        verify_ssl=env.flag("VERIFY_SSL", True),
        data_dir=env.text("DATA_DIR"),
        telemetry_enabled=env.flag("TELEMETRY_ENABLED", False),
    )
