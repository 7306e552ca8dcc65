from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from platformdirs import user_data_dir

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"


class AuthStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


@dataclass
class MemoryAuthStore:
    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def remove(self, key: str) -> None:
        self.values.pop(key, None)


@dataclass
class FileAuthStore:
    """String key-value store persisted as a single JSON object on disk."""

    app_name: str = "storefront"
    filename: str = "session.json"
    data_dir: str | None = None

    def _path(self) -> Path:
        base = Path(self.data_dir) if self.data_dir else Path(user_data_dir(self.app_name, "Storefront"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def _read(self) -> dict[str, str]:
        path = self._path()
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError:
            logger.warning("auth_store_corrupt", extra={"path": str(path)})
            path.unlink()
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items() if value is not None}

    def _write(self, data: dict[str, str]) -> None:
        path = self._path()
        if not data:
            if path.exists():
                path.unlink()
            return
        path.write_text(json.dumps(data, indent=2))
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
