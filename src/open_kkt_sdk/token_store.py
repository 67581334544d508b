from __future__ import annotations

import hashlib
import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Protocol

from platformdirs import user_data_dir

TokenFetcher = Callable[[], str]


class TokenCache(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> None: ...


@dataclass
class InMemoryTokenCache:
    _values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def has(self, key: str) -> bool:
        return key in self._values

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


@dataclass
class FileTokenCache:
    """Keeps tokens in a JSON file in the user data directory."""

    app_name: str = "open_kkt_sdk"
    filename: str = "tokens.json"
    base_dir: str | Path | None = None

    def _path(self) -> Path:
        base = Path(self.base_dir) if self.base_dir else Path(user_data_dir(self.app_name, "OpenKKT"))
        base.mkdir(parents=True, exist_ok=True)
        return base / self.filename

    def _load(self) -> dict[str, str]:
        path = self._path()
        if not path.exists():
            return {}
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError):
            path.unlink()
            return {}
        if not isinstance(data, dict):
            path.unlink()
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def _save(self, data: dict[str, str]) -> None:
        path = self._path()
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        try:
            path.chmod(0o600)
        except OSError:
            pass

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def has(self, key: str) -> bool:
        return key in self._load()

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


def token_cache_key(account_url: str, app_id: str) -> str:
    digest = hashlib.sha256(f"{account_url.rstrip('/')}|{app_id}".encode("utf-8")).hexdigest()
    return f"token:{digest[:32]}"


class TokenStore:
    """Holds the session token.

    There is no expiry timer: the dispatcher calls ``invalidate`` when the
    server reports the token as expired and the next ``current_token`` call
    fetches a new one.
    """

    def __init__(self, fetcher: TokenFetcher, *, cache: TokenCache | None = None, key: str = "token") -> None:
        self._fetcher = fetcher
        self._cache: TokenCache = cache if cache is not None else InMemoryTokenCache()
        self._key = key
        self._lock = threading.RLock()

    @property
    def key(self) -> str:
        return self._key

    def current_token(self) -> str:
        with self._lock:
            token = self._cache.get(self._key)
            if token:
                return token
            token = self._fetcher()
            self._cache.set(self._key, token)
            return token

    def invalidate(self, stale: str | None = None) -> None:
        """Drop the cached token.

        With ``stale`` given, only drop it if it is still the cached value, so
        a caller that lost a refresh race does not throw away a fresh token.
        """
        with self._lock:
            if stale is not None and self._cache.get(self._key) != stale:
                return
            self._cache.delete(self._key)

    def refresh(self, stale: str | None = None) -> str:
        with self._lock:
            self.invalidate(stale)
            return self.current_token()
