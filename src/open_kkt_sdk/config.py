from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from dotenv import load_dotenv

from .models import Credentials

TOKEN_CACHE_KINDS = {"memory", "file"}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class ClientConfig:
    account_url: str
    app_id: str
    secret: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    verify_ssl: bool = True
    logs_dir: str | None = None
    token_cache: str = "memory"

    @property
    def credentials(self) -> Credentials:
        return Credentials(account_url=self.account_url, app_id=self.app_id, secret=self.secret)

    @property
    def timeout(self) -> tuple[float, float]:
        return (self.connect_timeout_seconds, self.read_timeout_seconds)


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def _read_str(name: str) -> str:
    return (os.getenv(name) or "").strip()


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    account_url = _read_str("OPEN_KKT_ACCOUNT_URL")
    app_id = _read_str("OPEN_KKT_APP_ID")
    secret = _read_str("OPEN_KKT_SECRET")
    _require(
        {
            "OPEN_KKT_ACCOUNT_URL": account_url,
            "OPEN_KKT_APP_ID": app_id,
            "OPEN_KKT_SECRET": secret,
        },
        ["OPEN_KKT_ACCOUNT_URL", "OPEN_KKT_APP_ID", "OPEN_KKT_SECRET"],
    )

    timeout_seconds = _read_float("OPEN_KKT_TIMEOUT_SECONDS", "10")
    _validate(
        timeout_seconds > 0,
        f"Invalid OPEN_KKT_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    connect_timeout_seconds = _read_float(
        "OPEN_KKT_CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0))
    )
    _validate(
        connect_timeout_seconds > 0,
        (
            "Invalid OPEN_KKT_CONNECT_TIMEOUT_SECONDS: "
            f"expected > 0, got {connect_timeout_seconds}"
        ),
    )

    read_timeout_seconds = _read_float(
        "OPEN_KKT_READ_TIMEOUT_SECONDS",
        str(max(timeout_seconds, connect_timeout_seconds)),
    )
    _validate(
        read_timeout_seconds > 0,
        f"Invalid OPEN_KKT_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    verify_ssl = _coerce_bool(os.getenv("OPEN_KKT_VERIFY_SSL"), True)

    token_cache = (_read_str("OPEN_KKT_TOKEN_CACHE") or "memory").lower()
    _validate(
        token_cache in TOKEN_CACHE_KINDS,
        f"Invalid OPEN_KKT_TOKEN_CACHE: expected one of {sorted(TOKEN_CACHE_KINDS)}, got {token_cache!r}",
    )

    return ClientConfig(
        account_url=account_url.rstrip("/"),
        app_id=app_id,
        secret=secret,
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        verify_ssl=verify_ssl,
        logs_dir=_read_str("OPEN_KKT_LOGS_DIR") or None,
        token_cache=token_cache,
    )
