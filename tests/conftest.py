from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "src"

sys.path.insert(0, str(SDK_SRC))

from open_kkt_sdk.dispatcher import RequestDispatcher  # noqa: E402
from open_kkt_sdk.logger import LevelMethodsMixin, LogLevel  # noqa: E402
from open_kkt_sdk.models import Credentials  # noqa: E402
from open_kkt_sdk.token_store import InMemoryTokenCache  # noqa: E402

ACCOUNT_URL = "https://kkt.example.com/api/v2/"
APP_ID = "app-42"
SECRET = "s3cr3t"


class RecordingLogger(LevelMethodsMixin):
    def __init__(self) -> None:
        self.records: list[tuple[LogLevel, str, dict[str, Any]]] = []

    def log(self, level: LogLevel, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.records.append((LogLevel.parse(level), message, dict(context or {})))

    def levels(self) -> list[LogLevel]:
        return [level for level, _, _ in self.records]


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(account_url=ACCOUNT_URL, app_id=APP_ID, secret=SECRET)


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def token_cache() -> InMemoryTokenCache:
    return InMemoryTokenCache()


@pytest.fixture
def dispatcher(credentials, recording_logger, token_cache) -> RequestDispatcher:
    return RequestDispatcher(credentials, logger=recording_logger, token_cache=token_cache)


@pytest.fixture
def seeded_dispatcher(dispatcher, token_cache) -> RequestDispatcher:
    token_cache.set(dispatcher.token_store.key, "token-0")
    return dispatcher
