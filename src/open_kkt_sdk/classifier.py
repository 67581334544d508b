from __future__ import annotations

from enum import Enum
from typing import Any

from .exceptions import (
    ApiError,
    AuthRejectedError,
    ServerError,
    TokenExpiredError,
    UnexpectedStatusError,
)
from .models import Body

AUTH_REJECTED_RESULT = "1001"


class Outcome(str, Enum):
    SUCCESS = "success"
    PASSTHROUGH = "passthrough"
    TOKEN_EXPIRED = "token_expired"
    AUTH_REJECTED = "auth_rejected"
    SERVER_ERROR = "server_error"
    UNEXPECTED_STATUS = "unexpected_status"


FATAL_OUTCOMES = {Outcome.AUTH_REJECTED, Outcome.SERVER_ERROR, Outcome.UNEXPECTED_STATUS}


def _result_code(body: Body) -> str | None:
    if not isinstance(body, dict):
        return None
    result = body.get("Result")
    return None if result is None else str(result)


def classify(status_code: int, body: Body) -> Outcome:
    # 401/403 without the rejection marker are kept soft for compatibility with the server contract.
    if status_code == 200:
        return Outcome.SUCCESS
    if status_code in {400, 422}:
        return Outcome.PASSTHROUGH
    if status_code == 401:
        if _result_code(body) == AUTH_REJECTED_RESULT:
            return Outcome.AUTH_REJECTED
        return Outcome.TOKEN_EXPIRED
    if status_code == 403:
        if _result_code(body) == AUTH_REJECTED_RESULT:
            return Outcome.AUTH_REJECTED
        return Outcome.PASSTHROUGH
    if status_code == 500:
        return Outcome.SERVER_ERROR
    return Outcome.UNEXPECTED_STATUS


def _message(body: Body, default: str) -> str:
    if isinstance(body, dict):
        for key in ("message", "Message", "error", "Error"):
            value = body.get(key)
            if value:
                return str(value)
    return default


def map_error(outcome: Outcome, status_code: int, body: Body) -> ApiError:
    raw_payload: Any = dict(body) if isinstance(body, dict) else body
    mapped: type[ApiError]
    if outcome is Outcome.AUTH_REJECTED:
        mapped, code, default = AuthRejectedError, "AUTH_REJECTED", "Credentials rejected"
    elif outcome is Outcome.TOKEN_EXPIRED:
        mapped, code, default = TokenExpiredError, "TOKEN_EXPIRED", "Session token expired"
    elif outcome is Outcome.SERVER_ERROR:
        mapped, code, default = ServerError, "SERVER_ERROR", "Server error"
    elif outcome is Outcome.UNEXPECTED_STATUS:
        mapped, code, default = UnexpectedStatusError, "UNEXPECTED_STATUS", f"Unexpected HTTP status {status_code}"
    else:
        raise ValueError(f"Outcome {outcome.value} is not an error")
    return mapped(
        code=code,
        message=_message(body, default),
        details={"result": _result_code(body)} if _result_code(body) else None,
        status_code=status_code,
        raw_payload=raw_payload,
    )
