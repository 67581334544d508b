from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None = None
    status_code: int = 0
    raw_payload: object | None = None

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.code}: {self.message}"


class SerializationError(ApiError):
    """Request params could not be encoded to canonical JSON."""


class AuthRejectedError(ApiError):
    """Credentials rejected by the server; never retried."""


class TokenExpiredError(ApiError):
    """Session token expired. Absorbed by the dispatcher's single retry."""


class ServerError(ApiError):
    """Remote 500."""


class UnexpectedStatusError(ApiError):
    """Any status the classifier does not handle."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class LogDirectoryError(OSError):
    pass
