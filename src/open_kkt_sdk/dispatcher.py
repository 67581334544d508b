from __future__ import annotations

from collections.abc import Mapping
from typing import Any
from urllib.parse import urljoin

import requests
from pydantic import ValidationError as PydanticValidationError

from .classifier import FATAL_OUTCOMES, Outcome, classify, map_error
from .exceptions import AuthRejectedError, TransportError
from .logger import LogLevel, SdkLogger, StdLogger
from .models import ApiResponse, Body, Credentials, TokenResponse
from .nonce import NonceGenerator
from .signing import SIGN_HEADER, canonical_bytes, sign
from .token_store import TokenCache, TokenStore, token_cache_key

TOKEN_PATH = "Token"

_FAILURE_LOG_LEVELS = {
    Outcome.AUTH_REJECTED: LogLevel.WARNING,
    Outcome.SERVER_ERROR: LogLevel.CRITICAL,
    Outcome.UNEXPECTED_STATUS: LogLevel.ERROR,
}


class RequestDispatcher:
    """Signs and sends requests, refreshing the token once when it expires."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        session: requests.Session | None = None,
        logger: SdkLogger | None = None,
        token_cache: TokenCache | None = None,
        token_store: TokenStore | None = None,
        nonces: NonceGenerator | None = None,
        timeout: tuple[float, float] = (5.0, 15.0),
        verify_ssl: bool = True,
    ) -> None:
        self.credentials = credentials
        self.session = session or requests.Session()
        self.logger: SdkLogger = logger or StdLogger()
        self.nonces = nonces or NonceGenerator()
        self.timeout = timeout
        self.verify_ssl = verify_ssl
        self.token_store = token_store or TokenStore(
            self.fetch_token,
            cache=token_cache,
            key=token_cache_key(credentials.account_url, credentials.app_id),
        )

    def _build_url(self, path: str) -> str:
        base = self.credentials.account_url.rstrip("/") + "/"
        return urljoin(base, path.lstrip("/"))

    def build_params(self, params: Mapping[str, Any] | None, token: str | None) -> dict[str, Any]:
        merged: dict[str, Any] = dict(params or {})
        merged["app_id"] = self.credentials.app_id
        merged["nonce"] = self.nonces.next_nonce()
        if token is not None:
            merged["token"] = token
        return merged

    def send(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        *,
        authenticated: bool = True,
    ) -> ApiResponse:
        token = self.token_store.current_token() if authenticated else None
        response = self._send_once(method, path, params, token)
        outcome = classify(response.status_code, response.body)

        if outcome is Outcome.TOKEN_EXPIRED and authenticated:
            self.logger.log(
                LogLevel.DEBUG,
                "Session token expired, re-authenticating",
                {"method": method.upper(), "path": path, "status_code": response.status_code},
            )
            token = self.token_store.refresh(stale=token)
            response = self._send_once(method, path, params, token)
            outcome = classify(response.status_code, response.body)
            if outcome is Outcome.TOKEN_EXPIRED:
                self.logger.log(
                    LogLevel.WARNING,
                    "Session token rejected after refresh",
                    {"method": method.upper(), "path": path, "status_code": response.status_code},
                )
                raise AuthRejectedError(
                    code="TOKEN_EXPIRED_AFTER_REFRESH",
                    message="Server rejected a freshly issued token",
                    status_code=response.status_code,
                    raw_payload=response.body,
                )
        elif outcome is Outcome.TOKEN_EXPIRED:
            raise AuthRejectedError(
                code="AUTH_REJECTED",
                message="Server rejected an unauthenticated request",
                status_code=response.status_code,
                raw_payload=response.body,
            )

        if outcome in FATAL_OUTCOMES:
            error = map_error(outcome, response.status_code, response.body)
            self.logger.log(
                _FAILURE_LOG_LEVELS[outcome],
                str(error),
                {"method": method.upper(), "path": path, "status_code": response.status_code, "payload": error.raw_payload},
            )
            raise error
        return response

    def fetch_token(self) -> str:
        response = self.send("GET", TOKEN_PATH, authenticated=False)
        try:
            token = TokenResponse.model_validate(response.body).token
        except PydanticValidationError as exc:
            raise AuthRejectedError(
                code="TOKEN_MISSING",
                message="Token response does not contain a token",
                status_code=response.status_code,
                raw_payload=response.body,
            ) from exc
        return token

    def _send_once(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None,
        token: str | None,
    ) -> ApiResponse:
        normalized_method = method.upper()
        signed = self.build_params(params, token)
        headers = {
            SIGN_HEADER: sign(signed, self.credentials.secret),
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        body: bytes | None = None
        query: dict[str, Any] | None = None
        if normalized_method == "GET":
            query = signed
        else:
            body = canonical_bytes(signed)
        try:
            response = self.session.request(
                method=normalized_method,
                url=self._build_url(path),
                headers=headers,
                params=query,
                data=body,
                timeout=self.timeout,
                verify=self.verify_ssl,
            )
        except requests.RequestException as exc:
            raise TransportError(
                code="TRANSPORT_ERROR",
                message=str(exc),
                details={"type": type(exc).__name__},
            ) from exc
        return ApiResponse(status_code=response.status_code, body=_decode(response))

    def close(self) -> None:
        self.session.close()


def _decode(response: requests.Response) -> Body:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.content
