from __future__ import annotations

from typing import Any, Mapping
from urllib.parse import quote

import requests

from .config import ClientConfig, load_config
from .dispatcher import RequestDispatcher
from .logger import DailyFileLogger, SdkLogger, StdLogger
from .models import Body, CommandType, Credentials, ShiftCommand
from .token_store import FileTokenCache, InMemoryTokenCache, TokenCache


class OpenKktClient:
    """Operations of the cash register API.

    Every method returns the decoded response body unmodified. Soft
    responses (400, 422, 403 without a rejection marker) are returned as
    well; fatal ones raise an ``ApiError`` subclass.
    """

    def __init__(self, dispatcher: RequestDispatcher, *, owned_logger: DailyFileLogger | None = None) -> None:
        self.dispatcher = dispatcher
        # only loggers built by from_config are closed with the client
        self._owned_logger = owned_logger

    @classmethod
    def create(
        cls,
        account_url: str,
        app_id: str,
        secret: str,
        *,
        session: requests.Session | None = None,
        logger: SdkLogger | None = None,
        token_cache: TokenCache | None = None,
        timeout: tuple[float, float] = (5.0, 15.0),
        verify_ssl: bool = True,
    ) -> OpenKktClient:
        credentials = Credentials(account_url=account_url, app_id=app_id, secret=secret)
        return cls(
            RequestDispatcher(
                credentials,
                session=session,
                logger=logger,
                token_cache=token_cache,
                timeout=timeout,
                verify_ssl=verify_ssl,
            )
        )

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        *,
        session: requests.Session | None = None,
        logger: SdkLogger | None = None,
        token_cache: TokenCache | None = None,
    ) -> OpenKktClient:
        owned_logger: DailyFileLogger | None = None
        if logger is None and config.logs_dir:
            logger = owned_logger = DailyFileLogger(config.logs_dir)
        elif logger is None:
            logger = StdLogger()
        if token_cache is None:
            token_cache = FileTokenCache() if config.token_cache == "file" else InMemoryTokenCache()
        client = cls.create(
            config.account_url,
            config.app_id,
            config.secret,
            session=session,
            logger=logger,
            token_cache=token_cache,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
        )
        client._owned_logger = owned_logger
        return client

    @classmethod
    def from_env(cls, env_file: str | None = None, **kwargs: Any) -> OpenKktClient:
        return cls.from_config(load_config(env_file), **kwargs)

    def authenticate(self) -> str:
        """Fetch a session token now instead of on the first call."""
        return self.dispatcher.token_store.current_token()

    def get_state_system(self) -> Body:
        return self.dispatcher.send("GET", "StateSystem").body

    def open_shift(self, author: str = "name") -> Body:
        return self._shift(CommandType.OPEN_SHIFT, author)

    def close_shift(self, author: str = "name") -> Body:
        return self._shift(CommandType.CLOSE_SHIFT, author)

    def print_check(self, command: Mapping[str, Any]) -> Body:
        """Print a sale receipt. The response carries the ``command_id``."""
        return self._command(CommandType.PRINT_CHECK, command)

    def print_purchase_return(self, command: Mapping[str, Any]) -> Body:
        """Print a sale return receipt. The response carries the ``command_id``."""
        return self._command(CommandType.PRINT_PURCHASE_RETURN, command)

    def get_command_status(self, command_id: str) -> Body:
        return self.dispatcher.send("GET", f"Command/{quote(str(command_id), safe='')}").body

    def _shift(self, command_type: CommandType, author: str) -> Body:
        return self._command(command_type, ShiftCommand(author=author).model_dump())

    def _command(self, command_type: CommandType, command: Mapping[str, Any]) -> Body:
        params = {"command": dict(command), "type": command_type.value}
        return self.dispatcher.send("POST", "Command", params).body

    def close(self) -> None:
        self.dispatcher.close()
        if self._owned_logger is not None:
            self._owned_logger.close()

    def __enter__(self) -> OpenKktClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
