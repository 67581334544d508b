from .classifier import Outcome, classify
from .client import OpenKktClient
from .config import ClientConfig, ConfigError, load_config
from .dispatcher import RequestDispatcher
from .exceptions import (
    ApiError,
    AuthRejectedError,
    LogDirectoryError,
    SerializationError,
    ServerError,
    TokenExpiredError,
    TransportError,
    UnexpectedStatusError,
)
from .logger import DailyFileLogger, LogLevel, SdkLogger, StdLogger
from .models import ApiResponse, CommandType, Credentials, ShiftCommand, TokenResponse
from .nonce import NonceGenerator
from .signing import canonical_json, sign
from .token_store import FileTokenCache, InMemoryTokenCache, TokenCache, TokenStore

__version__ = "0.1.0"

__all__ = [
    "ApiError",
    "ApiResponse",
    "AuthRejectedError",
    "ClientConfig",
    "CommandType",
    "ConfigError",
    "Credentials",
    "DailyFileLogger",
    "FileTokenCache",
    "InMemoryTokenCache",
    "LogDirectoryError",
    "LogLevel",
    "NonceGenerator",
    "OpenKktClient",
    "Outcome",
    "RequestDispatcher",
    "SdkLogger",
    "SerializationError",
    "ServerError",
    "ShiftCommand",
    "StdLogger",
    "TokenCache",
    "TokenExpiredError",
    "TokenResponse",
    "TokenStore",
    "TransportError",
    "UnexpectedStatusError",
    "canonical_json",
    "classify",
    "load_config",
    "sign",
]
