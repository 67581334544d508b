from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, Field

Body = Union[dict[str, Any], list[Any], bytes, None]


@dataclass(frozen=True)
class Credentials:
    account_url: str
    app_id: str
    secret: str

    def __repr__(self) -> str:
        return f"Credentials(account_url={self.account_url!r}, app_id={self.app_id!r}, secret='***')"


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Body


class CommandType(str, Enum):
    OPEN_SHIFT = "openShift"
    CLOSE_SHIFT = "closeShift"
    PRINT_CHECK = "printCheck"
    PRINT_PURCHASE_RETURN = "printPurchaseReturn"


class TokenResponse(BaseModel):
    token: str = Field(min_length=1)


class ShiftCommand(BaseModel):
    report_type: str = "false"
    author: str
