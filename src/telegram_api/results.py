from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NoReturn

# Synthetic status for calls that never produced an HTTP response.
TRANSPORT_FAILURE = 0
UNKNOWN_ERROR = "Unknown error"


class TelegramError(RuntimeError):
    def __init__(self, *, method: str, status: int, description: str) -> None:
        super().__init__(f"Telegram {method} failed (HTTP {status}): {description}")
        self.method = method
        self.status = status
        self.description = description


class TransportError(TelegramError):
    pass


class ApiError(TelegramError):
    pass


@dataclass(frozen=True)
class Ok:
    method: str
    payload: Any = None

    ok = True

    def raise_for_error(self) -> "Ok":
        return self


@dataclass(frozen=True)
class Fail:
    method: str
    status: int
    description: str

    ok = False

    @property
    def is_transport(self) -> bool:
        return self.status == TRANSPORT_FAILURE

    def raise_for_error(self) -> NoReturn:
        error_cls = TransportError if self.is_transport else ApiError
        raise error_cls(method=self.method, status=self.status, description=self.description)


ApiResult = Ok | Fail


def interpret_response(method: str, status: int, body: Any) -> ApiResult:
    """Map one completed HTTP exchange onto Ok or Fail.

    Ok only when the status is 200 and the body carries ``"ok": true``.
    """
    if not isinstance(body, dict):
        body = {}
    if status == 200 and body.get("ok") is True:
        return Ok(method=method, payload=body.get("result"))
    description = body.get("description") or UNKNOWN_ERROR
    return Fail(method=method, status=status, description=str(description))
