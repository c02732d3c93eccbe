from __future__ import annotations

from typing import Any, Optional

USER_REJECTED_CODE = 4001


class ODLError(RuntimeError):
    """Generic SDK error. Public client methods raise only this type."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

    @classmethod
    def wrap(cls, exc: BaseException) -> "ODLError":
        return cls(str(exc), cause=exc)


class RpcError(ODLError):
    """JSON-RPC error object returned by a node or wallet."""

    def __init__(self, code: Optional[int], message: str, data: Any = None) -> None:
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.rpc_message = message
        self.data = data

    @property
    def user_rejected(self) -> bool:
        return self.code == USER_REJECTED_CODE


class AccountUnavailableError(ODLError):
    pass


class TabularParseError(ODLError, ValueError):
    pass


class ProjectionError(ODLError, LookupError):
    pass


class TabularValueError(ODLError, ValueError):
    pass


class CidFormatError(ODLError, ValueError):
    pass


class EncodingError(ODLError, ValueError):
    pass


class UploadError(ODLError):
    pass


class TransactionTimeoutError(ODLError):
    pass


class ConfigError(ODLError, ValueError):
    pass


__all__ = [
    "USER_REJECTED_CODE",
    "ODLError",
    "RpcError",
    "AccountUnavailableError",
    "TabularParseError",
    "ProjectionError",
    "TabularValueError",
    "CidFormatError",
    "EncodingError",
    "UploadError",
    "TransactionTimeoutError",
    "ConfigError",
]
