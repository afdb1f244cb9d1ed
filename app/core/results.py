"""Outcome values for pricing mutations"""
from dataclasses import dataclass
from typing import Any, Optional

from app.core.enums import ErrorKind


@dataclass(frozen=True)
class StoreResult:
    ok: bool
    message: str
    kind: Optional[ErrorKind] = None
    value: Any = None

    @classmethod
    def success(cls, message: str, value: Any = None) -> "StoreResult":
        return cls(ok=True, message=message, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "StoreResult":
        return cls(ok=False, message=message, kind=kind)


class StoreError(Exception):
    """Raised by the table store; carries the error kind and the driver code."""

    def __init__(self, kind: ErrorKind, message: str, code: Optional[str] = None):
        self.kind = kind
        self.message = message
        self.code = code
        super().__init__(message)
