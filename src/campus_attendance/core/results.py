from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from .enums import StoreErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a store write.

    Repositories translate driver errors into a StoreErrorKind so services never
    look at driver-specific error codes.
    """

    value: Optional[T] = None
    error: Optional[StoreErrorKind] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def is_duplicate(self) -> bool:
        return self.error == StoreErrorKind.DUPLICATE

    @classmethod
    def success(cls, value: T) -> "StoreResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: StoreErrorKind, detail: Optional[str] = None) -> "StoreResult[T]":
        return cls(error=kind, detail=detail)
