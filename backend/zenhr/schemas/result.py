from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from zenhr.exceptions import AppError

T = TypeVar("T")


@dataclass(frozen=True)
class CommandResult(Generic[T]):
    """Outcome of a ledger command.

    Expected failures (validation, quota, constraints) travel as values.
    ``unwrap`` turns them back into exceptions at the HTTP boundary.
    """

    value: T | None = None
    error: AppError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.message if self.error is not None else "ok"

    def unwrap(self) -> T | None:
        if self.error is not None:
            raise self.error
        return self.value

    @classmethod
    def success(cls, value: T | None = None) -> CommandResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: AppError) -> CommandResult[T]:
        return cls(error=error)
