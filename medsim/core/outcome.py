"""Outcome: explicit result value for governor and ledger operations.

Invariants:
    - Exactly one of value/error is meaningful: ok == (error is None)
    - Frozen: an Outcome handed to a caller never changes
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

from medsim.core.errors import MedSimError

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a MedSimError, never an escaping exception."""
    value: T | None = None
    error: MedSimError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: MedSimError) -> "Outcome[T]":
        return cls(error=error)
