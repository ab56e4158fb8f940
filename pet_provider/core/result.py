"""Result Envelope — explicit success/failure values for pure core functions.

Invariants:
    - Ok carries a value, Err carries an exception — never both
    - Ok/Err are frozen: a Result is never mutated after creation
    - unwrap() on Err raises the carried exception unchanged

Design Decisions:
    - Result over raising in the core: validation is an expected outcome, callers
      decide whether to raise (shell) or inspect (tests, batch checks)
    - match-friendly dataclasses: `case Ok(value)` / `case Err(error)` work natively
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing the error."""
    error: Exception

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        raise self.error


Result = Ok[T] | Err[T]
