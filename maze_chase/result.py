"""Result type for explicit success/failure handling.

Operations that can legitimately fail during play (placing an obstacle,
moving a session to a new status) return a Result instead of raising or
returning None, so callers have to look at the outcome.

Usage:
------
    result = builder.place_obstacle(spec)
    if result.is_err():
        logger.debug("Skipped obstacle: %s", result.error)
    else:
        cells = result.unwrap()

    match result:
        case Ok(cells):
            ...
        case Err(reason):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")  # Success value type
E = TypeVar("E")  # Error type


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome carrying a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    @property
    def error(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """A failed outcome carrying a reason."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        """Raises ValueError; check is_ok() first."""
        raise ValueError(f"Called unwrap on Err: {self.error}")

    @property
    def value(self) -> None:
        return None

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]
