"""Result type for explicit error handling.

This module provides a Result type that forces explicit handling of success
and failure cases. It is used where one failure must not hide the other
outcomes, such as several machines in one file or several files in one run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, NoReturn, Optional, TypeVar, Union

if TYPE_CHECKING:
    from machine_extractor.extractor.errors import ExtractionError
    from machine_extractor.models.location import Location

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


class ResultError(Exception):
    """Raised when a Result is unwrapped on the wrong side."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """A successful outcome, such as one extracted machine or a loaded config."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Return the extracted value."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ResultError(f"unwrap_err() on Ok: {self.value!r}")

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True)
class Err(Generic[E]):
    """
    A failed outcome carrying its reason (MachineError, ConfigError).

    Held in place of the value so callers can keep going with the rest of
    a file or a run.
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        """Raise ResultError naming the failure."""
        raise ResultError(f"unwrap() on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        """Fall back to `default` for a failed outcome."""
        return default

    def unwrap_err(self) -> E:
        """Return the failure reason."""
        return self.error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Union[Ok[T], Err[E]]


@dataclass(frozen=True)
class MachineError:
    """Extraction failure for one machine factory call."""

    factory: str
    error: "ExtractionError"
    call_location: Optional["Location"] = None

    def __str__(self) -> str:
        if self.call_location is not None:
            return f"{self.factory}() at line {self.call_location.start.line}: {self.error}"
        return f"{self.factory}(): {self.error}"

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "factory": self.factory,
            "call_location": self.call_location.to_dict() if self.call_location else None,
            **self.error.to_dict(),
        }


@dataclass(frozen=True)
class ConfigError:
    """Error in configuration."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"Config error in '{self.field}': {self.message}"


# Exit codes
class ExitCode:
    """Exit codes for CLI."""

    SUCCESS = 0
    EXTRACTION_FAILED = 1
    CONFIG_ERROR = 2
    INTERNAL_ERROR = 3

