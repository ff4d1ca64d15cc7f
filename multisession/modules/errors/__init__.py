"""
Errors Module - Black Box Interface

Purpose: Error types shared by every session module
Interface: SessionError hierarchy, MultiError aggregate
Hidden: Message rendering rules

Other modules raise and collect these; none of them inspect the message text.
"""

from typing import Iterable, Iterator, List, Optional


class SessionError(Exception):
    """Base class for all session errors."""


class SessionSetupError(SessionError):
    """Raised when the pipeline operates without required setup."""


class MissingStoreError(SessionError):
    """A tracked session has no store bound at save time."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'sessions: missing store for session "{name}"')


class SessionSaveError(SessionError):
    """A store failed to persist a session."""

    def __init__(self, name: str, cause: BaseException):
        self.name = name
        self.cause = cause
        super().__init__(f'sessions: error saving session "{name}": {cause}')


class SerializationError(SessionError, TypeError):
    """A session value could not be encoded or decoded."""


class MultiError(SessionError):
    """
    Stores multiple errors.

    Slots may be None; they are kept in `errors` but skipped when counting,
    iterating and rendering.
    """

    def __init__(self, errors: Optional[Iterable[Optional[BaseException]]] = None):
        self.errors: List[Optional[BaseException]] = list(errors or [])
        super().__init__()

    def append(self, error: Optional[BaseException]) -> None:
        """Add a component error."""
        self.errors.append(error)

    @property
    def failures(self) -> List[BaseException]:
        """Non-None component errors, in order."""
        return [e for e in self.errors if e is not None]

    def __iter__(self) -> Iterator[BaseException]:
        return iter(self.failures)

    def __len__(self) -> int:
        return len(self.failures)

    def __str__(self) -> str:
        failures = self.failures
        n = len(failures)
        if n == 0:
            return "(0 errors)"
        first = str(failures[0])
        if n == 1:
            return first
        if n == 2:
            return f"{first} (and 1 other error)"
        return f"{first} (and {n - 1} other errors)"

    def __repr__(self) -> str:
        return f"MultiError({self.errors!r})"


__all__ = [
    "SessionError",
    "SessionSetupError",
    "MissingStoreError",
    "SessionSaveError",
    "SerializationError",
    "MultiError",
]
