from typing import Any, List, Optional


class CallQAError(Exception):
    """Base class for everything the scoring core raises."""


class ValidationError(CallQAError):
    """Malformed or missing normalized-transcript fields, or a bad profile."""

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        super().__init__(message)
        self.errors = errors or []


class UnknownLocaleError(ValidationError):
    pass


class EmptyTranscriptError(CallQAError):
    """The provider returned no transcript text."""


class InternalInvariantError(CallQAError):
    """A computed score or the registry broke a documented invariant."""
