"""scopefs error types.

Two channels are kept apart:
- ScopeFsError and subclasses: ordinary precondition errors raised before
  any filesystem mutation.
- ExpectationNotMetError: assertion-style failures reported through the
  test framework (see scopefs.expectations).

Platform errors (OSError and friends) are never wrapped.
"""

from __future__ import annotations

from typing import Any


class ScopeFsError(Exception):
    """Base error for scopefs."""

    code: str = "internal_error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        **extra: Any,
    ) -> None:
        self.message = message or self.__class__.__doc__ or self.code
        self.details: dict[str, Any] = dict(details or {})
        self.details.update(extra)
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidArgumentError(ScopeFsError):
    """Invalid argument."""

    code = "invalid_argument"


class AlreadyExistsError(ScopeFsError):
    """Path already exists."""

    code = "already_exists"


class OperationAbortedError(ScopeFsError):
    """Operation aborted before any change was applied."""

    code = "operation_aborted"


class ExpectationNotMetError(AssertionError):
    """Assertion-style failure raised by the default expectations."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)
