"""Assertion-style failure channel.

Size and content helpers report unmet preconditions as test failures, not as
ScopeFsError. The reporting mechanism is injected into FilesystemManager.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from scopefs.errors import ExpectationNotMetError


class Expectations(ABC):
    """Reports failed expectations to the test framework."""

    @abstractmethod
    def fail(self, message: str, *, path: str | None = None) -> None:
        """Report a failed expectation. Must not return."""
        ...


class AssertionExpectations(Expectations):
    """Raises ExpectationNotMetError (an AssertionError)."""

    def fail(self, message: str, *, path: str | None = None) -> None:
        raise ExpectationNotMetError(message, path=path)
