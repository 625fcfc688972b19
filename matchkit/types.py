"""Core matcher protocol shared by every matcher in the package."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

__all__ = [
    "MatcherError",
    "Matcher",
    "OracleMatcher",
    "match_may_change_in_the_future",
]


class MatcherError(Exception):
    """Raised when a matcher cannot be applied to the value it was given."""


class Matcher(ABC):
    """A matcher decides whether a value matches and explains failures.

    ``match`` returns a bool, or raises :class:`MatcherError` when the value
    cannot be judged at all.  Any object that provides the three methods
    counts as a matcher for ``isinstance`` checks.
    """

    @abstractmethod
    def match(self, actual: Any) -> bool:
        """Return whether ``actual`` satisfies the matcher."""

    @abstractmethod
    def failure_message(self, actual: Any) -> str:
        """Explain why ``actual`` failed to match."""

    @abstractmethod
    def negated_failure_message(self, actual: Any) -> str:
        """Explain why ``actual`` matched when it should not have."""

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is Matcher:
            required = ("match", "failure_message", "negated_failure_message")
            if all(callable(getattr(subclass, name, None)) for name in required):
                return True
        return NotImplemented


class OracleMatcher(ABC):
    """A matcher that can tell whether its verdict may still change.

    Polling assertions use this to stop early once success has become
    impossible.
    """

    @abstractmethod
    def match_may_change_in_the_future(self, actual: Any) -> bool:
        """Return whether a later call to ``match`` could give another result."""

    @classmethod
    def __subclasshook__(cls, subclass: type) -> Any:
        if cls is OracleMatcher:
            if callable(getattr(subclass, "match_may_change_in_the_future", None)):
                return True
        return NotImplemented


def match_may_change_in_the_future(matcher: Any, value: Any) -> bool:
    """Ask ``matcher`` whether its result may change; assume so if it cannot say."""
    if isinstance(matcher, OracleMatcher):
        return bool(matcher.match_may_change_in_the_future(value))
    return True