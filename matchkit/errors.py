"""Matchers on exceptions: whether one occurred, and which one it was."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .equal import EqualMatcher
from .support import format_message, format_object, indent_string, is_error, is_string
from .types import Matcher, MatcherError

__all__ = ["HaveOccurredMatcher", "SucceedMatcher", "MatchErrorMatcher"]


def _error_chain(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` and the exceptions it was raised from, outermost first."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif current.__suppress_context__:
            current = None
        else:
            current = current.__context__


@dataclass(eq=False)
class HaveOccurredMatcher(Matcher):
    """Match exceptions; ``None`` means that no error occurred."""

    def match(self, actual: Any) -> bool:
        if actual is None:
            return False
        if not is_error(actual):
            raise MatcherError(f"Expected an error-type.  Got:\n{format_object(actual, 1)}")
        return True

    def failure_message(self, actual: Any) -> str:
        return f"Expected an error to have occurred.  Got:\n{format_object(actual, 1)}"

    def negated_failure_message(self, actual: Any) -> str:
        return (
            f"Unexpected error:\n{format_object(actual, 1)}\n"
            f"{indent_string(str(actual), 1)}\noccurred"
        )


@dataclass(eq=False)
class SucceedMatcher(Matcher):
    """Match ``None``, the sign that an operation raised no error."""

    def match(self, actual: Any) -> bool:
        if actual is None:
            return True
        if not is_error(actual):
            raise MatcherError(f"Expected an error-type.  Got:\n{format_object(actual, 1)}")
        return False

    def failure_message(self, actual: Any) -> str:
        return (
            "Expected success, but got an error:\n"
            f"{format_object(actual, 1)}\n{indent_string(str(actual), 1)}"
        )

    def negated_failure_message(self, actual: Any) -> str:
        return "Expected failure, but got no error."


@dataclass(eq=False)
class MatchErrorMatcher(Matcher):
    """Match an exception against another exception, its message, or a matcher.

    An expected exception matches if it equals the actual one or appears in
    the chain of exceptions the actual one was raised from.
    """

    expected: Any

    def match(self, actual: Any) -> bool:
        if actual is None:
            raise MatcherError("Expected an error, got nil")
        if not is_error(actual):
            raise MatcherError(f"Expected an error.  Got:\n{format_object(actual, 1)}")

        expected = self.expected
        if is_error(expected):
            if EqualMatcher(expected).match(actual):
                return True
            return any(link is expected for link in _error_chain(actual))
        if is_string(expected):
            return str(actual) == expected
        if isinstance(expected, Matcher):
            return expected.match(str(actual))
        raise MatcherError(
            "MatchError must be passed an error, a string, or a Matcher that can match "
            f"on strings. Got:\n{format_object(expected, 1)}"
        )

    def failure_message(self, actual: Any) -> str:
        return format_message(actual, "to match error", self.expected)

    def negated_failure_message(self, actual: Any) -> str:
        return format_message(actual, "not to match error", self.expected)