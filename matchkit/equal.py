"""Deep, type-strict equality matcher."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .support import format_message, message_with_diff
from .types import Matcher, MatcherError

__all__ = ["EqualMatcher"]

_BYTE_TYPES = (bytes, bytearray, memoryview)


def _deep_equal(a: Any, b: Any) -> bool:
    """Compare two values recursively, requiring identical types throughout."""
    if type(a) is not type(b):
        return False
    if isinstance(a, BaseException):
        return _deep_equal(list(a.args), list(b.args)) and _deep_equal(vars(a), vars(b))
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_deep_equal(x, y) for x, y in zip(a, b))
    if isinstance(a, Mapping):
        if a.keys() != b.keys():
            return False
        return all(_deep_equal(value, b[key]) for key, value in a.items())
    if isinstance(a, (set, frozenset)):
        return a == b
    if dataclasses.is_dataclass(a) and not isinstance(a, type):
        return all(
            _deep_equal(getattr(a, f.name), getattr(b, f.name))
            for f in dataclasses.fields(a)
        )
    if type(a).__eq__ is not object.__eq__:
        return bool(a == b)
    if hasattr(a, "__dict__"):
        return _deep_equal(vars(a), vars(b))
    return a is b


@dataclass(eq=False)
class EqualMatcher(Matcher):
    """Match values that are deeply equal to ``expected``, types included."""

    expected: Any

    def match(self, actual: Any) -> bool:
        if actual is None and self.expected is None:
            raise MatcherError(
                "Refusing to compare <nil> to <nil>.\n"
                "Be explicit and check for None instead.  This is to avoid mistakes "
                "where both sides of an assertion are erroneously uninitialized."
            )
        if isinstance(actual, _BYTE_TYPES) and isinstance(self.expected, _BYTE_TYPES):
            return bytes(actual) == bytes(self.expected)
        return _deep_equal(actual, self.expected)

    def failure_message(self, actual: Any) -> str:
        if isinstance(actual, str) and isinstance(self.expected, str):
            return message_with_diff(actual, "to equal", self.expected)
        return format_message(actual, "to equal", self.expected)

    def negated_failure_message(self, actual: Any) -> str:
        return format_message(actual, "not to equal", self.expected)