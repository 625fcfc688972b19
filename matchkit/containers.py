"""Matchers on sizes, capacities and mapping keys."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .equal import EqualMatcher
from .support import INDENT, cap_of, format_message, format_object, is_map, length_of
from .types import Matcher, MatcherError

__all__ = [
    "HaveCapMatcher",
    "HaveLenMatcher",
    "HaveKeyMatcher",
    "HaveKeyWithValueMatcher",
]


def _as_matcher(value: Any) -> Matcher:
    return value if isinstance(value, Matcher) else EqualMatcher(value)


@dataclass(eq=False)
class HaveCapMatcher(Matcher):
    """Match containers whose capacity equals ``count``."""

    count: int

    def match(self, actual: Any) -> bool:
        capacity = cap_of(actual)
        if capacity is None:
            raise MatcherError(
                f"HaveCap matcher expects a array/channel/slice.  Got:\n{format_object(actual, 1)}"
            )
        return capacity == self.count

    def failure_message(self, actual: Any) -> str:
        return f"Expected\n{format_object(actual, 1)}\nto have capacity {self.count}"

    def negated_failure_message(self, actual: Any) -> str:
        return f"Expected\n{format_object(actual, 1)}\nnot to have capacity {self.count}"


@dataclass(eq=False)
class HaveLenMatcher(Matcher):
    """Match sized values whose length equals ``count``."""

    count: int

    def match(self, actual: Any) -> bool:
        length = length_of(actual)
        if length is None:
            raise MatcherError(
                "HaveLen matcher expects a string/array/map/channel/slice.  "
                f"Got:\n{format_object(actual, 1)}"
            )
        return length == self.count

    def failure_message(self, actual: Any) -> str:
        return f"Expected\n{format_object(actual, 1)}\nto have length {self.count}"

    def negated_failure_message(self, actual: Any) -> str:
        return f"Expected\n{format_object(actual, 1)}\nnot to have length {self.count}"


@dataclass(eq=False)
class HaveKeyMatcher(Matcher):
    """Match mappings holding a key equal to, or matched by, ``key``."""

    key: Any

    def match(self, actual: Any) -> bool:
        if not is_map(actual):
            raise MatcherError(f"HaveKey matcher expects a map.  Got:{format_object(actual, 1)}")
        key_matcher = _as_matcher(self.key)
        for key in actual:
            try:
                if key_matcher.match(key):
                    return True
            except MatcherError as exc:
                raise MatcherError(f"HaveKey's key matcher failed with:\n{INDENT}{exc}") from exc
        return False

    def failure_message(self, actual: Any) -> str:
        if isinstance(self.key, Matcher):
            return format_message(actual, "to have key matching", self.key)
        return format_message(actual, "to have key", self.key)

    def negated_failure_message(self, actual: Any) -> str:
        if isinstance(self.key, Matcher):
            return format_message(actual, "not to have key matching", self.key)
        return format_message(actual, "not to have key", self.key)


@dataclass(eq=False)
class HaveKeyWithValueMatcher(Matcher):
    """Match mappings whose first key matching ``key`` has a value matching ``value``."""

    key: Any
    value: Any

    def match(self, actual: Any) -> bool:
        if not is_map(actual):
            raise MatcherError(
                f"HaveKeyWithValue matcher expects a map.  Got:{format_object(actual, 1)}"
            )
        key_matcher = _as_matcher(self.key)
        value_matcher = _as_matcher(self.value)
        for key, value in actual.items():
            try:
                key_found = key_matcher.match(key)
            except MatcherError as exc:
                raise MatcherError(
                    f"HaveKeyWithValue's key matcher failed with:\n{INDENT}{exc}"
                ) from exc
            if key_found:
                try:
                    return value_matcher.match(value)
                except MatcherError as exc:
                    raise MatcherError(
                        f"HaveKeyWithValue's value matcher failed with:\n{INDENT}{exc}"
                    ) from exc
        return False

    def failure_message(self, actual: Any) -> str:
        text = "to have {key: value}"
        if isinstance(self.key, Matcher) or isinstance(self.value, Matcher):
            text += " matching"
        try:
            expected: Any = {self.key: self.value}
        except TypeError:
            expected = [(self.key, self.value)]
        return format_message(actual, text, expected)

    def negated_failure_message(self, actual: Any) -> str:
        key_text = "not to have key"
        if isinstance(self.key, Matcher):
            key_text = "not to have key matching"
        value_text = "or that key's value not be"
        if isinstance(self.value, Matcher):
            value_text = "or to have that key's value not matching"
        return format_message(actual, key_text, self.key, value_text, self.value)