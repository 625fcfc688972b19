"""Matchers that reach into objects: named fields and referenced values."""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .equal import EqualMatcher
from .support import format_message, format_object
from .types import Matcher, MatcherError

__all__ = ["extract_field", "HaveFieldMatcher", "Ref", "HaveValueMatcher"]

MAX_INDIRECTIONS = 31

_NOT_STRUCTS = (
    bool,
    int,
    float,
    complex,
    str,
    bytes,
    bytearray,
    memoryview,
    list,
    tuple,
    set,
    frozenset,
    Mapping,
    type,
)

_MISSING = object()


def _is_struct(value: Any) -> bool:
    if value is None or isinstance(value, _NOT_STRUCTS):
        return False
    return not inspect.isroutine(value)


def _is_bound_to(value: Any, owner: Any) -> bool:
    return inspect.isroutine(value) and getattr(value, "__self__", None) is owner


def _is_valid_accessor(method: Any) -> bool:
    func = getattr(method, "__func__", method)
    code = getattr(func, "__code__", None)
    if code is None:
        return True
    positional = code.co_argcount - (1 if func is not method else 0)
    defaults = len(getattr(func, "__defaults__", None) or ())
    if positional - defaults > 0:
        return False
    kw_defaults = getattr(func, "__kwdefaults__", None) or {}
    keyword_only = code.co_varnames[code.co_argcount : code.co_argcount + code.co_kwonlyargcount]
    if any(name not in kw_defaults for name in keyword_only):
        return False
    annotations = getattr(func, "__annotations__", None) or {}
    returned = annotations.get("return", _MISSING)
    return returned is not None and returned != "None"


def extract_field(actual: Any, field: str) -> Any:
    """Follow a dotted path of attributes and ``name()`` method calls.

    Raises :class:`MatcherError` when a step cannot be taken.
    """
    head, dot, rest = field.partition(".")
    if not _is_struct(actual):
        raise MatcherError(
            f"HaveField encountered:\n{format_object(actual, 1)}\nWhich is not a struct."
        )
    type_name = type(actual).__qualname__

    if head.endswith("()"):
        method = getattr(actual, head[:-2], _MISSING)
        if method is _MISSING or not _is_bound_to(method, actual):
            raise MatcherError(
                f"HaveField could not find method named '{head}' in struct of type {type_name}."
            )
        if not _is_valid_accessor(method):
            raise MatcherError(
                f"HaveField found an invalid method named '{head}' in struct of type "
                f"{type_name}.\nMethods must take no arguments and return exactly one value."
            )
        extracted = method()
    else:
        extracted = getattr(actual, head, _MISSING)
        if extracted is _MISSING or _is_bound_to(extracted, actual):
            raise MatcherError(
                f"HaveField could not find field named '{head}' in struct:\n"
                f"{format_object(actual, 1)}"
            )

    if not dot:
        return extracted
    return extract_field(extracted, rest)


@dataclass(eq=False)
class HaveFieldMatcher(Matcher):
    """Match objects whose field at ``field`` matches, or equals, ``expected``."""

    field: str
    expected: Any
    _extracted: Any = field(default=None, init=False, repr=False)
    _sub_matcher: Matcher | None = field(default=None, init=False, repr=False)

    def match(self, actual: Any) -> bool:
        self._extracted = extract_field(actual, self.field)
        if isinstance(self.expected, Matcher):
            self._sub_matcher = self.expected
        else:
            self._sub_matcher = EqualMatcher(self.expected)
        return self._sub_matcher.match(self._extracted)

    def failure_message(self, actual: Any) -> str:
        return (
            f"Value for field '{self.field}' failed to satisfy matcher.\n"
            + self._sub_matcher.failure_message(self._extracted)
        )

    def negated_failure_message(self, actual: Any) -> str:
        return (
            f"Value for field '{self.field}' satisfied matcher, but should not have.\n"
            + self._sub_matcher.negated_failure_message(self._extracted)
        )


@dataclass
class Ref:
    """A reference to another value, which may itself be a reference."""

    value: Any = None


@dataclass(eq=False)
class HaveValueMatcher(Matcher):
    """Follow references to the underlying value and apply ``matcher`` to it."""

    matcher: Matcher
    _resolved: Any = field(default=None, init=False, repr=False)

    def match(self, actual: Any) -> bool:
        value = actual
        for _ in range(MAX_INDIRECTIONS):
            if value is None:
                raise MatcherError(format_message(actual, "not to be <nil>"))
            if isinstance(value, Ref):
                value = value.value
                continue
            self._resolved = value
            return self.matcher.match(value)
        raise MatcherError(format_message(actual, "too many indirections"))

    def failure_message(self, actual: Any) -> str:
        return self.matcher.failure_message(self._resolved)

    def negated_failure_message(self, actual: Any) -> str:
        return self.matcher.negated_failure_message(self._resolved)