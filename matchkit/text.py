"""Matchers on the text form of a value: prefixes, suffixes and regexps."""

from __future__ import annotations

import re
from typing import Any

from .support import format_message, format_object, to_string
from .types import Matcher, MatcherError

__all__ = ["HavePrefixMatcher", "HaveSuffixMatcher", "MatchRegexpMatcher"]


def _render(template: str, args: tuple[Any, ...]) -> str:
    return template % args if args else template


class HavePrefixMatcher(Matcher):
    """Match text starting with ``prefix``, %-formatted with ``args`` if given."""

    def __init__(self, prefix: str, *args: Any) -> None:
        self.prefix = prefix
        self.args = args

    def __repr__(self) -> str:
        return f"HavePrefixMatcher(prefix={self.prefix!r}, args={self.args!r})"

    def _prefix(self) -> str:
        return _render(self.prefix, self.args)

    def match(self, actual: Any) -> bool:
        text = to_string(actual)
        if text is None:
            raise MatcherError(
                f"HavePrefix matcher requires a string or stringer.  Got:\n{format_object(actual, 1)}"
            )
        return text.startswith(self._prefix())

    def failure_message(self, actual: Any) -> str:
        return format_message(actual, "to have prefix", self._prefix())

    def negated_failure_message(self, actual: Any) -> str:
        return format_message(actual, "not to have prefix", self._prefix())


class HaveSuffixMatcher(Matcher):
    """Match text ending with ``suffix``, %-formatted with ``args`` if given."""

    def __init__(self, suffix: str, *args: Any) -> None:
        self.suffix = suffix
        self.args = args

    def __repr__(self) -> str:
        return f"HaveSuffixMatcher(suffix={self.suffix!r}, args={self.args!r})"

    def _suffix(self) -> str:
        return _render(self.suffix, self.args)

    def match(self, actual: Any) -> bool:
        text = to_string(actual)
        if text is None:
            raise MatcherError(
                f"HaveSuffix matcher requires a string or stringer.  Got:\n{format_object(actual, 1)}"
            )
        return text.endswith(self._suffix())

    def failure_message(self, actual: Any) -> str:
        return format_message(actual, "to have suffix", self._suffix())

    def negated_failure_message(self, actual: Any) -> str:
        return format_message(actual, "not to have suffix", self._suffix())


class MatchRegexpMatcher(Matcher):
    """Match text in which ``regexp`` (%-formatted with ``args``) is found."""

    def __init__(self, regexp: str, *args: Any) -> None:
        self.regexp = regexp
        self.args = args

    def __repr__(self) -> str:
        return f"MatchRegexpMatcher(regexp={self.regexp!r}, args={self.args!r})"

    def _regexp(self) -> str:
        return _render(self.regexp, self.args)

    def match(self, actual: Any) -> bool:
        text = to_string(actual)
        if text is None:
            raise MatcherError(
                f"RegExp matcher requires a string or stringer.\nGot:{format_object(actual, 1)}"
            )
        try:
            pattern = re.compile(self._regexp())
        except re.error as exc:
            raise MatcherError(f"RegExp match failed to compile with error:\n\t{exc}") from exc
        return pattern.search(text) is not None

    def failure_message(self, actual: Any) -> str:
        return format_message(actual, "to match regular expression", self._regexp())

    def negated_failure_message(self, actual: Any) -> str:
        return format_message(actual, "not to match regular expression", self._regexp())