"""Matchers on HTTP responses: body, header values and status."""

from __future__ import annotations

import http
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .equal import EqualMatcher
from .support import INDENT, format_object, indent_string
from .types import Matcher, MatcherError

__all__ = [
    "HTTPResponse",
    "HaveHTTPBodyMatcher",
    "HaveHTTPHeaderWithValueMatcher",
    "HaveHTTPStatusMatcher",
    "format_http_response",
]

_BYTE_TYPES = (bytes, bytearray, memoryview)
_NO_BODY = object()


def _status_text(code: int) -> str:
    try:
        phrase = http.HTTPStatus(code).phrase
    except ValueError:
        phrase = ""
    return f"{code:03d} {phrase}"


def _normalise_headers(headers: Any) -> list[tuple[str, str]]:
    if isinstance(headers, Mapping):
        items: Iterable[tuple[str, Any]] = headers.items()
    else:
        items = headers
    pairs: list[tuple[str, str]] = []
    for name, value in items:
        if isinstance(value, (list, tuple)):
            pairs.extend((str(name), str(v)) for v in value)
        else:
            pairs.append((str(name), str(value)))
    return pairs


@dataclass
class HTTPResponse:
    """A received HTTP response.

    ``headers`` may be a mapping (values may be lists) or pairs of name and
    value.  ``body`` may be ``None``, text, bytes or a readable file-like
    object, which is consumed when read.  When ``status`` is not given it is
    derived from ``status_code``, e.g. ``"200 OK"``.
    """

    status_code: int = 0
    status: str | None = None
    headers: Any = field(default_factory=list)
    body: Any = None

    def __post_init__(self) -> None:
        self.headers = _normalise_headers(self.headers)
        if self.status is None:
            self.status = _status_text(self.status_code) if self.status_code else ""

    def header(self, name: str) -> str:
        """Return the first value of header ``name``, ignoring case, or ``""``."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return ""


def _read_body(response: HTTPResponse) -> bytes | None:
    """Return the body as bytes, consuming and closing a stream body."""
    body = response.body
    if body is None:
        return None
    if isinstance(body, str):
        return body.encode("utf-8")
    if isinstance(body, _BYTE_TYPES):
        return bytes(body)
    try:
        data = body.read()
    finally:
        close = getattr(body, "close", None)
        if callable(close):
            close()
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _not_a_response(name: str, actual: Any) -> MatcherError:
    return MatcherError(
        f"{name} matcher expects an HTTPResponse. Got:\n{format_object(actual, 1)}"
    )


class HaveHTTPBodyMatcher(Matcher):
    """Match responses whose body equals a str or bytes, or satisfies a matcher.

    The body is read once and kept, so messages can still show it.
    """

    def __init__(self, expected: Any) -> None:
        self.expected = expected
        self._cached: Any = _NO_BODY

    def __repr__(self) -> str:
        return f"HaveHTTPBodyMatcher(expected={self.expected!r})"

    def _body(self, actual: Any) -> bytes:
        if self._cached is not _NO_BODY:
            return self._cached
        if not isinstance(actual, HTTPResponse):
            raise _not_a_response("HaveHTTPBody", actual)
        try:
            data = _read_body(actual)
        except (OSError, ValueError) as exc:
            raise MatcherError(f"error reading response body: {exc}") from exc
        self._cached = b"" if data is None else data
        return self._cached

    def _sub(self, body: bytes) -> tuple[Matcher, Any]:
        expected = self.expected
        if isinstance(expected, str):
            return EqualMatcher(expected), body.decode("utf-8", errors="replace")
        if isinstance(expected, _BYTE_TYPES):
            return EqualMatcher(bytes(expected)), body
        if isinstance(expected, Matcher):
            return expected, body
        raise MatcherError(
            "HaveHTTPBody matcher expects str, bytes, or a Matcher. Got:\n"
            f"{format_object(expected, 1)}"
        )

    def match(self, actual: Any) -> bool:
        matcher, value = self._sub(self._body(actual))
        return matcher.match(value)

    def _message(self, actual: Any, negated: bool) -> str:
        try:
            body = self._body(actual)
        except MatcherError as exc:
            return f"failed to read body: {exc}"
        try:
            matcher, value = self._sub(body)
        except MatcherError as exc:
            return str(exc)
        if negated:
            return matcher.negated_failure_message(value)
        return matcher.failure_message(value)

    def failure_message(self, actual: Any) -> str:
        return self._message(actual, negated=False)

    def negated_failure_message(self, actual: Any) -> str:
        return self._message(actual, negated=True)


@dataclass(eq=False)
class HaveHTTPHeaderWithValueMatcher(Matcher):
    """Match responses whose first ``header`` value equals a str or satisfies a matcher."""

    header: str
    value: Any

    def _sub_matcher(self) -> Matcher:
        if isinstance(self.value, str):
            return EqualMatcher(self.value)
        if isinstance(self.value, Matcher):
            return self.value
        raise MatcherError(
            "HaveHTTPHeaderWithValue matcher must be passed a string or a Matcher. Got:\n"
            f"{format_object(self.value, 1)}"
        )

    def _extract(self, actual: Any) -> str:
        if not isinstance(actual, HTTPResponse):
            raise _not_a_response("HaveHTTPHeaderWithValue", actual)
        return actual.header(self.header)

    def match(self, actual: Any) -> bool:
        value = self._extract(actual)
        return self._sub_matcher().match(value)

    def failure_message(self, actual: Any) -> str:
        value = self._extract(actual)
        diff = indent_string(self._sub_matcher().failure_message(value), 1)
        return f'HTTP header "{self.header}":\n{diff}'

    def negated_failure_message(self, actual: Any) -> str:
        value = self._extract(actual)
        diff = indent_string(self._sub_matcher().negated_failure_message(value), 1)
        return f'HTTP header "{self.header}":\n{diff}'


class HaveHTTPStatusMatcher(Matcher):
    """Match responses whose status code (int) or status line (str) is any of ``expected``."""

    def __init__(self, *expected: Any) -> None:
        self.expected = list(expected)

    def __repr__(self) -> str:
        return f"HaveHTTPStatusMatcher({', '.join(repr(e) for e in self.expected)})"

    def match(self, actual: Any) -> bool:
        if not isinstance(actual, HTTPResponse):
            raise _not_a_response("HaveHTTPStatus", actual)
        if not self.expected:
            raise MatcherError("HaveHTTPStatus matcher must be passed an int or a string. Got nothing")
        for expected in self.expected:
            if isinstance(expected, int) and not isinstance(expected, bool):
                if actual.status_code == expected:
                    return True
            elif isinstance(expected, str):
                if actual.status == expected:
                    return True
            else:
                raise MatcherError(
                    "HaveHTTPStatus matcher must be passed int or string types. Got:\n"
                    f"{format_object(expected, 1)}"
                )
        return False

    def _expected_string(self) -> str:
        return "\n".join(format_object(e, 1) for e in self.expected)

    def failure_message(self, actual: Any) -> str:
        return (
            f"Expected\n{format_http_response(actual)}\n"
            f"to have HTTP status\n{self._expected_string()}"
        )

    def negated_failure_message(self, actual: Any) -> str:
        return (
            f"Expected\n{format_http_response(actual)}\n"
            f"not to have HTTP status\n{self._expected_string()}"
        )


def format_http_response(value: Any) -> str:
    """Render a response's status, code and body for failure messages."""
    if not isinstance(value, HTTPResponse):
        return "cannot format invalid HTTP response"

    body = "<nil>"
    if value.body is not None:
        try:
            data = _read_body(value) or b""
        except (OSError, ValueError):
            data = b"<error reading body>"
        body = format_object(data.decode("utf-8", errors="replace"), 0)

    lines = [
        f"{INDENT}<{type(value).__name__}>: {{",
        f"{INDENT}{INDENT}Status:     {format_object(value.status, 0)}",
        f"{INDENT}{INDENT}StatusCode: {format_object(value.status_code, 0)}",
        f"{INDENT}{INDENT}Body:       {body}",
        f"{INDENT}}}",
    ]
    return "\n".join(lines)