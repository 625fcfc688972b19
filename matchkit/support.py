"""Value formatting, type helpers and structured-data comparison."""

from __future__ import annotations

import dataclasses
import functools
import inspect
import json
from collections.abc import Mapping, Sized
from typing import Any

__all__ = [
    "INDENT",
    "format_object",
    "indent_string",
    "format_message",
    "message_with_diff",
    "is_error",
    "is_nil",
    "is_number",
    "is_string",
    "is_map",
    "to_string",
    "length_of",
    "cap_of",
    "formatted_message",
    "formatted_failure_path",
    "deep_equal",
]

INDENT = "    "
_TRUNCATE_THRESHOLD = 50
_CHARACTERS_AROUND_MISMATCH = 5

_VARARGS_FLAG = 0x04
_VARKEYWORDS_FLAG = 0x08

_SCALAR_NAMES = {
    type(None): "nil",
    bool: "bool",
    int: "int",
    float: "float64",
    complex: "complex128",
    str: "string",
}


# ---------------------------------------------------------------- formatting


def _quote(text: str) -> str:
    return json.dumps(text, ensure_ascii=False)


def _is_routine(value: Any) -> bool:
    return inspect.isroutine(value) or isinstance(value, functools.partial)


def _code_parameter_names(target: Any) -> list[str] | None:
    code = getattr(target, "__code__", None)
    if code is None:
        return None
    names = code.co_varnames
    count = code.co_argcount
    kwonly = code.co_kwonlyargcount
    positional = list(names[:count])
    keyword_only = list(names[count : count + kwonly])
    index = count + kwonly
    varargs: list[str] = []
    varkw: list[str] = []
    if code.co_flags & _VARARGS_FLAG:
        varargs.append(names[index])
        index += 1
    if code.co_flags & _VARKEYWORDS_FLAG:
        varkw.append(names[index])
    if inspect.ismethod(target) and positional:
        positional = positional[1:]
    return positional + varargs + keyword_only + varkw


def _routine_name(value: Any) -> str:
    if isinstance(value, functools.partial):
        names = _code_parameter_names(value.func)
        if names is None:
            return "func"
        bound = set(value.keywords)
        names = [name for name in names[len(value.args) :] if name not in bound]
    else:
        names = _code_parameter_names(value)
        if names is None:
            return "func"
    return "func(" + ", ".join(names) + ")"


def _type_name(value: Any) -> str:
    kind = type(value)
    if kind in _SCALAR_NAMES:
        return _SCALAR_NAMES[kind]
    if _is_routine(value):
        return _routine_name(value)
    name = "[]uint8" if kind in (bytes, bytearray) else kind.__qualname__
    if isinstance(value, str):
        return name
    length = length_of(value)
    if length is None:
        return name
    details = f"len:{length}"
    capacity = cap_of(value)
    if capacity is not None:
        details += f", cap:{capacity}"
    return f"{name} | {details}"


def _format_string(text: str, indentation: int) -> str:
    if indentation == 1:
        return ("\n" + INDENT).join(text.split("\n"))
    return _quote(text)


def _format_float(number: float) -> str:
    text = repr(number)
    return text[:-2] if text.endswith(".0") else text


def _printable_text(data: bytes | bytearray) -> str | None:
    try:
        text = bytes(data).decode("utf-8")
    except UnicodeDecodeError:
        return None
    if all(ch.isprintable() or ch in "\n\t\r" for ch in text):
        return text
    return None


def _struct_fields(value: Any) -> dict[str, Any] | None:
    if isinstance(value, type):
        return None
    if dataclasses.is_dataclass(value):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if hasattr(value, "__dict__"):
        return dict(vars(value))
    slots = [
        name
        for klass in type(value).__mro__
        for name in getattr(klass, "__slots__", ())
        if name not in ("__dict__", "__weakref__")
    ]
    if slots:
        return {name: getattr(value, name) for name in slots if hasattr(value, name)}
    return None


def _format_value(value: Any, indentation: int) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, (int, complex)):
        return str(value)
    if isinstance(value, str):
        return _format_string(value, indentation)
    if isinstance(value, (bytes, bytearray)):
        text = _printable_text(value)
        if text is not None:
            return _format_string(text, indentation)
        return "[" + ", ".join(str(b) for b in value) + "]"
    if isinstance(value, BaseException):
        return "{msg: " + _quote(str(value)) + "}"
    if _is_routine(value):
        return hex(id(value))
    deeper = indentation + 1
    if isinstance(value, Mapping):
        items = (
            f"{_format_value(k, deeper)}: {_format_value(v, deeper)}"
            for k, v in value.items()
        )
        return "{" + ", ".join(items) + "}"
    if isinstance(value, (list, tuple, set, frozenset)):
        return "[" + ", ".join(_format_value(v, deeper) for v in value) + "]"
    fields = _struct_fields(value)
    if fields is not None:
        items = (f"{name}: {_format_value(v, deeper)}" for name, v in fields.items())
        return "{" + ", ".join(items) + "}"
    return repr(value)


def format_object(value: Any, indentation: int = 0) -> str:
    """Render ``value`` as ``<type>: value``, indented by ``indentation`` levels."""
    return f"{INDENT * indentation}<{_type_name(value)}>: {_format_value(value, indentation)}"


def indent_string(text: str, indentation: int) -> str:
    """Indent every line of ``text`` by ``indentation`` levels."""
    prefix = INDENT * indentation
    return "\n".join(prefix + line for line in text.split("\n"))


def format_message(actual: Any, message: str, *args: Any) -> str:
    """Build an ``Expected ... <message> ...`` failure text.

    Only the first of ``args``, if any, is shown as the expected value.
    """
    if not args:
        return f"Expected\n{format_object(actual, 1)}\n{message}"
    return f"Expected\n{format_object(actual, 1)}\n{message}\n{format_object(args[0], 1)}"


def _find_first_mismatch(a: str, b: str) -> int:
    for index, ch in enumerate(a):
        if index >= len(b) or ch != b[index]:
            return index
    if len(b) > len(a):
        return len(a) + 1
    return 0


def _truncate_and_format(text: str, index: int) -> str:
    left_padding = right_padding = "..."
    start = index - _CHARACTERS_AROUND_MISMATCH
    if start < 0:
        start = 0
        left_padding = ""
    end = index + _CHARACTERS_AROUND_MISMATCH + 1
    if end > len(text):
        end = len(text)
        right_padding = ""
    return f'"{left_padding}{text[start:end]}{right_padding}"'


def message_with_diff(actual: str, message: str, expected: str) -> str:
    """Like :func:`format_message` for strings, pointing at the first difference
    when both strings are long."""
    if len(actual) >= _TRUNCATE_THRESHOLD and len(expected) >= _TRUNCATE_THRESHOLD:
        diff_point = _find_first_mismatch(actual, expected)
        shown_actual = _truncate_and_format(actual, diff_point)
        shown_expected = _truncate_and_format(expected, diff_point)
        spaces_before_mismatch = _find_first_mismatch(shown_actual, shown_expected)
        space_to_actual = len(INDENT) + len("<string>: ") - len(message)
        padding_count = space_to_actual + spaces_before_mismatch
        if padding_count < 0:
            return format_message(shown_actual, message, shown_expected)
        padding = " " * padding_count + "|"
        return format_message(shown_actual, message + padding, shown_expected)
    return format_message(_quote(actual)[1:-1], message, _quote(expected)[1:-1])


# ------------------------------------------------------------- type helpers


def is_error(value: Any) -> bool:
    """Return whether ``value`` is an exception."""
    return isinstance(value, BaseException)


def is_nil(value: Any) -> bool:
    """Return whether ``value`` is ``None``."""
    return value is None


def is_number(value: Any) -> bool:
    """Return whether ``value`` is a real number (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    """Return whether ``value`` is a ``str``."""
    return isinstance(value, str)


def is_map(value: Any) -> bool:
    """Return whether ``value`` is a mapping."""
    return isinstance(value, Mapping)


def _is_stringer(value: Any) -> bool:
    if value is None or isinstance(value, (bool, int, float, complex, BaseException, type)):
        return False
    if _is_routine(value):
        return False
    return type(value).__str__ is not object.__str__


def to_string(value: Any) -> str | None:
    """Return ``value`` as text if it is a string, bytes or has its own ``__str__``."""
    if isinstance(value, str):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).decode("utf-8", errors="replace")
    if _is_stringer(value):
        return str(value)
    return None


def length_of(value: Any) -> int | None:
    """Return ``len(value)``, or ``None`` when ``value`` has no length."""
    if value is None or not isinstance(value, Sized):
        return None
    return len(value)


def cap_of(value: Any) -> int | None:
    """Return the capacity of a sequence or bounded container, else ``None``."""
    if value is None:
        return None
    capacity = getattr(value, "capacity", None)
    if isinstance(capacity, int) and not isinstance(capacity, bool):
        return capacity
    if isinstance(value, (list, tuple, bytes, bytearray)):
        return len(value)
    return None


# --------------------------------------------------- semi-structured data


def formatted_message(comparison_message: str, failure_path: list[Any]) -> str:
    """Append the first mismatched key to ``comparison_message`` when known."""
    if not failure_path:
        return comparison_message
    return f"{comparison_message}\n\nfirst mismatched key: {formatted_failure_path(failure_path)}"


def formatted_failure_path(failure_path: list[Any]) -> str:
    """Render an innermost-first key path as ``"outer"."inner"[index]``."""
    parts: list[str] = []
    for position, key in enumerate(reversed(failure_path)):
        if isinstance(key, int) and not isinstance(key, bool):
            parts.append(f"[{key}]")
        else:
            if position != 0:
                parts.append(".")
            parts.append(f'"{key}"')
    return "".join(parts)


def deep_equal(a: Any, b: Any) -> tuple[bool, list[Any]]:
    """Compare decoded JSON/YAML values.

    Returns whether they are equal and, if not, the path to the first
    mismatch with the innermost key first.
    """
    if type(a) is not type(b):
        return False, []
    if isinstance(a, list):
        if len(a) != len(b):
            return False, []
        for index, (left, right) in enumerate(zip(a, b)):
            equal, path = deep_equal(left, right)
            if not equal:
                return False, path + [index]
        return True, []
    if isinstance(a, dict):
        if len(a) != len(b):
            return False, []
        for key, left in a.items():
            if key not in b:
                return False, []
            equal, path = deep_equal(left, b[key])
            if not equal:
                return False, path + [key]
        return True, []
    return a == b, []