"""Matchers that compare JSON, XML and YAML documents by structure."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any
from xml.parsers import expat

import yaml

from .support import deep_equal, format_message, format_object, formatted_message, to_string
from .types import Matcher, MatcherError

__all__ = ["MatchJSONMatcher", "MatchXMLMatcher", "MatchYAMLMatcher", "parse_xml_content"]

_BYTE_TYPES = (bytes, bytearray, memoryview)


def _text_pair(kind: str, actual: Any, expected: Any) -> tuple[str, str]:
    """Return both values as text, or raise if either has no text form."""
    actual_string = to_string(actual)
    if actual_string is None:
        raise MatcherError(
            f"{kind} matcher requires a string, stringer, or []byte.  "
            f"Got actual:\n{format_object(actual, 1)}"
        )
    expected_string = to_string(expected)
    if expected_string is None:
        raise MatcherError(
            f"{kind} matcher requires a string, stringer, or []byte.  "
            f"Got expected:\n{format_object(expected, 1)}"
        )
    return actual_string, expected_string


# ---------------------------------------------------------------------- JSON


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid character '{name[0]}' looking for beginning of value")


def _load_json(text: str, **options: Any) -> Any:
    return json.loads(text, parse_constant=_reject_constant, **options)


def _pretty_json(text: str, role: str) -> str:
    try:
        value = _load_json(text)
    except ValueError as exc:
        raise MatcherError(
            f"{role} '{text}' should be valid JSON, but it is not.\nUnderlying error:{exc}"
        ) from exc
    return json.dumps(value, indent=2, ensure_ascii=False)


@dataclass(eq=False)
class MatchJSONMatcher(Matcher):
    """Match JSON text that decodes to the same value as ``json_to_match``."""

    json_to_match: Any
    _first_failure_path: list[Any] = field(default_factory=list, init=False, repr=False)

    def _pretty_print(self, actual: Any) -> tuple[str, str]:
        actual_string, expected_string = _text_pair(
            "MatchJSONMatcher", actual, self.json_to_match
        )
        return _pretty_json(actual_string, "Actual"), _pretty_json(expected_string, "Expected")

    def match(self, actual: Any) -> bool:
        actual_text, expected_text = self._pretty_print(actual)
        # Every number is compared as a float, whatever its spelling.
        actual_value = _load_json(actual_text, parse_int=float)
        expected_value = _load_json(expected_text, parse_int=float)
        equal, self._first_failure_path = deep_equal(actual_value, expected_value)
        return equal

    def _message(self, actual: Any, text: str) -> str:
        try:
            actual_text, expected_text = self._pretty_print(actual)
        except MatcherError:
            actual_text = expected_text = ""
        return formatted_message(
            format_message(actual_text, text, expected_text), self._first_failure_path
        )

    def failure_message(self, actual: Any) -> str:
        return self._message(actual, "to match JSON of")

    def negated_failure_message(self, actual: Any) -> str:
        return self._message(actual, "not to match JSON of")


# ----------------------------------------------------------------------- XML


@dataclass
class _XmlNode:
    name: tuple[str, str]
    attrs: list[tuple[tuple[str, str], str]] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    proc_insts: list[tuple[str, str]] = field(default_factory=list)
    content: str = ""
    nodes: list[_XmlNode] = field(default_factory=list)


def _split_name(name: str) -> tuple[str, str]:
    space, _, local = name.rpartition(" ")
    return space, local


def _trim_parent_contents(node: _XmlNode) -> None:
    if node.nodes:
        node.content = node.content.strip()
        for child in node.nodes:
            _trim_parent_contents(child)


def parse_xml_content(content: str | bytes) -> _XmlNode:
    """Parse an XML document into a comparable tree of nodes.

    Attributes are sorted, and the text of elements with children is
    stripped of surrounding whitespace.  Raises :class:`MatcherError`
    for malformed documents or documents without elements.
    """
    nodes: list[_XmlNode] = []
    pending_namespaces: list[tuple[tuple[str, str], str]] = []

    def last() -> _XmlNode:
        # Anything seen before the first element lands on a discarded node.
        return nodes[-1] if nodes else _XmlNode(("", ""))

    def on_namespace(prefix: str | None, uri: str | None) -> None:
        name = ("xmlns", prefix) if prefix else ("", "xmlns")
        pending_namespaces.append((name, uri or ""))

    def on_start(name: str, attributes: dict[str, str]) -> None:
        attrs = pending_namespaces + [(_split_name(k), v) for k, v in attributes.items()]
        pending_namespaces.clear()
        attrs.sort(key=lambda attr: attr[0])
        nodes.append(_XmlNode(_split_name(name), attrs))

    def on_end(_name: str) -> None:
        if len(nodes) > 1:
            child = nodes.pop()
            nodes[-1].nodes.append(child)

    def on_text(data: str) -> None:
        last().content += data

    def on_comment(data: str) -> None:
        last().comments.append(data)

    def on_proc_inst(target: str, data: str) -> None:
        last().proc_insts.append((target, data))

    parser = expat.ParserCreate(namespace_separator=" ")
    parser.buffer_text = True
    parser.StartNamespaceDeclHandler = on_namespace
    parser.StartElementHandler = on_start
    parser.EndElementHandler = on_end
    parser.CharacterDataHandler = on_text
    parser.CommentHandler = on_comment
    parser.ProcessingInstructionHandler = on_proc_inst

    try:
        parser.Parse(content, True)
    except expat.ExpatError as exc:
        raise MatcherError(f"failed to decode next token: {exc}") from exc

    if not nodes:
        raise MatcherError("found no nodes")
    root = nodes[0]
    _trim_parent_contents(root)
    return root


def _xml_source(value: Any, text: str) -> str | bytes:
    """Raw bytes keep their declared encoding; everything else parses as text."""
    return bytes(value) if isinstance(value, _BYTE_TYPES) else text


@dataclass(eq=False)
class MatchXMLMatcher(Matcher):
    """Match XML documents equal to ``xml_to_match`` up to formatting and attribute order."""

    xml_to_match: Any

    def match(self, actual: Any) -> bool:
        actual_string, expected_string = _text_pair("MatchXMLMatcher", actual, self.xml_to_match)
        try:
            actual_tree = parse_xml_content(_xml_source(actual, actual_string))
        except MatcherError as exc:
            raise MatcherError(
                f"Actual '{actual_string}' should be valid XML, but it is not.\n"
                f"Underlying error:{exc}"
            ) from exc
        try:
            expected_tree = parse_xml_content(_xml_source(self.xml_to_match, expected_string))
        except MatcherError as exc:
            raise MatcherError(
                f"Expected '{expected_string}' should be valid XML, but it is not.\n"
                f"Underlying error:{exc}"
            ) from exc
        return actual_tree == expected_tree

    def _strings(self, actual: Any) -> tuple[str, str]:
        try:
            return _text_pair("MatchXMLMatcher", actual, self.xml_to_match)
        except MatcherError:
            return "", ""

    def failure_message(self, actual: Any) -> str:
        actual_string, expected_string = self._strings(actual)
        return f"Expected\n{actual_string}\nto match XML of\n{expected_string}"

    def negated_failure_message(self, actual: Any) -> str:
        actual_string, expected_string = self._strings(actual)
        return f"Expected\n{actual_string}\nnot to match XML of\n{expected_string}"


# ---------------------------------------------------------------------- YAML


def _normalise_yaml(text: str) -> str:
    output = yaml.safe_dump(yaml.safe_load(text), allow_unicode=True, default_flow_style=False)
    if output.endswith("\n...\n"):
        output = output[: -len("...\n")]
    return output.strip()


@dataclass(eq=False)
class MatchYAMLMatcher(Matcher):
    """Match YAML text that loads to the same value as ``yaml_to_match``."""

    yaml_to_match: Any
    _first_failure_path: list[Any] = field(default_factory=list, init=False, repr=False)

    def match(self, actual: Any) -> bool:
        actual_string, expected_string = _text_pair(
            "MatchYAMLMatcher", actual, self.yaml_to_match
        )
        try:
            actual_value = yaml.safe_load(actual_string)
        except yaml.YAMLError as exc:
            raise MatcherError(
                f"Actual '{actual_string}' should be valid YAML, but it is not.\n"
                f"Underlying error:{exc}"
            ) from exc
        try:
            expected_value = yaml.safe_load(expected_string)
        except yaml.YAMLError as exc:
            raise MatcherError(
                f"Expected '{expected_string}' should be valid YAML, but it is not.\n"
                f"Underlying error:{exc}"
            ) from exc
        equal, self._first_failure_path = deep_equal(actual_value, expected_value)
        return equal

    def _normalised(self, actual: Any) -> tuple[str, str]:
        try:
            actual_string, expected_string = _text_pair(
                "MatchYAMLMatcher", actual, self.yaml_to_match
            )
        except MatcherError:
            actual_string = expected_string = ""
        return _normalise_yaml(actual_string), _normalise_yaml(expected_string)

    def failure_message(self, actual: Any) -> str:
        actual_text, expected_text = self._normalised(actual)
        return formatted_message(
            format_message(actual_text, "to match YAML of", expected_text),
            self._first_failure_path,
        )

    def negated_failure_message(self, actual: Any) -> str:
        actual_text, expected_text = self._normalised(actual)
        return formatted_message(
            format_message(actual_text, "not to match YAML of", expected_text),
            self._first_failure_path,
        )