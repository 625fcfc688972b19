import pytest
import yaml

from matchkit.structured import (
    MatchJSONMatcher,
    MatchXMLMatcher,
    MatchYAMLMatcher,
    parse_xml_content,
)
from matchkit.types import MatcherError

SAMPLE_01 = """<?xml version="1.0" encoding="UTF-8"?>
<note>
  <to>Tove</to>
  <from>Jani</from>
  <heading>Reminder</heading>
  <body>Don't forget me this weekend!</body>
</note>
"""

SAMPLE_02 = """<?xml version="1.0" encoding="UTF-8"?>

<note>

  <to>Tove</to>

  <from>Jani</from>
  <heading>Reminder</heading>

  <body>Don't forget me this weekend!</body>
</note>

"""

SAMPLE_03 = (
    '<?xml version="1.0" encoding="UTF-8"?><note><to>Tove</to><from>Jani</from>'
    "<heading>Reminder</heading><body>Don't forget me this weekend!</body></note>"
)

SAMPLE_04 = """<?xml version="1.0" encoding="UTF-8"?>
<note>
  <to>John</to>
  <from>Doe</from>
  <heading>Reminder</heading>
  <body>Don't forget me this weekend!</body>
</note>
"""

SAMPLE_05 = """<?xml version="1.0" encoding="UTF-8"?>
<note>
  <to>Tove</to>
  <from>Jani</from>
  <heading>Reminder</heading>
</note>
"""

SAMPLE_06 = (
    '<root xmlns:h="http://www.example.com/html">'
    "<h:table><h:tr><h:td>Apples</h:td></h:tr></h:table></root>"
)
SAMPLE_07 = (
    '<root xmlns:h="http://www.example.com/furniture">'
    "<h:table><h:tr><h:td>Apples</h:td></h:tr></h:table></root>"
)
SAMPLE_08 = (
    '<root xmlns:h="http://www.example.com/furniture">'
    "<h:table><h:tr><h:td>Bananas</h:td></h:tr></h:table></root>"
)
SAMPLE_09 = '<book id="1"><title>Dune</title></book>'
SAMPLE_10 = '<book id="2"><title>Dune</title></book>'
SAMPLE_11 = '<?xml version="1.0" encoding="ISO-8859-1"?>\n<menu>caf\xe9</menu>'.encode(
    "latin-1"
)


# ---------------------------------------------------------------------- JSON


@pytest.mark.parametrize(
    "actual, expected, result",
    [
        ("{}", "{}", True),
        ('{"a":1}', '{"a":1}', True),
        ('{\n             "a":1\n         }', '{"a":1}', True),
        ('{"a":1, "b":2}', '{"b":2, "a":1}', True),
        ('{"a":1}', '{"b":2, "a":1}', False),
        ('{"a":"a", "b":"b"}', '{"a":"a", "b":"b", "c":"c"}', False),
        ('{"a":"a", "b":"b", "c":"c"}', '{"a":"a", "b":"b"}', False),
        ('{"a":null, "b":null}', '{"c":"c", "d":"d"}', False),
        ('{"a":null, "b":null, "c":null}', '{"a":null, "b":null, "d":null}', False),
        ('{"a":1}', '{"a":1.0}', True),
    ],
)
def test_json_matches_stringifiables(actual, expected, result):
    assert MatchJSONMatcher(expected).match(actual) is result


def test_json_works_with_bytes():
    assert MatchJSONMatcher(b"{}").match(b"{}") is True
    assert MatchJSONMatcher(b"{}").match("{}") is True
    assert MatchJSONMatcher("{}").match(b"{}") is True
    assert MatchJSONMatcher(b'{"a": 1}').match(b'{"a": 1}') is True


def test_json_reports_first_mismatched_key():
    subject = MatchJSONMatcher("5")
    assert subject.match("7") is False
    assert "first mismatched key" not in subject.failure_message("7")

    subject = MatchJSONMatcher('{"a": 1, "b.g": {"c": 2, "1": ["hello", "see ya"]}}')
    actual = '{"a": 1, "b.g": {"c": 2, "1": ["hello", "goodbye"]}}'
    assert subject.match(actual) is False
    assert 'first mismatched key: "b.g"."1"[1]' in subject.failure_message(actual)


def test_json_invalid_actual():
    with pytest.raises(MatcherError) as info:
        MatchJSONMatcher("{}").match("oops")
    assert "Actual 'oops' should be valid JSON" in str(info.value)


def test_json_invalid_expected():
    with pytest.raises(MatcherError) as info:
        MatchJSONMatcher("oops").match("{}")
    assert "Expected 'oops' should be valid JSON" in str(info.value)


@pytest.mark.parametrize("expected, shown", [(2, "<int>: 2"), (None, "<nil>: nil")])
def test_json_expected_not_text(expected, shown):
    with pytest.raises(MatcherError) as info:
        MatchJSONMatcher(expected).match("{}")
    assert (
        "MatchJSONMatcher matcher requires a string, stringer, or []byte.  Got expected:\n    "
        + shown
    ) in str(info.value)


@pytest.mark.parametrize("actual, shown", [(2, "<int>: 2"), (None, "<nil>: nil")])
def test_json_actual_not_text(actual, shown):
    with pytest.raises(MatcherError) as info:
        MatchJSONMatcher("{}").match(actual)
    assert (
        "MatchJSONMatcher matcher requires a string, stringer, or []byte.  Got actual:\n    "
        + shown
    ) in str(info.value)


def test_json_negated_failure_message():
    assert (
        MatchJSONMatcher("1").negated_failure_message("1")
        == "Expected\n    <string>: 1\nnot to match JSON of\n    <string>: 1"
    )


def test_json_failure_message_is_pretty_printed():
    matcher = MatchJSONMatcher('{"other":"stuff"}')
    assert matcher.match('{"some":"json"}') is False
    assert matcher.failure_message('{"some":"json"}') == (
        "Expected\n"
        '    <string>: {\n      "some": "json"\n    }\n'
        "to match JSON of\n"
        '    <string>: {\n      "other": "stuff"\n    }'
    )


# ----------------------------------------------------------------------- XML


def test_xml_ignores_attribute_order():
    a = '<a foo="bar" ka="boom"></a>'
    b = '<a ka="boom" foo="bar"></a>'
    assert MatchXMLMatcher(a).match(b) is True
    assert MatchXMLMatcher(b).match(a) is True


@pytest.mark.parametrize(
    "actual, expected, result",
    [
        (SAMPLE_01, SAMPLE_01, True),
        (SAMPLE_01, SAMPLE_02, True),
        (SAMPLE_01, SAMPLE_03, True),
        (SAMPLE_01, SAMPLE_04, False),
        (SAMPLE_01, SAMPLE_05, False),
        (SAMPLE_06, SAMPLE_07, False),
        (SAMPLE_07, SAMPLE_08, False),
        (SAMPLE_09, SAMPLE_10, False),
        (SAMPLE_11, SAMPLE_11, True),
    ],
)
def test_xml_samples(actual, expected, result):
    assert MatchXMLMatcher(expected).match(actual) is result


def test_xml_comments_are_compared():
    assert MatchXMLMatcher("<a><!-- one --><b/></a>").match("<a><!-- two --><b/></a>") is False
    assert MatchXMLMatcher("<a><!-- one --><b/></a>").match("<a><!-- one --><b/></a>") is True


def test_parse_xml_content_structure():
    root = parse_xml_content(SAMPLE_01)
    assert root.name == ("", "note")
    assert [child.name[1] for child in root.nodes] == ["to", "from", "heading", "body"]
    assert root.content == ""
    assert root.nodes[0].content == "Tove"


def test_parse_xml_content_keeps_leaf_whitespace():
    assert parse_xml_content("<a> x </a>").content == " x "


def test_parse_xml_content_decodes_declared_encoding():
    assert parse_xml_content(SAMPLE_11).content == "caf\xe9"


def test_parse_xml_content_namespaces():
    root = parse_xml_content(SAMPLE_06)
    assert root.attrs == [(("xmlns", "h"), "http://www.example.com/html")]
    assert root.nodes[0].name == ("http://www.example.com/html", "table")


def test_parse_xml_content_without_elements():
    with pytest.raises(MatcherError):
        parse_xml_content("")


def test_xml_invalid_actual():
    with pytest.raises(MatcherError) as info:
        MatchXMLMatcher(SAMPLE_01).match("oops")
    assert "Actual 'oops' should be valid XML" in str(info.value)


def test_xml_invalid_expected():
    with pytest.raises(MatcherError) as info:
        MatchXMLMatcher("oops").match(SAMPLE_01)
    assert "Expected 'oops' should be valid XML" in str(info.value)


@pytest.mark.parametrize("expected, shown", [(2, "<int>: 2"), (None, "<nil>: nil")])
def test_xml_expected_not_text(expected, shown):
    with pytest.raises(MatcherError) as info:
        MatchXMLMatcher(expected).match(SAMPLE_01)
    assert (
        "MatchXMLMatcher matcher requires a string, stringer, or []byte.  Got expected:\n    "
        + shown
    ) in str(info.value)


@pytest.mark.parametrize("actual, shown", [(2, "<int>: 2"), (None, "<nil>: nil")])
def test_xml_actual_not_text(actual, shown):
    with pytest.raises(MatcherError) as info:
        MatchXMLMatcher(SAMPLE_01).match(actual)
    assert (
        "MatchXMLMatcher matcher requires a string, stringer, or []byte.  Got actual:\n    "
        + shown
    ) in str(info.value)


def test_xml_failure_messages():
    assert MatchXMLMatcher("<yml/>").failure_message("<xml/>") == (
        "Expected\n<xml/>\nto match XML of\n<yml/>"
    )
    assert MatchXMLMatcher("<xml/>").negated_failure_message("<xml/>") == (
        "Expected\n<xml/>\nnot to match XML of\n<xml/>"
    )


# ---------------------------------------------------------------------- YAML


@pytest.mark.parametrize(
    "actual, expected",
    [("---", ""), ("a: 1", '{"a":1}'), ("a: 1\nb: 2", '{"b":2, "a":1}')],
)
def test_yaml_matches(actual, expected):
    assert MatchYAMLMatcher(expected).match(actual) is True


def test_yaml_mismatch():
    assert MatchYAMLMatcher('{"b":2, "a":1}').match("a: 1") is False


def test_yaml_failure_message():
    message = MatchYAMLMatcher("a: 1").failure_message("b: 2")
    assert message == "Expected\n    <string>: b: 2\nto match YAML of\n    <string>: a: 1"


def test_yaml_failure_message_is_normalised():
    message = MatchYAMLMatcher("a: 'one'").failure_message("{b: two}")
    assert message == "Expected\n    <string>: b: two\nto match YAML of\n    <string>: a: one"


def test_yaml_negated_failure_message():
    message = MatchYAMLMatcher("a: 1").negated_failure_message("a: 1")
    assert message == "Expected\n    <string>: a: 1\nnot to match YAML of\n    <string>: a: 1"


def test_yaml_negated_failure_message_is_normalised():
    message = MatchYAMLMatcher("a: 'one'").negated_failure_message("{a: one}")
    assert message == (
        "Expected\n    <string>: a: one\nnot to match YAML of\n    <string>: a: one"
    )


def test_yaml_works_with_bytes():
    assert MatchYAMLMatcher(b"a: 1").match(b"a: 1") is True
    assert MatchYAMLMatcher(b"a: 1").match("a: 1") is True
    assert MatchYAMLMatcher("a: 1").match(b"a: 1") is True


def test_yaml_reports_first_mismatched_key():
    matcher = MatchYAMLMatcher("a:\n  b: [1, 2]")
    assert matcher.match("a:\n  b: [1, 3]") is False
    assert 'first mismatched key: "a"."b"[1]' in matcher.failure_message("a:\n  b: [1, 3]")


def test_yaml_invalid_actual():
    with pytest.raises(MatcherError) as info:
        MatchYAMLMatcher("").match("good:\nbad")
    assert "Actual 'good:\nbad' should be valid YAML" in str(info.value)


def test_yaml_invalid_expected():
    with pytest.raises(MatcherError) as info:
        MatchYAMLMatcher("good:\nbad").match("")
    assert "Expected 'good:\nbad' should be valid YAML" in str(info.value)


def test_yaml_failure_message_on_invalid_yaml_raises():
    with pytest.raises(yaml.YAMLError):
        MatchYAMLMatcher("good").failure_message("good:\nbad")


@pytest.mark.parametrize("expected, shown", [(2, "<int>: 2"), (None, "<nil>: nil")])
def test_yaml_expected_not_text(expected, shown):
    with pytest.raises(MatcherError) as info:
        MatchYAMLMatcher(expected).match("")
    assert (
        "MatchYAMLMatcher matcher requires a string, stringer, or []byte.  Got expected:\n    "
        + shown
    ) in str(info.value)


@pytest.mark.parametrize("actual, shown", [(2, "<int>: 2"), (None, "<nil>: nil")])
def test_yaml_actual_not_text(actual, shown):
    with pytest.raises(MatcherError) as info:
        MatchYAMLMatcher("").match(actual)
    assert (
        "MatchYAMLMatcher matcher requires a string, stringer, or []byte.  Got actual:\n    "
        + shown
    ) in str(info.value)