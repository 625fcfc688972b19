# matchkit

Matchers for writing test assertions. Each matcher decides whether a value
matches and, when it does not, explains why in a readable failure message.

## Installation

```
pip install matchkit
```

## The matcher protocol

Every matcher derives from `matchkit.types.Matcher` and provides three methods:

- `match(actual)` returns `True` or `False`. It raises
  `matchkit.types.MatcherError` when the value cannot be judged at all, for
  example when a length is asked of an integer.
- `failure_message(actual)` explains why a positive assertion failed.
- `negated_failure_message(actual)` explains why a negative assertion failed.

Any object with these three methods counts as a `Matcher` in `isinstance`
checks, so your own matchers can be passed wherever a matcher is accepted.

A matcher that can tell whether its result might still change on a later
attempt may implement `OracleMatcher.match_may_change_in_the_future(actual)`.
The helper `matchkit.types.match_may_change_in_the_future(matcher, value)`
asks the matcher, and returns `True` for any matcher that cannot say.

Several matchers remember state from their last `match` call (the field they
extracted, the value they resolved, the body they read) and use it in their
messages, so call `match` before asking for a message, and use one matcher
instance per value.

## Examples

```python
from dataclasses import dataclass

from matchkit.equal import EqualMatcher
from matchkit.containers import HaveLenMatcher, HaveKeyWithValueMatcher
from matchkit.fields import HaveFieldMatcher, HaveValueMatcher, Ref
from matchkit.text import HavePrefixMatcher, MatchRegexpMatcher
from matchkit.errors import MatchErrorMatcher
from matchkit.structured import MatchJSONMatcher
from matchkit.types import MatcherError

matcher = EqualMatcher("eric")
if not matcher.match("tim"):
    print(matcher.failure_message("tim"))
# Expected
#     <string>: tim
# to equal
#     <string>: eric

HaveLenMatcher(3).match([1, 2, 3])                         # True
HaveKeyWithValueMatcher("foo", 2).match({"foo": 2})        # True
HavePrefixMatcher("C%dP", 3).match("C3PO")                 # True
MatchRegexpMatcher(r"\d!").match(" a2!bla")                # True
MatchErrorMatcher("boom").match(ValueError("boom"))        # True
MatchJSONMatcher('{"a": 1, "b": 2}').match('{"b":2,"a":1}')  # True
HaveValueMatcher(EqualMatcher(1)).match(Ref(Ref(1)))       # True

@dataclass
class Person:
    first_name: str

@dataclass
class Book:
    title: str
    author: Person

book = Book("Les Miserables", Person("Victor"))
HaveFieldMatcher("author.first_name", "Victor").match(book)  # True

try:
    HaveLenMatcher(0).match(0)
except MatcherError as exc:
    print(exc)
```

Wherever a matcher takes an expected value (a key, a field value, a header
value, a body), you may pass another matcher instead, and it is applied to the
extracted value.

## Available matchers

| Module | Contents |
| --- | --- |
| `matchkit.equal` | `EqualMatcher`: deep equality that also requires equal types; shows where two long strings first differ |
| `matchkit.containers` | `HaveLenMatcher`, `HaveCapMatcher`, `HaveKeyMatcher`, `HaveKeyWithValueMatcher` |
| `matchkit.fields` | `HaveFieldMatcher` and `extract_field` for dotted paths of attributes and `name()` method calls; `HaveValueMatcher`, which follows `Ref` references (at most 31) to the value beneath |
| `matchkit.text` | `HavePrefixMatcher`, `HaveSuffixMatcher`, `MatchRegexpMatcher`, each with optional `%`-formatting arguments |
| `matchkit.errors` | `HaveOccurredMatcher`, `SucceedMatcher` (where `None` means no error), `MatchErrorMatcher` (by exception, by message, or by matcher; also searches the `raise ... from` chain) |
| `matchkit.structured` | `MatchJSONMatcher`, `MatchXMLMatcher`, `MatchYAMLMatcher`, and `parse_xml_content`; JSON and YAML mismatches report the first mismatched key |
| `matchkit.httpmatch` | `HTTPResponse`, `HaveHTTPStatusMatcher`, `HaveHTTPBodyMatcher`, `HaveHTTPHeaderWithValueMatcher`, and `format_http_response` |

### HTTP responses

`HTTPResponse` is a plain record of a response: `status_code`, `status`
(derived from the code when omitted, e.g. `"200 OK"`), `headers` (a mapping,
whose values may be lists, or name/value pairs) and `body` (`None`, text,
bytes, or a readable file-like object, which is read and closed).
`HTTPResponse.header(name)` returns the first value of a header, ignoring
case, or `""`.

```python
from matchkit.httpmatch import HTTPResponse, HaveHTTPStatusMatcher, HaveHTTPBodyMatcher

response = HTTPResponse(status_code=200, headers={"Content-Type": "text/plain"}, body="hello")
HaveHTTPStatusMatcher(404, "200 OK").match(response)   # True
HaveHTTPBodyMatcher("hello").match(response)            # True
```

### Support helpers

`matchkit.support` holds the shared helpers: `format_object`,
`format_message`, `message_with_diff` and `indent_string` for building
messages; `deep_equal`, `formatted_message` and `formatted_failure_path` for
comparing decoded JSON and YAML; and small type helpers such as `to_string`,
`length_of` and `cap_of`.

### Bipartite matching

`matchkit.graph` provides `Node`, `Edge`, `EdgeSet` and `BipartiteGraph`.
`new_bipartite_graph(left_values, right_values, neighbours)` joins every pair
for which `neighbours(left, right)` is true; `largest_matching()` returns a
maximum-cardinality matching (Hopcroft–Karp), and `free_left_right(edges)`
returns the values of the nodes that the given edges leave untouched.

```python
from matchkit.graph import new_bipartite_graph

graph = new_bipartite_graph([1, 2, 3], [1, 2], lambda left, right: left == right)
matching = graph.largest_matching()
len(matching)                       # 2
graph.free_left_right(matching)     # ([3], [])
```

## What the package does not do

matchkit holds individual matchers only. There is no assertion runner that
calls `match` and reports or raises on failure, and no polling of a value
until it matches; your tests call the methods themselves. There are no
matchers that negate or combine other matchers, none that check whether a
callable raises, none that apply a predicate or a transformation to a value
before matching, and none that receive from a channel or queue.

## Running the tests

```
pip install -e ".[test]"
pytest
```