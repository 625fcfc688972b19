"""Matchers for test assertions with descriptive failure messages."""

__version__ = "0.1.0"

__all__ = [
    "types",
    "support",
    "graph",
    "equal",
    "containers",
    "fields",
    "text",
    "errors",
    "structured",
    "httpmatch",
]