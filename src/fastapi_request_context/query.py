"""Form-encoded query strings with bracket-notation nesting.

``a[b]=1&a[c]=2`` decodes to ``{"a": {"b": "1", "c": "2"}}`` and
``a[]=x&a[]=y`` to ``{"a": ["x", "y"]}``. Encoding walks the same shape back
into bracketed keys, so decoded data survives a round trip with every scalar
turned into a string.
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterator, Mapping
from typing import Any
from urllib.parse import quote_plus, unquote_plus

from fastapi_request_context._types import QueryData, QueryValue

# list indexes; longer digit runs stay plain string keys
_INDEX_RE = re.compile(r"0|[1-9][0-9]{0,17}")

# deepest bracket nesting accepted in a key; deeper pairs are dropped
MAX_NESTING = 64


def parse_query(raw: str) -> QueryData:
    """Decode a form-encoded query string into nested query data."""
    data: dict[str, Any] = {}
    for pair in raw.split("&"):
        if not pair:
            continue
        name, _, value = pair.partition("=")
        name = unquote_plus(name, errors="surrogateescape").lstrip(" ")
        base, keys = _split_key(name)
        if not base or len(keys) > MAX_NESTING:
            continue
        _assign(data, [base, *keys], unquote_plus(value, errors="surrogateescape"))
    return {key: _listify(value) for key, value in data.items()}


def build_query(data: Mapping[str, QueryValue]) -> str:
    """Encode query data, nesting mappings and lists with bracketed keys."""
    return "&".join(
        f"{_encode(key)}={_encode(value)}"
        for name, item in data.items()
        for key, value in _flatten(str(name), item)
    )


def filter_query(data: Mapping[str, QueryValue], allowed: Collection[str]) -> QueryData:
    """Keep only entries whose key is allowed, preserving the original order."""
    return {key: value for key, value in data.items() if key in allowed}


def lookup(data: Mapping[str, QueryValue], name: str) -> QueryValue:
    """Fetch a value by bracketed path, e.g. ``filter[age][min]``.

    Missing keys, and paths that run past a scalar, give ``None``.
    """
    base, keys = _split_key(name)
    value: Any = data.get(base)
    for key in keys:
        if isinstance(value, Mapping):
            value = value.get(key)
        elif isinstance(value, list) and _INDEX_RE.fullmatch(key):
            index = int(key)
            value = value[index] if index < len(value) else None
        else:
            return None
    return value


def _split_key(name: str) -> tuple[str, list[str]]:
    start = name.find("[")
    if start == -1:
        return name, []
    if start == 0:
        return "", []
    keys: list[str] = []
    pos = start
    while pos < len(name) and name[pos] == "[":
        end = name.find("]", pos + 1)
        if end == -1:
            break
        keys.append(name[pos + 1 : end])
        pos = end + 1
    if not keys:
        # unmatched bracket, the whole name is a plain key
        return name, []
    return name[:start], keys


def _assign(container: dict[str, Any], path: list[str], value: str) -> None:
    for key in path[:-1]:
        if key == "":
            key = _next_index(container)
        child = container.get(key)
        if not isinstance(child, dict):
            child = {}
            container[key] = child
        container = child
    key = path[-1]
    if key == "":
        key = _next_index(container)
    container[key] = value


def _next_index(container: Mapping[str, Any]) -> str:
    indexes = [int(key) for key in container if _INDEX_RE.fullmatch(key)]
    return str(max(indexes) + 1) if indexes else "0"


def _listify(value: Any) -> QueryValue:
    if not isinstance(value, dict):
        return value
    items = {key: _listify(child) for key, child in value.items()}
    if items and list(items) == [str(i) for i in range(len(items))]:
        return list(items.values())
    return items


def _flatten(prefix: str, value: Any) -> Iterator[tuple[str, str]]:
    if value is None:
        return
    if isinstance(value, Mapping):
        for key, child in value.items():
            yield from _flatten(f"{prefix}[{key}]", child)
    elif isinstance(value, (list, tuple)):
        for index, child in enumerate(value):
            yield from _flatten(f"{prefix}[{index}]", child)
    elif isinstance(value, bool):
        yield prefix, "1" if value else "0"
    else:
        yield prefix, str(value)


def _encode(text: str) -> str:
    return quote_plus(text, errors="surrogateescape")
