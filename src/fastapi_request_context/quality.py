"""Quality-value ("q-factor") parsing for the Accept family of headers."""

from __future__ import annotations

DEFAULT_QUALITY = 1.0


def parse_quality_values(value: str | None) -> dict[str, float]:
    """Parse a header value into tokens mapped to their quality factor.

    Tokens are trimmed and lowercased. A missing, unparsable or out of range
    ``q`` parameter counts as ``1.0``. The mapping is ordered by descending
    quality; equal qualities keep their left-to-right order. A token listed
    more than once keeps its first occurrence.
    """
    if not value:
        return {}
    parsed: dict[str, float] = {}
    for item in value.split(","):
        token, *params = item.split(";")
        token = token.strip().lower()
        if not token or token in parsed:
            continue
        parsed[token] = _quality(params)
    return dict(sorted(parsed.items(), key=lambda entry: -entry[1]))


def preference_order(value: str | None) -> list[str]:
    """Tokens of a header value, most preferred first."""
    return list(parse_quality_values(value))


def _quality(params: list[str]) -> float:
    for param in params:
        name, sep, raw = param.partition("=")
        if not sep or name.strip().lower() != "q":
            continue
        try:
            quality = float(raw.strip())
        except ValueError:
            return DEFAULT_QUALITY
        return quality if 0.0 <= quality <= 1.0 else DEFAULT_QUALITY
    return DEFAULT_QUALITY
