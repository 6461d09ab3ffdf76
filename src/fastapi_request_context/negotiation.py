"""Content negotiation across the Accept family of headers."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

from fastapi_request_context.quality import preference_order

_AXIS_HEADERS = {
    "accept": "Accept",
    "charset": "Accept-Charset",
    "encoding": "Accept-Encoding",
    "language": "Accept-Language",
}


class NegotiationAxis(Enum):
    """Negotiable header families."""

    ACCEPT = "accept"
    CHARSET = "charset"
    ENCODING = "encoding"
    LANGUAGE = "language"

    @property
    def header(self) -> str:
        return _AXIS_HEADERS[self.value]


class ContentNegotiator:
    """Picks one mutually acceptable value per axis.

    Client preferences are parsed on first use and cached per axis.
    ``headers`` must support case-insensitive lookup.
    """

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._headers = headers
        self._preferences: dict[NegotiationAxis, list[str]] = {}

    def preferences(self, axis: NegotiationAxis | str) -> list[str]:
        axis = NegotiationAxis(axis)
        if axis not in self._preferences:
            self._preferences[axis] = preference_order(self._headers.get(axis.header))
        return list(self._preferences[axis])

    def negotiate(self, axis: NegotiationAxis | str, candidates: Sequence[str]) -> str:
        """Return the client's most preferred candidate, else the first one."""
        if not candidates:
            raise ValueError("At least one candidate is required")
        offered = [candidate.lower() for candidate in candidates]
        for item in self.preferences(axis):
            if item in offered:
                return item
        return offered[0]
