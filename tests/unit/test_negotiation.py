"""Tests for ContentNegotiator and NegotiationAxis."""

from __future__ import annotations

import pytest
from starlette.datastructures import Headers

from fastapi_request_context.negotiation import ContentNegotiator, NegotiationAxis


def _negotiator(**headers: str) -> ContentNegotiator:
    return ContentNegotiator(Headers(headers={k.replace("_", "-"): v for k, v in headers.items()}))


class TestNegotiationAxis:
    @pytest.mark.parametrize(
        ("axis", "header"),
        [
            (NegotiationAxis.ACCEPT, "Accept"),
            (NegotiationAxis.CHARSET, "Accept-Charset"),
            (NegotiationAxis.ENCODING, "Accept-Encoding"),
            (NegotiationAxis.LANGUAGE, "Accept-Language"),
        ],
    )
    def test_header(self, axis: NegotiationAxis, header: str) -> None:
        assert axis.header == header

    def test_lookup_by_value(self) -> None:
        assert NegotiationAxis("language") is NegotiationAxis.LANGUAGE


class TestContentNegotiator:
    def test_default_without_header(self) -> None:
        assert _negotiator().negotiate("accept", ["json", "xml"]) == "json"

    def test_picks_client_preference(self) -> None:
        negotiator = _negotiator(Accept="text/html;q=0.5, application/xml, application/json;q=0.9")
        result = negotiator.negotiate(
            NegotiationAxis.ACCEPT, ["application/json", "text/html"]
        )
        assert result == "application/json"

    def test_falls_back_to_first_candidate(self) -> None:
        negotiator = _negotiator(Accept_Language="fr, de")
        assert negotiator.negotiate("language", ["en", "pt-br"]) == "en"

    def test_case_insensitive_match_returns_lowercase(self) -> None:
        negotiator = _negotiator(Accept_Charset="UTF-8, ISO-8859-1;q=0.5")
        assert negotiator.negotiate("charset", ["ISO-8859-1", "Utf-8"]) == "utf-8"

    def test_default_is_lowercased(self) -> None:
        assert _negotiator().negotiate("encoding", ["GZIP"]) == "gzip"

    def test_preferences_per_axis(self) -> None:
        negotiator = _negotiator(Accept_Encoding="gzip;q=0.5, br", Accept_Language="pt-BR")
        assert negotiator.preferences(NegotiationAxis.ENCODING) == ["br", "gzip"]
        assert negotiator.preferences("language") == ["pt-br"]
        assert negotiator.preferences("accept") == []

    def test_preferences_are_cached(self) -> None:
        headers = {"Accept-Language": "en"}
        negotiator = ContentNegotiator(headers)
        assert negotiator.preferences("language") == ["en"]
        headers["Accept-Language"] = "fr"
        assert negotiator.preferences("language") == ["en"]

    def test_returned_preferences_are_copies(self) -> None:
        negotiator = _negotiator(Accept="a, b")
        negotiator.preferences("accept").clear()
        assert negotiator.preferences("accept") == ["a", "b"]

    def test_empty_candidates_rejected(self) -> None:
        with pytest.raises(ValueError, match="candidate"):
            _negotiator().negotiate("accept", [])

    def test_unknown_axis_rejected(self) -> None:
        with pytest.raises(ValueError):
            _negotiator().preferences("color")
