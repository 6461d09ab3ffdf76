"""Tests for Authorization header decoding."""

from __future__ import annotations

import base64
from dataclasses import FrozenInstanceError

import pytest

from fastapi_request_context.auth import (
    BasicCredentials,
    DigestCredentials,
    parse_authorization,
)


def _basic(text: str) -> str:
    return "Basic " + base64.b64encode(text.encode()).decode()


class TestBasic:
    def test_decodes_username_and_password(self) -> None:
        creds = parse_authorization("Basic dXNlcjpwYXNz")
        assert creds == BasicCredentials(username="user", password="pass")
        assert creds.scheme == "Basic"

    def test_password_may_contain_colons(self) -> None:
        creds = parse_authorization(_basic("user:pa:ss"))
        assert creds == BasicCredentials(username="user", password="pa:ss")

    def test_no_separator_leaves_password_absent(self) -> None:
        assert parse_authorization(_basic("justuser")) == BasicCredentials(
            username="justuser", password=None
        )

    def test_empty_password(self) -> None:
        assert parse_authorization(_basic("user:")) == BasicCredentials("user", "")

    @pytest.mark.parametrize("value", ["Basic", "Basic ", "Basic !!!notbase64", "Basic //79"])
    def test_undecodable_gives_empty_credentials(self, value: str) -> None:
        assert parse_authorization(value) == BasicCredentials()

    def test_credentials_are_immutable(self) -> None:
        creds = BasicCredentials("a", "b")
        with pytest.raises(FrozenInstanceError):
            creds.username = "c"  # type: ignore[misc]


class TestDigest:
    HEADER = (
        'Digest username="bob", realm="test", nonce="abc", uri="/x", '
        'response="r", qop=auth, nc=00000001, cnonce="xyz"'
    )

    def test_all_fields(self) -> None:
        creds = parse_authorization(self.HEADER)
        assert creds == DigestCredentials(
            username="bob",
            realm="test",
            nonce="abc",
            uri="/x",
            response="r",
            opaque=None,
            qop="auth",
            nc="00000001",
            cnonce="xyz",
        )
        assert creds.scheme == "Digest"

    def test_order_and_whitespace_independent(self) -> None:
        creds = parse_authorization(
            "Digest   cnonce='c1' ,nonce=n1,\n  opaque=\"o p\",username='al ice'"
        )
        assert isinstance(creds, DigestCredentials)
        assert creds.cnonce == "c1"
        assert creds.nonce == "n1"
        assert creds.opaque == "o p"
        assert creds.username == "al ice"
        assert creds.realm is None

    def test_ignores_unknown_parameters(self) -> None:
        creds = parse_authorization('Digest algorithm=MD5, xnonce="bad", realm="r"')
        assert creds == DigestCredentials(realm="r")

    def test_quoted_value_may_contain_commas(self) -> None:
        creds = parse_authorization('Digest uri="/a?b=1,2", nc=1')
        assert isinstance(creds, DigestCredentials)
        assert creds.uri == "/a?b=1,2"
        assert creds.nc == "1"

    def test_empty_attributes(self) -> None:
        assert parse_authorization("Digest") == DigestCredentials()


class TestOtherSchemes:
    @pytest.mark.parametrize("value", [None, "", "Bearer token", "basic dXNlcjpwYXNz", "Negotiate"])
    def test_no_credentials(self, value: str | None) -> None:
        assert parse_authorization(value) is None
