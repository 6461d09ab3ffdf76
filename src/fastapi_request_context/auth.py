"""Authorization header decoding for the Basic and Digest schemes."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass
from typing import ClassVar, Literal, Union

_DIGEST_PARAM_RE = re.compile(
    r"(?<![\w-])(?P<name>username|realm|nonce|uri|response|opaque|qop|nc|cnonce)="
    r"""(?:(?P<quote>["'])(?P<quoted>.*?)(?P=quote)|(?P<bare>[^\s,]+))"""
)


@dataclass(frozen=True)
class BasicCredentials:
    """Decoded ``Basic`` credentials."""

    scheme: ClassVar[Literal["Basic"]] = "Basic"

    username: str | None = None
    password: str | None = None


@dataclass(frozen=True)
class DigestCredentials:
    """Decoded ``Digest`` credentials."""

    scheme: ClassVar[Literal["Digest"]] = "Digest"

    username: str | None = None
    realm: str | None = None
    nonce: str | None = None
    uri: str | None = None
    response: str | None = None
    opaque: str | None = None
    qop: str | None = None
    nc: str | None = None
    cnonce: str | None = None


AuthCredentials = Union[BasicCredentials, DigestCredentials, None]


def parse_authorization(value: str | None) -> AuthCredentials:
    """Decode an Authorization header value.

    Unknown schemes and absent headers give ``None``; malformed credentials
    of a known scheme give empty fields. Never raises.
    """
    if not value:
        return None
    scheme, _, attributes = value.partition(" ")
    if scheme == BasicCredentials.scheme:
        return parse_basic(attributes)
    if scheme == DigestCredentials.scheme:
        return parse_digest(attributes)
    return None


def parse_basic(attributes: str) -> BasicCredentials:
    try:
        decoded = base64.b64decode(attributes.strip(), validate=True).decode()
    except (binascii.Error, UnicodeDecodeError):
        return BasicCredentials()
    if not decoded:
        return BasicCredentials()
    username, sep, password = decoded.partition(":")
    return BasicCredentials(username=username, password=password if sep else None)


def parse_digest(attributes: str) -> DigestCredentials:
    values: dict[str, str] = {}
    for match in _DIGEST_PARAM_RE.finditer(attributes):
        quoted = match["quoted"]
        values[match["name"]] = quoted if quoted is not None else match["bare"]
    return DigestCredentials(**values)
