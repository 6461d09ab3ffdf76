"""RequestContext — per-request view over transport-supplied metadata."""

from __future__ import annotations

import hashlib
import logging
import uuid
from collections.abc import Collection, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any
from urllib.parse import quote

from starlette.requests import Request

from fastapi_request_context._types import QueryData, QueryValue
from fastapi_request_context.auth import (
    AuthCredentials,
    BasicCredentials,
    DigestCredentials,
    parse_authorization,
)
from fastapi_request_context.exceptions import InvalidURL, UntrustedHost
from fastapi_request_context.negotiation import ContentNegotiator, NegotiationAxis
from fastapi_request_context.options import ContextOptions
from fastapi_request_context.query import lookup, parse_query
from fastapi_request_context.url import URL

logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """Per-request state container with lazily derived request facts.

    Every derived attribute is computed on first access and cached on the
    instance. A context belongs to one request and is never shared.
    """

    request: Request
    user: Any | None = None
    state: dict[str, Any] = field(default_factory=dict)
    options: ContextOptions = field(default_factory=ContextOptions)
    _parsed_body: QueryData | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def validate_host(self, allowed_hosts: str | Collection[str]) -> None:
        """Reject the request unless its Host header is exactly allow-listed.

        A bare string is a single allowed host, never a substring pool.
        """
        if isinstance(allowed_hosts, str):
            allowed_hosts = (allowed_hosts,)
        hosts = frozenset(allowed_hosts)
        host = self.request.headers.get("host")
        if host is None or host not in hosts:
            logger.warning("Rejected request for untrusted host %r", host)
            raise UntrustedHost(host)

    # -- transport ---------------------------------------------------------

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def protocol(self) -> str:
        return f"HTTP/{self.request.scope.get('http_version', '1.1')}"

    @property
    def ip(self) -> str | None:
        """Address of the connecting peer."""
        client = self.request.client
        return client.host if client else None

    @property
    def content_type(self) -> str | None:
        return self.request.headers.get("content-type")

    @property
    def user_agent(self) -> str | None:
        return self.request.headers.get("user-agent") or None

    @property
    def is_post(self) -> bool:
        return self.method == "POST"

    @property
    def is_json(self) -> bool:
        return self._media_type == "application/json"

    @property
    def is_form(self) -> bool:
        return self._media_type == "application/x-www-form-urlencoded"

    @property
    def _media_type(self) -> str | None:
        if not self.content_type:
            return None
        return self.content_type.split(";", 1)[0].strip().lower()

    # -- inputs ------------------------------------------------------------

    @cached_property
    def query_data(self) -> QueryData:
        """Query string decoded with bracket keys nested."""
        raw = self.request.scope.get("query_string", b"").decode("latin-1")
        return parse_query(raw)

    def query_param(self, name: str) -> QueryValue:
        """Query value by bracketed path, e.g. ``filter[name]``, or None."""
        return lookup(self.query_data, name)

    @property
    def cookies(self) -> dict[str, str]:
        return self.request.cookies

    def cookie(self, name: str) -> str | None:
        return self.request.cookies.get(name)

    @property
    def etag(self) -> str | None:
        return self.request.headers.get("etag")

    async def parsed_body(self) -> QueryData:
        """Form-encoded request body, decoded like the query string.

        Bodies of any other content type give an empty mapping.
        """
        if self._parsed_body is None:
            if self.is_form:
                body = await self.request.body()
                self._parsed_body = parse_query(body.decode("latin-1"))
            else:
                self._parsed_body = {}
        return self._parsed_body

    async def body_param(self, name: str) -> QueryValue:
        return lookup(await self.parsed_body(), name)

    async def json(self) -> Any | None:
        """Request body decoded as JSON, or None when it is not valid JSON."""
        try:
            return await self.request.json()
        except ValueError as exc:
            logger.debug("Ignoring undecodable JSON body: %s", exc)
            return None

    # -- URL ---------------------------------------------------------------

    @cached_property
    def is_secure(self) -> bool:
        scope = self.request.scope
        extensions = scope.get("extensions") or {}
        return scope.get("scheme") in ("https", "wss") or "tls" in extensions

    @cached_property
    def url(self) -> URL:
        """Effective request URL rebuilt from scheme, Host header and path."""
        scheme = "https" if self.is_secure else "http"
        return URL(f"{scheme}://{self._authority}{self._request_uri}")

    @property
    def host(self) -> str:
        return self.url.hostname

    @cached_property
    def port(self) -> int:
        if self.url.port is not None:
            return self.url.port
        server = self.request.scope.get("server")
        if server and server[1] is not None:
            return int(server[1])
        return 443 if self.is_secure else 80

    @cached_property
    def referer(self) -> URL | None:
        value = self.request.headers.get("referer")
        if not value:
            return None
        try:
            return URL(value)
        except InvalidURL as exc:
            logger.debug("Ignoring invalid Referer %r: %s", value, exc.detail)
            return None

    def https_url(self) -> str | None:
        """The request URL with an https scheme, or None when already secure."""
        if self.is_secure:
            return None
        return self.url.copy().set_scheme("https").as_string()

    @property
    def _authority(self) -> str:
        host = self.request.headers.get("host")
        if host:
            return host
        server = self.request.scope.get("server")
        if not server:
            return ""
        hostname, port = server
        return hostname if port is None else f"{hostname}:{port}"

    @property
    def _request_uri(self) -> str:
        scope = self.request.scope
        raw_path = scope.get("raw_path")
        if raw_path:
            # some servers leave the query string on raw_path
            path = raw_path.decode("latin-1").split("?", 1)[0]
        else:
            path = quote(scope.get("path") or "/")
        query = scope.get("query_string", b"").decode("latin-1")
        return f"{path}?{query}" if query else path

    # -- proxies and correlation ---------------------------------------------

    @cached_property
    def is_ajax(self) -> bool:
        received = self.request.headers.get(self.options.ajax_header)
        return bool(received) and received.lower() == "xmlhttprequest"

    @cached_property
    def proxied_ip(self) -> str | None:
        """First non-empty proxy client-IP header. The value is not validated."""
        for header in self.options.proxy_headers:
            value = self.request.headers.get(header)
            if value:
                return value
        return None

    @cached_property
    def request_id(self) -> str:
        value = self.request.headers.get(self.options.request_id_header)
        if value:
            return value
        seed = f"{self.ip or ''}{uuid.uuid4().hex}"
        generated = hashlib.md5(seed.encode(), usedforsecurity=False).hexdigest()
        logger.debug("Generated request id %s", generated)
        return generated

    # -- authorization ---------------------------------------------------------

    @cached_property
    def auth(self) -> AuthCredentials:
        return parse_authorization(self.request.headers.get("authorization"))

    @property
    def auth_type(self) -> str | None:
        """``"Basic"``, ``"Digest"`` or None."""
        return self.auth.scheme if self.auth is not None else None

    @property
    def basic_auth(self) -> BasicCredentials | None:
        return self.auth if isinstance(self.auth, BasicCredentials) else None

    @property
    def digest_auth(self) -> DigestCredentials | None:
        return self.auth if isinstance(self.auth, DigestCredentials) else None

    # -- negotiation -------------------------------------------------------------

    @cached_property
    def negotiator(self) -> ContentNegotiator:
        return ContentNegotiator(self.request.headers)

    @property
    def accepts(self) -> list[str]:
        return self.negotiator.preferences(NegotiationAxis.ACCEPT)

    @property
    def charsets(self) -> list[str]:
        return self.negotiator.preferences(NegotiationAxis.CHARSET)

    @property
    def encodings(self) -> list[str]:
        return self.negotiator.preferences(NegotiationAxis.ENCODING)

    @property
    def languages(self) -> list[str]:
        return self.negotiator.preferences(NegotiationAxis.LANGUAGE)

    def negotiate(self, axis: NegotiationAxis | str, candidates: Sequence[str]) -> str:
        return self.negotiator.negotiate(axis, candidates)

    def negotiate_accept(self, candidates: Sequence[str]) -> str:
        return self.negotiate(NegotiationAxis.ACCEPT, candidates)

    def negotiate_charset(self, candidates: Sequence[str]) -> str:
        return self.negotiate(NegotiationAxis.CHARSET, candidates)

    def negotiate_encoding(self, candidates: Sequence[str]) -> str:
        return self.negotiate(NegotiationAxis.ENCODING, candidates)

    def negotiate_language(self, candidates: Sequence[str]) -> str:
        return self.negotiate(NegotiationAxis.LANGUAGE, candidates)
