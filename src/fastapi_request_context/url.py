"""URL — mutable absolute URL value with lossless serialization."""

from __future__ import annotations

import copy
import re
from collections.abc import Collection, Iterable, Mapping
from typing import Any
from urllib.parse import quote, unquote

from fastapi_request_context._types import QueryData, QueryValue
from fastapi_request_context.exceptions import InvalidHostname, InvalidPort, InvalidURL
from fastapi_request_context.query import build_query, filter_query, parse_query

_URL_RE = re.compile(
    r"(?P<scheme>[^:/?#]+)://"
    r"(?P<authority>[^/?#]*)"
    r"(?P<path>[^?#]*)"
    r"(?:\?(?P<query>[^#]*))?"
    r"(?:#(?P<fragment>.*))?"
)
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_LABEL_RE = re.compile(r"[A-Za-z0-9](?:[A-Za-z0-9\-]{0,61}[A-Za-z0-9])?")
_FORBIDDEN_RE = re.compile(r"[\x00-\x20\x7f]")

_DEFAULT_PORTS = (80, 443)
# RFC 3986 pchar minus unreserved, which quote() never escapes
_SEGMENT_SAFE = "!$&'()*+,;=:@"


def is_valid_hostname(hostname: str) -> bool:
    """Check DNS hostname syntax: dot-separated labels, no trailing dot."""
    if not hostname or len(hostname) > 253:
        return False
    return all(_LABEL_RE.fullmatch(label) for label in hostname.split("."))


class URL:
    """Absolute URL split into typed components.

    Mutators validate before committing and return ``self`` so calls chain.
    A failing mutator raises and leaves the previous value in place.
    """

    def __init__(self, url: str) -> None:
        self._reset()
        self._parse(url)

    @classmethod
    def build(
        cls,
        scheme: str,
        hostname: str,
        *,
        user: str | None = None,
        password: str | None = None,
        port: int | None = None,
        path: str | Iterable[str] = (),
        query: Mapping[str, QueryValue] | None = None,
        fragment: str | None = None,
    ) -> URL:
        """Construct a URL from components instead of parsing a string."""
        url = cls.__new__(cls)
        url._reset()
        url.set_scheme(scheme).set_hostname(hostname).set_port(port)
        if user is not None:
            url.set_user(user)
        if password is not None:
            url.set_pass(password)
        if isinstance(path, str):
            url.set_path(path)
        else:
            url.set_path_segments(path)
        if query:
            url.set_query_data(query)
        if fragment is not None:
            url.set_fragment(fragment)
        return url

    def _reset(self) -> None:
        self._scheme: str = ""
        self._user: str | None = None
        self._pass: str | None = None
        self._hostname: str = ""
        self._port: int | None = None
        self._path_segments: list[str] = []
        self._query_data: QueryData = {}
        self._fragment: str | None = None

    def _parse(self, url: str) -> None:
        if not url or not url.isascii() or _FORBIDDEN_RE.search(url):
            raise InvalidURL(f"Invalid URL: {url}")
        match = _URL_RE.fullmatch(url)
        if match is None or not _SCHEME_RE.fullmatch(match["scheme"]):
            raise InvalidURL(f"Invalid URL: {url}")

        userinfo, _, hostport = match["authority"].rpartition("@")
        hostname, port = _split_hostport(hostport)
        if not hostname:
            raise InvalidURL(f"Invalid URL: {url}")

        self.set_scheme(match["scheme"])
        if userinfo:
            user, sep, password = userinfo.partition(":")
            self.set_user(user)
            if sep:
                self.set_pass(password)
        self.set_hostname(hostname)
        if port is not None:
            self.set_port(port)
        self.set_path(match["path"])
        if match["query"] is not None:
            self.set_query(match["query"])
        if match["fragment"] is not None:
            self.set_fragment(match["fragment"])

    def __str__(self) -> str:
        return self.as_string()

    def __repr__(self) -> str:
        return f"URL({self.as_string()!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, URL):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    __hash__ = None  # type: ignore[assignment]

    # -- mutators ---------------------------------------------------------

    def set_scheme(self, scheme: str) -> URL:
        if not _SCHEME_RE.fullmatch(scheme):
            raise InvalidURL(f"Invalid URL Scheme: {scheme}")
        self._scheme = scheme
        return self

    def set_user(self, user: str) -> URL:
        self._user = user
        return self

    def set_pass(self, password: str) -> URL:
        self._pass = password
        return self

    def set_hostname(self, hostname: str) -> URL:
        if not is_valid_hostname(hostname):
            raise InvalidHostname(hostname)
        self._hostname = hostname
        return self

    def set_port(self, port: int | None) -> URL:
        """Set the port; ``None`` falls back to the scheme default."""
        if port is not None and not 1 <= port <= 65535:
            raise InvalidPort(port)
        self._port = port
        return self

    def set_path(self, path: str) -> URL:
        """Split an encoded path into un-escaped segments."""
        path = path.strip("/")
        if not path:
            return self.set_path_segments([])
        # undecodable bytes survive as surrogates so serialization stays lossless
        return self.set_path_segments(
            unquote(segment, errors="surrogateescape") for segment in path.split("/")
        )

    def set_path_segments(self, segments: Iterable[str]) -> URL:
        self._path_segments = [str(segment) for segment in segments]
        return self

    def set_query(self, query: str, only: Collection[str] = ()) -> URL:
        return self.set_query_data(parse_query(query.lstrip("?")), only)

    def set_query_data(
        self, data: Mapping[str, QueryValue], only: Collection[str] = ()
    ) -> URL:
        self._query_data = filter_query(data, only) if only else dict(data)
        return self

    def add_query(self, key: str, value: QueryValue = None) -> URL:
        self._query_data[key] = value
        return self

    def add_queries(self, queries: Mapping[str, QueryValue]) -> URL:
        for key, value in queries.items():
            self.add_query(key, value)
        return self

    def remove_query_data(self, key: str) -> URL:
        self._query_data.pop(key, None)
        return self

    def set_fragment(self, fragment: str) -> URL:
        self._fragment = fragment.lstrip("#") or None
        return self

    # -- readers ----------------------------------------------------------

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def user(self) -> str | None:
        return self._user

    @property
    def password(self) -> str | None:
        return self._pass

    @property
    def hostname(self) -> str:
        return self._hostname

    @property
    def port(self) -> int | None:
        return self._port

    @property
    def host(self) -> str:
        """Hostname plus ``:port`` unless the port is absent, 80 or 443."""
        if self._port is None or self._port in _DEFAULT_PORTS:
            return self._hostname
        return f"{self._hostname}:{self._port}"

    @property
    def origin(self) -> str:
        return f"{self._scheme}://{self.host}"

    @property
    def path_segments(self) -> list[str]:
        return list(self._path_segments)

    def path_segment(self, index: int) -> str | None:
        try:
            return self._path_segments[index]
        except IndexError:
            return None

    @property
    def path(self) -> str:
        return "/" + "/".join(
            quote(segment, safe=_SEGMENT_SAFE, errors="surrogateescape")
            for segment in self._path_segments
        )

    @property
    def query(self) -> str | None:
        return self.get_query()

    def get_query(self, allowed_keys: Collection[str] = ()) -> str | None:
        """Form-encoded query, or ``None`` when there is nothing to encode."""
        return build_query(self.get_query_data(allowed_keys)) or None

    def get_query_data(self, allowed_keys: Collection[str] = ()) -> QueryData:
        if allowed_keys:
            return filter_query(self._query_data, allowed_keys)
        return dict(self._query_data)

    @property
    def fragment(self) -> str | None:
        return self._fragment

    def base_url(self, path: str = "/") -> str:
        return self.origin + "/" + path.strip("/")

    def as_string(self) -> str:
        url = f"{self._scheme}://"
        if self._user:
            url += self._user
            if self._pass:
                url += f":{self._pass}"
            url += "@"
        url += self.host + self.path
        query = self.query
        if query:
            url += f"?{query}"
        if self._fragment:
            url += f"#{self._fragment}"
        return url

    def as_dict(self) -> dict[str, Any]:
        return {
            "scheme": self._scheme,
            "user": self._user,
            "pass": self._pass,
            "hostname": self._hostname,
            "port": self._port,
            "path": self.path_segments,
            "query": self.get_query_data(),
            "fragment": self._fragment,
        }

    def copy(self) -> URL:
        return copy.deepcopy(self)


def _split_hostport(hostport: str) -> tuple[str, int | None]:
    if hostport.startswith("["):
        # IP literals are not domain names
        raise InvalidHostname(hostport)
    hostname, sep, port = hostport.rpartition(":")
    if not sep:
        return hostport, None
    if not port:
        return hostname, None
    if not port.isdigit():
        raise InvalidURL(f"Invalid URL Port: {port}")
    if len(port) > 5:
        raise InvalidPort(port)
    return hostname, int(port)
