"""Exception hierarchy for hard request-model violations."""

from __future__ import annotations


class RequestContextError(Exception):
    """Base for all request-context exceptions."""


class RequestRejected(RequestContextError):
    """Request-level violation carrying an HTTP status code and detail."""

    def __init__(self, detail: str, *, status_code: int = 400) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class InvalidURL(RequestRejected, ValueError):
    """Malformed absolute URL (400)."""

    def __init__(self, detail: str = "Invalid URL") -> None:
        super().__init__(detail, status_code=400)


class InvalidHostname(InvalidURL):
    """Hostname fails domain-name syntax (400)."""

    def __init__(self, hostname: str) -> None:
        super().__init__(f"Invalid URL Hostname: {hostname}")
        self.hostname = hostname


class InvalidPort(InvalidURL):
    """Port outside 1-65535 (400)."""

    def __init__(self, port: int | str) -> None:
        super().__init__(f"Invalid URL Port: {port}")
        self.port = port


class UntrustedHost(RequestRejected):
    """Host header is not in the allow-list (400)."""

    def __init__(self, host: str | None) -> None:
        super().__init__(f"Invalid Host: {host}", status_code=400)
        self.host = host
