"""ContextOptions — header names a RequestContext reads its derived facts from."""

from __future__ import annotations

from dataclasses import dataclass

PROXY_HEADERS = (
    "X-Forwarded-For",
    "Client-IP",
    "X-Client-IP",
    "X-Cluster-Client-IP",
)


@dataclass(frozen=True)
class ContextOptions:
    """Immutable per-application settings shared by every RequestContext."""

    proxy_headers: tuple[str, ...] = PROXY_HEADERS
    request_id_header: str = "X-Request-ID"
    ajax_header: str = "X-Requested-With"
