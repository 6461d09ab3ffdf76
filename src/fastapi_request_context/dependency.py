"""context_dependency() — factory producing FastAPI-compatible dependency callables."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Collection

from fastapi import HTTPException
from starlette.requests import Request

from fastapi_request_context.context import RequestContext
from fastapi_request_context.exceptions import RequestRejected
from fastapi_request_context.options import ContextOptions

logger = logging.getLogger(__name__)


def context_dependency(
    *,
    allowed_hosts: str | Collection[str] | None = None,
    options: ContextOptions | None = None,
) -> Callable[..., Awaitable[RequestContext]]:
    """Return a FastAPI-compatible dependency that builds a RequestContext.

    Pass ``allowed_hosts`` when the server in front of the application does
    not route by Host header itself. Hard request violations (untrusted host,
    unparsable request URL) become ``HTTPException`` responses.
    """
    if isinstance(allowed_hosts, str):
        allowed_hosts = (allowed_hosts,)
    hosts = frozenset(allowed_hosts) if allowed_hosts is not None else None
    resolved_options = options or ContextOptions()

    async def dependency(request: Request) -> RequestContext:
        ctx = RequestContext(request=request, options=resolved_options)
        try:
            if hosts is not None:
                ctx.validate_host(hosts)
            # resolve eagerly so a malformed request URL is rejected up front
            _ = ctx.url
        except RequestRejected as exc:
            logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.detail)
            raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
        return ctx

    return dependency
