"""Shared pytest fixtures for fastapi-request-context tests."""

from __future__ import annotations

from typing import Any

import pytest
from starlette.requests import Request

from fastapi_request_context.context import RequestContext


@pytest.fixture
def make_request() -> Any:
    """Factory for creating Starlette Request objects from an ASGI scope."""

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: dict[str, str] | None = None,
        query_string: str = "",
        scheme: str = "http",
        client: tuple[str, int] | None = ("203.0.113.7", 51000),
        server: tuple[str, int | None] | None = ("testserver", 80),
        extensions: dict[str, Any] | None = None,
        body: bytes = b"",
    ) -> Request:
        scope: dict[str, Any] = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": scheme,
            "path": path,
            "raw_path": path.encode(),
            "query_string": query_string.encode(),
            "headers": [
                (k.lower().encode(), v.encode()) for k, v in (headers or {}).items()
            ],
            "root_path": "",
            "client": client,
            "server": server,
        }
        if extensions is not None:
            scope["extensions"] = extensions

        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make


@pytest.fixture
def make_context(make_request: Any) -> Any:
    """Factory for RequestContext instances wrapping a fresh request."""

    def _make(**kwargs: Any) -> RequestContext:
        return RequestContext(request=make_request(**kwargs))

    return _make
