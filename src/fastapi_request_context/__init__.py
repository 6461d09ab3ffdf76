"""FastAPI Request Context - structured, lazily derived views of an HTTP request."""

from fastapi_request_context.auth import (
    AuthCredentials,
    BasicCredentials,
    DigestCredentials,
    parse_authorization,
)
from fastapi_request_context.context import RequestContext
from fastapi_request_context.dependency import context_dependency
from fastapi_request_context.exceptions import (
    InvalidHostname,
    InvalidPort,
    InvalidURL,
    RequestContextError,
    RequestRejected,
    UntrustedHost,
)
from fastapi_request_context.negotiation import ContentNegotiator, NegotiationAxis
from fastapi_request_context.options import ContextOptions
from fastapi_request_context.quality import parse_quality_values, preference_order
from fastapi_request_context.query import build_query, filter_query, lookup, parse_query
from fastapi_request_context.url import URL, is_valid_hostname

__all__ = [
    "URL",
    "AuthCredentials",
    "BasicCredentials",
    "ContentNegotiator",
    "ContextOptions",
    "DigestCredentials",
    "InvalidHostname",
    "InvalidPort",
    "InvalidURL",
    "NegotiationAxis",
    "RequestContext",
    "RequestContextError",
    "RequestRejected",
    "UntrustedHost",
    "build_query",
    "context_dependency",
    "filter_query",
    "is_valid_hostname",
    "lookup",
    "parse_authorization",
    "parse_query",
    "parse_quality_values",
    "preference_order",
]
