"""Shared type aliases."""

from __future__ import annotations

from typing import Union

# Recursive shape of decoded query data: scalar, list or nested mapping.
QueryScalar = Union[str, int, float, bool, None]
QueryValue = Union[QueryScalar, "list[QueryValue]", "dict[str, QueryValue]"]
QueryData = dict[str, QueryValue]
