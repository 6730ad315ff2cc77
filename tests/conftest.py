"""Shared fixtures: Starlette requests built straight from ASGI scopes."""

from __future__ import annotations

import pytest
from starlette.requests import Request

from typedroute.core.request import UnvalidatedRequest


def _build_request(method="GET", path="/", *, path_params=None, headers=None, body=b""):
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "path_params": dict(path_params or {}),
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    }

    async def receive():
        return {"type": "http.request", "body": body, "more_body": False}

    return Request(scope, receive)


@pytest.fixture
def make_request():
    return _build_request


@pytest.fixture
def make_unvalidated():
    def factory(method="GET", path="/", *, params=None, body=None, headers=None):
        request = _build_request(method, path, path_params=params, headers=headers)
        return UnvalidatedRequest(request, dict(params or {}), {} if body is None else body)

    return factory
