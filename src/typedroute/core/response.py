"""Structured responses, error aggregation and the response writer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from pydantic_core import to_json
from starlette.responses import Response

from typedroute.core.decoder import DecodeError

__all__ = ["HttpResponse", "aggregate_errors", "write_response"]

VALIDATION_ERROR_STATUS = 400


@dataclass(frozen=True)
class HttpResponse:
    """Status code plus optional body; ``str`` bodies are sent verbatim."""

    status: int
    body: Any = None


def aggregate_errors(errors: Iterable[DecodeError]) -> HttpResponse:
    """Collapse decode failures into one 400 response, one message per line."""
    messages = [error.message for error in errors]
    if not messages:
        raise ValueError("aggregate_errors() requires at least one decode error")
    return HttpResponse(status=VALIDATION_ERROR_STATUS, body="\n".join(messages))


def write_response(response: HttpResponse) -> Response:
    """Serialize ``response`` onto a transport-level Starlette response."""
    body = response.body
    if isinstance(body, str):
        return Response(content=body, status_code=response.status, media_type="text/plain")
    if body is None:
        return Response(status_code=response.status)
    return Response(
        content=to_json(body),
        status_code=response.status,
        media_type="application/json",
    )
