"""Request views handed to decoders and handlers (source of truth).

``UnvalidatedRequest``
    Thin view over a Starlette ``Request``. It carries ``params`` (path
    parameters as received) and ``body`` (parsed JSON, ``{}`` when the request
    has no JSON payload). Any other attribute is looked up on the wrapped
    transport request, so ``headers``, ``method``, ``url``, ``state``,
    ``client`` ... behave exactly as on Starlette's object.

``ValidatedRequest``
    Same view with ``params``/``body`` holding decoded values. Built by
    ``merge_decoded`` which never mutates its inputs: the original view keeps
    its raw values and both views share the one transport request.

``read_request``
    Builds the unvalidated view from a Starlette request. Only bodies whose
    content type mentions ``json`` are parsed; malformed JSON raises
    ``MalformedBodyError`` before any decoding takes place.
"""

from __future__ import annotations

from typing import Any, Dict, Generic, TypeVar

from pydantic_core import from_json
from starlette.requests import Request

__all__ = [
    "MalformedBodyError",
    "UnvalidatedRequest",
    "ValidatedRequest",
    "merge_decoded",
    "read_request",
]

P = TypeVar("P")
B = TypeVar("B")


class MalformedBodyError(ValueError):
    """Raised when a JSON request body cannot be parsed."""


class UnvalidatedRequest:
    """Transport request plus raw ``params``/``body``."""

    __slots__ = ("request", "params", "body")

    def __init__(self, request: Request, params: Any, body: Any) -> None:
        self.request = request
        self.params = params
        self.body = body

    def __getattr__(self, name: str) -> Any:
        if name in UnvalidatedRequest.__slots__:
            raise AttributeError(name)
        return getattr(self.request, name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(params={self.params!r}, body={self.body!r})"

    def raw_input(self) -> Dict[str, Any]:
        """Return the value a request decoder validates."""
        return {"params": self.params, "body": self.body}


class ValidatedRequest(UnvalidatedRequest, Generic[P, B]):
    """Transport request plus decoded ``params``/``body``."""

    __slots__ = ()

    params: P
    body: B


def merge_decoded(request: UnvalidatedRequest, decoded: Any) -> ValidatedRequest:
    """Overlay decoded ``params``/``body`` on the transport request."""
    return ValidatedRequest(request.request, decoded.params, decoded.body)


async def read_request(request: Request) -> UnvalidatedRequest:
    params = dict(request.path_params)
    content_type = request.headers.get("content-type", "")
    body: Any = {}
    if "json" in content_type.lower():
        raw = await request.body()
        if raw.strip():
            try:
                body = from_json(raw)
            except ValueError as exc:
                raise MalformedBodyError(str(exc)) from exc
    return UnvalidatedRequest(request, params, body)
