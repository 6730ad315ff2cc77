"""Route registration on an untyped Starlette router (source of truth).

``serve(router, contract, *, writer=write_response)`` returns
``register(path, handler)``. Calling it adds one Starlette route for
``contract.method`` + ``path`` whose endpoint:

1. reads the transport request into an ``UnvalidatedRequest``
   (``read_request``); a malformed JSON body is answered with a plain-text 400
   and the pipeline does not run;
2. awaits ``dispatch(contract.decoder, handler, request, writer=writer)`` and
   returns the written response.

``router`` is anything exposing Starlette's ``add_route(path, endpoint,
methods=..., name=...)`` (``Router``, ``Starlette``). It is not otherwise
touched, and the contract is used as given.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from starlette.requests import Request

from typedroute.core.contract import Contract
from typedroute.core.pipeline import dispatch
from typedroute.core.request import MalformedBodyError, ValidatedRequest, read_request
from typedroute.core.response import VALIDATION_ERROR_STATUS, HttpResponse, write_response

__all__ = ["serve"]

logger = logging.getLogger("typedroute.registrar")

Handler = Callable[[ValidatedRequest], Any]


def serve(
    router: Any,
    contract: Contract,
    *,
    writer: Callable[[HttpResponse], Any] = write_response,
) -> Callable[..., None]:
    """Bind ``contract`` to ``router``; returns ``register(path, handler, name=None)``."""

    def register(path: str, handler: Handler, *, name: Optional[str] = None) -> None:
        async def endpoint(request: Request) -> Any:
            try:
                unvalidated = await read_request(request)
            except MalformedBodyError as exc:
                logger.debug("Malformed JSON body on %s %s: %s", request.method, path, exc)
                return writer(
                    HttpResponse(status=VALIDATION_ERROR_STATUS, body=f"Malformed JSON body: {exc}")
                )
            return await dispatch(contract.decoder, handler, unvalidated, writer=writer)

        endpoint.__name__ = getattr(handler, "__name__", "endpoint")
        router.add_route(path, endpoint, methods=[contract.method.value], name=name)
        logger.debug("Registered %s %s -> %s", contract.method.value, path, contract.decoder)

    return register
