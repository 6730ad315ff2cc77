"""Per-request dispatch pipeline (source of truth).

``dispatch(decoder, handler, request, *, writer=write_response)`` runs one
request through a strictly linear sequence:

1. ``decoder.decode(request.raw_input())``.
2. ``Err`` → ``aggregate_errors``: a 400 response, the handler is skipped.
3. ``Ok`` → ``merge_decoded`` → ``handler(validated)``. The handler may be a
   plain function or a coroutine function; its outcome must be ``Ok(HttpResponse)``
   (success), ``Err(HttpResponse)`` (business failure) or a bare
   ``HttpResponse`` (treated as success). Anything else raises ``TypeError``.
4. Whichever response came out of 2 or 3 is folded into a single value and
   passed to ``writer`` exactly once. ``dispatch`` returns the writer's result.

Exceptions raised by the handler are not part of the contract and propagate
to the server unchanged. No timeout, retry or cancellation logic lives here.
"""

from __future__ import annotations

import inspect
import logging
from functools import partial
from typing import Any, Callable

from typedroute.core.decoder import Decoder
from typedroute.core.request import UnvalidatedRequest, ValidatedRequest, merge_decoded
from typedroute.core.response import HttpResponse, aggregate_errors, write_response
from typedroute.core.result import Err, Ok, Result

__all__ = ["dispatch", "invoke_handler"]

logger = logging.getLogger("typedroute.pipeline")


async def dispatch(
    decoder: Decoder,
    handler: Callable[[ValidatedRequest], Any],
    request: UnvalidatedRequest,
    *,
    writer: Callable[[HttpResponse], Any] = write_response,
) -> Any:
    decoded = decoder.decode(request.raw_input())
    if not decoded.is_ok():
        logger.debug(
            "Rejected %s %s: %d decode error(s)",
            request.method,
            request.url.path,
            len(decoded.error),
        )
    staged = decoded.bimap(aggregate_errors, partial(merge_decoded, request))
    if staged.is_ok():
        outcome = await invoke_handler(handler, staged.value)
    else:
        outcome = staged
    response = outcome.fold(_identity, _identity)
    logger.debug("Writing %s for %s %s", response.status, request.method, request.url.path)
    return writer(response)


async def invoke_handler(
    handler: Callable[[ValidatedRequest], Any], request: ValidatedRequest
) -> Result[HttpResponse, HttpResponse]:
    """Run ``handler`` and normalise its outcome into ``Ok``/``Err``."""
    outcome = handler(request)
    if inspect.isawaitable(outcome):
        outcome = await outcome
    if isinstance(outcome, HttpResponse):
        return Ok(outcome)
    if isinstance(outcome, (Ok, Err)):
        payload = outcome.value if isinstance(outcome, Ok) else outcome.error
        if isinstance(payload, HttpResponse):
            return outcome
    raise TypeError(
        f"Handler {getattr(handler, '__name__', handler)!r} must resolve to "
        f"Ok(HttpResponse), Err(HttpResponse) or HttpResponse, got {outcome!r}"
    )


def _identity(response: HttpResponse) -> HttpResponse:
    return response
