"""Core runtime aggregator (source of truth).

Purpose: expose the request pipeline building blocks from a single module. No
extra logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not register plugins or
  instantiate routers.
- Public API mirrors underlying modules 1:1:
  * ``result`` → ``Ok``, ``Err``, ``Result``
  * ``decoder`` → ``Decoder``, ``DecodeError``, ``DecodedRequest``,
    ``request_decoder``, ``IntegerFromString``
  * ``response`` → ``HttpResponse``, ``aggregate_errors``, ``write_response``
  * ``request`` → ``UnvalidatedRequest``, ``ValidatedRequest``,
    ``merge_decoded``, ``read_request``, ``MalformedBodyError``
  * ``contract`` → ``Contract``, ``HttpMethod``
  * ``pipeline`` → ``dispatch``
  * ``registrar`` → ``serve``
  * ``router`` → ``TypedRouter`` (plugin-enabled)
"""

from .contract import Contract, HttpMethod
from .decoder import DecodedRequest, DecodeError, Decoder, IntegerFromString, request_decoder
from .pipeline import dispatch
from .registrar import serve
from .request import (
    MalformedBodyError,
    UnvalidatedRequest,
    ValidatedRequest,
    merge_decoded,
    read_request,
)
from .response import HttpResponse, aggregate_errors, write_response
from .result import Err, Ok, Result
from .router import TypedRouter

__all__ = [
    "Contract",
    "DecodeError",
    "DecodedRequest",
    "Decoder",
    "Err",
    "HttpMethod",
    "HttpResponse",
    "IntegerFromString",
    "MalformedBodyError",
    "Ok",
    "Result",
    "TypedRouter",
    "UnvalidatedRequest",
    "ValidatedRequest",
    "aggregate_errors",
    "dispatch",
    "merge_decoded",
    "read_request",
    "request_decoder",
    "serve",
    "write_response",
]
