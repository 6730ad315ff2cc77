"""Route contracts: HTTP method plus request decoder."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from typedroute.core.decoder import Decoder

__all__ = ["Contract", "HttpMethod"]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"


@dataclass(frozen=True)
class Contract:
    """Immutable pairing of an HTTP method and the decoder its requests must pass."""

    method: HttpMethod
    decoder: Decoder

    def __init__(self, method: Union[HttpMethod, str], decoder: Decoder) -> None:
        if not isinstance(decoder, Decoder):
            raise TypeError(f"Contract decoder must be a Decoder, got {type(decoder).__name__}")
        object.__setattr__(self, "method", _coerce_method(method))
        object.__setattr__(self, "decoder", decoder)

    @classmethod
    def get(cls, decoder: Decoder) -> "Contract":
        return cls(HttpMethod.GET, decoder)

    @classmethod
    def post(cls, decoder: Decoder) -> "Contract":
        return cls(HttpMethod.POST, decoder)

    @classmethod
    def put(cls, decoder: Decoder) -> "Contract":
        return cls(HttpMethod.PUT, decoder)


def _coerce_method(method: Union[HttpMethod, str]) -> HttpMethod:
    if isinstance(method, HttpMethod):
        return method
    if isinstance(method, str):
        try:
            return HttpMethod(method.strip().upper())
        except ValueError:
            pass
    allowed = ", ".join(m.value for m in HttpMethod)
    raise ValueError(f"Unsupported HTTP method {method!r} (expected one of {allowed})")
