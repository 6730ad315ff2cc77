"""Decoder capability built on pydantic (source of truth).

Contract
--------
``Decoder(schema, *, name=None)`` wraps any type pydantic can validate
(``BaseModel`` subclasses, ``TypedDict``, ``Annotated`` types, builtins) in a
``TypeAdapter``. ``decode(value)`` returns:

- ``Ok(typed_value)`` when validation succeeds;
- ``Err([DecodeError, ...])`` otherwise, one entry per violated rule in the
  order pydantic traverses the schema. Every failing field is reported, not
  only the first one.

``decode`` never raises. A ``ValidationError`` is translated field by field;
any other exception escaping the schema (a buggy custom validator, for
instance) is logged with its traceback and turned into a single
``decoder_error`` entry, so a request can never slip past validation because
the schema itself blew up.

Helpers
-------
- ``DecodedRequest[P, B]``: generic ``{params, body}`` model.
- ``request_decoder(params=Any, body=Any)``: structural decoder for a request.
- ``IntegerFromString``: integer decoded exactly from a numeric string, the
  shape path parameters arrive in. Non-string input is rejected.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Generic, List, Optional, Tuple, TypeVar

from pydantic import BaseModel, BeforeValidator, TypeAdapter, ValidationError

from typedroute.core.result import Err, Ok, Result

__all__ = [
    "DecodeError",
    "DecodedRequest",
    "Decoder",
    "IntegerFromString",
    "request_decoder",
]

logger = logging.getLogger("typedroute.decoder")

P = TypeVar("P")
B = TypeVar("B")


@dataclass(frozen=True)
class DecodeError:
    """One violated field-level rule."""

    loc: Tuple[Any, ...]
    msg: str
    type: str = "value_error"

    @property
    def message(self) -> str:
        """Human-readable message prefixed with the dotted field location."""
        if not self.loc:
            return self.msg
        path = ".".join(str(part) for part in self.loc)
        return f"{path}: {self.msg}"

    def __str__(self) -> str:
        return self.message


class DecodedRequest(BaseModel, Generic[P, B]):
    """Validated ``params``/``body`` pair produced by a request decoder."""

    params: P
    body: B


class Decoder:
    """Pure, total validator turning untyped input into a typed value."""

    __slots__ = ("schema", "name", "_adapter")

    def __init__(self, schema: Any, *, name: Optional[str] = None) -> None:
        self.schema = schema
        self.name = name or getattr(schema, "__name__", None) or repr(schema)
        self._adapter = TypeAdapter(schema)

    def __repr__(self) -> str:
        return f"Decoder({self.name})"

    def decode(self, value: Any) -> Result[Any, List[DecodeError]]:
        try:
            return Ok(self._adapter.validate_python(value))
        except ValidationError as exc:
            return Err(
                [
                    DecodeError(loc=tuple(err["loc"]), msg=err["msg"], type=err["type"])
                    for err in exc.errors()
                ]
            )
        except Exception as exc:
            logger.exception("Decoder %s failed unexpectedly", self.name)
            return Err(
                [DecodeError(loc=(), msg=f"Decoder {self.name} failed: {exc}", type="decoder_error")]
            )


def request_decoder(params: Any = Any, body: Any = Any, *, name: Optional[str] = None) -> Decoder:
    """Build the structural ``{params, body}`` decoder for a route."""
    return Decoder(DecodedRequest[params, body], name=name)


# Largest decimal exponent accepted for forms like "1e3"; matches the
# interpreter's default int/str digit limit.
_MAX_EXPONENT = 4300


def _integer_from_string(value: Any) -> int:
    if not isinstance(value, str):
        raise ValueError(f"expected a numeric string, got {type(value).__name__}")
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    # exponent and decimal forms ("1e3", "10.0"), kept exact
    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"{value!r} is not a number") from None
    if not number.is_finite() or number != number.to_integral_value():
        raise ValueError(f"{value!r} is not an integer")
    if number.adjusted() >= _MAX_EXPONENT:
        raise ValueError(f"{value!r} is too large")
    return int(number)


IntegerFromString = Annotated[int, BeforeValidator(_integer_from_string)]
"""Integer decoded from its string form, the shape path parameters arrive in.

Only ``str`` input is accepted: ``"5"``, ``" 7 "`` and ``"1e3"`` decode to
``5``, ``7`` and ``1000``. Conversion is exact at any magnitude. Booleans,
floats and already-decoded ints are rejected; build models programmatically
with the string form (``IdParams(id="9")``).
"""
