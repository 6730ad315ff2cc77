"""typedroute public API surface (source of truth).

Recreate the module with these rules:
- Public exports: ``serve``, ``TypedRouter``, ``Contract``, ``HttpMethod``,
  ``HttpResponse``, ``Ok``, ``Err``, ``Decoder``, ``request_decoder``,
  ``IntegerFromString``, ``ValidatedRequest``.
- Plugin registration: import built-in plugins (``logging``) for their side
  effect of calling ``TypedRouter.register_plugin(<class>)``. Imports are done
  lazily via ``import_module`` to avoid cycles.

Constraints
-----------
- Import must stay lightweight: no router instantiation or heavy work beyond
  plugin registration.
- Version string lives here as ``__version__`` and must remain available for
  packaging tools.
"""

from importlib import import_module

__version__ = "0.1.0"

from .core import (
    Contract,
    Decoder,
    Err,
    HttpMethod,
    HttpResponse,
    IntegerFromString,
    Ok,
    TypedRouter,
    ValidatedRequest,
    request_decoder,
    serve,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("logging",):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "Contract",
    "Decoder",
    "Err",
    "HttpMethod",
    "HttpResponse",
    "IntegerFromString",
    "Ok",
    "TypedRouter",
    "ValidatedRequest",
    "request_decoder",
    "serve",
]
