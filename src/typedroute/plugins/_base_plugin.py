"""Plugin contract for typed routes (source of truth).

Source of truth
---------------
If this module were wiped except for this docstring, the implementation must be
reconstructed exactly as described below.

Objects
~~~~~~~
``RouteEntry``
    One served route, created by ``TypedRouter.serve`` before the Starlette
    endpoint is registered. Fields:

    - ``name`` – route name (explicit, handler ``__name__`` or
      ``"<METHOD> <path>"``); the key plugins configure against
    - ``method`` – ``HttpMethod`` taken from the contract
    - ``path`` – Starlette path pattern (``/{id}``)
    - ``contract`` – the ``Contract`` the route was served with
    - ``func`` – the typed handler as registered (unwrapped)
    - ``router`` – the owning ``TypedRouter``
    - ``plugins`` – names of the plugins wrapping the handler, outermost first
    - ``metadata`` – free-form annotations written by ``on_decore``

    ``route`` is ``"<METHOD> <path>"`` for log lines and introspection.

``BasePlugin``
    Base class of every router plugin. A plugin only ever sees requests that
    passed the route's decoder: ``wrap_handler`` wraps the typed handler,
    which receives a ``ValidatedRequest`` and returns the handler outcome
    (``Ok``/``Err``/``HttpResponse`` or an awaitable of one). Rejected requests
    are answered by the pipeline before any plugin runs.

    Class attributes: ``plugin_code`` (registry name, e.g. ``"logging"``) and
    ``plugin_description``.

    ``BasePlugin(router, **config)`` creates the plugin's bucket in the
    router's ``_plugin_info`` store and forwards ``config`` to ``configure``.

Configuration store
~~~~~~~~~~~~~~~~~~~
``router._plugin_info[plugin_name]`` maps a target to
``{"config": {...}, "locals": {...}}``. ``BASE_TARGET`` (``"--base--"``) holds
router-wide values; every other key is a route name. ``config`` is what
``configure`` writes, ``locals`` is runtime state owned by the router
(``set_plugin_enabled``).

``configure(**config)``
    Subclasses declare accepted options through the method signature.
    ``__init_subclass__`` wraps it so that a call:

    - merges ``flags`` (``"enabled,before:off"``) parsed by ``parse_flags``;
      values are ``on``/``off``/``true``/``false``/``yes``/``no``/``1``/``0``,
      a bare name means ``on``, anything else raises ``ValueError``;
    - validates the options with ``pydantic.validate_call`` against the
      subclass signature before anything is stored;
    - writes them to every target named by ``_target``: ``BASE_TARGET``
      (default), one route name, a comma-separated string of route names or
      a list of them. Route names may be configured before the route is
      served.

``configuration(route_name=None)``
    Router-wide config overlaid with the route's own values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from pydantic import validate_call

__all__ = ["BASE_TARGET", "BasePlugin", "RouteEntry", "parse_flags"]

BASE_TARGET = "--base--"

_FLAG_VALUES = {
    "on": True,
    "true": True,
    "yes": True,
    "1": True,
    "off": False,
    "false": False,
    "no": False,
    "0": False,
}

Target = Union[str, Iterable[str]]


@dataclass
class RouteEntry:
    """Metadata for a served route."""

    name: str
    method: Any
    path: str
    contract: Any
    func: Callable
    router: Any
    plugins: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def route(self) -> str:
        return f"{getattr(self.method, 'value', self.method)} {self.path}"


def parse_flags(flags: str) -> Dict[str, bool]:
    """Turn ``"enabled,before:off"`` into ``{"enabled": True, "before": False}``."""
    mapping: Dict[str, bool] = {}
    for chunk in flags.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, _, raw = chunk.partition(":")
        raw = raw.strip().lower() or "on"
        if raw not in _FLAG_VALUES:
            raise ValueError(f"Invalid value {raw!r} for flag '{name.strip()}'")
        mapping[name.strip()] = _FLAG_VALUES[raw]
    return mapping


def _route_targets(target: Target) -> List[str]:
    names = target.split(",") if isinstance(target, str) else list(target)
    targets = [name.strip() for name in names if name and name.strip()]
    if not targets:
        raise ValueError(f"_target names no route: {target!r}")
    return targets


def _wrap_configure(original_configure: Callable) -> Callable:
    validated = validate_call(original_configure)

    def configure(
        self: "BasePlugin",
        *,
        _target: Target = BASE_TARGET,
        flags: Optional[str] = None,
        **options: Any,
    ) -> None:
        if flags:
            options.update(parse_flags(flags))
        validated(self, **options)
        for route_name in _route_targets(_target):
            self._write_config(route_name, options)

    configure.__doc__ = original_configure.__doc__
    return configure


class BasePlugin:
    """Handler middleware attached to a ``TypedRouter``."""

    __slots__ = ("name", "_router")

    plugin_code: str = ""
    plugin_description: str = ""

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(self, router: Any, **config: Any):
        self.name = self.plugin_code
        self._router = router
        self._buckets().setdefault(BASE_TARGET, {"config": {"enabled": True}, "locals": {}})
        self.configure(**config)

    def configure(self, *, _target: Target = BASE_TARGET, flags: Optional[str] = None) -> None:
        """Plugins without options still accept ``flags``."""
        if flags:
            for route_name in _route_targets(_target):
                self._write_config(route_name, parse_flags(flags))

    def configuration(self, route_name: Optional[str] = None) -> Dict[str, Any]:
        buckets = self._buckets()
        merged = dict(buckets.get(BASE_TARGET, {}).get("config", {}))
        if route_name:
            merged.update(buckets.get(route_name, {}).get("config", {}))
        return merged

    def on_decore(self, router: Any, func: Callable, entry: RouteEntry) -> None:
        """Called once per route while it is being served."""

    def wrap_handler(self, router: Any, entry: RouteEntry, call_next: Callable) -> Callable:
        """Return the callable run in place of ``call_next`` for ``entry``."""
        return call_next

    def entry_metadata(self, router: Any, entry: RouteEntry) -> Dict[str, Any]:
        """Extra description shown under the route in ``TypedRouter.members()``."""
        return {}

    def _write_config(self, target: str, config: Dict[str, Any]) -> None:
        if not config:
            return
        bucket = self._buckets().setdefault(target, {"config": {}, "locals": {}})
        bucket["config"].update(config)

    def _buckets(self) -> Dict[str, Dict[str, Any]]:
        return self._router._plugin_info.setdefault(self.name, {})
