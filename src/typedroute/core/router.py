"""Typed router with plugin pipeline (source of truth).

If this module disappeared, rebuild it exactly as described. ``TypedRouter``
wraps an untyped Starlette router and registers contract-checked routes on it
through ``typedroute.core.registrar.serve``. On top of the bare registrar it
keeps a named table of ``RouteEntry`` objects, a global plugin registry,
per-router plugin instances and their configuration store.

Constructor
-----------
``TypedRouter(http_router=None, *, name=None, serve_writer=None, serve_kwargs=None)``

- ``http_router``: anything with Starlette's ``add_route``; a fresh
  ``starlette.routing.Router`` is created when omitted.
- ``serve_writer`` and ``serve_kwargs`` seed the defaults merged via
  ``SmartOptions`` into every ``serve()`` call.

Internal state
--------------
- ``_entries``: route name → ``RouteEntry``.
- ``_handlers``: route name → plugin-wrapped typed handler.
- ``_plugins``: instantiated plugins in the order they were attached.
- ``_plugins_by_name``: name → plugin instance.
- ``_plugin_info``: per-plugin state store (``"--base--"`` bucket for router
  defaults, one bucket per route name, each with ``config`` and ``locals``).

Global registry
---------------
``TypedRouter.register_plugin(plugin_class, name=None)`` validates that
``plugin_class`` is a ``BasePlugin`` subclass with a ``plugin_code``.
Re-registering a code with a different class raises ``ValueError`` unless an
explicit ``name`` is given. ``available_plugins`` returns a shallow copy.

Serving
-------
``serve(contract, **options)`` returns ``register(path, handler=None)``.
Options: ``name`` (route name), ``writer`` (response writer). ``register``:

- resolves the route name (explicit → ``handler.__name__`` → ``"<METHOD> <path>"``
  for lambdas); a duplicate name raises ``ValueError``;
- creates the ``RouteEntry``, runs ``on_decore`` of every attached plugin;
- wraps the handler with the plugin middleware (first attached = outermost,
  each layer skipped at call time when ``is_plugin_enabled`` is False);
- hands the wrapped handler to the registrar;
- returns the original handler. Called with only ``path`` it returns a
  decorator instead.

``plug(plugin_name, **config)`` must happen before the first ``serve``: the
routes already handed to the untyped router cannot be re-wrapped, so late
attachment raises ``RuntimeError``.

Lookup and introspection
------------------------
``get(name)`` returns the wrapped typed handler (``NotImplementedError`` when
missing). ``entries()`` lists route names in registration order.
``members()`` describes routes and plugin state.
"""

from __future__ import annotations

import inspect
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from smartseeds import SmartOptions
from starlette.routing import Router as StarletteRouter

from typedroute.core.contract import Contract
from typedroute.core.registrar import serve as serve_route
from typedroute.core.response import HttpResponse, write_response
from typedroute.plugins._base_plugin import BASE_TARGET, BasePlugin, RouteEntry

__all__ = ["TypedRouter"]

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


class TypedRouter:
    """Contract-checked route registration with plugin support."""

    __slots__ = (
        "name",
        "http_router",
        "_entries",
        "_handlers",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
        "_serve_defaults",
    )

    def __init__(
        self,
        http_router: Any = None,
        *,
        name: Optional[str] = None,
        serve_writer: Optional[Callable[[HttpResponse], Any]] = None,
        serve_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugins: List[BasePlugin] = []
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        self._entries: Dict[str, RouteEntry] = {}
        self._handlers: Dict[str, Callable] = {}
        self.name = name
        self.http_router = http_router if http_router is not None else StarletteRouter()
        defaults: Dict[str, Any] = dict(serve_kwargs or {})
        if serve_writer is not None:
            defaults.setdefault("writer", serve_writer)
        self._serve_defaults = defaults

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally."""
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "TypedRouter":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        if self._entries:
            raise RuntimeError(
                f"Cannot plug '{plugin}' into router '{self.name}': routes are already served"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        instance = plugin_class(router=self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        return self

    def iter_plugins(self) -> List[BasePlugin]:
        """Return attached plugin instances in application order."""
        return list(self._plugins)

    def get_config(self, plugin_name: str, route_name: Optional[str] = None) -> Dict[str, Any]:
        """Return plugin config (global + per-route overrides) for an attached plugin."""
        return self._require_plugin(plugin_name).configuration(route_name)

    def __getattr__(self, name: str) -> Any:
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to router '{self.name}'")
        return plugin

    def _require_plugin(self, plugin_name: str) -> BasePlugin:
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(
                f"No plugin named '{plugin_name}' attached to router '{self.name}'"
            )
        return plugin

    # ------------------------------------------------------------------
    # Runtime helpers (state stored on plugin_info)
    # ------------------------------------------------------------------
    def set_plugin_enabled(self, route_name: str, plugin_name: str, enabled: bool = True) -> None:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(
                f"No plugin named '{plugin_name}' attached to router '{self.name}'"
            )
        slot = bucket.setdefault(route_name, {"config": {}, "locals": {}})
        slot.setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, route_name: str, plugin_name: str) -> bool:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(
                f"No plugin named '{plugin_name}' attached to router '{self.name}'"
            )
        route_locals = bucket.get(route_name, {}).get("locals", {})
        if "enabled" in route_locals:
            return bool(route_locals["enabled"])
        return bool(bucket.get(BASE_TARGET, {}).get("locals", {}).get("enabled", True))

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------
    def serve(
        self, contract: Contract, *, name: Optional[str] = None, **options: Any
    ) -> Callable[..., Any]:
        """Return ``register(path, handler)`` binding ``contract`` to the untyped router."""
        opts = SmartOptions(options, defaults=self._serve_defaults)
        writer = getattr(opts, "writer", None) or write_response
        register_route = serve_route(self.http_router, contract, writer=writer)

        def register(path: str, handler: Optional[Callable] = None) -> Any:
            if handler is None:
                return lambda func: register(path, func)
            entry = self._register_entry(contract, path, handler, name=name)
            register_route(path, self._handlers[entry.name], name=entry.name)
            return handler

        return register

    def _register_entry(
        self, contract: Contract, path: str, handler: Callable, *, name: Optional[str]
    ) -> RouteEntry:
        if not callable(handler):
            raise TypeError(f"Route handler must be callable, got {handler!r}")
        route_name = self._resolve_name(contract, path, handler, name)
        if route_name in self._entries:
            raise ValueError(f"Route name collision: {route_name}")
        entry = RouteEntry(
            name=route_name,
            method=contract.method,
            path=path,
            contract=contract,
            func=handler,
            router=self,
        )
        for plugin in self._plugins:
            entry.plugins.append(plugin.name)
            plugin.on_decore(self, handler, entry)
        self._entries[route_name] = entry
        self._handlers[route_name] = self._wrap_handler(entry, handler)
        return entry

    @staticmethod
    def _resolve_name(
        contract: Contract, path: str, handler: Callable, name: Optional[str]
    ) -> str:
        if name:
            return name
        func_name = getattr(handler, "__name__", "")
        if func_name and func_name.isidentifier():
            return func_name
        return f"{contract.method.value} {path}"

    def _wrap_handler(self, entry: RouteEntry, call_next: Callable) -> Callable:
        wrapped = call_next
        for plugin in reversed(self._plugins):
            plugin_call = plugin.wrap_handler(self, entry, wrapped)
            wrapped = self._create_wrapper(plugin, entry, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        entry: RouteEntry,
        plugin_call: Callable,
        next_handler: Callable,
    ) -> Callable:
        @wraps(next_handler)
        def wrapper(request):
            if not self.is_plugin_enabled(entry.name, plugin.name):
                return next_handler(request)
            return plugin_call(request)

        return wrapper

    # ------------------------------------------------------------------
    # Lookup and introspection
    # ------------------------------------------------------------------
    def get(self, name: str) -> Callable:
        """Return the plugin-wrapped typed handler registered as ``name``."""
        handler = self._handlers.get(name)
        if handler is None:
            raise NotImplementedError(f"Route '{name}' not found on router '{self.name}'")
        return handler

    __getitem__ = get

    def entries(self) -> Tuple[str, ...]:
        """Return route names in registration order."""
        return tuple(self._entries)

    def members(self) -> Dict[str, Any]:
        """Return a description of served routes and plugin state."""
        if not self._entries:
            return {}
        return {
            "name": self.name,
            "router": self,
            "plugin_info": self._get_plugin_info(),
            "entries": {name: self._entry_member_info(entry) for name, entry in self._entries.items()},
        }

    def _entry_member_info(self, entry: RouteEntry) -> Dict[str, Any]:
        info: Dict[str, Any] = {
            "name": entry.name,
            "method": entry.method.value,
            "path": entry.path,
            "route": entry.route,
            "decoder": entry.contract.decoder,
            "callable": entry.func,
            "metadata": entry.metadata,
            "doc": inspect.getdoc(entry.func) or "",
        }
        plugins_info: Dict[str, Dict[str, Any]] = {}
        for plugin in self._plugins:
            plugin_data: Dict[str, Any] = {}
            config = plugin.configuration(entry.name)
            if config:
                plugin_data["config"] = config
            meta = plugin.entry_metadata(self, entry)
            if meta:
                plugin_data["metadata"] = meta
            if plugin_data:
                plugins_info[plugin.name] = plugin_data
        if plugins_info:
            info["plugins"] = plugins_info
        return info

    def _get_plugin_info(self) -> Dict[str, Any]:
        return {
            pname: {
                key: {
                    "config": dict(slot.get("config", {})),
                    "locals": dict(slot.get("locals", {})),
                }
                for key, slot in pdata.items()
            }
            for pname, pdata in self._plugin_info.items()
        }
