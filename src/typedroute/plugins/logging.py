"""Logging plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
- Wrap each typed handler call and emit configurable messages:
  * ``before`` (default True): ``"{entry.name} start"``
  * ``after`` (default True): ``"{entry.name} end (<ms> ms)"`` with elapsed time
    in milliseconds and ``{elapsed:.2f}`` formatting. Async handlers are
    awaited inside the timing window.
- Sinks:
  * when ``print`` is true → always ``print(message)``;
  * else when ``log`` is true → ``logger.info(message)`` if the logger reports
    handlers via ``hasHandlers()``, otherwise ``print(message)`` to avoid drops;
  * else → no output.
- ``enabled`` gates the plugin entirely (default True).
- Use a provided ``logging.Logger`` (default ``logging.getLogger("typedroute")``).

Configuration
-------------
- Accepted keys (router-level or per-route): ``enabled``, ``before``,
  ``after``, ``log``, ``print``; also as ``flags`` (e.g.
  ``"enabled:off,before:on,after:on,log:on,print:off"``).
- Per-route: ``router.logging.configure(_target="route_name", before=False)``.

Behaviour
---------
Exceptions propagate; the end message is skipped when the handler raises.

Registration
------------
At module import, the plugin registers itself globally as ``"logging"`` via
``TypedRouter.register_plugin(LoggingPlugin)``.
"""

from __future__ import annotations

import inspect
import logging
import time
from typing import Callable, Optional

from typedroute.core.router import TypedRouter
from typedroute.plugins._base_plugin import BasePlugin, RouteEntry


class LoggingPlugin(BasePlugin):
    """Logs typed handler calls with timing."""

    plugin_code = "logging"
    plugin_description = "Logs handler calls with timing"

    __slots__ = ("_logger",)

    def __init__(self, router, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("typedroute")
        super().__init__(router, **cfg)

    def configure(
        self,
        enabled: bool = True,
        before: bool = True,
        after: bool = True,
        log: bool = True,
        print: bool = False,  # noqa: A002 - shadowing builtin intentionally
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass

    def _emit(self, message: str, *, cfg: dict) -> None:
        if cfg.get("print"):
            print(message)
            return
        if cfg.get("log"):
            if self._logger.hasHandlers():
                self._logger.info(message)
            else:
                print(message)

    def wrap_handler(self, route, entry: RouteEntry, call_next: Callable):
        """Wrap handler with start/end logging and timing."""

        async def logged(request):
            cfg = self._effective_config(entry.name)
            if not cfg["enabled"]:
                result = call_next(request)
                return await result if inspect.isawaitable(result) else result
            if cfg["before"]:
                self._emit(f"{entry.name} start", cfg=cfg)
            t0 = time.perf_counter()
            result = call_next(request)
            if inspect.isawaitable(result):
                result = await result
            elapsed = (time.perf_counter() - t0) * 1000
            if cfg["after"]:
                self._emit(f"{entry.name} end ({elapsed:.2f} ms)", cfg=cfg)
            return result

        return logged

    def _effective_config(self, entry_name: str) -> dict:
        defaults = {"enabled": True, "before": True, "after": True, "log": True, "print": False}
        cfg = defaults | self.configuration(entry_name)

        def to_bool(key: str) -> bool:
            val = cfg.get(key)
            return defaults[key] if val is None else bool(val)

        return {key: to_bool(key) for key in defaults}


TypedRouter.register_plugin(LoggingPlugin)
