"""Example CRUD service served through typedroute.

Routes
------
- ``POST /``      body ``{"name": str}``            → ``{"id": <0..999>}``
- ``PUT /{id}``   id from path, body ``{"name": str}`` → ``{"id": id, "result": name}``
- ``GET /{id}``   id from path, any body             → ``{"res": id}``

Run with ``python -m typedroute.demo`` (or the ``typedroute-demo`` script).
Host, port and log level come from ``TYPEDROUTE_HOST``, ``TYPEDROUTE_PORT``
and ``TYPEDROUTE_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import random
from typing import Any

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from starlette.applications import Starlette

from typedroute import (
    Contract,
    HttpResponse,
    IntegerFromString,
    Ok,
    TypedRouter,
    ValidatedRequest,
    request_decoder,
)

logger = logging.getLogger("typedroute.demo")


class DemoSettings(BaseSettings):
    """Process settings for the example service."""

    model_config = SettingsConfigDict(env_prefix="TYPEDROUTE_", extra="ignore")

    host: str = Field(default="127.0.0.1", description="Interface to bind")
    port: int = Field(default=3000, ge=1, le=65535, description="Port to listen on")
    log_level: str = Field(default="INFO", description="Root log level")


class IdParams(BaseModel):
    id: IntegerFromString


class NameBody(BaseModel):
    name: str


GetRequest = request_decoder(params=IdParams, body=Any, name="GetRequest")
PostRequest = request_decoder(params=Any, body=NameBody, name="PostRequest")
PutRequest = request_decoder(params=IdParams, body=NameBody, name="PutRequest")


def create_app(*, plugins: tuple[str, ...] = ("logging",)) -> Starlette:
    """Build the Starlette app with the three example routes."""
    app = Starlette()
    router = TypedRouter(app.router, name="demo")
    for plugin in plugins:
        router.plug(plugin)

    @router.serve(Contract.post(PostRequest))("/")
    def create_item(request: ValidatedRequest[Any, NameBody]):
        return Ok(HttpResponse(status=200, body={"id": random.randrange(1000)}))

    @router.serve(Contract.put(PutRequest))("/{id}")
    def update_item(request: ValidatedRequest[IdParams, NameBody]):
        return Ok(
            HttpResponse(
                status=200, body={"id": request.params.id, "result": request.body.name}
            )
        )

    @router.serve(Contract.get(GetRequest))("/{id}")
    def read_item(request: ValidatedRequest[IdParams, Any]):
        return Ok(HttpResponse(status=200, body={"res": request.params.id}))

    app.state.typed_router = router
    return app


def main() -> None:
    import uvicorn

    settings = DemoSettings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    logger.info("Example app listening on port %s!", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
