"""Tests for the standalone route registrar on a bare Starlette router."""

from typing import Any

import pytest
from pydantic import BaseModel
from starlette.responses import Response
from starlette.routing import Router
from starlette.testclient import TestClient

from typedroute.core.contract import Contract, HttpMethod
from typedroute.core.decoder import IntegerFromString, request_decoder
from typedroute.core.registrar import serve
from typedroute.core.response import HttpResponse
from typedroute.core.result import Err, Ok


class IdParams(BaseModel):
    id: IntegerFromString


class NameBody(BaseModel):
    name: str


def test_contract_normalises_method_strings():
    decoder = request_decoder()
    assert Contract("put", decoder).method is HttpMethod.PUT
    assert Contract.get(decoder) == Contract(HttpMethod.GET, decoder)


@pytest.mark.parametrize("method", ["DELETE", "", 42])
def test_contract_rejects_unsupported_methods(method):
    with pytest.raises(ValueError):
        Contract(method, request_decoder())


def test_contract_requires_a_decoder():
    with pytest.raises(TypeError):
        Contract("GET", lambda value: value)


def test_contract_is_immutable():
    contract = Contract.post(request_decoder())
    with pytest.raises(AttributeError):
        contract.method = HttpMethod.GET


def test_serve_registers_route_for_contract_method():
    router = Router()
    calls = []

    def handler(request):
        calls.append(request.params.id)
        return Ok(HttpResponse(200, {"res": request.params.id}))

    serve(router, Contract.get(request_decoder(params=IdParams)))("/items/{id}", handler)

    [route] = router.routes
    assert route.path == "/items/{id}"
    assert "GET" in route.methods

    client = TestClient(router)
    assert client.get("/items/5").json() == {"res": 5}
    assert client.post("/items/5").status_code == 405
    assert calls == [5]


def test_serve_uses_given_route_name():
    router = Router()
    serve(router, Contract.get(request_decoder()))(
        "/", lambda request: HttpResponse(200), name="home"
    )
    assert router.url_path_for("home") == "/"


def test_handler_failure_status_reaches_the_client():
    router = Router()

    async def handler(request):
        return Err(HttpResponse(409, "name already taken"))

    serve(router, Contract.post(request_decoder(body=NameBody)))("/", handler)
    response = TestClient(router).post("/", json={"name": "Alice"})
    assert response.status_code == 409
    assert response.text == "name already taken"


def test_validation_failure_is_plain_text_400():
    router = Router()
    serve(router, Contract.put(request_decoder(params=IdParams, body=NameBody)))(
        "/{id}", lambda request: HttpResponse(200)
    )
    response = TestClient(router).put("/abc", json={})
    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text.split("\n")[0].startswith("params.id: ")
    assert "body.name: Field required" in response.text


def test_malformed_json_is_rejected_before_the_pipeline():
    router = Router()
    calls = []

    def handler(request):
        calls.append(request)
        return HttpResponse(200)

    serve(router, Contract.post(request_decoder(body=Any)))("/", handler)
    response = TestClient(router).post(
        "/", content=b'{"name": ', headers={"Content-Type": "application/json"}
    )
    assert response.status_code == 400
    assert response.text.startswith("Malformed JSON body")
    assert calls == []


def test_custom_writer_is_called_once_per_request():
    router = Router()
    written = []

    def writer(response):
        written.append(response)
        return Response(str(response.status), status_code=response.status)

    serve(router, Contract.get(request_decoder(params=IdParams)), writer=writer)(
        "/{id}", lambda request: Ok(HttpResponse(200, {"res": request.params.id}))
    )
    client = TestClient(router)
    client.get("/1")
    client.get("/nope")
    assert [r.status for r in written] == [200, 400]
