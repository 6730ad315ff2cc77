"""Tests for error aggregation and the response writer."""

import json

import pytest

from typedroute.core.decoder import DecodeError
from typedroute.core.response import HttpResponse, aggregate_errors, write_response


def test_aggregate_errors_joins_messages_in_order():
    errors = [
        DecodeError(loc=("params", "id"), msg="not a number"),
        DecodeError(loc=("body", "name"), msg="Field required"),
    ]
    response = aggregate_errors(errors)
    assert response == HttpResponse(
        status=400, body="params.id: not a number\nbody.name: Field required"
    )


def test_aggregate_errors_single_error_has_no_separator():
    response = aggregate_errors([DecodeError(loc=(), msg="nope")])
    assert response.status == 400
    assert response.body == "nope"


def test_aggregate_errors_requires_errors():
    with pytest.raises(ValueError):
        aggregate_errors([])


def test_write_response_sends_strings_verbatim():
    written = write_response(HttpResponse(status=404, body='{"not": "json"}'))
    assert written.status_code == 404
    assert written.body == b'{"not": "json"}'
    assert written.headers["content-type"].startswith("text/plain")


def test_write_response_serializes_other_bodies_as_json():
    written = write_response(HttpResponse(status=200, body={"id": 5, "result": "Bob"}))
    assert written.status_code == 200
    assert written.headers["content-type"] == "application/json"
    assert json.loads(written.body) == {"id": 5, "result": "Bob"}


def test_write_response_without_body():
    written = write_response(HttpResponse(status=204))
    assert written.status_code == 204
    assert written.body == b""
