# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from httprest.errors import InvalidRequestError, ResourceNotFoundError, UnauthorizedRequestError
from httprest.http.adapters import StubRestClient
from httprest.http.response import RestResponse
from httprest.models import Request, RequestMethod


def test_stub_rest_client_returns_registered_responses():
    stub = StubRestClient()
    stub.add("GET", "/items", body='{"count": 2}', headers={"X-Total": "2"})

    result = stub.submit_request(Request.get("/items"))

    assert isinstance(result, RestResponse)
    assert result.json() == {"count": 2}
    assert result.header("X-TOTAL") == "2"
    assert stub.requests[0].endpoint == "/items"


def test_stub_rest_client_runs_error_statuses_through_handler():
    stub = StubRestClient()
    stub.add(RequestMethod.DELETE, "/items/1", status_code=401, body="login first")
    stub.add(RequestMethod.POST, "/items", status_code=409, body="duplicate")

    with pytest.raises(UnauthorizedRequestError) as excinfo:
        stub.submit_request(Request.delete("/items/1"))
    assert excinfo.value.message == "login first"

    with pytest.raises(InvalidRequestError) as excinfo:
        stub.submit_request(Request.post("/items", {"name": "x"}))
    assert excinfo.value.status_code == 409

    with pytest.raises(ResourceNotFoundError):
        stub.submit_request(Request.get("/missing"))

    assert [r.method for r in stub.requests] == [RequestMethod.DELETE, RequestMethod.POST, RequestMethod.GET]


def test_stub_rest_client_close():
    stub = StubRestClient()
    stub.close()
    stub.close()
    assert stub.closed is True
