import json
from concurrent.futures import Future

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from awskit.core import (
    ClientException,
    NetworkException,
    RedirectionException,
    Request,
    Response,
    ServerException,
    UnparsableResponse,
)
from awskit.core.response import is_throttling_error, sanitize_error_code


class NotFound(ClientException):
    code = "NotFound"


class Unavailable(ServerException):
    code = "Unavailable"


class Conflict(ClientException):
    code = "Conflict"

    def _populate_result(self, response: Response) -> None:
        self.items = [item["id"] for item in self._get_error_data(response)["Items"]]


class Broken(ClientException):
    code = "Broken"

    def _populate_result(self, response: Response) -> None:
        raise RuntimeError("broken")


def create_response(status=200, body=b"", headers=None, exception_mapping=None) -> Response:
    if isinstance(body, dict):
        body = json.dumps(body).encode("utf-8")

    http_response = requests.Response()
    http_response.status_code = status
    http_response._content = body
    http_response._content_consumed = True
    http_response.headers = CaseInsensitiveDict(headers or {})

    future = Future()
    future.set_result(http_response)

    request = Request("POST", "/")
    request.endpoint = "https://fakedb.us-east-1.amazonaws.com"
    return Response(future, request, "GetItem", exception_mapping)


@pytest.mark.parametrize(
    "code,expected",
    [
        ("com.amazonaws.dynamodb.v20120810#ResourceNotFoundException", "ResourceNotFoundException"),
        (
            "ResourceNotFoundException:http://internal.amazon.com/coral/com.amazon.coral.validate/",
            "ResourceNotFoundException",
        ),
        ("ValidationException", "ValidationException"),
        ("", None),
        (None, None),
    ],
)
def test_sanitize_error_code(code, expected):
    assert sanitize_error_code(code) == expected


@pytest.mark.parametrize(
    "status,body,headers,expected",
    [
        (400, {"__type": "com.amazonaws.dynamodb.v20120810#ThrottlingException"}, {}, True),
        (400, {"__type": "ProvisionedThroughputExceededException"}, {}, True),
        (400, b"", {"X-Amzn-ErrorType": "TooManyRequestsException:http://internal/"}, True),
        (400, {"__type": "ValidationException"}, {}, False),
        (400, b"Bad Request", {}, False),
        (500, {"__type": "ThrottlingException"}, {}, False),
        (200, {"__type": "ThrottlingException"}, {}, False),
    ],
)
def test_is_throttling_error(status, body, headers, expected):
    http_response = requests.Response()
    http_response.status_code = status
    http_response._content = json.dumps(body).encode("utf-8") if isinstance(body, dict) else body
    http_response.headers = CaseInsensitiveDict(headers)

    assert is_throttling_error(http_response) is expected


class TestResponse:
    def test_to_dict(self):
        response = create_response(body={"TableNames": ["a", "b"]})
        assert response.resolve()
        assert response.to_dict() == {"TableNames": ["a", "b"]}
        assert response.status_code == 200

    def test_empty_body(self):
        assert create_response(body=b"").to_dict() == {}
        assert create_response(body=b"  \n").to_dict() == {}

    def test_invalid_json(self):
        response = create_response(body=b"<html></html>")
        with pytest.raises(UnparsableResponse):
            response.to_dict()

    def test_pending_response_timeout(self):
        future = Future()
        request = Request("POST", "/")
        request.endpoint = "https://fakedb.us-east-1.amazonaws.com"
        response = Response(future, request, "GetItem")

        assert not response.resolve(timeout=0.01)
        assert not response.info()["resolved"]

    def test_network_error(self):
        future = Future()
        future.set_exception(requests.ConnectionError("connection refused"))
        request = Request("POST", "/")
        request.endpoint = "https://fakedb.us-east-1.amazonaws.com"
        response = Response(future, request, "GetItem")

        with pytest.raises(NetworkException) as e:
            response.resolve()
        assert "connection refused" in str(e.value)

        # the error is remembered
        with pytest.raises(NetworkException):
            response.resolve()

    def test_cancelled_request(self):
        future = Future()
        request = Request("POST", "/")
        request.endpoint = "https://fakedb.us-east-1.amazonaws.com"
        response = Response(future, request, "GetItem")

        response.cancel()
        assert future.cancelled()
        with pytest.raises(NetworkException):
            response.resolve()

    def test_info(self):
        response = create_response(body={}, headers={"X-Amzn-RequestId": "req-1"})
        response.resolve()
        assert response.info() == {
            "operation": "GetItem",
            "method": "POST",
            "url": "https://fakedb.us-east-1.amazonaws.com/",
            "resolved": True,
            "status": 200,
            "request_id": "req-1",
        }


class TestErrors:
    def test_client_error(self):
        response = create_response(
            400, {"__type": "com.amazonaws.fakedb#ValidationException", "message": "invalid"}
        )

        with pytest.raises(ClientException) as e:
            response.resolve()

        assert type(e.value) is ClientException
        assert e.value.code == "ValidationException"
        assert e.value.message == "invalid"
        assert e.value.status_code == 400
        assert "Code:    ValidationException" in str(e.value)
        assert "Message: invalid" in str(e.value)

    def test_error_is_raised_again(self):
        response = create_response(400, {"__type": "ValidationException"})
        with pytest.raises(ClientException) as first:
            response.resolve()
        with pytest.raises(ClientException) as second:
            response.to_dict()
        assert first.value is second.value

    def test_mapped_error(self):
        response = create_response(
            404,
            {"Message": "no such thing"},
            {"X-Amzn-ErrorType": "NotFound:http://internal/"},
            {"NotFound": NotFound},
        )

        with pytest.raises(NotFound) as e:
            response.resolve()
        assert e.value.code == "NotFound"
        assert e.value.message == "no such thing"

    def test_mapped_error_of_wrong_kind_is_not_used(self):
        # a modeled client error returned with a server error status
        response = create_response(
            503, {"__type": "NotFound"}, exception_mapping={"NotFound": NotFound}
        )

        with pytest.raises(ServerException) as e:
            response.resolve()
        assert type(e.value) is ServerException

    def test_server_error(self):
        response = create_response(
            503, {"__type": "Unavailable"}, exception_mapping={"Unavailable": Unavailable}
        )
        with pytest.raises(Unavailable):
            response.resolve()

    def test_redirection(self):
        response = create_response(301, b"")
        with pytest.raises(RedirectionException) as e:
            response.resolve()
        assert e.value.code is None

    def test_unparsable_error_body(self):
        response = create_response(500, b"Internal Server Error")
        with pytest.raises(ServerException) as e:
            response.resolve()
        assert e.value.code is None
        assert e.value.message == ""

    def test_error_body_is_not_required_for_content(self):
        response = create_response(400, {"__type": "ValidationException"})
        assert response.status_code == 400
        assert response.to_dict(raise_errors=False) == {"__type": "ValidationException"}

    def test_malformed_error_members(self):
        response = create_response(
            409, {"__type": "Conflict", "Items": "oops"}, exception_mapping={"Conflict": Conflict}
        )

        with pytest.raises(Conflict) as first:
            response.resolve()
        assert not hasattr(first.value, "items")
        with pytest.raises(Conflict) as second:
            response.resolve()
        assert first.value is second.value

    def test_failed_error_creation_is_not_a_success(self):
        response = create_response(400, {"__type": "Broken"}, exception_mapping={"Broken": Broken})

        with pytest.raises(RuntimeError):
            response.resolve()
        with pytest.raises(RuntimeError):
            response.resolve()
        with pytest.raises(RuntimeError):
            response.to_dict()
