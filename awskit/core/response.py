import json
import logging
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Dict, Optional, Type

import requests

from awskit.constants import HEADER_AMZN_ERROR_TYPE, HEADER_AMZN_REQUEST_ID, THROTTLING_ERROR_CODES
from awskit.core.exceptions import (
    AwsError,
    ClientException,
    HttpException,
    NetworkException,
    RedirectionException,
    ServerException,
    UnparsableResponse,
)
from awskit.core.request import Request

LOG = logging.getLogger(__name__)

ExceptionMapping = Dict[str, Type[HttpException]]


def sanitize_error_code(code: Optional[str]) -> Optional[str]:
    """
    Strips the namespace and the suffix off an error type, f.e.
    ``com.amazonaws.dynamodb.v20120810#ResourceNotFoundException`` or
    ``ResourceNotFoundException:http://internal.amazon.com/coral/com.amazon.coral.validate/`` both turn into
    ``ResourceNotFoundException``.
    """
    if not code:
        return None
    code = code.split(":", 1)[0]
    code = code.rsplit("#", 1)[-1]
    return code.strip() or None


def _read_error_data(content: Optional[bytes]) -> Dict[str, Any]:
    if not content or not content.strip():
        return {}
    try:
        data = json.loads(content)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def get_error_code(headers, data: Dict[str, Any]) -> Optional[str]:
    """
    Reads the error code of an error response, from the ``x-amzn-ErrorType`` header (rest-json) or the body (json).
    """
    code = headers.get(HEADER_AMZN_ERROR_TYPE) or data.get("__type") or data.get("code") or data.get("Code")
    return sanitize_error_code(code)


def is_throttling_error(http_response: requests.Response) -> bool:
    """Whether the response is a throttling error which comes with a 4xx status code (f.e. ``ThrottlingException``)."""
    if not 400 <= http_response.status_code < 500:
        return False
    data = _read_error_data(http_response.content)
    return get_error_code(http_response.headers, data) in THROTTLING_ERROR_CODES


class Response:
    """
    A pending response of a service. The request is already on its way when the response object is created (it is
    sent by a worker thread of the client), this object only waits for the outcome when it is needed.
    """

    def __init__(
        self,
        future: "Future[requests.Response]",
        request: Request,
        operation: Optional[str] = None,
        exception_mapping: Optional[ExceptionMapping] = None,
    ):
        self._future = future
        self._request = request
        self._operation = operation
        self._exception_mapping = exception_mapping or {}
        self._http_response: Optional[requests.Response] = None
        self._network_error: Optional[NetworkException] = None
        self._http_error: Optional[HttpException] = None
        self._checked = False
        self._decoded: Any = None

    @property
    def future(self) -> "Future[requests.Response]":
        return self._future

    @property
    def request(self) -> Request:
        return self._request

    @property
    def operation(self) -> Optional[str]:
        return self._operation

    def _wait(self, timeout: Optional[float] = None) -> bool:
        if self._http_response is not None:
            return True
        if self._network_error is not None:
            raise self._network_error

        try:
            self._http_response = self._future.result(timeout=timeout)
        except FutureTimeoutError:
            return False
        except CancelledError as e:
            self._network_error = NetworkException("The request was cancelled.")
            raise self._network_error from e
        except requests.RequestException as e:
            self._network_error = NetworkException(
                f'Could not contact remote server "{self._request.endpoint}": {e}'
            )
            raise self._network_error from e

        return True

    def resolve(self, timeout: Optional[float] = None) -> bool:
        """
        Waits for the response and makes sure it is not an error.

        :param timeout: the maximum number of seconds to wait, None to wait forever
        :return: True if the response is available, False if the timeout elapsed before
        :raises NetworkException: if the request could not be sent
        :raises HttpException: if the service returned an error status code
        """
        if not self._wait(timeout):
            return False

        if not self._checked:
            if self._http_response.status_code >= 300:
                self._http_error = self._create_exception()
            self._checked = True

        if self._http_error is not None:
            raise self._http_error

        return True

    def cancel(self) -> None:
        if self._future.cancel():
            LOG.debug("cancelled pending request %s", self._request)
            return
        if self._future.done() and not self._future.exception():
            self._future.result().close()

    @property
    def status_code(self) -> int:
        self._wait()
        return self._http_response.status_code

    @property
    def headers(self):
        """The (case-insensitive) response headers."""
        self._wait()
        return self._http_response.headers

    @property
    def content(self) -> bytes:
        self._wait()
        return self._http_response.content

    def to_dict(self, raise_errors: bool = True) -> Dict[str, Any]:
        """
        Decodes the JSON body of the response. An empty body results in an empty dict.

        :param raise_errors: whether to raise the mapped exception if the response is an error
        :raises UnparsableResponse: if the body is not valid JSON
        """
        if raise_errors:
            self.resolve()
        else:
            self._wait()

        if self._decoded is None:
            content = self._http_response.content
            if not content or not content.strip():
                self._decoded = {}
            else:
                try:
                    self._decoded = json.loads(content)
                except ValueError as e:
                    raise UnparsableResponse(
                        f"Could not decode the response of {self._operation or self._request} as JSON"
                    ) from e
        return self._decoded

    def info(self) -> Dict[str, Any]:
        info = {
            "operation": self._operation,
            "method": self._request.method,
            "url": self._request.url() if self._request.endpoint else self._request.uri,
            "resolved": self._http_response is not None,
        }
        if self._http_response is not None:
            info["status"] = self._http_response.status_code
            info["request_id"] = self._http_response.headers.get(HEADER_AMZN_REQUEST_ID)
        return info

    def _parse_error(self) -> AwsError:
        headers = self._http_response.headers
        try:
            data = self.to_dict(raise_errors=False)
        except UnparsableResponse:
            data = {}
        if not isinstance(data, dict):
            data = {}

        code = get_error_code(headers, data)
        message = data.get("message") or data.get("Message") or data.get("errorMessage")
        return AwsError(
            code=code,
            message=message,
            type=data.get("Type") or data.get("type"),
            detail=data.get("Detail") or data.get("detail"),
        )

    def _create_exception(self) -> HttpException:
        status_code = self._http_response.status_code
        if status_code < 400:
            default_class = RedirectionException
        elif status_code < 500:
            default_class = ClientException
        else:
            default_class = ServerException

        aws_error = self._parse_error()
        exception_class = self._exception_mapping.get(aws_error.code)
        if exception_class is None or not issubclass(exception_class, default_class):
            exception_class = default_class

        LOG.debug(
            "%s returned %d (%s): %s",
            self._operation,
            status_code,
            aws_error.code,
            aws_error.message,
        )
        return exception_class(self, aws_error)

    def __repr__(self):
        return f"Response({self._operation}, resolved={self._http_response is not None})"
