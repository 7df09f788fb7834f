import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from awskit.core.response import Response

LOG = logging.getLogger(__name__)


class AwsKitException(Exception):
    """
    Root of all exceptions raised by awskit and the generated clients.
    """

    pass


class InvalidArgument(AwsKitException, ValueError):
    """
    Raised when an input or a value object cannot be rendered into a request, f.e. because a required member is
    missing or an enum member has a value the service does not know.
    """

    pass


class UnparsableResponse(AwsKitException):
    """
    Raised when a response body cannot be decoded.
    """

    pass


class NetworkException(AwsKitException):
    """
    Raised when the request could not be sent or no response was received (DNS errors, refused connections,
    timeouts, ...).
    """

    pass


class HttpException(AwsKitException):
    """
    An error response returned by the service. The exception keeps the response it was created from, and the error
    details parsed from it.
    """

    code: Optional[str] = None
    message: str
    status_code: int
    aws_type: Optional[str]
    aws_detail: Optional[str]

    def __init__(self, response: "Response", aws_error: Optional["AwsError"] = None):
        self.response = response
        self.status_code = response.status_code
        self.aws_error = aws_error
        self.aws_type = aws_error.type if aws_error else None
        self.aws_detail = aws_error.detail if aws_error else None
        if aws_error and aws_error.code:
            self.code = aws_error.code
        self.message = aws_error.message if aws_error and aws_error.message else ""

        try:
            self._populate_result(response)
        except (AttributeError, TypeError, ValueError) as e:
            # the error body does not match the modeled error, keep the members that were read
            LOG.debug("could not read the members of %s from the error response: %s", type(self).__name__, e)
        super().__init__(self._format_message())

    @staticmethod
    def _get_error_data(response: "Response") -> Dict[str, Any]:
        try:
            data = response.to_dict(raise_errors=False)
        except UnparsableResponse:
            return {}
        return data if isinstance(data, dict) else {}

    def _populate_result(self, response: "Response") -> None:
        """
        Hook for generated exceptions to read their modeled members from the error response.
        """
        pass

    def _format_message(self) -> str:
        info = self.response.info()
        message = f'HTTP {self.status_code} returned for "{info.get("url")}".'
        if self.code:
            message += f"\n\nCode:    {self.code}"
        if self.message:
            message += f"\nMessage: {self.message}"
        if self.aws_type:
            message += f"\nType:    {self.aws_type}"
        if self.aws_detail:
            message += f"\nDetail:  {self.aws_detail}"
        return message


class ClientException(HttpException):
    """
    The service returned a 4xx status code.
    """

    pass


class ServerException(HttpException):
    """
    The service returned a 5xx status code.
    """

    pass


class RedirectionException(HttpException):
    """
    The service returned a 3xx status code.
    """

    pass


class AwsError:
    """
    The error details of an error response, as parsed from the body and the headers.
    """

    code: Optional[str]
    message: Optional[str]
    type: Optional[str]
    detail: Optional[str]

    def __init__(
        self,
        code: Optional[str],
        message: Optional[str],
        type: Optional[str] = None,
        detail: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.type = type
        self.detail = detail

    def __repr__(self):
        return f"AwsError(code={self.code!r}, message={self.message!r})"
