from awskit.core.client import AbstractApi
from awskit.core.configuration import Configuration
from awskit.core.enums import StringEnum
from awskit.core.exceptions import (
    AwsError,
    AwsKitException,
    ClientException,
    HttpException,
    InvalidArgument,
    NetworkException,
    RedirectionException,
    ServerException,
    UnparsableResponse,
)
from awskit.core.input import Input
from awskit.core.request import Request, build_uri
from awskit.core.response import Response
from awskit.core.result import Result
from awskit.core.value_object import ValueObject

__all__ = [
    "AbstractApi",
    "AwsError",
    "AwsKitException",
    "ClientException",
    "Configuration",
    "HttpException",
    "Input",
    "InvalidArgument",
    "NetworkException",
    "RedirectionException",
    "Request",
    "Response",
    "Result",
    "ServerException",
    "StringEnum",
    "UnparsableResponse",
    "ValueObject",
    "build_uri",
]
