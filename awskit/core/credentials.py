import logging
from typing import Optional

import botocore.session
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials
from botocore.exceptions import ProfileNotFound

from awskit.core.configuration import (
    OPTION_ACCESS_KEY_ID,
    OPTION_PROFILE,
    OPTION_SECRET_ACCESS_KEY,
    OPTION_SESSION_TOKEN,
    Configuration,
)
from awskit.core.exceptions import InvalidArgument
from awskit.core.request import Request

LOG = logging.getLogger(__name__)


def resolve_credentials(configuration: Configuration) -> Optional[Credentials]:
    """
    Returns the credentials to sign requests with. Explicitly configured keys win, otherwise botocore's provider chain
    is used (environment variables, shared credentials and config files, container and instance metadata).

    :param configuration: the client configuration
    :return: the credentials, or None if no credentials could be found (requests are sent unsigned)
    """
    if configuration.has(OPTION_ACCESS_KEY_ID):
        return Credentials(
            configuration.get(OPTION_ACCESS_KEY_ID),
            configuration.get(OPTION_SECRET_ACCESS_KEY),
            configuration.get(OPTION_SESSION_TOKEN),
        )

    session = botocore.session.Session(profile=configuration.get(OPTION_PROFILE))
    try:
        credentials = session.get_credentials()
    except ProfileNotFound as e:
        raise InvalidArgument(f"The configured profile does not exist: {e}") from e

    if credentials is None:
        LOG.debug("no AWS credentials found, requests will be sent unsigned")
    return credentials


def sign_request(request: Request, credentials: Credentials, signing_name: str, region: str) -> None:
    """
    Signs the request in place with AWS Signature Version 4, using botocore's signer.

    :param request: the request, its endpoint has to be set already
    :param credentials: the credentials to sign with
    :param signing_name: the signing name of the service
    :param region: the region the request is sent to
    """
    aws_request = AWSRequest(
        method=request.method,
        url=request.url(),
        data=request.body,
        headers=dict(request.headers),
    )
    SigV4Auth(credentials, signing_name, region).add_auth(aws_request)
    for name, value in aws_request.headers.items():
        request.set_header(name, value)
