"""Base class of the generated service clients: endpoint resolution, signing and sending requests."""
import logging
import threading
import time
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Optional

import requests
from botocore.credentials import Credentials
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from awskit.constants import USER_AGENT
from awskit.core.configuration import (
    OPTION_DEBUG,
    OPTION_ENDPOINT,
    OPTION_MAX_RETRIES,
    OPTION_MAX_WORKERS,
    OPTION_REGION,
    OPTION_TIMEOUT,
    Configuration,
    ConfigurationLike,
    to_configuration,
)
from awskit.core.credentials import resolve_credentials, sign_request
from awskit.core.request import Request
from awskit.core.response import ExceptionMapping, Response, is_throttling_error

LOG = logging.getLogger(__name__)
REQUEST_LOG = logging.getLogger("awskit.request")

# throttling and transient server status codes are retried by urllib3
RETRY_STATUS_CODES = (429, 500, 502, 503, 504)
# seconds to wait before the first retry of a throttling error, doubled for every further retry
THROTTLING_BACKOFF_FACTOR = 0.5


class AbstractApi:
    """
    A client for one AWS service. Generated clients subclass it, set the class attributes describing the service
    and add one method per operation.

    Every operation call returns immediately: the request is sent by a worker thread, and the returned result waits
    for the response only when it is accessed.
    """

    service_name: str = None
    endpoint_prefix: str = None
    signing_name: str = None
    api_version: str = None
    global_endpoint: Optional[str] = None

    def __init__(
        self,
        configuration: ConfigurationLike = None,
        credentials: Optional[Credentials] = None,
        session: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
    ):
        """
        :param configuration: a Configuration or a dict of configuration options
        :param credentials: botocore credentials to sign requests with, resolved from the configuration if not given
        :param session: the requests session used to send requests, a session with retries is created if not given
        :param executor: the executor sending requests in the background, a thread pool is created if not given
        """
        self._configuration = to_configuration(configuration)
        self._credentials = (
            credentials if credentials is not None else resolve_credentials(self._configuration)
        )
        self._session = session if session is not None else self._create_session()
        self._executor = executor
        self._owns_executor = executor is None
        self._executor_lock = threading.Lock()

    @property
    def configuration(self) -> Configuration:
        return self._configuration

    def _create_session(self) -> requests.Session:
        retry = Retry(
            total=self._configuration.get(OPTION_MAX_RETRIES),
            backoff_factor=0.5,
            status_forcelist=RETRY_STATUS_CODES,
            allowed_methods=None,
            raise_on_status=False,
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(
            max_retries=retry, pool_maxsize=self._configuration.get(OPTION_MAX_WORKERS)
        )
        session = requests.Session()
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers["User-Agent"] = USER_AGENT
        return session

    def _get_executor(self) -> Executor:
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._configuration.get(OPTION_MAX_WORKERS),
                    thread_name_prefix=f"awskit-{self.service_name}",
                )
            return self._executor

    def _get_endpoint(self, region: str) -> str:
        if endpoint := self._configuration.get(OPTION_ENDPOINT):
            return endpoint.rstrip("/")
        if self.global_endpoint:
            return f"https://{self.global_endpoint}"
        suffix = "amazonaws.com.cn" if region.startswith("cn-") else "amazonaws.com"
        return f"https://{self.endpoint_prefix}.{region}.{suffix}"

    def _sign(self, request: Request, region: str) -> None:
        if self._credentials is not None:
            sign_request(request, self._credentials, self.signing_name or self.endpoint_prefix, region)

    def _get_response(
        self,
        request: Request,
        operation: str,
        region: Optional[str] = None,
        exception_mapping: Optional[ExceptionMapping] = None,
    ) -> Response:
        """
        Signs the request and hands it to the executor.

        :param request: the request rendered by the input
        :param operation: the name of the operation (used for logging and debugging information)
        :param region: the region of this request, defaults to the configured region
        :param exception_mapping: error code to exception class of the modeled errors of the operation
        :return: the pending response
        """
        region = region or self._configuration.get(OPTION_REGION)
        request.endpoint = self._get_endpoint(region)
        self._sign(request, region)

        LOG.debug("sending %s request: %s %s", operation, request.method, request.url())
        future = self._get_executor().submit(self._send, request, operation, region)
        return Response(future, request, operation, exception_mapping)

    def _send(self, request: Request, operation: str, region: str) -> requests.Response:
        """
        Sends the request. Throttling errors returned with a 4xx status code are not seen by the urllib3 retries, those
        requests are signed again and resent here, up to the configured number of retries.
        """
        max_retries = self._configuration.get(OPTION_MAX_RETRIES) or 0
        attempt = 0
        while True:
            response = self._session.request(
                method=request.method,
                url=request.url(),
                headers=request.headers,
                data=request.body,
                timeout=self._configuration.get(OPTION_TIMEOUT),
            )
            log = REQUEST_LOG.info if self._configuration.get(OPTION_DEBUG) else REQUEST_LOG.debug
            log(
                "%s %s => %d",
                request.method,
                request.url(),
                response.status_code,
                extra={
                    "operation": operation,
                    "request_body": request.body,
                    "status_code": response.status_code,
                    "response_body": response.content,
                },
            )
            if attempt >= max_retries or not is_throttling_error(response):
                return response

            delay = THROTTLING_BACKOFF_FACTOR * (2**attempt)
            attempt += 1
            LOG.debug("%s was throttled, retry %d of %d in %.1fs", operation, attempt, max_retries, delay)
            response.close()
            time.sleep(delay)
            # the signature contains the request date
            self._sign(request, region)

    def close(self) -> None:
        """
        Waits for the pending requests and releases the thread pool and the HTTP connections.
        """
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
