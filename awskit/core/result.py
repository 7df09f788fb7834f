import logging
from concurrent.futures import FIRST_COMPLETED
from concurrent.futures import wait as wait_futures
from typing import TYPE_CHECKING, Any, Dict, Iterable, Iterator, Optional

from awskit.core.response import Response

if TYPE_CHECKING:
    from awskit.core.client import AbstractApi
    from awskit.core.input import Input

LOG = logging.getLogger(__name__)


class Result:
    """
    The result of an operation. The request is sent as soon as the client method is called, the result is only
    waited for when one of its properties is accessed (or when ``resolve`` is called explicitly).

    Generated subclasses implement ``_populate_result`` to read their members from the response.
    """

    def __init__(
        self,
        response: Response,
        client: Optional["AbstractApi"] = None,
        input: Optional["Input"] = None,
    ):
        self._response = response
        self._client = client
        self._input = input
        self._initialized = False
        self._prefetch_results: Dict[int, "Result"] = {}

    def resolve(self, timeout: Optional[float] = None) -> bool:
        """
        Waits for the response.

        :param timeout: the maximum number of seconds to wait, None to wait forever
        :return: True if the response is available, False if the timeout elapsed before
        :raises HttpException: if the service returned an error
        """
        return self._response.resolve(timeout)

    def cancel(self) -> None:
        """
        Cancels the request (if it was not sent yet) and all the pages prefetched by paginators.
        """
        for result in list(self._prefetch_results.values()):
            result.cancel()
        self._prefetch_results.clear()
        self._response.cancel()

    def info(self) -> Dict[str, Any]:
        """
        Returns debugging information about the underlying request and response.
        """
        return self._response.info()

    def initialize(self) -> None:
        if self._initialized:
            return

        self.resolve()
        self._initialized = True
        self._populate_result(self._response)

    def _populate_result(self, response: Response) -> None:
        pass

    def _register_prefetch(self, result: "Result") -> None:
        self._prefetch_results[id(result)] = result

    def _unregister_prefetch(self, result: "Result") -> None:
        self._prefetch_results.pop(id(result), None)

    @staticmethod
    def wait(
        results: Iterable["Result"], timeout: Optional[float] = None
    ) -> Iterator["Result"]:
        """
        Yields the given results as soon as their responses arrive.

        :param results: the results to wait for
        :param timeout: the maximum number of seconds to wait for each response, None to wait forever
        :return: an iterator over the resolved results, in the order in which they complete
        :raises HttpException: if a service returned an error (raised when the failing result is reached)
        """
        pending = {result._response.future: result for result in results}
        while pending:
            done, _ = wait_futures(list(pending), timeout=timeout, return_when=FIRST_COMPLETED)
            if not done:
                LOG.debug("timeout while waiting for %d results", len(pending))
                return
            for future in done:
                result = pending.pop(future)
                result.resolve()
                yield result
