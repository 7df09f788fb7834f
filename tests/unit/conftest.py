import json
import threading
from typing import Callable, List, Optional, Union

import pytest
import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

Handler = Callable[[requests.PreparedRequest], "FakeResponse"]


class FakeResponse:
    def __init__(self, status: int = 200, body: Union[dict, list, str, bytes, None] = None, headers=None):
        self.status = status
        self.body = body
        self.headers = headers or {}

    def content(self) -> bytes:
        if self.body is None:
            return b""
        if isinstance(self.body, (dict, list)):
            return json.dumps(self.body).encode("utf-8")
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body


class FakeTransport(BaseAdapter):
    """
    A requests transport adapter which records the requests and answers them with queued responses (or with the
    response returned by a handler function), without any network access.
    """

    def __init__(self):
        super().__init__()
        self.requests: List[requests.PreparedRequest] = []
        self.responses: List[FakeResponse] = []
        self.handler: Optional[Handler] = None
        self.error: Optional[Exception] = None
        self._lock = threading.Lock()

    def add_response(self, status: int = 200, body=None, headers=None) -> "FakeTransport":
        self.responses.append(FakeResponse(status, body, headers))
        return self

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        with self._lock:
            self.requests.append(request)
            if self.error:
                raise self.error
            if self.handler:
                fake = self.handler(request)
            elif self.responses:
                fake = self.responses.pop(0)
            else:
                fake = FakeResponse(200, {})

        response = requests.Response()
        response.status_code = fake.status
        response._content = fake.content()
        response._content_consumed = True
        response.headers = CaseInsensitiveDict(fake.headers)
        response.url = request.url
        response.request = request
        response.reason = "Fake"
        return response

    def close(self):
        pass

    def request_json(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].body)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def http_session(transport) -> requests.Session:
    session = requests.Session()
    session.mount("https://", transport)
    session.mount("http://", transport)
    yield session
    session.close()
