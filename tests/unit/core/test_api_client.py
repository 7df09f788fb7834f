import pytest
import requests

from awskit.core import AbstractApi, ClientException, NetworkException, Request, Result
from awskit.core.configuration import Configuration


class EchoResult(Result):
    def _populate_result(self, response) -> None:
        self._echo = response.to_dict().get("Echo")

    @property
    def echo(self):
        self.initialize()
        return self._echo


class EchoClient(AbstractApi):
    service_name = "echo"
    endpoint_prefix = "echo"
    signing_name = "echo-signing"
    api_version = "2020-01-01"

    def echo(self, message: str, region: str = None) -> EchoResult:
        request = Request(
            "POST",
            "/",
            {},
            {"Content-Type": "application/x-amz-json-1.0", "X-Amz-Target": "Echo.Echo"},
            '{"Message": "%s"}' % message,
        )
        response = self._get_response(request, "Echo", region=region)
        return EchoResult(response, self)


class GlobalClient(EchoClient):
    global_endpoint = "echo.amazonaws.com"


@pytest.fixture
def options():
    return {
        "region": "eu-west-1",
        "access_key_id": "AKIDEXAMPLE",
        "secret_access_key": "secret",
    }


class TestEndpoints:
    def test_regional_endpoint(self, options):
        client = EchoClient(options, session=requests.Session())
        assert client._get_endpoint("eu-west-1") == "https://echo.eu-west-1.amazonaws.com"
        assert client._get_endpoint("cn-north-1") == "https://echo.cn-north-1.amazonaws.com.cn"

    def test_endpoint_override(self, options):
        client = EchoClient(
            {**options, "endpoint": "http://localhost:4566/"}, session=requests.Session()
        )
        assert client._get_endpoint("eu-west-1") == "http://localhost:4566"

    def test_global_endpoint(self, options):
        client = GlobalClient(options, session=requests.Session())
        assert client._get_endpoint("eu-west-1") == "https://echo.amazonaws.com"


class TestRequests:
    def test_request_is_signed_and_sent(self, options, transport, http_session):
        transport.add_response(200, {"Echo": "hello"})

        with EchoClient(options, session=http_session) as client:
            result = client.echo("hello")
            assert result.echo == "hello"

        assert len(transport.requests) == 1
        request = transport.requests[0]
        assert request.method == "POST"
        assert request.url == "https://echo.eu-west-1.amazonaws.com/"
        assert request.headers["X-Amz-Target"] == "Echo.Echo"
        assert request.headers["Authorization"].startswith(
            "AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/"
        )
        assert "/eu-west-1/echo-signing/aws4_request" in request.headers["Authorization"]
        assert "X-Amz-Date" in request.headers
        assert transport.request_json() == {"Message": "hello"}

    def test_session_token_is_sent(self, options, transport, http_session):
        options["session_token"] = "session-token"
        with EchoClient(options, session=http_session) as client:
            client.echo("hello").resolve()

        assert transport.requests[0].headers["X-Amz-Security-Token"] == "session-token"

    def test_region_per_request(self, options, transport, http_session):
        with EchoClient(options, session=http_session) as client:
            client.echo("hello", region="ap-northeast-1").resolve()

        request = transport.requests[0]
        assert request.url == "https://echo.ap-northeast-1.amazonaws.com/"
        assert "/ap-northeast-1/echo-signing/aws4_request" in request.headers["Authorization"]

    def test_unsigned_without_credentials(self, transport, http_session, monkeypatch):
        monkeypatch.setattr("awskit.core.client.resolve_credentials", lambda configuration: None)

        with EchoClient({"region": "eu-west-1"}, session=http_session) as client:
            client.echo("hello").resolve()

        assert "Authorization" not in transport.requests[0].headers

    def test_network_error(self, options, transport, http_session):
        transport.error = requests.ConnectionError("connection refused")

        with EchoClient(options, session=http_session) as client:
            result = client.echo("hello")
            with pytest.raises(NetworkException):
                result.resolve()

    def test_configuration(self, options):
        client = EchoClient(Configuration.create(options), session=requests.Session())
        assert client.configuration.get("region") == "eu-west-1"

    def test_default_session_retries(self, options):
        client = EchoClient({**options, "max_retries": 5})
        adapter = client._session.get_adapter("https://echo.eu-west-1.amazonaws.com")
        assert adapter.max_retries.total == 5
        assert 503 in adapter.max_retries.status_forcelist
        assert client._session.headers["User-Agent"].startswith("awskit/")
        client.close()


class TestRetries:
    @pytest.fixture
    def sleeps(self, monkeypatch):
        sleeps = []
        monkeypatch.setattr("awskit.core.client.time.sleep", sleeps.append)
        return sleeps

    @pytest.fixture
    def server_options(self, options, httpserver):
        return {**options, "endpoint": httpserver.url_for("/"), "max_retries": 3}

    def test_throttling_error_is_retried(self, server_options, httpserver, sleeps):
        httpserver.expect_oneshot_request("/", method="POST").respond_with_json(
            {"__type": "com.amazonaws.echo#ThrottlingException", "message": "slow down"}, status=400
        )
        httpserver.expect_request("/", method="POST").respond_with_json({"Echo": "hello"})

        with EchoClient(server_options) as client:
            assert client.echo("hello").echo == "hello"

        assert len(httpserver.log) == 2
        assert sleeps == [0.5]
        for request, _ in httpserver.log:
            assert request.headers["Authorization"].startswith("AWS4-HMAC-SHA256 ")
            assert request.get_data() == b'{"Message": "hello"}'

    def test_throttling_error_type_header(self, server_options, httpserver, sleeps):
        httpserver.expect_oneshot_request("/", method="POST").respond_with_json(
            {"message": "too many requests"},
            status=400,
            headers={"x-amzn-ErrorType": "TooManyRequestsException:http://internal.amazon.com/"},
        )
        httpserver.expect_request("/", method="POST").respond_with_json({"Echo": "hello"})

        with EchoClient(server_options) as client:
            assert client.echo("hello").echo == "hello"

        assert len(httpserver.log) == 2

    def test_retries_are_limited(self, server_options, httpserver, sleeps):
        httpserver.expect_request("/", method="POST").respond_with_json(
            {"__type": "ProvisionedThroughputExceededException"}, status=400
        )

        with EchoClient({**server_options, "max_retries": 2}) as client:
            with pytest.raises(ClientException) as e:
                client.echo("hello").resolve()

        assert e.value.code == "ProvisionedThroughputExceededException"
        assert len(httpserver.log) == 3
        assert sleeps == [0.5, 1.0]

    def test_no_retries(self, server_options, httpserver, sleeps):
        httpserver.expect_request("/", method="POST").respond_with_json(
            {"__type": "ThrottlingException"}, status=400
        )

        with EchoClient({**server_options, "max_retries": 0}) as client:
            with pytest.raises(ClientException):
                client.echo("hello").resolve()

        assert len(httpserver.log) == 1
        assert sleeps == []

    def test_other_client_errors_are_not_retried(self, server_options, httpserver, sleeps):
        httpserver.expect_request("/", method="POST").respond_with_json(
            {"__type": "ValidationException", "message": "invalid"}, status=400
        )

        with EchoClient(server_options) as client:
            with pytest.raises(ClientException) as e:
                client.echo("hello").resolve()

        assert e.value.code == "ValidationException"
        assert len(httpserver.log) == 1

    def test_server_error_is_retried(self, server_options, httpserver):
        httpserver.expect_oneshot_request("/", method="POST").respond_with_data("", status=503)
        httpserver.expect_request("/", method="POST").respond_with_json({"Echo": "hello"})

        with EchoClient(server_options) as client:
            assert client.echo("hello").echo == "hello"

        assert len(httpserver.log) == 2
