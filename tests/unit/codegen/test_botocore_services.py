"""
Generates the clients of real services from the service descriptions shipped with botocore, and makes sure the
generated packages can be imported and used.
"""
import importlib
import sys

import pytest

from awskit.codegen.generator import ServiceGenerator, create_package_directory
from awskit.codegen.loader import load_service


@pytest.fixture
def import_generated(tmp_path, monkeypatch):
    """Returns a function which generates the package of a service into a temporary directory and imports it."""
    monkeypatch.syspath_prepend(str(tmp_path))
    imported = []

    def _import(service_name: str, operations=None):
        generator = ServiceGenerator(load_service(service_name), operations)
        files = generator.generate()
        for file_name, code in files.items():
            compile(code, f"{service_name}/{file_name}", "exec")
        create_package_directory(service_name, files, str(tmp_path))
        imported.append(generator.package_name)
        return importlib.import_module(generator.package_name)

    yield _import

    for name in list(sys.modules):
        if name.split(".")[0] in imported:
            sys.modules.pop(name)


@pytest.mark.parametrize("service_name", ["dynamodb", "kinesis", "athena", "mediaconvert"])
def test_generated_package_can_be_imported(import_generated, service_name):
    package = import_generated(service_name)

    client_class = getattr(package, package.__all__[0])
    assert client_class.service_name == service_name
    for module in ("enums", "value_objects", "exceptions", "inputs", "results", "client"):
        assert importlib.import_module(f"{package.__name__}.{module}")


def test_dynamodb_client(import_generated, http_session, transport):
    dynamodb = import_generated("dynamodb", ["ListTables", "PutItem"])
    transport.add_response(200, {"TableNames": ["users"]})

    options = {"region": "us-east-1", "access_key_id": "AKIDEXAMPLE", "secret_access_key": "secret"}
    with dynamodb.DynamoDbClient(options, session=http_session) as client:
        assert list(client.list_tables({"Limit": 1})) == ["users"]

    request = transport.requests[0]
    assert request.url == "https://dynamodb.us-east-1.amazonaws.com/"
    assert request.headers["X-Amz-Target"] == "DynamoDB_20120810.ListTables"
    assert transport.request_json() == {"Limit": 1}


def test_mediaconvert_input_class_is_renamed(import_generated):
    mediaconvert = import_generated("mediaconvert", ["CreateJob"])

    settings = mediaconvert.value_objects.JobSettings.create({"Inputs": [{"FileInput": "s3://bucket/in.mp4"}]})

    assert isinstance(settings.inputs[0], mediaconvert.value_objects.Input_)
    assert settings.request_body() == {"inputs": [{"fileInput": "s3://bucket/in.mp4"}]}
