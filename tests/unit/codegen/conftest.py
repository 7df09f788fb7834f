import importlib
import json
import os
import sys
from typing import Optional

import pytest

from awskit.codegen.definition import ServiceDefinition
from awskit.codegen.generator import ServiceGenerator, create_package_directory

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def _read_fixture(file_name: str) -> Optional[dict]:
    path = os.path.join(FIXTURES_DIR, file_name)
    if not os.path.exists(path):
        return None
    with open(path) as fd:
        return json.load(fd)


def load_fixture_service(name: str) -> ServiceDefinition:
    return ServiceDefinition(
        name,
        _read_fixture(f"{name}-service-2.json"),
        _read_fixture(f"{name}-paginators-1.json"),
    )


@pytest.fixture
def load_description():
    """Returns a function loading the raw service description of a fixture service."""

    def _load(name: str) -> dict:
        return _read_fixture(f"{name}-service-2.json")

    return _load


@pytest.fixture
def fakedb_service() -> ServiceDefinition:
    return load_fixture_service("fakedb")


@pytest.fixture
def fakemedia_service() -> ServiceDefinition:
    return load_fixture_service("fakemedia")


@pytest.fixture(scope="session")
def generated_packages(tmp_path_factory):
    """
    Generates the client packages of the fixture services into a temporary directory and makes them importable.
    """
    path = tmp_path_factory.mktemp("generated")
    for name in ("fakedb", "fakemedia"):
        files = ServiceGenerator(load_fixture_service(name)).generate()
        create_package_directory(name, files, str(path))

    sys.path.insert(0, str(path))
    importlib.invalidate_caches()
    yield path
    sys.path.remove(str(path))


@pytest.fixture(scope="session")
def fakedb(generated_packages):
    return importlib.import_module("fakedb")


@pytest.fixture(scope="session")
def fakemedia(generated_packages):
    return importlib.import_module("fakemedia")


@pytest.fixture
def client_options():
    return {
        "region": "eu-west-1",
        "access_key_id": "AKIDEXAMPLE",
        "secret_access_key": "secret",
        "max_retries": 0,
    }


@pytest.fixture
def fakedb_client(fakedb, client_options, http_session):
    client = fakedb.FakeDbClient(client_options, session=http_session)
    yield client
    client.close()


@pytest.fixture
def fakemedia_client(fakemedia, client_options, http_session):
    client = fakemedia.FakeMediaClient(client_options, session=http_session)
    yield client
    client.close()
