import os

import pytest

# make sure no endpoint override or extra model path of the environment leaks into the tests
for _name in ("AWS_ENDPOINT_URL", "AWSKIT_EXTRA_MODEL_PATH"):
    os.environ.pop(_name, None)


@pytest.fixture(autouse=True)
def set_test_credentials_and_region(monkeypatch):
    """
    Automatically sets the default credentials and region for all tests.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "test")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "test")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
