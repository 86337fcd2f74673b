"""
Shared fixtures: a fake storage account and a gateway wired to it.
"""

import pytest

from abcretailers.adapters.storage import set_storage_gateway
from abcretailers.core.config import reset_settings
from fakes import FakeStorageAccount, build_gateway


@pytest.fixture
def account():
    return FakeStorageAccount()


@pytest.fixture
def gateway(account):
    return build_gateway(account)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep settings and the gateway singleton from leaking between tests."""
    for name in (
        "AZURE_STORAGE_CONNECTION_STRING",
        "ConnectionStrings__AzureStorage",
        "AZURE_BLOB_CONNECTION_STRING",
        "AZURE_STORAGE_OPERATION_TIMEOUT",
        "APP_ENV",
        "LOG_LEVEL",
        "LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    set_storage_gateway(None)
    yield
    reset_settings()
    set_storage_gateway(None)
