"""
Shared fixtures for Notification service tests.
"""

import os

import pytest

from notification_shared.config import ServiceConfig
from notification_shared.test_helpers import FakeParameterStore, MockEnvironment


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep appsettings.json, .env and NOTIFICATION_ variables out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("NOTIFICATION_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def config_values():
    return MockEnvironment.get_mock_config()


@pytest.fixture
def config(config_values):
    return ServiceConfig(**config_values)


@pytest.fixture
def parameter_store():
    return FakeParameterStore()
