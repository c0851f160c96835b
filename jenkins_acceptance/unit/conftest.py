"""
Fixtures for unit-testing the framework without a browser.

Timing is shrunk so waits that are expected to time out do so within
milliseconds.
"""

import pytest
from playwright.sync_api import Error as PlaywrightError

from autotest_tools.common import reset_config, set_config
from fakes import FakeApi, FakePage
from jenkins_acceptance.framework.wait import ElasticTime


@pytest.fixture(autouse=True)
def fast_config():
    """Millisecond waits; dropped again after each test."""
    reset_config()
    set_config("wait.polling_interval", 0.001)
    set_config("wait.timeout", 0.05)
    yield
    reset_config()


@pytest.fixture
def elastic_time() -> ElasticTime:
    # find() polls for one elastic second
    return ElasticTime(0.02)


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest.fixture
def intercepted() -> PlaywrightError:
    return PlaywrightError("Element is covered by another element")
