"""
================================================================================
Acceptance Test Pytest Configuration
================================================================================

Fixtures for tests that drive a real Jenkins through a real browser.

Key Features:
- Skips the whole suite when Jenkins is not reachable
- One browser per session, a fresh context and page per test
- Login when credentials are configured
- Failure diagnostics (screenshot, page source, URL) per failed test

================================================================================
"""

from typing import Generator

import httpx
import pytest
from loguru import logger
from playwright.sync_api import BrowserContext, Page

from autotest_tools.common import get_config
from autotest_tools.version_checker.version_checker import JenkinsVersion
from jenkins_acceptance.framework.browser_manager import BrowserManager
from jenkins_acceptance.framework.diagnostics import FailureDiagnostics
from jenkins_acceptance.framework.jenkins_api import JenkinsApiClient, JenkinsApiError
from jenkins_acceptance.framework.wait import ElasticTime
from jenkins_acceptance.pages.agent import Agent
from jenkins_acceptance.pages.jenkins import Jenkins


# ================================================================================
# Jenkins Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def jenkins_api() -> Generator[JenkinsApiClient, None, None]:
    """
    Session-scoped JSON API client.

    Probes the instance first; every test depending on it is skipped when
    Jenkins does not answer.
    """
    with JenkinsApiClient() as api:
        try:
            version = api.get_version()
        except (httpx.HTTPError, JenkinsApiError) as e:
            pytest.skip(f"Jenkins is not reachable at {api.base_url}: {e}")
        logger.info(f"Testing Jenkins {version} at {api.base_url}")
        yield api


@pytest.fixture(scope="session")
def jenkins_version(jenkins_api: JenkinsApiClient) -> JenkinsVersion:
    return jenkins_api.get_version()


@pytest.fixture(scope="session")
def elastic_time() -> ElasticTime:
    return ElasticTime.from_config()


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture(scope="session")
def browser_manager(jenkins_api: JenkinsApiClient) -> Generator[BrowserManager, None, None]:
    """
    Session-scoped browser manager fixture.

    Depends on the API reachability check so no browser is launched for an absent Jenkins.
    Contexts start from the login state saved by an earlier test.
    """
    with BrowserManager(restore_auth=True) as manager:
        yield manager


@pytest.fixture(scope="function")
def context(browser_manager: BrowserManager) -> Generator[BrowserContext, None, None]:
    """Function-scoped browser context, isolating cookies between tests."""
    context = browser_manager.new_context()
    yield context
    browser_manager.close_context(context)


@pytest.fixture(scope="function")
def page(context: BrowserContext) -> Page:
    return context.new_page()


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def jenkins(
    page: Page,
    browser_manager: BrowserManager,
    jenkins_api: JenkinsApiClient,
    elastic_time: ElasticTime,
) -> Jenkins:
    """
    Provides the Jenkins root page object.

    When jenkins.username and jenkins.password are configured the session is
    logged in, reusing the saved login state when it is still valid.
    """
    jenkins = Jenkins(page, jenkins_api.base_url, jenkins_api, elastic_time)
    if get_config("jenkins.username") and get_config("jenkins.password"):
        if jenkins.ensure_logged_in():
            browser_manager.save_auth_state(page.context)
    return jenkins


@pytest.fixture
def agent(jenkins: Jenkins) -> Agent:
    """The agent named by JENKINS_AGENT; skipped when none is configured."""
    name = get_config("jenkins.agent")
    if not name:
        pytest.skip("No agent configured (set JENKINS_AGENT)")
    return jenkins.get_agent(name)


# ================================================================================
# Failure Diagnostics
# ================================================================================

@pytest.fixture(autouse=True)
def diagnostics(request) -> Generator[FailureDiagnostics, None, None]:
    """
    Per-test diagnostics directory.

    Left empty and removed for passing tests; announced and attached to the
    report for failing ones.
    """
    diagnostics = FailureDiagnostics(request.node.nodeid)
    yield diagnostics

    report = getattr(request.node, "rep_call", None)
    if report is not None and report.failed:
        diagnostics.failed()
    else:
        diagnostics.succeeded()


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Keep each phase's report on the item and capture the page on failure.

    The page is captured here, while it is still open; the diagnostics
    fixture publishes the files during teardown.
    """
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)

    if report.when == "call" and report.failed:
        funcargs = getattr(item, "funcargs", {})
        diagnostics = funcargs.get("diagnostics")
        jenkins = funcargs.get("jenkins")
        if diagnostics is not None and jenkins is not None:
            diagnostics.capture_page(jenkins)
