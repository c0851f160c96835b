"""
Repository-level pytest configuration.

  - Command line options for the browser used by acceptance tests
  - Logger initialisation from config/config.yaml
  - pytester, used by the unit tests of the acceptance fixtures

The Jenkins under test defaults to config/config.yaml (a local
`java -jar jenkins.war`). CI jobs export JENKINS_URL / JENKINS_USER /
JENKINS_API_TOKEN instead.
"""

from __future__ import annotations

import os

from autotest_tools.common import init_logger, reset_config


pytest_plugins = ["pytester"]


def pytest_addoption(parser):
    group = parser.getgroup("jenkins-acceptance")
    group.addoption(
        "--ui-browser",
        action="store",
        default=None,
        choices=("chromium", "firefox", "webkit"),
        help="Browser for acceptance tests (default: config browser.type)",
    )
    group.addoption(
        "--ui-headed",
        action="store_true",
        default=False,
        help="Show the browser window",
    )
    group.addoption(
        "--jenkins-url",
        action="store",
        default=None,
        help="Jenkins under test (default: config jenkins.url / JENKINS_URL)",
    )


def pytest_configure(config):
    # Exported as environment so a configuration reload keeps them
    if config.getoption("--ui-browser"):
        os.environ["BROWSER"] = config.getoption("--ui-browser")
    if config.getoption("--ui-headed"):
        os.environ["BROWSER__HEADLESS"] = "false"
    if config.getoption("--jenkins-url"):
        os.environ["JENKINS_URL"] = config.getoption("--jenkins-url")
    reset_config()
    init_logger()

