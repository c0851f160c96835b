"""
================================================================================
Jenkins Root Page Object
================================================================================

Entry point to every other page object of one Jenkins instance.

Usage:
    jenkins = Jenkins(page, "http://localhost:8080/", api)
    jenkins.open()
    config = jenkins.get_config_page()
    view = jenkins.views.create(ListView)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Optional

from loguru import logger
from playwright.sync_api import Page

from autotest_tools.common import get_config
from autotest_tools.version_checker.version_checker import JenkinsVersion
from jenkins_acceptance.framework.jenkins_api import JenkinsApiClient
from jenkins_acceptance.framework.page_object import PageObject
from jenkins_acceptance.framework.wait import ElasticTime

from .agent import Agent
from .jenkins_config import JenkinsConfig
from .job import Job
from .login_page import LoginPage
from .view import ViewsMixer


class Jenkins(PageObject):
    """The Jenkins instance under test."""

    def __init__(
        self,
        page: Page,
        url: Optional[str] = None,
        api: Optional[JenkinsApiClient] = None,
        time: Optional[ElasticTime] = None,
    ):
        url = url or get_config("jenkins.url")
        if not url.endswith("/"):
            url += "/"
        super().__init__(page, url, api, time)
        self.views = ViewsMixer(self)
        self._version: Optional[JenkinsVersion] = None

    def get_version(self) -> JenkinsVersion:
        """Version from the X-Jenkins header, fetched once."""
        if self._version is None:
            if self.api is None:
                with JenkinsApiClient(self.url) as api:
                    self._version = api.get_version()
            else:
                self._version = self.api.get_version()
        return self._version

    def get_config_page(self) -> JenkinsConfig:
        return JenkinsConfig(self)

    def get_agent(self, name: str) -> Agent:
        return Agent(self, name)

    def get_job(self, name: str) -> Job:
        return Job(self, name)

    def login(self, username: Optional[str] = None, password: Optional[str] = None) -> "Jenkins":
        LoginPage(self).login(username, password)
        return self

    def ensure_logged_in(self, username: Optional[str] = None, password: Optional[str] = None) -> bool:
        """
        Log in unless the current (possibly restored) session already is.

        Returns:
            True when the login form was submitted
        """
        self.open()
        if LoginPage(self).is_logged_in():
            logger.debug("Session already logged in")
            return False
        self.login(username, password)
        return True


__all__ = [
    "Jenkins",
]
