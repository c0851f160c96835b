"""
================================================================================
Login Page Object
================================================================================

Jenkins' own user database login form at ``/login``.

Credentials default to config ``jenkins.username`` / ``jenkins.password``
(JENKINS_USER / JENKINS_PASSWORD).

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from autotest_tools.common import get_config
from jenkins_acceptance.framework.page_object import PageObject


class LoginPage(PageObject):
    """Login form page object."""

    def __init__(self, jenkins: PageObject):
        super().__init__(jenkins.page, jenkins.url_for("login"), jenkins.api, jenkins.time)

    @allure.step("Login (username={username})")
    def login(self, username: Optional[str] = None, password: Optional[str] = None) -> None:
        """
        Sign in through the form.

        Raises:
            ValueError: if no credentials are given or configured
        """
        username = username or get_config("jenkins.username")
        password = password or get_config("jenkins.password")
        if not username or not password:
            raise ValueError("Login needs jenkins.username and jenkins.password")

        self.open()
        self.fill_in("j_username", username)
        self.fill_in("j_password", password)
        self.click_button("Sign in")
        logger.info(f"Logged in as {username}")

    def is_logged_in(self) -> bool:
        """The page header shows a logout link for signed-in users."""
        return self.get_element("a[href$='/logout']") is not None
