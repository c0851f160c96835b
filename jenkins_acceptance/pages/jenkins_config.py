"""
Global configuration page (``/configure``).
"""

from __future__ import annotations

import allure

from jenkins_acceptance.framework.page_object import PageObject

from .view import click_save


class JenkinsConfig(PageObject):

    def __init__(self, jenkins: PageObject):
        super().__init__(jenkins.page, jenkins.url_for("configure"), jenkins.api, jenkins.time)
        self.jenkins = jenkins
        self.num_executors = self.control(
            "/jenkins-model-MasterBuildConfiguration/numExecutors",
            "/numExecutors",
        )

    @allure.step("Open global configuration")
    def configure(self) -> "JenkinsConfig":
        self.open()
        return self

    @allure.step("Save global configuration")
    def save(self) -> None:
        click_save(self)
