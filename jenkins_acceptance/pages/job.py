"""
Job page object.
"""

from __future__ import annotations

from jenkins_acceptance.framework.page_object import PageObject


class Job(PageObject):
    """A job at ``job/{name}/``."""

    def __init__(self, jenkins: PageObject, name: str):
        super().__init__(jenkins.page, jenkins.url_for(f"job/{name}/"), jenkins.api, jenkins.time)
        self.jenkins = jenkins
        self.name = name

    def get_next_build_number(self) -> int:
        return int(self.get_json()["nextBuildNumber"])

    def __str__(self) -> str:
        return self.name
