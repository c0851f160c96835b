"""
================================================================================
Agent Page Object
================================================================================

Nodes of a Jenkins instance and the build agent at ``computer/{name}/``.

State (online/offline, executors) is read from the JSON API; changes go
through the UI buttons a user would press. Button labels changed across
Jenkins releases ("slave" became "agent"), so the old ones are tried as a
fallback.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Optional

import allure
from loguru import logger

from jenkins_acceptance.framework import by
from jenkins_acceptance.framework.page_object import PageObject
from jenkins_acceptance.framework.porting_layer import ElementNotFoundError

from .job import Job


DEFAULT_OFFLINE_MESSAGE = "Just for testing... be right back..."

MARK_OFFLINE = "Mark this node temporarily offline"
BRING_ONLINE = "Bring this node back online"

# The builds table is filled asynchronously
BUILDS_SETTLE_MS = 2000


class Node(PageObject, ABC):
    """Anything that can run builds: the built-in node or an agent."""

    @abstractmethod
    def get_name(self) -> str:
        ...

    def __str__(self) -> str:
        return self.get_name()


class Agent(Node):
    """
    Build agent.

    Usage:
        agent = jenkins.get_agent("linux-1")
        agent.mark_offline()
        assert agent.is_offline()
        agent.mark_online()
        agent.wait_until_online()
    """

    def __init__(self, jenkins: PageObject, name: str):
        super().__init__(jenkins.page, jenkins.url_for(f"computer/{name}/"), jenkins.api, jenkins.time)
        self.jenkins = jenkins
        self.name = name

    def get_name(self) -> str:
        return self.name

    def is_offline(self) -> bool:
        return bool(self.get_json()["offline"])

    def is_online(self) -> bool:
        return not self.is_offline()

    def get_executor_count(self) -> int:
        return len(self.get_json()["executors"])

    def wait_until_online(self) -> "Agent":
        """Wait for the agent to connect; a timeout carries the agent log."""
        self.wait_for().with_message("Agent is online").until(
            self.is_online,
            diagnose=lambda last_error, message: "Agent log:\n" + self.get_log(),
        )
        return self

    def get_log(self) -> str:
        self.visit("log")
        return self.find(by.css("pre#out pre")).inner_text()

    @allure.step("Mark agent offline")
    def mark_offline(self, message: str = DEFAULT_OFFLINE_MESSAGE) -> None:
        """Take an online agent offline with ``message`` as the reason."""
        if not self.is_online():
            return
        self.open()
        self.click_button(MARK_OFFLINE)
        self._set_offline_message(message)
        self.click_button(MARK_OFFLINE)
        logger.info(f"Agent {self.name} marked offline")

    @allure.step("Mark agent online")
    def mark_online(self) -> None:
        """Bring an agent marked offline back."""
        if not self.is_offline():
            return
        self.open()
        self.click_button(BRING_ONLINE)
        logger.info(f"Agent {self.name} marked online")

    @allure.step("Disconnect agent")
    def disconnect(self, message: str) -> None:
        if not self.is_online():
            return
        self.open()
        self.find(by.link("Disconnect")).click()
        self._set_offline_message(message)
        self.click_button("Yes")

    @allure.step("Delete agent")
    def delete(self) -> None:
        self.open()
        try:
            self.click_link("Delete Agent")
        except ElementNotFoundError:
            self.click_link("Delete Slave")
        self.click_button("Yes")

    @allure.step("Launch agent")
    def launch_agent(self) -> None:
        """Launch an offline agent."""
        if not self.is_offline():
            return
        self.open()
        try:
            self.click_button("Launch agent")
        except ElementNotFoundError:
            self.click_button("Launch slave agent")

    def ran_builds_in_order(self, *jobs: Job) -> bool:
        """Whether the agent's build history lists ``jobs`` in this order."""
        self.visit("builds")
        self.elastic_sleep(BUILDS_SETTLE_MS)
        history = self.find(by.id("projectStatus")).inner_text()

        pattern = ".*" + "".join(re.escape(job.name) + ".*" for job in jobs)
        return re.fullmatch(pattern, history, re.DOTALL) is not None

    def _set_offline_message(self, message: Optional[str]) -> None:
        field = self.find(by.input("offlineMessage"))
        field.fill(message or "")


__all__ = [
    "Agent",
    "DEFAULT_OFFLINE_MESSAGE",
    "Node",
]
