"""
================================================================================
Base Page Object
================================================================================

Foundation for the Jenkins page objects.

A page object is a PortingLayer bound to a base URL. Child pages are derived
by plain string concatenation (``url_for("configure")``), so every URL is
expected to end with a slash.

Provides:
    - open() / visit() navigation
    - JSON API access for the object's own URL
    - Control: form fields addressed by Jenkins ``path`` attributes

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import allure
from loguru import logger
from playwright.sync_api import Locator, Page

from . import by
from .form_validation import FormValidation
from .jenkins_api import JenkinsApiClient, JenkinsApiError
from .porting_layer import ElementNotFoundError, PortingLayer
from .wait import ElasticTime


class PageObject(PortingLayer):
    """
    Base class for all page objects.

    Usage:
        class JenkinsConfig(PageObject):
            def __init__(self, jenkins):
                super().__init__(jenkins.page, jenkins.url_for("configure"),
                                 jenkins.api, jenkins.time)
                self.num_executors = self.control("/jenkins-model-MasterBuildConfiguration/numExecutors")
    """

    # Prepended to every Control path of this object
    path_prefix: str = ""

    def __init__(
        self,
        page: Page,
        url: str,
        api: Optional[JenkinsApiClient] = None,
        time: Optional[ElasticTime] = None,
    ):
        """
        Args:
            page: Playwright Page
            url: Absolute URL of this object, ending with '/'
            api: JSON API client used by get_json()
            time: Elastic time shared with the owning Jenkins object
        """
        super().__init__(page, time)
        self.url = url
        self.api = api

    def url_for(self, rel: str) -> str:
        """Absolute URL of a child resource."""
        return self.url + rel

    def open(self) -> "PageObject":
        """Navigate to this object's URL."""
        with allure.step(f"Open {self.url}"):
            self.navigate_to(self.url)
        return self

    def visit(self, rel: str) -> Page:
        """Navigate to a URL relative to this object."""
        return self.navigate_to(self.url_for(rel))

    def get_json(self) -> Dict[str, Any]:
        """
        JSON API representation of this object.

        Raises:
            JenkinsApiError: if no API client is attached or the call fails
        """
        if self.api is None:
            raise JenkinsApiError(f"{type(self).__name__} has no JSON API client")
        return self.api.get_json(self.url_for("api/json"))

    def control(self, *relative_paths: str) -> "Control":
        """Form control addressed relative to this object's path prefix."""
        return Control(self, *relative_paths)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.url})"


class Control:
    """
    A form field located through its Jenkins ``path`` attribute.

    Several paths can be given when the field moved between Jenkins
    releases; they are tried in order.
    """

    def __init__(self, owner: PageObject, *relative_paths: str):
        if not relative_paths:
            raise ValueError("Control needs at least one path")
        self.owner = owner
        self.relative_paths = relative_paths

    def resolve(self) -> Locator:
        """
        Find the element of the first path present on the page.

        Raises:
            ElementNotFoundError: if none of the paths exists
        """
        cause: Optional[ElementNotFoundError] = None
        for rel in self.relative_paths:
            try:
                return self.owner.find(by.path(self.owner.path_prefix + rel))
            except ElementNotFoundError as e:
                cause = e
        raise ElementNotFoundError(
            f"No control for any of {list(self.relative_paths)} in {self.owner.current_url}"
        ) from cause

    def set(self, value: Any) -> None:
        """Replace the field value."""
        element = self.resolve()
        element.fill(str(value))
        logger.debug(f"Set {self.relative_paths[0]} = {value}")

    def check(self, state: bool = True) -> None:
        self.owner.check(self.resolve(), state)

    def text(self) -> str:
        """Current value of an input, or the text of any other element."""
        element = self.resolve()
        tag = element.evaluate("e => e.tagName").lower()
        if tag in ("input", "textarea", "select"):
            return element.input_value()
        return element.inner_text()

    def get_form_validation(self) -> FormValidation:
        """Validation message Jenkins renders for the current value."""
        return FormValidation.await_for(self)

    def __repr__(self) -> str:
        return f"Control({self.owner.path_prefix}{self.relative_paths[0]})"


__all__ = [
    "Control",
    "PageObject",
]
