"""
================================================================================
Views
================================================================================

View page objects and the factory that creates new views through the UI.

Usage:
    view = jenkins.views.create(ListView)
    view.configure()
    view.match_jobs("build-.*")
    view.save()

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import uuid
from typing import Optional, Type, TypeVar

import allure
from loguru import logger

from jenkins_acceptance.framework import by
from jenkins_acceptance.framework.page_object import PageObject
from jenkins_acceptance.framework.porting_layer import ElementNotFoundError, describable


V = TypeVar("V", bound="View")


class View(PageObject):
    """Any Jenkins view at ``view/{name}/``."""

    def __init__(self, jenkins: PageObject, url: str):
        super().__init__(jenkins.page, url, jenkins.api, jenkins.time)
        self.jenkins = jenkins

    @property
    def name(self) -> str:
        return self.url.rstrip("/").rsplit("/", 1)[-1]

    @allure.step("Configure view")
    def configure(self) -> "View":
        self.visit("configure")
        return self

    @allure.step("Save view")
    def save(self) -> None:
        click_save(self)


@describable("List View", "hudson.model.ListView")
class ListView(View):
    """View listing jobs picked by name or regular expression."""

    def __init__(self, jenkins: PageObject, url: str):
        super().__init__(jenkins, url)
        self.use_include_regex = self.control("/useincluderegex")
        self.include_regex = self.control("/useincluderegex/includeRegex", "/includeRegex")

    def match_jobs(self, regex: str) -> None:
        """Enable the regular expression filter and set it to ``regex``."""
        self.use_include_regex.check()
        self.include_regex.set(regex)


class ViewsMixer:
    """Creates views of a Jenkins instance."""

    def __init__(self, jenkins: PageObject):
        self.jenkins = jenkins

    def create(self, view_cls: Type[V], name: Optional[str] = None) -> V:
        """
        Create a view of type ``view_cls`` through the "New View" page.

        Args:
            view_cls: @describable View subclass
            name: View name, random when omitted
        """
        jenkins = self.jenkins
        name = name or uuid.uuid4().hex[:8]

        with allure.step(f"Create {view_cls.__name__} '{name}'"):
            jenkins.visit("newView")
            jenkins.fill_in("name", name)
            jenkins.find_caption(view_cls, jenkins.choose)
            try:
                jenkins.click_button("Create")
            except ElementNotFoundError:
                jenkins.click_button("OK")

        logger.info(f"Created {view_cls.__name__}: {name}")
        return jenkins.new_instance(view_cls, jenkins, jenkins.url_for(f"view/{name}/"))


def click_save(page: PageObject) -> None:
    """Submit a configuration form; older releases label the button "OK"."""
    if page.get_element(by.button("Save")) is not None:
        page.click_button("Save")
    else:
        page.click_button("OK")


__all__ = [
    "ListView",
    "View",
    "ViewsMixer",
    "click_save",
]
