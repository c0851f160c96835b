"""
================================================================================
Porting Layer
================================================================================

Thin convenience layer over a Playwright page that every page object builds
on. It re-exposes driver primitives with the retry and timeout behaviour UI
acceptance tests need:

    - find / find_if_not_visible / get_element / all / last
    - wait_for (polling builder) and the element/condition shortcuts
    - click_button / click_link / choose / check / fill_in / blur
    - execute_script with Selenium-style `arguments[i]` bodies
    - native dialog (alert/confirm/beforeunload) handling
    - new_instance: constructor matching for page-area types
    - find_caption: try a type's known UI captions in order

Lookups fail with ElementNotFoundError carrying the current URL, which is
usually all that is needed to understand a broken test from its log.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import inspect
import typing
from pathlib import Path
from typing import Any, Callable, List, Optional, Tuple, Type, TypeVar, Union

import allure
from loguru import logger
from playwright.sync_api import Dialog, Error as PlaywrightError, Locator, Page

from autotest_tools.common import get_float

from . import by
from .wait import ElasticTime, Wait, WaitTimeoutError


T = TypeVar("T")

# How long find() keeps looking for a visible match, before elastic scaling
FIND_TIMEOUT = 1.0

# Polling interval while waiting for a native dialog
ALERT_POLLING_INTERVAL = 0.5

CLICK_TIMEOUT_MS = 5000

_NONE_TYPE = type(None)

_POSITIONAL_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class ElementNotFoundError(Exception):
    """Raised when no (visible) element matches a selector."""
    pass


def describable(*captions: str) -> Callable[[Type[T]], Type[T]]:
    """
    Declare the UI captions a page-object type is known by.

    The first caption is the current one; later ones cover older Jenkins
    releases that labelled the same thing differently.

        @describable("List View", "hudson.model.ListView")
        class ListView(View): ...
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls._captions = tuple(captions)
        return cls
    return decorator


class PortingLayer:
    """
    Element location, waiting and interaction helpers over a Playwright page.

    Usage:
        layer = PortingLayer(page)
        layer.navigate_to("http://localhost:8080/configure")
        layer.fill_in("_.numExecutors", 4)
        layer.click_button("Save")
    """

    def __init__(self, page: Page, time: Optional[ElasticTime] = None):
        """
        Args:
            page: Playwright Page the layer drives
            time: Elastic time for timeouts (read from config when omitted)
        """
        self.page = page
        self.time = time or ElasticTime.from_config()

    # =========================================================================
    # Navigation
    # =========================================================================

    @property
    def current_url(self) -> str:
        """URL of the page currently loaded in the browser."""
        return self.page.url

    def get_current_url_with_fragment(self) -> str:
        """Current URL including the fragment part."""
        return str(self.execute_script("return document.location.href"))

    def navigate_to(self, url: str) -> Page:
        """Navigate the browser to an absolute URL."""
        self.page.goto(url)
        logger.debug(f"Navigated to: {url}")
        return self.page

    # =========================================================================
    # Waiting
    # =========================================================================

    def _pause(self, seconds: float) -> None:
        # The page-backed sleep lets Playwright dispatch events (dialogs) meanwhile
        self.page.wait_for_timeout(seconds * 1000)

    def wait_for(self, subject: Any = None) -> Wait:
        """
        Default waiting object configured with default timing.

        Args:
            subject: Object handed to ``until_matches`` predicates
                (defaults to this layer)
        """
        return (
            Wait(self if subject is None else subject, time=self.time, sleeper=self._pause)
            .polling_every(get_float("wait.polling_interval", 0.5))
            .with_timeout(get_float("wait.timeout", 120))
        )

    def wait_for_element(self, selector: str, timeout: Optional[float] = None) -> Locator:
        """
        Wait until an element matching the selector is visible.

        Args:
            selector: Playwright selector (see ``by``)
            timeout: Seconds to wait; the configured default when omitted
        """
        wait = (
            self.wait_for()
            .with_message("Element matching %s is present", selector)
            .ignoring(ElementNotFoundError)
        )
        if timeout is not None:
            wait.with_timeout(timeout)
        return wait.until(lambda: self.find(selector))

    def wait_for_cond(self, block: Callable[[], T], timeout: Optional[float] = None) -> T:
        """Repeatedly evaluate ``block`` until it returns a value other than None/False."""
        wait = self.wait_for()
        if timeout is not None:
            wait.with_timeout(timeout)
        return wait.until(block)

    def wait_for_match(
        self,
        item: T,
        predicate: Callable[[T], bool],
        timeout: float,
        description: Optional[str] = None,
    ) -> T:
        """Wait until ``predicate(item)`` holds; ``description`` names the expectation."""
        return (
            self.wait_for(item)
            .with_timeout(timeout)
            .until_matches(predicate, description or _describe_predicate(predicate))
        )

    # =========================================================================
    # Element Lookup
    # =========================================================================

    def find(self, selector: str) -> Locator:
        """
        Return the first visible element that matches the selector.

        Raises:
            ElementNotFoundError: if no visible match shows up in time
        """
        def first_visible() -> Optional[Locator]:
            for element in self.page.locator(selector).all():
                if element.is_visible():
                    return element
            return None

        try:
            return (
                self.wait_for()
                .with_timeout(FIND_TIMEOUT)
                .quietly()
                .with_message("Wait for the element (%s) to become visible", selector)
                .until(first_visible)
            )
        except WaitTimeoutError as e:
            raise ElementNotFoundError(
                f"Unable to locate {selector} in {self.current_url}"
            ) from e

    def find_if_not_visible(self, selector: str) -> Locator:
        """
        Return the first element that matches the selector even if not visible.

        Raises:
            ElementNotFoundError: if nothing matches right now
        """
        locator = self.page.locator(selector)
        if locator.count() == 0:
            raise ElementNotFoundError(
                f"Unable to locate {selector} in {self.current_url}"
            )
        return locator.first

    def get_element(self, selector: str) -> Optional[Locator]:
        """Like find_if_not_visible() but returns None instead of raising."""
        matches = self.all(selector)
        if not matches:
            return None
        return matches[0]

    def all(self, selector: str) -> List[Locator]:
        """
        Return all elements currently matching the selector.

        Unlike find(), this does not wait: called right after an action that
        populates the DOM asynchronously it can return too early. Prefer a
        more specific find(), or wrap the call in wait_for_cond().
        """
        return self.page.locator(selector).all()

    def last(self, selector: str) -> Locator:
        """Wait for a visible match, then return the last element matching."""
        self.find(selector)
        return self.all(selector)[-1]

    def last_if_not_visible(self, selector: str) -> Locator:
        """Return the last element matching, visible or not."""
        self.find_if_not_visible(selector)
        return self.all(selector)[-1]

    # =========================================================================
    # Interactions
    # =========================================================================

    @allure.step("Click button: {text}")
    def click_button(self, text: str) -> None:
        logger.info(f"Clicking button: {text}")
        self.find(by.button(text)).click()

    @allure.step("Click link: {locator}")
    def click_link(self, locator: str) -> None:
        """Click a link by its text, id or title."""
        logger.info(f"Clicking link: {locator}")
        self.find(by.link(locator)).click()

    @allure.step("Choose: {locator}")
    def choose(self, locator: str) -> Locator:
        """Select radio button by its name, id, or label text."""
        element = self.find(by.radio_button(locator))
        element.click()
        return element

    @allure.step("Fill in {field_name}")
    def fill_in(self, field_name: str, value: Any) -> None:
        """Replace the value of the form field with the given name."""
        element = self.wait_for_element(by.name(field_name))
        element.fill(str(value))
        logger.debug(f"Filled field: {field_name}")

    def check(self, target: Union[str, Locator], state: bool = True) -> None:
        """
        Set a checkbox to the given state.

        Args:
            target: Checkbox locator text (name, id, label) or a resolved element
            state: Desired checked state
        """
        element = self.find(by.checkbox(target)) if isinstance(target, str) else target

        if element.is_checked() != state:
            try:
                element.click(timeout=self.time.milliseconds(CLICK_TIMEOUT_MS))
            except PlaywrightError as e:
                # Tooltips can cover the checkbox
                logger.debug(f"Checkbox click intercepted, using script click: {e}")
                self.execute_script("arguments[0].click();", element)

        # Elements scrolled out of view sometimes ignore the native click
        if element.is_checked() != state:
            self.execute_script("arguments[0].click();", element)

    def blur(self, element: Locator) -> None:
        """Dispatch a DOM blur event on the element."""
        self.execute_script(
            "var obj = arguments[0];"
            "var ev = document.createEvent('MouseEvents');"
            "ev.initEvent('blur', true, false);"
            "obj.dispatchEvent(ev);"
            "return true;",
            element,
        )

    # =========================================================================
    # Script Execution
    # =========================================================================

    def execute_script(self, script: str, *args: Any) -> Any:
        """
        Execute a JavaScript function body in the page.

        The body sees its parameters as ``arguments[i]`` and may ``return``
        a value. Locator arguments are passed as their DOM elements.
        """
        handles = [_to_handle(arg) for arg in args]
        return self.page.evaluate(
            f"(args) => (function() {{ {script} }}).apply(null, args)",
            handles,
        )

    # =========================================================================
    # Native Dialogs
    # =========================================================================

    def handle_alert(self, action: Callable[[Dialog], None]) -> None:
        """Handle the next dialog the page opens with ``action``."""
        self.run_then_handle_alert(None, action)

    def run_then_handle_alert(
        self,
        runnable: Optional[Callable[[], Any]],
        action: Callable[[Dialog], None],
        timeout: float = 10,
    ) -> None:
        """
        Run ``runnable`` and handle the dialog it opens.

        The handler is registered before ``runnable`` runs: Playwright
        dismisses dialogs nobody listens for.

        Raises:
            WaitTimeoutError: if no dialog shows up within ``timeout`` seconds
        """
        handled: List[Dialog] = []

        def on_dialog(dialog: Dialog) -> None:
            logger.debug(f"Handling {dialog.type} dialog: {dialog.message}")
            action(dialog)
            handled.append(dialog)

        self.page.once("dialog", on_dialog)
        try:
            if runnable is not None:
                runnable()
            (
                Wait(self.page, time=self.time, sleeper=self._pause)
                .polling_every(ALERT_POLLING_INTERVAL)
                .with_timeout(timeout)
                .with_message("Alert is present")
                .until(lambda: len(handled) > 0)
            )
        finally:
            if not handled:
                self.page.remove_listener("dialog", on_dialog)

    def confirm_alert(self, timeout: float = 10) -> None:
        """Accept the next dialog."""
        self.run_then_handle_alert(None, _accept, timeout)

    @allure.step("Confirm alert")
    def run_then_confirm_alert(self, runnable: Callable[[], Any], timeout: float = 10) -> None:
        """Run ``runnable`` and accept the dialog it opens."""
        self.run_then_handle_alert(runnable, _accept, timeout)

    # =========================================================================
    # Sleeping
    # =========================================================================

    def sleep(self, ms: float) -> None:
        """Pause the test for ``ms`` milliseconds, still dispatching page events."""
        self.page.wait_for_timeout(ms)

    def elastic_sleep(self, ms: float) -> None:
        self.sleep(self.time.milliseconds(ms))

    # =========================================================================
    # Reflection Helpers
    # =========================================================================

    def new_instance(self, cls: Type[T], *args: Any) -> T:
        """
        Find a matching constructor and invoke it.

        The constructor must take exactly as many positional parameters as
        there are arguments (no *args), and each non-None argument must be an
        instance of the annotated parameter type.
        Useful for page areas whose concrete type is a parameter.

        Raises:
            AssertionError: if the constructor does not match or fails
        """
        if not _constructor_matches(cls, args):
            raise AssertionError(f"No matching constructor found in {cls}: {list(args)}")

        try:
            return cls(*args)
        except Exception as e:
            raise AssertionError(f"Failed to invoke a constructor of {cls}") from e

    def find_caption(self, cls: type, finder: Callable[[str], Optional[T]]) -> T:
        """
        Apply ``finder`` to each caption ``cls`` is described by.

        Returns the first non-None result. When every caption fails the last
        error is raised (ElementNotFoundError if none raised at all).
        """
        captions: Tuple[str, ...] = getattr(cls, "_captions", ())
        if not captions:
            raise AssertionError(f"{cls.__name__} is not @describable")

        cause: Exception = ElementNotFoundError(
            "None of the captions exists: " + ", ".join(captions)
        )
        for index, caption in enumerate(captions):
            try:
                out = finder(caption)
            except Exception as e:
                cause = e
                continue
            if out is not None:
                if index > 0:
                    logger.warning(
                        f"⚠️ {cls.__name__} matched fallback caption '{caption}'"
                    )
                return out

        raise cause

    # =========================================================================
    # Page Content
    # =========================================================================

    def get_page_source(self) -> str:
        """Outer HTML of the current document."""
        return self.execute_script(
            "return document.getElementsByTagName('html')[0].outerHTML"
        )

    def get_page_content(self) -> str:
        """Visible text on the page."""
        return self.page.locator("html").inner_text()

    def resource(self, path: str) -> Path:
        """
        Locate a test resource stored next to this object's module.

        Raises:
            AssertionError: if the resource does not exist
        """
        base = Path(inspect.getfile(type(self))).parent
        resource = base / path.lstrip("/")
        if not resource.exists():
            raise AssertionError(f"No such resource {path} for {type(self).__name__}")
        return resource


# =============================================================================
# Helpers
# =============================================================================

def _accept(dialog: Dialog) -> None:
    dialog.accept()


def _to_handle(arg: Any) -> Any:
    if hasattr(arg, "element_handle"):
        return arg.element_handle()
    return arg


def _describe_predicate(predicate: Callable[..., Any]) -> str:
    return getattr(predicate, "__name__", repr(predicate))


def _resolved_hints(cls: type) -> dict:
    try:
        return typing.get_type_hints(cls.__init__)
    except (NameError, TypeError):
        # Forward references to names only imported for type checking
        annotations = getattr(cls.__init__, "__annotations__", {})
        return {k: v for k, v in annotations.items() if not isinstance(v, str)}


def _is_instance(value: Any, hint: Any) -> bool:
    if hint is Any:
        return True
    origin = typing.get_origin(hint)
    if origin is Union:
        return any(_is_instance(value, arg) for arg in typing.get_args(hint) if arg is not _NONE_TYPE)
    if origin is not None:
        return isinstance(value, origin) if isinstance(origin, type) else True
    if isinstance(hint, type):
        return isinstance(value, hint)
    return True


def _constructor_matches(cls: type, args: Tuple[Any, ...]) -> bool:
    try:
        signature = inspect.signature(cls)
    except ValueError:
        # No introspectable signature (some builtins); let the call decide
        return True

    # Exactly one positional parameter per argument, defaults included
    kinds = [p.kind for p in signature.parameters.values()]
    if inspect.Parameter.VAR_POSITIONAL in kinds:
        return False
    positional = sum(1 for kind in kinds if kind in _POSITIONAL_KINDS)
    if positional != len(args):
        return False

    try:
        bound = signature.bind(*args)
    except TypeError:
        return False

    hints = _resolved_hints(cls)
    for name, value in bound.arguments.items():
        if value is None or name not in hints:
            continue
        if not _is_instance(value, hints[name]):
            return False
    return True


__all__ = [
    "ElementNotFoundError",
    "PortingLayer",
    "describable",
]
