"""
Fakes standing in for Playwright and the JSON API in unit tests.

FakePage answers locator() from a selector -> elements table, records
navigation and scripts, and fires dialogs on demand.
"""

from typing import Any, Callable, Dict, List, Optional

from jenkins_acceptance.framework.jenkins_api import JenkinsApiClient


class FakeLocator:
    """A single DOM element."""

    def __init__(
        self,
        text: str = "",
        visible: bool = True,
        checked: bool = False,
        checkable: bool = False,
        value: str = "",
        tag: str = "input",
        attributes: Optional[Dict[str, str]] = None,
        children: Optional[Dict[str, List["FakeLocator"]]] = None,
        click_error: Optional[Exception] = None,
        on_click: Optional[Callable[[], None]] = None,
    ):
        self.text = text
        self.visible = visible
        self.checked = checked
        self.checkable = checkable
        self.value = value
        self.tag = tag
        self.attributes = attributes or {}
        self.children = children or {}
        self.click_error = click_error
        self.on_click = on_click
        self.clicks = 0

    # Locator-like API used by the framework

    def is_visible(self) -> bool:
        return self.visible

    def is_checked(self) -> bool:
        return self.checked

    def click(self, timeout: Optional[float] = None) -> None:
        if self.click_error is not None:
            raise self.click_error
        self.script_click()

    def script_click(self) -> None:
        self.clicks += 1
        if self.checkable:
            self.checked = not self.checked
        if self.on_click is not None:
            self.on_click()

    def fill(self, value: str) -> None:
        self.value = value

    def input_value(self) -> str:
        return self.value

    def inner_text(self) -> str:
        return self.text

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def evaluate(self, expression: str) -> Any:
        if "tagName" in expression:
            return self.tag.upper()
        raise AssertionError(f"Unexpected element script: {expression}")

    def element_handle(self) -> "FakeLocator":
        return self

    def locator(self, selector: str) -> "FakeQuery":
        return FakeQuery(self.children.get(selector, []))


class FakeQuery:
    """Result of page.locator(): lazily evaluated list of elements."""

    def __init__(self, elements: List[FakeLocator]):
        self.elements = elements

    def all(self) -> List[FakeLocator]:
        return list(self.elements)

    def count(self) -> int:
        return len(self.elements)

    @property
    def first(self) -> FakeLocator:
        return self.elements[0]

    def inner_text(self) -> str:
        return self.first.inner_text()

    def locator(self, selector: str) -> "FakeQuery":
        if not self.elements:
            return FakeQuery([])
        return self.elements[0].locator(selector)


class FakeDialog:

    def __init__(self, message: str = "Leave site?", type: str = "beforeunload"):
        self.message = message
        self.type = type
        self.accepted = False
        self.dismissed = False

    def accept(self, prompt_text: Optional[str] = None) -> None:
        self.accepted = True

    def dismiss(self) -> None:
        self.dismissed = True


class FakePage:
    """Playwright Page stand-in."""

    def __init__(self, url: str = "http://localhost:8080/"):
        self.url = url
        self.elements: Dict[str, List[FakeLocator]] = {}
        self.visited: List[str] = []
        self.scripts: List[str] = []
        self.script_results: Dict[str, Any] = {}
        self.sleeps: List[float] = []
        self.listeners: Dict[str, List[Callable]] = {}

    def add(self, selector: str, *elements: FakeLocator) -> FakeLocator:
        self.elements.setdefault(selector, []).extend(elements)
        return elements[0]

    def locator(self, selector: str) -> FakeQuery:
        # Resolved when used, like Playwright locators
        return _LazyQuery(self, selector)

    def goto(self, url: str) -> None:
        self.visited.append(url)
        self.url = url

    def evaluate(self, expression: str, args: Any = None) -> Any:
        self.scripts.append(expression)
        if "arguments[0].click();" in expression:
            args[0].script_click()
            return None
        for fragment, result in self.script_results.items():
            if fragment in expression:
                return result
        return None

    def wait_for_timeout(self, timeout: float) -> None:
        self.sleeps.append(timeout)

    def once(self, event: str, handler: Callable) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event: str, handler: Callable) -> None:
        self.listeners.get(event, []).remove(handler)

    def fire(self, event: str, payload: Any) -> None:
        handlers = self.listeners.pop(event, [])
        for handler in handlers:
            handler(payload)

    def screenshot(self, path: str, full_page: bool = False) -> None:
        with open(path, "wb") as f:
            f.write(b"\x89PNG")

    def content(self) -> str:
        return "<html><body>fake</body></html>"


class _LazyQuery(FakeQuery):

    def __init__(self, page: FakePage, selector: str):
        self._page = page
        self._selector = selector

    @property
    def elements(self) -> List[FakeLocator]:
        return self._page.elements.get(self._selector, [])


class FakeApi(JenkinsApiClient):
    """JSON API answering from a url -> document table."""

    def __init__(self, documents: Optional[Dict[str, Any]] = None):
        super().__init__("http://localhost:8080/", "admin", "token")
        self.documents = documents or {}
        self.calls: List[str] = []

    def get_json(self, url: str) -> Dict[str, Any]:
        self.calls.append(url)
        document = self.documents[url]
        return document() if callable(document) else document
