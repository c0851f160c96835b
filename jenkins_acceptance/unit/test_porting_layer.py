from typing import Optional

import pytest
from loguru import logger

from fakes import FakeDialog, FakeLocator
from jenkins_acceptance.framework import by
from jenkins_acceptance.framework.porting_layer import (
    ElementNotFoundError,
    PortingLayer,
    describable,
)
from jenkins_acceptance.framework.wait import WaitTimeoutError


@pytest.fixture
def layer(fake_page, elastic_time):
    return PortingLayer(fake_page, elastic_time)


# ================================================================================
# Lookup
# ================================================================================

def test_find_returns_first_visible_match(layer, fake_page):
    hidden = FakeLocator(visible=False)
    shown = FakeLocator(text="shown")
    fake_page.add("#x", hidden, shown)

    assert layer.find("#x") is shown


def test_find_reports_selector_and_url(layer, fake_page):
    fake_page.url = "http://localhost:8080/configure"
    fake_page.add("#x", FakeLocator(visible=False))

    with pytest.raises(ElementNotFoundError) as exc_info:
        layer.find("#x")

    assert str(exc_info.value) == "Unable to locate #x in http://localhost:8080/configure"
    assert isinstance(exc_info.value.__cause__, WaitTimeoutError)


def test_failed_lookup_does_not_log_warnings(layer):
    levels = []
    handler_id = logger.add(lambda message: levels.append(message.record["level"].name), level="DEBUG")
    try:
        with pytest.raises(ElementNotFoundError):
            layer.find("#missing")
    finally:
        logger.remove(handler_id)

    assert "DEBUG" in levels
    assert "WARNING" not in levels


def test_find_if_not_visible_ignores_visibility(layer, fake_page):
    hidden = fake_page.add("#x", FakeLocator(visible=False))

    assert layer.find_if_not_visible("#x") is hidden
    with pytest.raises(ElementNotFoundError):
        layer.find_if_not_visible("#missing")


def test_get_element_never_raises(layer, fake_page):
    element = fake_page.add("#x", FakeLocator(visible=False))

    assert layer.get_element("#x") is element
    assert layer.get_element("#missing") is None


def test_all_and_last(layer, fake_page):
    first, second = FakeLocator(text="1"), FakeLocator(text="2", visible=False)
    fake_page.add("li", first, second)

    assert layer.all("li") == [first, second]
    assert layer.all("#missing") == []
    assert layer.last("li") is second
    assert layer.last_if_not_visible("li") is second


def test_wait_for_element_times_out_with_message(layer):
    with pytest.raises(WaitTimeoutError, match=r"Element matching #late is present"):
        layer.wait_for_element("#late")


def test_wait_for_element_finds_late_element(layer, fake_page):
    element = FakeLocator()
    calls = []
    original = fake_page.locator

    def appearing(selector):
        calls.append(selector)
        if len(calls) == 3:
            fake_page.add(selector, element)
        return original(selector)

    fake_page.locator = appearing
    assert layer.wait_for_element("#late", timeout=100) is element


def test_wait_for_cond_and_match(layer):
    values = iter([None, None, "ready"])
    assert layer.wait_for_cond(lambda: next(values), timeout=100) == "ready"

    box = {"n": 0}

    def bumped(subject):
        subject["n"] += 1
        return subject["n"] == 2

    assert layer.wait_for_match(box, bumped, timeout=100) is box

    with pytest.raises(WaitTimeoutError, match="waiting for: never"):
        layer.wait_for_match(box, lambda subject: False, timeout=0.01, description="never")


# ================================================================================
# Interactions
# ================================================================================

def test_navigation_and_urls(layer, fake_page):
    fake_page.script_results["document.location.href"] = "http://localhost:8080/#frag"

    layer.navigate_to("http://localhost:8080/manage")

    assert fake_page.visited == ["http://localhost:8080/manage"]
    assert layer.current_url == "http://localhost:8080/manage"
    assert layer.get_current_url_with_fragment() == "http://localhost:8080/#frag"


def test_click_button_and_link(layer, fake_page):
    button = fake_page.add(by.button("Save"), FakeLocator())
    link = fake_page.add(by.link("Disconnect"), FakeLocator(tag="a"))

    layer.click_button("Save")
    layer.click_link("Disconnect")

    assert button.clicks == 1
    assert link.clicks == 1


def test_choose_clicks_radio(layer, fake_page):
    radio = fake_page.add(by.radio_button("List View"), FakeLocator(checkable=True))

    assert layer.choose("List View") is radio
    assert radio.checked


def test_fill_in_replaces_value_with_string(layer, fake_page):
    field = fake_page.add(by.name("_.numExecutors"), FakeLocator(value="2"))

    layer.fill_in("_.numExecutors", 16)

    assert field.value == "16"


def test_check_only_clicks_when_state_differs(layer, fake_page):
    checkbox = fake_page.add(by.checkbox("useincluderegex"), FakeLocator(checkable=True))

    layer.check("useincluderegex")
    layer.check("useincluderegex")
    assert checkbox.checked
    assert checkbox.clicks == 1

    layer.check(checkbox, False)
    assert not checkbox.checked


def test_check_falls_back_to_script_click(layer, intercepted):
    checkbox = FakeLocator(checkable=True, click_error=intercepted)

    layer.check(checkbox)

    assert checkbox.checked
    assert layer.page.scripts[-1].count("arguments[0].click();") == 1


def test_check_clicks_again_when_state_did_not_change(layer):
    # The first native click is swallowed by the page
    checkbox = FakeLocator(checkable=False)

    def start_toggling():
        checkbox.checkable = True

    checkbox.on_click = start_toggling
    layer.check(checkbox)

    assert checkbox.checked
    assert checkbox.clicks == 2


def test_blur_dispatches_event(layer, fake_page):
    element = FakeLocator()

    layer.blur(element)

    assert "initEvent('blur', true, false)" in fake_page.scripts[-1]


def test_execute_script_wraps_body_and_passes_handles(layer, fake_page):
    element = FakeLocator()
    captured = {}

    def evaluate(expression, args=None):
        captured["expression"] = expression
        captured["args"] = args
        return 42

    fake_page.evaluate = evaluate
    assert layer.execute_script("return arguments[1] + 1;", element, 41) == 42

    assert captured["expression"] == "(args) => (function() { return arguments[1] + 1; }).apply(null, args)"
    assert captured["args"] == [element, 41]


def test_page_source_and_content(layer, fake_page):
    fake_page.script_results["outerHTML"] = "<html></html>"
    fake_page.add("html", FakeLocator(text="Dashboard"))

    assert layer.get_page_source() == "<html></html>"
    assert layer.get_page_content() == "Dashboard"


def test_sleeps_go_through_the_page(layer, fake_page):
    layer.sleep(100)
    layer.elastic_sleep(1000)

    assert fake_page.sleeps == [100, 1000 * layer.time.factor]


# ================================================================================
# Dialogs
# ================================================================================

def test_run_then_confirm_alert_registers_before_running(layer, fake_page):
    dialog = FakeDialog()

    layer.run_then_confirm_alert(lambda: fake_page.fire("dialog", dialog))

    assert dialog.accepted
    assert fake_page.listeners == {}


def test_handle_alert_with_custom_action(layer, fake_page):
    dialog = FakeDialog(type="confirm")
    fake_page.wait_for_timeout = lambda ms: fake_page.fire("dialog", dialog)

    layer.handle_alert(lambda d: d.dismiss())

    assert dialog.dismissed


def test_missing_alert_times_out_and_unregisters(layer, fake_page):
    with pytest.raises(WaitTimeoutError, match="Alert is present"):
        layer.run_then_handle_alert(lambda: None, lambda d: d.accept(), timeout=0.01)

    assert fake_page.listeners["dialog"] == []


def test_confirm_alert_without_runnable(layer, fake_page):
    dialog = FakeDialog()
    fake_page.wait_for_timeout = lambda ms: fake_page.fire("dialog", dialog)

    layer.confirm_alert()

    assert dialog.accepted


# ================================================================================
# Reflection
# ================================================================================

class Area:
    def __init__(self, owner: PortingLayer, path: str):
        self.owner = owner
        self.path = path


class OptionalArea:
    def __init__(self, owner: PortingLayer, label: Optional[str] = None, anything=None):
        self.owner = owner
        self.label = label
        self.anything = anything


class VarArgsArea:
    def __init__(self, owner: PortingLayer, *paths: str):
        self.owner = owner
        self.paths = paths


class Exploding:
    def __init__(self, value: int):
        raise RuntimeError("kaboom")


def test_new_instance_matches_constructor(layer):
    area = layer.new_instance(Area, layer, "/builder")

    assert area.owner is layer
    assert area.path == "/builder"


def test_new_instance_accepts_none_and_unannotated(layer):
    area = layer.new_instance(OptionalArea, layer, None, object())

    assert area.label is None


def test_new_instance_rejects_wrong_types_and_arity(layer):
    with pytest.raises(AssertionError, match="No matching constructor found in"):
        layer.new_instance(Area, layer, 42)
    with pytest.raises(AssertionError, match="No matching constructor found in"):
        layer.new_instance(Area, layer)


def test_new_instance_requires_exact_positional_count(layer):
    # Defaults do not make a shorter call match
    with pytest.raises(AssertionError, match="No matching constructor found in"):
        layer.new_instance(OptionalArea, layer)
    with pytest.raises(AssertionError, match="No matching constructor found in"):
        layer.new_instance(VarArgsArea, layer, "a", "b", "c")
    with pytest.raises(AssertionError, match="No matching constructor found in"):
        layer.new_instance(VarArgsArea, layer)


def test_new_instance_wraps_constructor_failure(layer):
    with pytest.raises(AssertionError, match="Failed to invoke a constructor of") as exc_info:
        layer.new_instance(Exploding, 1)

    assert isinstance(exc_info.value.__cause__, RuntimeError)


@describable("List View", "hudson.model.ListView")
class Described:
    pass


class Undescribed:
    pass


def test_find_caption_returns_first_success(layer):
    tried = []

    def finder(caption):
        tried.append(caption)
        if caption == "List View":
            raise ElementNotFoundError(caption)
        return f"found {caption}"

    assert layer.find_caption(Described, finder) == "found hudson.model.ListView"
    assert tried == ["List View", "hudson.model.ListView"]


def test_find_caption_skips_none_results(layer):
    assert layer.find_caption(Described, lambda caption: None if caption == "List View" else caption) == (
        "hudson.model.ListView"
    )


def test_find_caption_reraises_last_error(layer):
    def finder(caption):
        raise ElementNotFoundError(f"no {caption}")

    with pytest.raises(ElementNotFoundError, match="no hudson.model.ListView"):
        layer.find_caption(Described, finder)


def test_find_caption_default_error(layer):
    with pytest.raises(ElementNotFoundError, match="None of the captions exists: List View, hudson.model.ListView"):
        layer.find_caption(Described, lambda caption: None)


def test_find_caption_requires_describable(layer):
    with pytest.raises(AssertionError, match="is not @describable"):
        layer.find_caption(Undescribed, lambda caption: caption)


def test_resource_is_resolved_next_to_module(layer):
    path = layer.resource("by.py")
    assert path.name == "by.py"

    with pytest.raises(AssertionError, match="No such resource"):
        layer.resource("/does-not-exist.txt")
