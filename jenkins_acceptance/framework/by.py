"""
================================================================================
Selector Builders
================================================================================

Playwright selector strings for the lookups page objects need over and over:
buttons by caption, links by text, form fields by name, Jenkins `path`
attributes, and so on.

Every builder returns a plain selector string, so results can be passed to
`page.locator()` directly and show up verbatim in error messages.

    >>> by.button("Save")
    "xpath=//input[@type='submit' ...][... @value='Save' ...] | ... | //button[...]"
    >>> by.path("/jenkins-model-MasterBuildConfiguration/numExecutors")
    "[path='/jenkins-model-MasterBuildConfiguration/numExecutors']"

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations


def xpath_literal(text: str) -> str:
    """
    Quote ``text`` as an XPath 1.0 string literal.

    XPath has no escape sequences, so a value containing both quote kinds
    has to be assembled with concat().
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    pieces = []
    for i, part in enumerate(parts):
        if part:
            pieces.append(f"'{part}'")
        if i < len(parts) - 1:
            pieces.append('"\'"')
    return f"concat({', '.join(pieces)})"


def _css_literal(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def css(selector: str) -> str:
    """Plain CSS selector."""
    return f"css={selector}"


def xpath(expression: str) -> str:
    """Plain XPath expression."""
    return f"xpath={expression}"


def id(element_id: str) -> str:  # noqa: A001 - mirrors the other builder names
    """Element by its id attribute."""
    return f"[id={_css_literal(element_id)}]"


def name(field_name: str) -> str:
    """Element by its name attribute."""
    return f"[name={_css_literal(field_name)}]"


def path(jenkins_path: str) -> str:
    """
    Element by Jenkins' ``path`` attribute.

    Jenkins config forms annotate every control with the JSON path it is
    submitted under, which is the most stable handle on a form field.
    """
    return f"[path={_css_literal(jenkins_path)}]"


def link(locator: str) -> str:
    """Anchor by id, visible text, title or image alt text."""
    q = xpath_literal(locator)
    return xpath(
        f"//a[@href][@id={q} or normalize-space(.)={q} or @title={q} "
        f"or .//img[@alt={q}]]"
    )


def button(locator: str) -> str:
    """
    Button by id, name, value, caption or title.

    Covers <button> elements, submit/reset/button inputs and image inputs,
    which is every shape Jenkins has used for form buttons over the years.
    """
    q = xpath_literal(locator)
    return xpath(
        "//input[@type='submit' or @type='reset' or @type='image' or @type='button']"
        f"[@id={q} or @name={q} or @value={q} or @title={q}]"
        f" | //input[@type='image'][@alt={q}]"
        f" | //button[@id={q} or @name={q} or @value={q} or @title={q}"
        f" or normalize-space(string(.))={q}]"
    )


def input(locator: str) -> str:  # noqa: A001 - reads as by.input(...)
    """Text-like form field by name or id (input, textarea, select)."""
    q = xpath_literal(locator)
    return xpath(
        f"//input[@name={q} or @id={q}]"
        f" | //textarea[@name={q} or @id={q}]"
        f" | //select[@name={q} or @id={q}]"
    )


def _toggle(input_type: str, locator: str) -> str:
    q = xpath_literal(locator)
    return xpath(
        f"//input[@type='{input_type}'][@id={q} or @name={q} or @value={q} or @json={q}]"
        f" | //label[normalize-space(.)={q}]//input[@type='{input_type}']"
        f" | //input[@type='{input_type}'][@id=//label[normalize-space(.)={q}]/@for]"
        f" | //label[normalize-space(.)={q}]/preceding-sibling::input[@type='{input_type}'][1]"
    )


def checkbox(locator: str) -> str:
    """Checkbox by id, name, value or label text."""
    return _toggle("checkbox", locator)


def radio_button(locator: str) -> str:
    """Radio button by id, name, value or label text."""
    return _toggle("radio", locator)


def option(locator: str) -> str:
    """<option> by visible text or value."""
    q = xpath_literal(locator)
    return xpath(f"//option[normalize-space(.)={q} or @value={q}]")


__all__ = [
    "button",
    "checkbox",
    "css",
    "id",
    "input",
    "link",
    "name",
    "option",
    "path",
    "radio_button",
    "xpath",
    "xpath_literal",
]
