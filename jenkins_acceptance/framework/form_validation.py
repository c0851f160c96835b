"""
================================================================================
Form Validation
================================================================================

Reads the validation message Jenkins renders below a form field.

Jenkins validates fields either in the browser (number checks) or through an
AJAX ``check`` URL once the field loses focus. Both end up as a
``<div class="error|warning|ok|info">`` inside the field's
``validation-error-area``.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from loguru import logger

from .wait import WaitTimeoutError

if TYPE_CHECKING:
    from playwright.sync_api import Locator

    from .page_object import Control


# How long to wait for a message before the field counts as silent
SETTLE_TIMEOUT = 2.0

# The validation area of a field, relative to the field element
VALIDATION_AREA = (
    "xpath=./ancestor::*[contains(@class, 'setting-main')][1]"
    "/following-sibling::*[contains(@class, 'validation-error-area')][1]"
    " | ./ancestor::tr[1]/following-sibling::tr[contains(@class, 'validation-error-area')][1]"
)

MESSAGE = "css=div.error, div.warning, div.ok, div.info"


class Kind(str, Enum):
    OK = "ok"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def from_css_class(cls, css_class: str) -> "Kind":
        """
        Kind of a rendered message from its class attribute.

        ``info`` messages are not problems and count as OK.

        Raises:
            ValueError: if no known kind is among the classes
        """
        classes = css_class.split()
        for kind in (cls.ERROR, cls.WARNING, cls.OK):
            if kind.value in classes:
                return kind
        if "info" in classes:
            return cls.OK
        raise ValueError(f"Unknown form validation kind: '{css_class}'")


@dataclass(frozen=True)
class FormValidation:
    """Kind and text of one field's validation message."""

    kind: Kind
    message: str = ""

    @classmethod
    def silent(cls) -> "FormValidation":
        return cls(Kind.OK, "")

    @classmethod
    def await_for(cls, control: "Control") -> "FormValidation":
        """
        Blur the control and read the message Jenkins renders for it.

        Returns a silent validation when nothing shows up within the
        settle period.
        """
        owner = control.owner
        element = control.resolve()
        owner.blur(element)

        areas = element.locator(VALIDATION_AREA)

        def rendered() -> Optional["FormValidation"]:
            if areas.count() == 0:
                return None
            return cls.from_area(areas.first)

        try:
            return (
                owner.wait_for(control)
                .with_timeout(SETTLE_TIMEOUT)
                .quietly()
                .with_message("Form validation of %s", control)
                .until(rendered)
            )
        except WaitTimeoutError:
            logger.debug(f"No form validation rendered for {control}")
            return cls.silent()

    @classmethod
    def from_area(cls, area: "Locator") -> Optional["FormValidation"]:
        """Parse a validation area; None when it holds no message."""
        messages = area.locator(MESSAGE)
        if messages.count() == 0:
            return None
        message = messages.first
        text = message.inner_text().strip()
        if not text:
            return None
        return cls(Kind.from_css_class(message.get_attribute("class") or ""), text)

    def is_silent(self) -> bool:
        """OK with no message, i.e. the field is valid and says nothing."""
        return self.kind is Kind.OK and not self.message

    def reports(self, kind: Kind, message: Optional[str] = None) -> bool:
        """Whether this is a ``kind`` message, optionally with exactly ``message``."""
        if self.kind is not kind:
            return False
        return message is None or self.message == message

    def __str__(self) -> str:
        if self.is_silent():
            return "silent"
        return f"{self.kind.name}: {self.message}"


__all__ = [
    "FormValidation",
    "Kind",
    "SETTLE_TIMEOUT",
]
