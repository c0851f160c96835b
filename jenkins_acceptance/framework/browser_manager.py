"""
================================================================================
Browser Manager
================================================================================

Browser lifecycle for the acceptance suite (sync Playwright API).

Features:
    - One browser per test session
    - A fresh context per test
    - Login state persistence between sessions
    - Browser selection and headless mode from configuration

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    sync_playwright,
)

from autotest_tools.common import get_bool, get_config


# Storage state file for the logged-in Jenkins session
AUTH_STATE_FILE = Path("target") / ".jenkins_auth_state.json"

SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")


class BrowserManager:
    """
    Starts Playwright, launches the browser and hands out isolated contexts.

    Usage:
        with BrowserManager() as manager:
            page = manager.new_page()
            page.goto("http://localhost:8080/")

        # Reuse a session saved by save_auth_state()
        with BrowserManager(restore_auth=True) as manager:
            page = manager.new_page()
    """

    DEFAULT_LAUNCH_OPTIONS: Dict[str, Any] = {
        "args": ["--ignore-certificate-errors"],
    }

    # Jenkins config pages are long; a tall viewport keeps controls in view
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1600, "height": 1200},
        "ignore_https_errors": True,
    }

    def __init__(
        self,
        headless: Optional[bool] = None,
        restore_auth: bool = False,
        browser_type: Optional[str] = None,
        auth_state_file: Optional[Path] = None,
    ):
        """
        Args:
            headless: Run without a window (config ``browser.headless``)
            restore_auth: Load cookies saved by save_auth_state()
            browser_type: 'chromium', 'firefox' or 'webkit' (config ``browser.type``)
            auth_state_file: Where save_auth_state() writes (AUTH_STATE_FILE)
        """
        self.headless = get_bool("browser.headless", True) if headless is None else headless
        self.restore_auth = restore_auth
        self.auth_state_file = Path(auth_state_file or AUTH_STATE_FILE)
        self.browser_type = browser_type or get_config("browser.type", "chromium")
        if self.browser_type not in SUPPORTED_BROWSERS:
            raise ValueError(
                f"Unsupported browser '{self.browser_type}', "
                f"expected one of {', '.join(SUPPORTED_BROWSERS)}"
            )

        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._contexts: List[BrowserContext] = []

    def __enter__(self) -> "BrowserManager":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def start(self) -> None:
        """Start Playwright and launch the configured browser."""
        self._playwright = sync_playwright().start()
        launcher = getattr(self._playwright, self.browser_type)
        self._browser = launcher.launch(
            **{**self.DEFAULT_LAUNCH_OPTIONS, "headless": self.headless}
        )
        logger.debug(f"Browser started: {self.browser_type} (headless={self.headless})")

    def close(self) -> None:
        """Close every context, the browser and Playwright."""
        for context in self._contexts:
            context.close()
        self._contexts.clear()

        if self._browser:
            self._browser.close()
            self._browser = None

        if self._playwright:
            self._playwright.stop()
            self._playwright = None

        logger.debug("Browser closed")

    def new_context(self, **options: Any) -> BrowserContext:
        """
        Create an isolated context (own cookies and storage).

        Raises:
            RuntimeError: if start() has not been called
        """
        if not self._browser:
            raise RuntimeError("Browser not started. Call start() first.")

        context_options = {**self.DEFAULT_CONTEXT_OPTIONS, **options}
        if self.restore_auth and self.auth_state_file.exists():
            context_options["storage_state"] = str(self.auth_state_file)
            logger.debug("Restored authentication state from file")

        context = self._browser.new_context(**context_options)
        self._contexts.append(context)
        return context

    def close_context(self, context: BrowserContext) -> None:
        """Close a context handed out by new_context()."""
        if context in self._contexts:
            self._contexts.remove(context)
        context.close()

    def new_page(self, context: Optional[BrowserContext] = None, **context_options: Any) -> Page:
        """Open a page in ``context``, or in a new context when omitted."""
        if context is None:
            context = self.new_context(**context_options)
        return context.new_page()

    def save_auth_state(self, context: BrowserContext) -> Path:
        """Persist cookies and local storage of a logged-in context."""
        self.auth_state_file.parent.mkdir(parents=True, exist_ok=True)
        context.storage_state(path=str(self.auth_state_file))
        logger.info(f"Authentication state saved to: {self.auth_state_file}")
        return self.auth_state_file

    @property
    def browser(self) -> Optional[Browser]:
        return self._browser


__all__ = [
    "AUTH_STATE_FILE",
    "BrowserManager",
]
