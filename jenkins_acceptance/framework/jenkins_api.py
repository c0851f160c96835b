"""
================================================================================
Jenkins JSON API Client
================================================================================

Side channel to the Jenkins remote API used by page objects for state that is
tedious or flaky to scrape from HTML (is a node offline, how many executors
does it have, which version is running).

Features:
    - Basic authentication with user + API token
    - Automatic retry with exponential backoff on network errors
    - Allure attachments for every call
    - Version detection from the X-Jenkins header

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional

import allure
import httpx
from loguru import logger

from autotest_tools.common import get_config, get_float
from autotest_tools.report_tools.allure_utils import attach_json, attach_text
from autotest_tools.version_checker.version_checker import (
    JenkinsVersion,
    JenkinsVersionDetector,
)


# Maximum response length to include in Allure reports
MAX_RESPONSE_LENGTH = 3000
RESPONSE_ATTACHMENT = "📥 Response Body"

# Default retry settings
DEFAULT_RETRY_COUNT = 3
DEFAULT_RETRY_BACKOFF = 0.5
DEFAULT_RETRY_MAX_WAIT = 5.0


class JenkinsApiError(Exception):
    """Raised when the Jenkins API cannot be used or answers with an error."""
    pass


class JenkinsApiClient:
    """
    Small HTTP client for the Jenkins remote API.

    Usage:
        >>> with JenkinsApiClient("http://localhost:8080/") as api:
        ...     api.get_json("http://localhost:8080/computer/agent-1/api/json")["offline"]
        False
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        username: Optional[str] = None,
        api_token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        """
        Initialize the client; unset values come from configuration.

        Args:
            base_url: Jenkins root URL
            username: User for basic authentication
            api_token: API token (or password) of that user
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or get_config("jenkins.url")).rstrip("/") + "/"
        self.username = username or get_config("jenkins.username")
        self.api_token = api_token or get_config("jenkins.api_token")
        self.timeout = get_float("api.timeout", 30)
        self.retry_count = int(get_config("api.retry_count", DEFAULT_RETRY_COUNT))
        self.retry_backoff = get_float("api.retry_backoff", DEFAULT_RETRY_BACKOFF)
        self.retry_max_wait = DEFAULT_RETRY_MAX_WAIT

        self._transport = transport
        self.session: Optional[httpx.Client] = None

    def __enter__(self) -> "JenkinsApiClient":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def open(self) -> None:
        """Create the HTTP session."""
        auth = (self.username, self.api_token) if self.username and self.api_token else None
        self.session = httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout),
            auth=auth,
            follow_redirects=True,
            transport=self._transport,
        )

    def close(self) -> None:
        if self.session:
            self.session.close()
            self.session = None

    def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Execute HTTP request with automatic retry and Allure logging.

        Args:
            method: HTTP method
            url: Absolute URL or path relative to the Jenkins root

        Raises:
            JenkinsApiError: When used outside open()/close()
            httpx.HTTPError: When network retries are exhausted
        """
        if self.session is None:
            raise JenkinsApiError(
                "JenkinsApiClient is not open. Use 'with JenkinsApiClient() as api:'"
            )

        for attempt in range(self.retry_count):
            try:
                response = self.session.request(method, url, **kwargs)
                self._log_to_allure(method, url, response)
                return response
            except (httpx.TimeoutException, httpx.NetworkError) as e:
                if attempt < self.retry_count - 1:
                    wait_time = self._calculate_backoff(attempt)
                    logger.warning(
                        f"Network error: {e}. Retrying in {wait_time}s. "
                        f"Attempt {attempt + 1}/{self.retry_count}"
                    )
                    time.sleep(wait_time)
                else:
                    logger.error(f"All retries exhausted. Last error: {e}")
                    raise

        raise JenkinsApiError(f"No attempt made for {method} {url}")

    def get_json(self, url: str) -> Dict[str, Any]:
        """
        GET a JSON API document.

        Args:
            url: Absolute ``.../api/json`` URL

        Raises:
            JenkinsApiError: On a non-2xx answer or a non-JSON body
        """
        response = self.request("GET", url)
        if response.status_code >= 400:
            raise JenkinsApiError(
                f"GET {url} failed with HTTP {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as e:
            raise JenkinsApiError(f"GET {url} did not return JSON") from e

    def get_version(self) -> JenkinsVersion:
        """
        Version of the Jenkins instance under test.

        Raises:
            JenkinsApiError: When the X-Jenkins header is missing or malformed
        """
        response = self.request("GET", self.base_url + "login")
        version = JenkinsVersionDetector(self.base_url).parse_headers(response.headers)
        if version is None:
            raise JenkinsApiError(f"Unable to determine Jenkins version from {self.base_url}")
        return version

    def _calculate_backoff(self, attempt: int) -> float:
        """
        Calculate exponential backoff wait time.

        Formula: base * (2 ^ attempt), capped at max_wait
        """
        wait_time = self.retry_backoff * (2 ** attempt)
        return min(wait_time, self.retry_max_wait)

    def _log_to_allure(self, method: str, url: str, response: httpx.Response) -> None:
        """Attach the call and a (truncated) response body to the Allure step."""
        status_emoji = "✅" if response.status_code < 400 else "❌"
        with allure.step(f"{status_emoji} {method} {url} → {response.status_code}"):
            try:
                data = response.json()
            except ValueError:
                pass
            else:
                if len(response.text) <= MAX_RESPONSE_LENGTH:
                    attach_json(data, name=RESPONSE_ATTACHMENT)
                    return

            content = response.text or "<empty>"
            if len(content) > MAX_RESPONSE_LENGTH:
                content = (
                    f"{content[:MAX_RESPONSE_LENGTH]}\n\n"
                    f"... [Truncated, full length: {len(content)} chars] ..."
                )
            attach_text(content, name=RESPONSE_ATTACHMENT)


__all__ = [
    "JenkinsApiClient",
    "JenkinsApiError",
]
