"""
================================================================================
Acceptance Testing Framework
================================================================================

Playwright-based layer the Jenkins page objects are built on.

Components:
    - wait: bounded polling with elastic timeouts
    - by: selector builders
    - porting_layer: find / click / fill / script / dialog helpers
    - page_object: base page object and form controls
    - form_validation: field validation messages
    - jenkins_api: JSON API side channel
    - diagnostics: per-test failure artifacts
    - browser_manager: browser lifecycle

Author: Automation Team
License: MIT
================================================================================
"""

from .browser_manager import BrowserManager
from .diagnostics import FailureDiagnostics
from .form_validation import FormValidation, Kind
from .jenkins_api import JenkinsApiClient, JenkinsApiError
from .page_object import Control, PageObject
from .porting_layer import ElementNotFoundError, PortingLayer, describable
from .wait import ElasticTime, Wait, WaitTimeoutError

__all__ = [
    "BrowserManager",
    "Control",
    "ElasticTime",
    "ElementNotFoundError",
    "FailureDiagnostics",
    "FormValidation",
    "JenkinsApiClient",
    "JenkinsApiError",
    "Kind",
    "PageObject",
    "PortingLayer",
    "Wait",
    "WaitTimeoutError",
    "describable",
]
