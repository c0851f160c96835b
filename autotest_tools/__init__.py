"""
================================================================================
Autotest Tools
================================================================================

Supporting utilities for the Jenkins acceptance harness.

Modules:
    - common: Shared configuration and logging utilities
    - report_tools: Allure attachment helpers and report generation
    - version_checker: Jenkins version parsing and detection

Example:
    from autotest_tools.common import get_config, init_logger
    from autotest_tools.version_checker.version_checker import JenkinsVersion

    init_logger()
    if JenkinsVersion.parse("2.401.3").is_newer_than("2.295"):
        ...

================================================================================
"""

__version__ = "1.0.0"

__all__ = [
    "common",
    "report_tools",
    "version_checker",
]
