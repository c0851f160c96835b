"""
================================================================================
Harness Pytest Configuration
================================================================================

Registers the markers used across the harness and tags tests by location:
everything under `tests/` needs a running Jenkins (`acceptance`), everything
under `unit/` runs against fakes (`unit`).

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for a release"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "acceptance: Needs a running Jenkins and a browser"
    )
    config.addinivalue_line(
        "markers", "unit: Runs against fake pages, no browser needed"
    )

    # Feature markers
    config.addinivalue_line(
        "markers", "agent: Tests that need a configured build agent (JENKINS_AGENT)"
    )
    config.addinivalue_line(
        "markers", "form_validation: Tests of field validation messages"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-add the suite marker from the test's directory."""
    for item in items:
        path = str(item.fspath)
        if "jenkins_acceptance/tests" in path.replace("\\", "/"):
            item.add_marker(pytest.mark.acceptance)
        if "jenkins_acceptance/unit" in path.replace("\\", "/"):
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "Jenkins Acceptance Harness",
        "=" * 60,
        "",
    ]
