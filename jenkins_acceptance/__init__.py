"""
================================================================================
Jenkins Acceptance Harness
================================================================================

Browser-driven acceptance tests for Jenkins.

Packages:
    - framework: waits, element lookup and the page object base classes
    - pages: page objects for Jenkins, agents, views, jobs and configuration
    - tests: acceptance tests run against a live Jenkins
    - unit: tests of the framework itself against fake pages

Example:
    from jenkins_acceptance.framework import BrowserManager, JenkinsApiClient
    from jenkins_acceptance.pages import Jenkins

    with BrowserManager() as manager, JenkinsApiClient() as api:
        jenkins = Jenkins(manager.new_page(), api=api)
        jenkins.get_config_page().configure()

================================================================================
"""

__version__ = "1.0.0"
