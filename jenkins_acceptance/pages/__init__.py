"""
================================================================================
Page Objects
================================================================================

Page Object Model of the Jenkins web UI.

Each page class encapsulates:
    - Its URL, derived from the Jenkins root
    - Form controls addressed by Jenkins `path` attributes
    - The UI actions a user performs on it

Author: Automation Team
License: MIT
================================================================================
"""

from .agent import Agent, Node
from .jenkins import Jenkins
from .jenkins_config import JenkinsConfig
from .job import Job
from .login_page import LoginPage
from .view import ListView, View, ViewsMixer

__all__ = [
    "Agent",
    "Jenkins",
    "JenkinsConfig",
    "Job",
    "ListView",
    "LoginPage",
    "Node",
    "View",
    "ViewsMixer",
]
