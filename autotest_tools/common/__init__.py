"""
================================================================================
Autotest Tools Common Utilities
================================================================================

This module provides shared configuration management and logging setup for
the harness and its tools.

Exports:
    - get_config / set_config: Dot-path configuration access
    - get_float / get_bool: Typed access for env-overridable values
    - init_logger: Initialize loguru with standard settings

Usage:
    from autotest_tools.common import get_config, init_logger

    init_logger()
    jenkins_url = get_config("jenkins.url", "http://localhost:8080/")

================================================================================
"""

from .global_config import (
    ConfigurationError,
    get_bool,
    get_config,
    get_float,
    init_logger,
    reset_config,
    set_config,
)

__all__ = [
    "ConfigurationError",
    "get_bool",
    "get_config",
    "get_float",
    "init_logger",
    "reset_config",
    "set_config",
]
