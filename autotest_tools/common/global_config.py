"""
================================================================================
Global Configuration for the Jenkins Acceptance Harness
================================================================================

This module provides centralized configuration management for the harness,
including logging setup and configuration file loading.

Features:
    - Module-level configuration shared by every page object and tool
    - YAML-based configuration loading (config/config.yaml + config/{ENV}.yaml)
    - Environment variable support (JENKINS_URL, SECTION__KEY overrides)
    - Centralized Loguru logging configuration

Author: Automation Team
License: MIT
================================================================================
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional
import yaml
from loguru import logger

# Global configuration storage
_config: Dict[str, Any] = {}
_logger_initialized: bool = False

# Well-known variables that CI jobs already export for Jenkins
ENV_MAPPING: Dict[str, str] = {
    "JENKINS_URL": "jenkins.url",
    "JENKINS_USER": "jenkins.username",
    "JENKINS_API_TOKEN": "jenkins.api_token",
    "JENKINS_PASSWORD": "jenkins.password",
    "JENKINS_AGENT": "jenkins.agent",
    "BROWSER": "browser.type",
    "ELASTIC_TIME_FACTOR": "time.elastic_factor",
    "LOG_LEVEL": "logging.level",
}


class ConfigurationError(Exception):
    """Raised when a configuration file cannot be parsed."""
    pass


def init_logger(level: str = None, format_str: str = None) -> None:
    """
    Initializes the global Loguru logger with consistent configuration.

    Call this once at the start of a test session or tool run.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to config value.
        format_str: Custom log format string. Defaults to config value.
    """
    global _logger_initialized

    if _logger_initialized:
        return

    _ensure_config_loaded()

    log_level = level or get_config("logging.level", "INFO")
    log_format = format_str or get_config(
        "logging.format",
        "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    )

    logger.remove()
    logger.add(
        sys.stderr,
        level=str(log_level).upper(),
        format=log_format,
        colorize=True,
        backtrace=True,
        diagnose=True,
    )

    log_file = get_config("logging.file", None)
    if log_file:
        log_dir = Path(log_file).parent
        log_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_file,
            level=str(log_level).upper(),
            format=log_format.replace("{level: <8}", "{level}"),  # No padding in files
            rotation=get_config("logging.rotation", "10 MB"),
            retention=get_config("logging.retention", "7 days"),
            compression="zip",
        )

    _logger_initialized = True
    logger.debug(f"Logger initialized with level: {log_level}")


def _ensure_config_loaded() -> None:
    """
    Ensures the configuration is loaded.
    """
    if not _config:
        _load_config()


def _find_config_dir() -> Optional[Path]:
    """Return the first existing configuration directory."""
    override = os.getenv("HARNESS_CONFIG_DIR")
    possible_config_dirs = [
        Path(override) if override else None,
        Path("config"),
        Path(__file__).parent.parent.parent / "config",
    ]
    for dir_path in possible_config_dirs:
        if dir_path is not None and dir_path.is_dir():
            return dir_path
    return None


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e


def _load_config() -> None:
    """
    Loads configuration from YAML files and environment variables.

    Configuration loading order:
        1. Built-in defaults
        2. Default configuration file (config/config.yaml)
        3. Environment-specific configuration (config/{ENV}.yaml)
        4. Environment variables (override YAML settings)
    """
    global _config

    _config = _get_defaults()

    config_dir = _find_config_dir()
    if not config_dir:
        logger.debug("No configuration directory found. Using defaults.")
    else:
        default_config_path = config_dir / "config.yaml"
        if default_config_path.exists():
            _config = _deep_merge(_config, _read_yaml(default_config_path))
            logger.debug(f"Loaded configuration from {default_config_path}")

        env = os.getenv("ENVIRONMENT", os.getenv("ENV", "dev"))
        env_config_path = config_dir / f"{env}.yaml"
        if env_config_path.exists():
            _config = _deep_merge(_config, _read_yaml(env_config_path))
            logger.debug(f"Merged environment config: {env_config_path}")

    _apply_env_overrides()


def _get_defaults() -> Dict[str, Any]:
    """
    Returns default configuration values.
    """
    return {
        "logging": {
            "level": "INFO",
            "format": "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
        },
        "jenkins": {
            "url": "http://localhost:8080/",
            "username": None,
            "api_token": None,
            "password": None,
            "agent": None,
        },
        "browser": {
            "type": "chromium",
            "headless": True,
        },
        "wait": {
            "timeout": 120,
            "polling_interval": 0.5,
        },
        "time": {
            "elastic_factor": 1.0,
        },
        "api": {
            "timeout": 30,
            "retry_count": 3,
            "retry_backoff": 0.5,
        },
        "diagnostics": {
            "dir": "target/diagnostics",
        },
    }


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merges two dictionaries, with override taking precedence.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides() -> None:
    """
    Applies environment variable overrides to the configuration.

    Two conventions are supported:
        - Well-known names from ENV_MAPPING (JENKINS_URL -> jenkins.url)
        - Double underscore for nested keys (WAIT__TIMEOUT -> wait.timeout)
    """
    for key, value in os.environ.items():
        if "__" in key:
            parts = [p.lower() for p in key.split("__")]
            _set_nested(_config, parts, value)

    for env_key, config_key in ENV_MAPPING.items():
        if env_key in os.environ:
            _set_nested(_config, config_key.split("."), os.environ[env_key])


def _set_nested(d: Dict, keys: list, value: Any) -> None:
    """
    Sets a nested dictionary value using a list of keys.
    """
    for key in keys[:-1]:
        d = d.setdefault(key, {})
    d[keys[-1]] = value


def get_config(key: str, default: Any = None) -> Any:
    """
    Retrieves a configuration value using a dot-separated key path.

    Args:
        key: Dot-separated key path (e.g., "jenkins.url", "wait.timeout").
        default: Default value to return if key is not found.

    Returns:
        The configuration value, or the default if not found.

    Examples:
        >>> get_config("wait.timeout", 120)
        120
        >>> get_config("jenkins.url")
        'http://localhost:8080/'
    """
    _ensure_config_loaded()

    keys = key.split(".")
    value = _config

    for k in keys:
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    if value is None:
        return default
    return value


def get_float(key: str, default: float) -> float:
    """Retrieve a numeric value; env overrides always arrive as strings."""
    return float(get_config(key, default))


def get_bool(key: str, default: bool) -> bool:
    """Retrieve a boolean value, accepting "true"/"1"/"yes"/"on" strings."""
    value = get_config(key, default)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


def set_config(key: str, value: Any) -> None:
    """
    Sets a configuration value at runtime.

    Args:
        key: Dot-separated key path.
        value: Value to set.
    """
    _ensure_config_loaded()

    keys = key.split(".")
    _set_nested(_config, keys, value)


def reset_config() -> None:
    """
    Drop the loaded configuration without reloading it.

    The next get_config() call reads files and environment again. Used by
    unit tests that monkeypatch environment variables.
    """
    global _config
    _config = {}
