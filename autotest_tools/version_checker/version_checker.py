"""
================================================================================
Version Checker Tool
================================================================================

This module provides utilities for reading and comparing the version of the
Jenkins instance under test. Acceptance tests branch on it when the UI text
changed between releases, and the runner can refuse to start against an
instance older than the supported minimum.

Features:
- Jenkins version parsing ("2.295", "2.401.3", "2.426-SNAPSHOT")
- Version detection from the X-Jenkins response header
- Minimum-version gate for CI runs

================================================================================
"""

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional, Tuple, Union

import httpx
from loguru import logger


# ================================================================================
# Version Model
# ================================================================================

@total_ordering
@dataclass(frozen=True, eq=False)
class JenkinsVersion:
    """
    Represents a dotted Jenkins version number.

    Weekly releases have two components (2.295), LTS releases three
    (2.401.3). A qualifier such as "SNAPSHOT" sorts before the plain release.

    Attributes:
        components: Numeric components, most significant first
        qualifier: Optional qualifier after '-'
    """
    components: Tuple[int, ...]
    qualifier: Optional[str] = None

    @classmethod
    def parse(cls, version_string: str) -> "JenkinsVersion":
        """
        Parse version string to JenkinsVersion.

        Args:
            version_string: Version string (e.g., "2.401.3", "2.426-SNAPSHOT")

        Returns:
            JenkinsVersion instance

        Raises:
            ValueError: If version string is invalid
        """
        text = version_string.strip().lstrip("v")
        match = re.match(r'^(\d+(?:\.\d+)*)(?:-([A-Za-z0-9.\-]+))?(?:\s.*)?$', text)
        if not match:
            raise ValueError(f"Invalid version string: {version_string}")

        components = tuple(int(part) for part in match.group(1).split("."))
        return cls(components=components, qualifier=match.group(2))

    def _key(self) -> Tuple[Tuple[int, ...], int]:
        # Trailing zeros don't matter: 2.300 == 2.300.0
        parts = list(self.components)
        while len(parts) > 1 and parts[-1] == 0:
            parts.pop()
        return tuple(parts), 0 if self.qualifier else 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JenkinsVersion):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "JenkinsVersion") -> bool:
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        version = ".".join(str(part) for part in self.components)
        if self.qualifier:
            version += f"-{self.qualifier}"
        return version

    def is_newer_than(self, other: Union["JenkinsVersion", str]) -> bool:
        """Return True if this version is strictly newer than ``other``."""
        if isinstance(other, str):
            other = JenkinsVersion.parse(other)
        return self > other

    def is_older_than(self, other: Union["JenkinsVersion", str]) -> bool:
        """Return True if this version is strictly older than ``other``."""
        if isinstance(other, str):
            other = JenkinsVersion.parse(other)
        return self < other


# ================================================================================
# Version Detection
# ================================================================================

class JenkinsVersionDetector:
    """
    Detects the Jenkins version from the X-Jenkins header.

    Every Jenkins response carries the header, including the login page of a
    secured instance, so no credentials are needed.
    """

    VERSION_HEADER = "X-Jenkins"

    def __init__(self, base_url: str, timeout: int = 10):
        """
        Initialize detector.

        Args:
            base_url: Jenkins root URL
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout

    def detect(self) -> Optional[JenkinsVersion]:
        """
        Detect Jenkins version.

        Returns:
            JenkinsVersion if detected, None otherwise
        """
        try:
            with httpx.Client(timeout=self.timeout, follow_redirects=True) as client:
                response = client.get(f"{self.base_url}login")
        except httpx.HTTPError as e:
            logger.warning(f"Could not reach Jenkins at {self.base_url}: {e}")
            return None

        return self.parse_headers(response.headers)

    def parse_headers(self, headers) -> Optional[JenkinsVersion]:
        """Extract the version from a response header mapping."""
        version_string = headers.get(self.VERSION_HEADER)
        if not version_string:
            logger.warning(f"No {self.VERSION_HEADER} header in response")
            return None

        try:
            version = JenkinsVersion.parse(version_string)
        except ValueError:
            logger.warning(f"Unparseable Jenkins version: {version_string}")
            return None

        logger.info(f"Jenkins version detected: {version}")
        return version


# ================================================================================
# Convenience Functions
# ================================================================================

def check_version(base_url: str, minimum: Optional[str] = None) -> bool:
    """
    Check the Jenkins under test satisfies a minimum version.

    Args:
        base_url: Jenkins root URL
        minimum: Optional minimum version string

    Returns:
        True if the version was detected and is not older than ``minimum``
    """
    version = JenkinsVersionDetector(base_url).detect()
    if version is None:
        logger.error("❌ Version check failed: Jenkins version unknown")
        return False

    if minimum and version.is_older_than(minimum):
        logger.error(f"❌ Jenkins {version} is older than required {minimum}")
        return False

    logger.info(f"✅ Version check passed: Jenkins {version}")
    return True


# ================================================================================
# CLI Entry Point (for standalone use)
# ================================================================================

def main():
    """CLI entry point for version checking."""
    import argparse

    parser = argparse.ArgumentParser(description="Jenkins Version Checker")
    parser.add_argument("--jenkins-url", required=True, help="Jenkins root URL")
    parser.add_argument("--minimum", help="Minimum supported version")

    args = parser.parse_args()

    is_valid = check_version(args.jenkins_url, args.minimum)
    raise SystemExit(0 if is_valid else 1)


if __name__ == "__main__":
    main()
