"""
================================================================================
Failure Diagnostics
================================================================================

Per-test directory for diagnostic files (screenshots, page sources, agent
logs) under ``target/diagnostics/<test name>/``.

The same kind of information is expected to use the same file name across
tests so CI jobs can collect it by pattern. Files are attached to the Allure
report and announced with ``[[ATTACHMENT|path]]`` lines that the JUnit
attachments plugin picks up.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from autotest_tools.common import get_config
from autotest_tools.report_tools.allure_utils import attach_file

from .porting_layer import PortingLayer


JUNIT_ATTACHMENT = "[[ATTACHMENT|{}]]"

_UNSAFE_CHARS = re.compile(r"[^\w.\-\[\]]+")


class FailureDiagnostics:
    """
    Collects diagnostic files for one test.

    Usage:
        diagnostics = FailureDiagnostics("test_agent.py::test_offline")
        diagnostics.write("agent.log", agent.get_log())
        ...
        diagnostics.failed()
    """

    def __init__(self, test_name: str, root: Optional[Union[str, Path]] = None):
        """
        Args:
            test_name: Test identifier, sanitised into a directory name
            root: Parent directory (config ``diagnostics.dir``)
        """
        root = Path(root or get_config("diagnostics.dir", "target/diagnostics"))
        self.dir = root / sanitise(test_name)

    def _get_dir(self) -> Path:
        if not self.dir.exists():
            try:
                self.dir.mkdir(parents=True)
            except OSError as e:
                raise RuntimeError(f"Directory {self.dir} could not be created") from e
        elif not self.dir.is_dir():
            raise RuntimeError(f"{self.dir} is not a directory.")
        return self.dir

    def touch(self, filename: str) -> Path:
        """Path of a diagnostic file, creating the test directory on demand."""
        return self._get_dir() / filename

    def write(self, filename: str, content: str) -> Path:
        path = self.touch(filename)
        path.write_text(content, encoding="utf-8")
        return path

    def files(self) -> List[Path]:
        if not self.dir.is_dir():
            return []
        return sorted(p for p in self.dir.iterdir() if p.is_file())

    def succeeded(self) -> None:
        """Remove the test directory when nothing was written into it."""
        if self.dir.is_dir() and not any(self.dir.iterdir()):
            self.dir.rmdir()

    def failed(self) -> List[Path]:
        """Announce every diagnostic file and attach it to the report."""
        files = self.files()
        for path in files:
            print(JUNIT_ATTACHMENT.format(path.resolve()))
            attach_file(path)
        if files:
            logger.info(f"📎 {len(files)} diagnostic file(s) in {self.dir}")
        return files

    def capture_page(self, layer: PortingLayer) -> None:
        """
        Save screenshot, page source and URL of the page ``layer`` drives.

        A closed or crashed page only loses the artifacts, not the report.
        """
        try:
            self.write("url.txt", layer.current_url)
            layer.page.screenshot(path=str(self.touch("screenshot.png")), full_page=True)
            self.write("page-source.html", layer.page.content())
        except PlaywrightError as e:
            logger.warning(f"Unable to capture page diagnostics: {e}")


def sanitise(test_name: str) -> str:
    """Make a pytest node id usable as a single directory name."""
    name = test_name.replace("::", ".").replace("/", ".")
    return _UNSAFE_CHARS.sub("_", name).strip("._") or "unnamed"


__all__ = [
    "FailureDiagnostics",
    "JUNIT_ATTACHMENT",
    "sanitise",
]
