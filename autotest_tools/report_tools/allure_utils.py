"""
================================================================================
Allure Report Utilities
================================================================================

This module provides helpers for enriching Allure test reports with
attachments produced by the harness: JSON API payloads, page sources,
screenshots and failure diagnostics.

Features:
- Custom attachment helpers
- File attachments with type detection by extension
- Report generation through the Allure CLI

================================================================================
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Optional

import allure
from loguru import logger


# Attachment type by file extension; anything else is attached as plain text
_ATTACHMENT_TYPES = {
    ".png": allure.attachment_type.PNG,
    ".jpg": allure.attachment_type.JPG,
    ".html": allure.attachment_type.HTML,
    ".json": allure.attachment_type.JSON,
    ".xml": allure.attachment_type.XML,
    ".txt": allure.attachment_type.TEXT,
    ".log": allure.attachment_type.TEXT,
}


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_file(path: Path, name: Optional[str] = None):
    """
    Attach a file from disk, picking the attachment type by extension.

    Args:
        path: File to attach
        name: Attachment name (defaults to the file name)
    """
    attachment_type = _ATTACHMENT_TYPES.get(
        path.suffix.lower(), allure.attachment_type.TEXT
    )
    allure.attach.file(
        str(path),
        name=name or path.name,
        attachment_type=attachment_type
    )


# ================================================================================
# Report Generation
# ================================================================================

def generate_allure_report(
    results_dir: Path,
    output_dir: Path,
) -> bool:
    """
    Generate an HTML report from allure-results with the Allure CLI.

    Args:
        results_dir: Path to allure-results directory
        output_dir: Report output directory

    Returns:
        True if successful
    """
    if not results_dir.exists():
        logger.warning(f"No Allure results at {results_dir}")
        return False

    try:
        subprocess.run([
            "allure", "generate",
            str(results_dir),
            "-o", str(output_dir),
            "--clean"
        ], check=True)
    except FileNotFoundError:
        logger.warning("Allure CLI not found. Please install Allure to generate reports.")
        return False
    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to generate Allure report: {e}")
        return False

    logger.info(f"Report generated: {output_dir}")
    return True
