"""System utility checks."""

from __future__ import annotations

import logging
import shutil
import subprocess

logger = logging.getLogger(__name__)


def check_git() -> tuple[bool, str]:
    """Check if git is installed and return version."""
    if not shutil.which("git"):
        return False, "git not found. Install git to fetch shell plugins."
    try:
        result = subprocess.run(
            ["git", "--version"],
            capture_output=True,
            text=True,
            timeout=10,
        )
        return True, result.stdout.strip() or result.stderr.strip()
    except subprocess.TimeoutExpired:
        return False, "git version check timed out"
    except Exception as e:
        logger.exception("git version check failed")
        return False, f"Error checking git: {e}"
