"""Build version detection, shared by main.py and the health router."""

from __future__ import annotations

import subprocess
from pathlib import Path

_PROJECT_ROOT = Path(__file__).resolve().parents[3]
BASE_VERSION = "0.3.0"


def get_build_version() -> str:
    """Return version string with git commit hash suffix."""
    commit_file = _PROJECT_ROOT / "BUILD_COMMIT"
    if commit_file.is_file():
        commit = commit_file.read_text().strip()
        if commit and commit != "dev":
            return f"{BASE_VERSION}-{commit}"
    try:
        commit = (
            subprocess.check_output(
                ["git", "rev-parse", "--short", "HEAD"],
                cwd=str(_PROJECT_ROOT),
                stderr=subprocess.DEVNULL,
            )
            .decode()
            .strip()
        )
    except (OSError, subprocess.CalledProcessError):
        commit = ""
    if commit:
        return f"{BASE_VERSION}-{commit}"
    return f"{BASE_VERSION}-dev"


#: Computed once at import time.
BUILD_VERSION = get_build_version()
