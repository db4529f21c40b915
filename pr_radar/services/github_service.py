"""GitHub CLI wrapper: gh path resolution, run_command, JSON parsing."""

import json
import logging
import shutil
import subprocess
import threading
from pathlib import Path
from typing import Iterable, List, Optional

from pr_radar.errors import ParseFailure, ProcessFailure, ToolNotFound

logger = logging.getLogger(__name__)

# Checked in order before falling back to a PATH lookup
COMMON_GH_PATHS = (
    "/opt/homebrew/bin/gh",
    "/usr/local/bin/gh",
    "/usr/bin/gh",
    "/home/linuxbrew/.linuxbrew/bin/gh",
)


def find_gh_path(common_paths: Iterable[str] = COMMON_GH_PATHS) -> Optional[str]:
    """Find the gh binary in common locations or on PATH."""
    for path in common_paths:
        if Path(path).exists():
            return path
    return shutil.which("gh")


class GhCli:
    """Runs gh commands using a binary path resolved once per instance.

    The lookup result, found or not, is memoized; a gh installed or moved
    after the first lookup is only picked up by a new instance.
    """

    def __init__(self, gh_path: Optional[str] = None, common_paths: Iterable[str] = COMMON_GH_PATHS):
        self._override = gh_path
        self._common_paths = tuple(common_paths)
        self._lock = threading.Lock()
        self._resolved = False
        self._path: Optional[str] = None

    def resolve(self) -> str:
        """Return the gh path, raising ToolNotFound if it is not installed."""
        with self._lock:
            if not self._resolved:
                self._path = self._override or find_gh_path(self._common_paths)
                self._resolved = True
                if self._path:
                    logger.info(f"Using gh at {self._path}")
                else:
                    logger.error("gh CLI not found in common locations or PATH")
        if not self._path:
            raise ToolNotFound()
        return self._path

    def run_command(self, args: List[str], check: bool = True) -> str:
        """Run a gh CLI command and return its stripped stdout."""
        gh_path = self.resolve()
        try:
            result = subprocess.run(
                [gh_path] + list(args),
                capture_output=True,
                text=True,
                check=check,
            )
            return result.stdout.strip()
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise ProcessFailure(f"gh command failed: {stderr}")
        except OSError as e:
            raise ProcessFailure(f"Failed to run gh command: {e}")


def parse_json_output(output):
    """Parse JSON output from gh CLI, returning [] when it is empty or invalid."""
    if not output:
        return []
    try:
        return json.loads(output)
    except json.JSONDecodeError:
        return []


def load_json_output(output, what="gh output"):
    """Parse JSON output from gh CLI, raising ParseFailure when it is invalid."""
    try:
        return json.loads(output)
    except (json.JSONDecodeError, TypeError) as e:
        raise ParseFailure(f"Failed to parse {what}: {e}")
