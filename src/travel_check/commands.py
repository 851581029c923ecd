"""
Best-effort execution of the host tools the readiness check reads from.

Every host tool (pveversion, lscpu, ethtool, ...) is optional. A runner
returns the command's stdout, or None when the binary is missing, cannot be
started, or exits non-zero. Nothing here raises for those cases.
"""

import logging
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

# Signature shared by run_command and the fakes used in tests
Runner = Callable[[List[str]], Optional[str]]


def run_command(cmd: List[str]) -> Optional[str]:
    """Run a command and return its stdout, or None if it is unavailable or failed."""
    try:
        # dmesg and lscpu can carry vendor strings that are not valid UTF-8
        result = subprocess.run(cmd, capture_output=True, text=True, errors="replace")
    except FileNotFoundError:
        logger.debug(f"{cmd[0]} not installed")
        return None
    except OSError as e:
        logger.debug(f"Could not run {cmd[0]}: {e}")
        return None

    if result.returncode != 0:
        logger.debug(
            f"{' '.join(cmd)} exited with {result.returncode}: {result.stderr.strip()}"
        )
        return None
    return result.stdout


def read_text(path) -> Optional[str]:
    """Read a text file, or None if it is missing or unreadable."""
    try:
        return Path(path).read_text(errors="replace")
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return None
