"""
Optional installation of the tools the readiness check reads from.

Only ethtool and brctl are commonly absent from a fresh Proxmox node; the
rest ship with the base system. Installation failures are reported but
never stop the run, since every collector copes with a missing tool.
"""

import logging
import os
import shutil
import subprocess
from typing import Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

# command -> Debian package providing it
HOST_TOOLS: Dict[str, str] = {
    "ethtool": "ethtool",
    "brctl": "bridge-utils",
}


def find_missing_packages(
    which: Callable[[str], Optional[str]] = shutil.which,
) -> List[str]:
    """Packages to install for host tools that are not on PATH."""
    return [pkg for cmd, pkg in HOST_TOOLS.items() if which(cmd) is None]


def install_packages(packages: List[str]) -> bool:
    """Install packages with apt-get. Returns True on success."""
    if not packages:
        return True

    if os.geteuid() != 0:
        logger.warning(f"Not root, skipping install of: {', '.join(packages)}")
        return False

    env = dict(os.environ, DEBIAN_FRONTEND="noninteractive")
    try:
        logger.info("Updating package index...")
        subprocess.run(
            ["apt-get", "update", "-qq"],
            check=True, capture_output=True, text=True, env=env,
        )
        logger.info(f"Installing {', '.join(packages)}...")
        subprocess.run(
            ["apt-get", "install", "-y", "-qq"] + packages,
            check=True, capture_output=True, text=True, env=env,
        )
    except FileNotFoundError:
        logger.warning("apt-get not available, cannot install host tools")
        return False
    except subprocess.CalledProcessError as e:
        logger.warning(f"Package install failed: {(e.stderr or '').strip()}")
        return False

    logger.info(f"Installed {', '.join(packages)}")
    return True


def ensure_host_tools() -> bool:
    """Install whatever host tools are missing."""
    missing = find_missing_packages()
    if not missing:
        logger.debug("All host tools present")
        return True
    return install_packages(missing)
