"""
check-proxmox-travel - Proxmox travel router readiness check

Inspects a Proxmox VE node and reports, as a single JSON document, whether it
can host a portable OPNsense travel router.
"""

__version__ = "1.2.0"
__author__ = "AriGonz"

try:
    # Written by setup.py at build time; absent in a source checkout
    from ._build_info import GIT_COMMIT as __git_commit__, BUILD_TIME as __build_time__
except ImportError:
    __git_commit__ = None
    __build_time__ = None


def get_version_info(commit=None, build_time=None) -> str:
    """Version string for --version, e.g. 'check-proxmox-travel 1.2.0 (a1b2c3d, built ...)'."""
    commit = commit or __git_commit__
    build_time = build_time or __build_time__

    extras = []
    if commit:
        extras.append(commit[:7])
    if build_time:
        extras.append(f"built {build_time}")

    info = f"check-proxmox-travel {__version__}"
    return f"{info} ({', '.join(extras)})" if extras else info
