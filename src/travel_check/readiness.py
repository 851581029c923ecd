"""
Readiness evaluation for the travel router role.

The thresholds are fixed policy. Checks run in a fixed order and each
failing check adds one remediation line to Readiness.missing, in that same
order.
"""

import logging
import re
from typing import Optional, Tuple

from .models import HostFacts, Readiness

logger = logging.getLogger(__name__)

MIN_PROXMOX_VERSION = (9, 0)  # exclusive
MIN_RAM_GB = 16
MIN_ROOT_STORAGE_GB = 128
MIN_AVAILABLE_STORAGE_GB = 50
MIN_NICS = 2
MIN_CPU_CORES = 4

REMEDIATIONS = {
    "version_ok": "Update Proxmox (need >9.0)",
    "ram_ok": "RAM upgrade (need >=16GB)",
    "storage_ok": "Storage upgrade (need >=128GB)",
    "avail_storage_ok": "Free storage (need >=50GB available)",
    "nics_ok": "Add NIC (need >=2 Ethernet)",
    "cores_ok": "CPU upgrade (need >=4 cores)",
    "iommu_ok": "Enable IOMMU (intel_iommu=on or amd_iommu=on)",
    "virt_ok": "Enable virtualization (VT-x/AMD-V) in BIOS",
}

_VERSION_RE = re.compile(r"^(\d+)\.(\d+)")


def parse_version(version: str) -> Optional[Tuple[int, int]]:
    """'9.1' -> (9, 1); anything unparseable -> None."""
    match = _VERSION_RE.match(version or "")
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def version_is_supported(version: str) -> bool:
    parsed = parse_version(version)
    return parsed is not None and parsed > MIN_PROXMOX_VERSION


def evaluate_readiness(facts: HostFacts) -> Readiness:
    """Apply every readiness gate to the collected facts."""
    checks = [
        ("version_ok", version_is_supported(facts.proxmox_version)),
        ("ram_ok", facts.ram_gb >= MIN_RAM_GB),
        ("storage_ok", facts.root_storage_gb >= MIN_ROOT_STORAGE_GB),
        ("avail_storage_ok", facts.available_storage_gb >= MIN_AVAILABLE_STORAGE_GB),
        ("nics_ok", len(facts.nics) >= MIN_NICS),
        ("cores_ok", facts.cpu_cores >= MIN_CPU_CORES),
        ("iommu_ok", facts.iommu_enabled),
        ("virt_ok", facts.virtualization_supported),
    ]

    missing = tuple(REMEDIATIONS[name] for name, ok in checks if not ok)
    for item in missing:
        logger.debug(f"Readiness gap: {item}")

    return Readiness(missing=missing, **dict(checks))
