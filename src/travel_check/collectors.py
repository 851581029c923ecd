"""
Host fact collectors.

Each collector gathers one fact from a host tool or /proc file and degrades
to a zero value ("unknown", "", 0, False, empty) whenever the source is
missing or its output cannot be parsed. Parsing is kept in separate parse_*
functions that work on plain text.
"""

import fnmatch
import logging
import os
import re
from typing import Dict, List, Optional, Tuple

from .commands import Runner, read_text, run_command
from .models import UNKNOWN, HostFacts, NicDetail, OpnsenseStatus

logger = logging.getLogger(__name__)

ISO_DIR = "/var/lib/vz/template/iso"
ISO_PATTERN = "opnsense*.iso"
CPUINFO_PATH = "/proc/cpuinfo"

# First pool present wins
STORAGE_POOLS = ("local-lvm", "local-zfs", "local")

NIC_PREFIXES = ("en", "eth")
BRIDGE_PREFIX = "vmbr"

IOMMU_MARKERS = (
    "DMAR: IOMMU enabled",                  # Intel VT-d
    "AMD-Vi: Interrupt remapping enabled",  # AMD-Vi
)
VIRT_FLAGS = ("vmx", "svm")

_PVE_VERSION_RE = re.compile(r"pve-manager/(\d+\.\d+)")
_LINK_NAME_RE = re.compile(r"^\d+:\s+([^:\s]+):")
_LINK_STATE_RE = re.compile(r"\bstate\s+(\S+)")


def _to_int(value: str) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

def parse_pveversion(output: Optional[str]) -> str:
    """Extract 'X.Y' from 'pve-manager/X.Y.Z/...'."""
    if not output:
        return UNKNOWN
    match = _PVE_VERSION_RE.search(output)
    return match.group(1) if match else UNKNOWN


def parse_lscpu(output: Optional[str]) -> Tuple[str, int, int]:
    """Return (model, cores, threads_per_core) from lscpu output.

    cores is cores per socket times sockets; a missing socket count is
    taken as a single socket.
    """
    fields: Dict[str, str] = {}
    for line in (output or "").splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        fields[key.strip()] = value.strip()

    model = fields.get("Model name", "")
    cores_per_socket = _to_int(fields.get("Core(s) per socket", ""))
    sockets = _to_int(fields.get("Socket(s)", "")) or 1
    threads = _to_int(fields.get("Thread(s) per core", ""))
    return model, cores_per_socket * sockets, threads


def parse_free(output: Optional[str]) -> int:
    """Total memory in GB, rounded, from `free -m`."""
    for line in (output or "").splitlines():
        parts = line.split()
        if len(parts) >= 2 and parts[0] == "Mem:":
            try:
                return max(round(int(parts[1]) / 1024), 0)
            except ValueError:
                return 0
    return 0


def parse_df_size(output: Optional[str]) -> int:
    """Size column of the first data row of `df -BG`, e.g. '238G' -> 238."""
    lines = (output or "").strip().splitlines()
    if len(lines) < 2:
        return 0
    parts = lines[1].split()
    if len(parts) < 2:
        return 0
    return _to_int(parts[1].rstrip("GgBb"))


def parse_pvesm_available(output: Optional[str], pools=STORAGE_POOLS) -> int:
    """Available GB of the highest-priority pool listed by `pvesm status`.

    pvesm reports sizes in KiB.
    """
    available: Dict[str, int] = {}
    for line in (output or "").splitlines()[1:]:
        parts = line.split()
        # Name Type Status Total Used Available %
        if len(parts) < 6:
            continue
        try:
            available[parts[0]] = int(parts[5])
        except ValueError:
            continue

    for pool in pools:
        if pool in available:
            return max(round(available[pool] / 1024 / 1024), 0)
    return 0


def parse_nics(output: Optional[str]) -> List[str]:
    """Physical Ethernet interface names from `ip -o link show`."""
    nics = []
    for line in (output or "").splitlines():
        match = _LINK_NAME_RE.match(line)
        if not match:
            continue
        # "eth0@if12" style names carry their peer after '@'
        name = match.group(1).split("@", 1)[0]
        if name.startswith(NIC_PREFIXES) and name not in nics:
            nics.append(name)
    return nics


def parse_ethtool_driver(output: Optional[str]) -> str:
    for line in (output or "").splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "driver" and value.strip():
            return value.strip()
    return UNKNOWN


def parse_ethtool_speed(output: Optional[str]) -> str:
    for line in (output or "").splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "Speed":
            value = value.strip()
            if value and not value.startswith("Unknown"):
                return value
            return UNKNOWN
    return UNKNOWN


def parse_link_state(output: Optional[str]) -> str:
    """Map the kernel operstate to UP, DOWN or unknown.

    No output at all counts as DOWN.
    """
    if not output:
        return "DOWN"
    match = _LINK_STATE_RE.search(output)
    if not match:
        return "DOWN"
    state = match.group(1).upper()
    if state == "UP":
        return "UP"
    if state == "UNKNOWN":
        return UNKNOWN
    return "DOWN"


def parse_bridges(output: Optional[str]) -> List[str]:
    """Bridge names from `brctl show`, header and member-only rows skipped."""
    bridges = []
    for line in (output or "").splitlines()[1:]:
        if not line or line[0].isspace():
            continue
        name = line.split()[0]
        if name.startswith(BRIDGE_PREFIX) and name not in bridges:
            bridges.append(name)
    return bridges


def parse_iommu(output: Optional[str]) -> bool:
    if not output:
        return False
    return any(marker in output for marker in IOMMU_MARKERS)


def parse_virt_flags(cpuinfo: Optional[str]) -> bool:
    for line in (cpuinfo or "").splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "flags":
            flags = set(value.split())
            if flags.intersection(VIRT_FLAGS):
                return True
    return False


def parse_qm_list(output: Optional[str]) -> bool:
    return bool(output) and "opnsense" in output.lower()


# ---------------------------------------------------------------------------
# Collectors
# ---------------------------------------------------------------------------

def get_proxmox_version(run: Runner = run_command) -> str:
    return parse_pveversion(run(["pveversion"]))


def get_cpu_info(run: Runner = run_command) -> Tuple[str, int, int]:
    return parse_lscpu(run(["lscpu"]))


def get_ram_gb(run: Runner = run_command) -> int:
    return parse_free(run(["free", "-m"]))


def get_root_storage_gb(run: Runner = run_command) -> int:
    return parse_df_size(run(["df", "-BG", "/"]))


def get_available_storage_gb(run: Runner = run_command) -> int:
    return parse_pvesm_available(run(["pvesm", "status"]))


def get_nics(run: Runner = run_command) -> List[str]:
    return parse_nics(run(["ip", "-o", "link", "show"]))


def get_nic_detail(nic: str, run: Runner = run_command) -> NicDetail:
    return NicDetail(
        name=nic,
        driver=parse_ethtool_driver(run(["ethtool", "-i", nic])),
        state=parse_link_state(run(["ip", "link", "show", nic])),
        speed=parse_ethtool_speed(run(["ethtool", nic])),
    )


def get_nic_details(nics: List[str], run: Runner = run_command) -> List[NicDetail]:
    return [get_nic_detail(nic, run) for nic in nics]


def get_bridges(run: Runner = run_command) -> List[str]:
    return parse_bridges(run(["brctl", "show"]))


def get_iommu_enabled(run: Runner = run_command) -> bool:
    return parse_iommu(run(["dmesg"]))


def get_virtualization_supported(cpuinfo_path: str = CPUINFO_PATH) -> bool:
    return parse_virt_flags(read_text(cpuinfo_path))


def find_opnsense_isos(iso_dir: str = ISO_DIR) -> List[str]:
    """ISO images in iso_dir named like opnsense*.iso, in any letter case."""
    try:
        names = sorted(os.listdir(iso_dir))
    except OSError as e:
        logger.debug(f"Could not list {iso_dir}: {e}")
        return []
    return [
        os.path.join(iso_dir, name) for name in names
        if fnmatch.fnmatchcase(name.lower(), ISO_PATTERN)
    ]


def get_opnsense_status(run: Runner = run_command, iso_dir: str = ISO_DIR) -> OpnsenseStatus:
    return OpnsenseStatus(
        iso_present=bool(find_opnsense_isos(iso_dir)),
        vm_exists=parse_qm_list(run(["qm", "list"])),
    )


def collect_facts(
    run: Runner = run_command,
    iso_dir: str = ISO_DIR,
    cpuinfo_path: str = CPUINFO_PATH,
) -> HostFacts:
    """Run every collector once, in order, and freeze the result."""
    logger.info("Collecting host facts")

    proxmox_version = get_proxmox_version(run)
    cpu_model, cpu_cores, cpu_threads = get_cpu_info(run)
    nics = get_nics(run)

    facts = HostFacts(
        proxmox_version=proxmox_version,
        cpu_model=cpu_model,
        cpu_cores=cpu_cores,
        cpu_threads_per_core=cpu_threads,
        ram_gb=get_ram_gb(run),
        root_storage_gb=get_root_storage_gb(run),
        available_storage_gb=get_available_storage_gb(run),
        nics=tuple(nics),
        nic_details=tuple(get_nic_details(nics, run)),
        bridges=tuple(get_bridges(run)),
        iommu_enabled=get_iommu_enabled(run),
        virtualization_supported=get_virtualization_supported(cpuinfo_path),
        opnsense=get_opnsense_status(run, iso_dir),
    )

    logger.debug(f"Collected facts: {facts}")
    return facts
