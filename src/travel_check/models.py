"""
Readiness report data model.

All types are frozen: a report is built once per run and never mutated.
Sequences are stored as tuples and turned into lists by to_dict().
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

UNKNOWN = "unknown"


@dataclass(frozen=True)
class NicDetail:
    """Driver, link state and speed of one physical NIC."""
    name: str
    driver: str = UNKNOWN
    state: str = "DOWN"  # UP | DOWN | unknown
    speed: str = UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "driver": self.driver,
            "state": self.state,
            "speed": self.speed,
        }


@dataclass(frozen=True)
class OpnsenseStatus:
    iso_present: bool = False
    vm_exists: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "iso_present": self.iso_present,
            "vm_exists": self.vm_exists,
        }


@dataclass(frozen=True)
class HostFacts:
    """Everything the collectors learned about the host.

    Defaults are the zero values a collector falls back to, so
    HostFacts() describes a host where nothing could be detected.
    """
    proxmox_version: str = UNKNOWN
    cpu_model: str = ""
    cpu_cores: int = 0
    cpu_threads_per_core: int = 0
    ram_gb: int = 0
    root_storage_gb: int = 0
    available_storage_gb: int = 0
    nics: Tuple[str, ...] = ()
    nic_details: Tuple[NicDetail, ...] = ()
    bridges: Tuple[str, ...] = ()
    iommu_enabled: bool = False
    virtualization_supported: bool = False
    opnsense: OpnsenseStatus = field(default_factory=OpnsenseStatus)


@dataclass(frozen=True)
class Readiness:
    """Outcome of the readiness gates, in evaluation order."""
    version_ok: bool = False
    ram_ok: bool = False
    storage_ok: bool = False
    avail_storage_ok: bool = False
    nics_ok: bool = False
    cores_ok: bool = False
    iommu_ok: bool = False
    virt_ok: bool = False
    missing: Tuple[str, ...] = ()

    @property
    def ready(self) -> bool:
        return not self.missing

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version_ok": self.version_ok,
            "ram_ok": self.ram_ok,
            "storage_ok": self.storage_ok,
            "avail_storage_ok": self.avail_storage_ok,
            "nics_ok": self.nics_ok,
            "cores_ok": self.cores_ok,
            "iommu_ok": self.iommu_ok,
            "virt_ok": self.virt_ok,
            "missing": list(self.missing),
        }


@dataclass(frozen=True)
class ReadinessReport:
    script_version: str
    facts: HostFacts
    readiness: Readiness

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary with the published key order."""
        facts = self.facts
        return {
            "script_version": self.script_version,
            "proxmox_version": facts.proxmox_version,
            "cpu_model": facts.cpu_model,
            "cpu_cores": facts.cpu_cores,
            "cpu_threads_per_core": facts.cpu_threads_per_core,
            "ram_gb": facts.ram_gb,
            "root_storage_gb": facts.root_storage_gb,
            "available_storage_gb": facts.available_storage_gb,
            "nics": list(facts.nics),
            "nic_details": [nic.to_dict() for nic in facts.nic_details],
            "bridges": list(facts.bridges),
            "iommu_enabled": facts.iommu_enabled,
            "virtualization_supported": facts.virtualization_supported,
            "opnsense": facts.opnsense.to_dict(),
            "readiness": self.readiness.to_dict(),
        }
