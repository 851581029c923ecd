"""
Tests for the readiness gates.

Run with: python -m pytest tests/test_readiness.py -v
"""

import pytest

from travel_check.models import HostFacts
from travel_check.readiness import (
    REMEDIATIONS,
    evaluate_readiness,
    parse_version,
    version_is_supported,
)

CHECK_ORDER = [
    "version_ok",
    "ram_ok",
    "storage_ok",
    "avail_storage_ok",
    "nics_ok",
    "cores_ok",
    "iommu_ok",
    "virt_ok",
]


def _facts(**overrides):
    values = dict(
        proxmox_version="9.2",
        cpu_cores=8,
        ram_gb=32,
        root_storage_gb=256,
        available_storage_gb=100,
        nics=("enp1s0", "enp2s0", "enp3s0"),
        iommu_enabled=True,
        virtualization_supported=True,
    )
    values.update(overrides)
    return HostFacts(**values)


def test_undersized_host_fails_every_check():
    facts = _facts(
        proxmox_version="8.2",
        cpu_cores=2,
        ram_gb=8,
        root_storage_gb=64,
        available_storage_gb=10,
        nics=("eth0",),
        iommu_enabled=False,
        virtualization_supported=False,
    )

    readiness = evaluate_readiness(facts)
    result = readiness.to_dict()

    assert all(result[name] is False for name in CHECK_ORDER)
    assert list(readiness.missing) == [REMEDIATIONS[name] for name in CHECK_ORDER]
    assert not readiness.ready


def test_capable_host_passes_every_check():
    readiness = evaluate_readiness(_facts())
    result = readiness.to_dict()

    assert all(result[name] is True for name in CHECK_ORDER)
    assert result["missing"] == []
    assert readiness.ready


def test_unknown_version_fails_version_check_only():
    readiness = evaluate_readiness(_facts(proxmox_version="unknown"))

    assert readiness.version_ok is False
    assert list(readiness.missing) == ["Update Proxmox (need >9.0)"]


def test_no_nics_fails_nic_check():
    readiness = evaluate_readiness(_facts(nics=()))

    assert readiness.nics_ok is False
    assert list(readiness.missing) == ["Add NIC (need >=2 Ethernet)"]


def test_thresholds_are_inclusive():
    readiness = evaluate_readiness(_facts(
        ram_gb=16, root_storage_gb=128, available_storage_gb=50,
        nics=("eno1", "eno2"), cpu_cores=4,
    ))
    assert readiness.ready


@pytest.mark.parametrize("overrides", [
    {"ram_gb": 15},
    {"root_storage_gb": 127},
    {"available_storage_gb": 49},
    {"cpu_cores": 3},
    {"iommu_enabled": False, "virtualization_supported": False},
    {"proxmox_version": "9.0", "ram_gb": 0, "cpu_cores": 0},
])
def test_missing_matches_failed_checks(overrides):
    """missing holds one entry per failing gate, in evaluation order."""
    readiness = evaluate_readiness(_facts(**overrides))
    result = readiness.to_dict()

    failed = [name for name in CHECK_ORDER if not result[name]]
    assert failed
    assert list(readiness.missing) == [REMEDIATIONS[name] for name in failed]


def test_default_facts_fail_everything():
    readiness = evaluate_readiness(HostFacts())
    assert len(readiness.missing) == len(CHECK_ORDER)


def test_version_comparison_is_numeric():
    assert version_is_supported("9.1")
    assert version_is_supported("10.0")
    assert version_is_supported("9.10")
    assert not version_is_supported("9.0")
    assert not version_is_supported("8.4")
    assert not version_is_supported("unknown")
    assert not version_is_supported("")


def test_parse_version():
    assert parse_version("9.1") == (9, 1)
    assert parse_version("10.0") == (10, 0)
    assert parse_version("nine") is None


def test_evaluation_is_repeatable():
    facts = _facts(ram_gb=8)
    assert evaluate_readiness(facts) == evaluate_readiness(facts)
