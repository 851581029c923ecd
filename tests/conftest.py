"""Shared fixtures: canned host tool output for a fake command runner."""

import logging

import pytest


PVEVERSION = "pve-manager/9.1.2/9d436f37a0ac4172 (running kernel: 6.17.2-1-pve)\n"

LSCPU = """\
Architecture:                         x86_64
CPU op-mode(s):                       32-bit, 64-bit
Vendor ID:                            GenuineIntel
Model name:                           Intel(R) N100
Thread(s) per core:                   1
Core(s) per socket:                   4
Socket(s):                            1
"""

FREE = """\
               total        used        free      shared  buff/cache   available
Mem:           31958        2311       28722          45        1320       29647
Swap:           8191           0        8191
"""

DF = """\
Filesystem           1G-blocks  Used Available Use% Mounted on
/dev/mapper/pve-root      238G   12G      214G   6% /
"""

PVESM = """\
Name             Type     Status           Total            Used       Available        %
local             dir     active        98497780        12345678        81085432   12.53%
local-lvm     lvmthin     active       832888832        10485760       822403072    1.26%
"""

IP_LINK = """\
1: lo: <LOOPBACK,UP,LOWER_UP> mtu 65536 qdisc noqueue state UNKNOWN mode DEFAULT group default qlen 1000\\    link/loopback 00:00:00:00:00:00 brd 00:00:00:00:00:00
2: enp1s0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc mq master vmbr0 state UP mode DEFAULT group default qlen 1000\\    link/ether 7c:2b:e1:13:a0:01 brd ff:ff:ff:ff:ff:ff
3: enp2s0: <BROADCAST,MULTICAST> mtu 1500 qdisc noop state DOWN mode DEFAULT group default qlen 1000\\    link/ether 7c:2b:e1:13:a0:02 brd ff:ff:ff:ff:ff:ff
4: wlp3s0: <BROADCAST,MULTICAST> mtu 1500 qdisc noop state DOWN mode DORMANT group default qlen 1000\\    link/ether 10:6f:d9:aa:bb:cc brd ff:ff:ff:ff:ff:ff
5: vmbr0: <BROADCAST,MULTICAST,UP,LOWER_UP> mtu 1500 qdisc noqueue state UP mode DEFAULT group default qlen 1000\\    link/ether 7c:2b:e1:13:a0:01 brd ff:ff:ff:ff:ff:ff
6: tap100i0: <BROADCAST,MULTICAST,PROMISC,UP,LOWER_UP> mtu 1500 qdisc pfifo_fast master vmbr0 state UNKNOWN mode DEFAULT group default qlen 1000\\    link/ether 2a:11:22:33:44:55 brd ff:ff:ff:ff:ff:ff
"""

BRCTL = """\
bridge name\tbridge id\t\tSTP enabled\tinterfaces
vmbr0\t\t8000.7c2be113a001\tno\t\tenp1s0
\t\t\t\t\t\t\ttap100i0
vmbr1\t\t8000.000000000000\tno\t\t
"""

DMESG = """\
[    0.000000] Linux version 6.17.2-1-pve
[    0.021847] DMAR: IOMMU enabled
[    0.102311] DMAR: Host address width 39
"""

QM_LIST = """\
      VMID NAME                 STATUS     MEM(MB)    BOOTDISK(GB) PID
       100 OPNsense-Travel      running    4096              32.00 1234
"""


def ethtool_driver(driver):
    return (
        f"driver: {driver}\n"
        "version: 6.17.2-1-pve\n"
        "firmware-version: 0.2-4\n"
        "bus-info: 0000:01:00.0\n"
    )


def ethtool_speed(speed):
    return (
        "Settings for enp1s0:\n"
        "\tSupported ports: [ TP ]\n"
        f"\tSpeed: {speed}\n"
        "\tDuplex: Full\n"
    )


def make_runner(outputs):
    """Build a runner that answers from a {command tuple: stdout} map.

    Commands not in the map behave like a missing binary.
    """
    calls = []

    def run(cmd):
        calls.append(tuple(cmd))
        return outputs.get(tuple(cmd))

    run.calls = calls
    return run


@pytest.fixture
def proxmox_outputs():
    """Tool output of a travel-ready two-NIC Proxmox 9.1 node."""
    return {
        ("pveversion",): PVEVERSION,
        ("lscpu",): LSCPU,
        ("free", "-m"): FREE,
        ("df", "-BG", "/"): DF,
        ("pvesm", "status"): PVESM,
        ("ip", "-o", "link", "show"): IP_LINK,
        ("ethtool", "-i", "enp1s0"): ethtool_driver("igc"),
        ("ethtool", "-i", "enp2s0"): ethtool_driver("igc"),
        ("ip", "link", "show", "enp1s0"): "2: enp1s0: <UP> mtu 1500 state UP mode DEFAULT\n",
        ("ip", "link", "show", "enp2s0"): "3: enp2s0: <BROADCAST> mtu 1500 state DOWN mode DEFAULT\n",
        ("ethtool", "enp1s0"): ethtool_speed("2500Mb/s"),
        ("ethtool", "enp2s0"): ethtool_speed("Unknown!"),
        ("brctl", "show"): BRCTL,
        ("dmesg",): DMESG,
        ("qm", "list"): QM_LIST,
    }


@pytest.fixture
def cpuinfo(tmp_path):
    path = tmp_path / "cpuinfo"
    path.write_text(
        "processor\t: 0\n"
        "model name\t: Intel(R) N100\n"
        "flags\t\t: fpu vme de pse tsc msr pae mce cx8 vmx est tm2 ssse3\n"
    )
    return str(path)


@pytest.fixture
def iso_dir(tmp_path):
    path = tmp_path / "iso"
    path.mkdir()
    (path / "opnsense-25.7-dvd-amd64.iso").write_bytes(b"")
    return str(path)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo the CLI's logging setup so caplog sees package records."""
    yield
    logger = logging.getLogger("travel_check")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
