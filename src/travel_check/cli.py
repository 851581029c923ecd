"""
check-proxmox-travel CLI - inspect a Proxmox node and write the readiness report
"""

import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from . import __version__, get_version_info
from .collectors import collect_facts
from .config import TravelCheckConfig
from .dependencies import ensure_host_tools
from .readiness import REMEDIATIONS, evaluate_readiness
from .report import ReportError, build_report, write_report

# stdout is reserved for the JSON report
console = Console(stderr=True)

logger = logging.getLogger("travel_check")

CHECK_LABELS = {
    "version_ok": "Proxmox version",
    "ram_ok": "RAM",
    "storage_ok": "Root storage",
    "avail_storage_ok": "Available storage",
    "nics_ok": "Ethernet NICs",
    "cores_ok": "CPU cores",
    "iommu_ok": "IOMMU",
    "virt_ok": "Virtualization",
}


def setup_logging(level: int = logging.INFO):
    """Route package logging through rich on stderr."""
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)

    handler = RichHandler(console=console, show_path=False, show_time=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    logger.setLevel(level)


def print_summary(report):
    """Show the readiness gates as a table."""
    facts = report.facts
    readiness = report.readiness.to_dict()

    values = {
        "version_ok": facts.proxmox_version,
        "ram_ok": f"{facts.ram_gb} GB",
        "storage_ok": f"{facts.root_storage_gb} GB",
        "avail_storage_ok": f"{facts.available_storage_gb} GB",
        "nics_ok": ", ".join(facts.nics) or "none",
        "cores_ok": str(facts.cpu_cores),
        "iommu_ok": "enabled" if facts.iommu_enabled else "disabled",
        "virt_ok": "supported" if facts.virtualization_supported else "not supported",
    }

    table = Table(title="Travel Router Readiness")
    table.add_column("Check", style="cyan")
    table.add_column("Found")
    table.add_column("Result")

    for name in REMEDIATIONS:
        result = "[green]✓[/green]" if readiness[name] else "[red]✗[/red]"
        table.add_row(CHECK_LABELS[name], values[name], result)

    console.print(table)

    if report.readiness.ready:
        console.print("[green]✓[/green] Node is ready for the travel router setup")
    else:
        console.print("[bold]Missing:[/bold]")
        for item in report.readiness.missing:
            console.print(f"  [yellow]•[/yellow] {item}")


@click.command()
@click.version_option(version=__version__, prog_name="check-proxmox-travel", message=get_version_info())
@click.argument("output_path", required=False)
@click.option("--install-deps", is_flag=True, help="Install missing host tools (ethtool, bridge-utils) first")
@click.option("--summary/--no-summary", default=True, help="Print a readiness table to stderr")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--config-dir", default=None, help="Configuration directory")
def main(output_path, install_deps, summary, debug, config_dir):
    """
    Check whether this Proxmox node can run the portable travel router.

    Writes a JSON readiness report to OUTPUT_PATH
    (default: ./check-proxmox-travel.json). Use - to write to stdout.

    \b
    EXAMPLES:
        check-proxmox-travel
        check-proxmox-travel my-check.json
        check-proxmox-travel - | jq .readiness
    """
    setup_logging(logging.DEBUG if debug else logging.INFO)

    config = TravelCheckConfig.load(config_dir)
    if not debug:
        setup_logging(config.log_level_value)
    logger.debug(f"Config: {config.to_dict()}")

    output = output_path or config.output

    console.print(Panel.fit(
        f"[bold cyan]Proxmox Travel Router Check[/bold cyan]\n"
        f"[dim]Version {__version__}[/dim]",
        border_style="cyan"
    ))

    if install_deps or config.install_deps:
        ensure_host_tools()

    facts = collect_facts(iso_dir=config.iso_dir)
    readiness = evaluate_readiness(facts)
    report = build_report(facts, readiness)

    try:
        written = write_report(report, output)
    except ReportError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if summary:
        print_summary(report)

    console.print(f"\n[green]✓[/green] Diagnostic complete. JSON written to: [cyan]{written}[/cyan]")
    if written != "<stdout>":
        console.print("You can now feed this file to your install script, e.g.:")
        console.print(f"   [cyan]bash install-travel-router.sh --input {written}[/cyan]")


if __name__ == "__main__":
    main()
