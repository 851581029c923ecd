"""
Report assembly and output.

The JSON text is rendered completely before anything touches the output
path, and files are written through a temporary file plus rename, so a
failed run never leaves a partial report behind.
"""

import json
import logging
import os
import sys
import tempfile
from pathlib import Path

from . import __version__
from .models import HostFacts, Readiness, ReadinessReport

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "check-proxmox-travel.json"
STDOUT = "-"


class ReportError(Exception):
    """The report could not be serialized or written."""


def build_report(facts: HostFacts, readiness: Readiness) -> ReadinessReport:
    return ReadinessReport(
        script_version=__version__,
        facts=facts,
        readiness=readiness,
    )


def render_report(report: ReadinessReport) -> str:
    """Serialize a report to JSON text."""
    try:
        return json.dumps(report.to_dict(), indent=2, allow_nan=False) + "\n"
    except (TypeError, ValueError) as e:
        raise ReportError(f"Failed to generate valid JSON: {e}") from e


def write_report(report: ReadinessReport, output: str = DEFAULT_OUTPUT) -> str:
    """Write the report to a file (or stdout for '-') and return where it went."""
    text = render_report(report)

    if output == STDOUT:
        try:
            sys.stdout.write(text)
            sys.stdout.flush()
        except OSError as e:
            # e.g. BrokenPipeError when piped into head
            raise ReportError(f"Failed to write to stdout: {e}") from e
        return "<stdout>"

    path = Path(output)
    directory = path.parent if str(path.parent) else Path(".")
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=str(directory)
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        # mkstemp creates 0600; the report is not secret
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        raise ReportError(f"Failed to write {output}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass

    logger.debug(f"Wrote {len(text)} bytes to {path}")
    return str(path)
