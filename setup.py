"""Setup script that generates build info before building."""

import subprocess
from pathlib import Path
from datetime import datetime, timezone


def _git(*args):
    try:
        result = subprocess.run(
            ["git", *args],
            capture_output=True, text=True, timeout=5
        )
    except (OSError, subprocess.TimeoutExpired):
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def generate_build_info():
    """Generate _build_info.py with git and timestamp info."""
    commit = _git("rev-parse", "HEAD")
    build_time = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")

    build_info_file = Path(__file__).parent / "src" / "travel_check" / "_build_info.py"

    content = f'''"""Build information - auto-generated, do not edit."""

GIT_COMMIT = {repr(commit)}
BUILD_TIME = {repr(build_time)}
'''

    build_info_file.write_text(content)
    print(f"Generated build info: commit={commit[:7] if commit else None}")


# Generate build info before setuptools runs
generate_build_info()

# Let setuptools handle the rest via pyproject.toml
from setuptools import setup
setup()
