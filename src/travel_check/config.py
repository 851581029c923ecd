"""
check-proxmox-travel Configuration Module

Handles configuration loading from environment variables and config files.
Readiness thresholds are fixed policy and are intentionally not configurable.
"""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass

from .collectors import ISO_DIR
from .report import DEFAULT_OUTPUT

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"


def _as_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def get_config_dir() -> Path:
    """Get the configuration directory."""
    # Check environment variable first
    if "TRAVEL_CHECK_CONFIG" in os.environ:
        return Path(os.environ["TRAVEL_CHECK_CONFIG"])

    if os.geteuid() == 0:
        return Path("/etc/check-proxmox-travel")

    # Use XDG_CONFIG_HOME or default
    xdg_config = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(xdg_config) / "check-proxmox-travel"


@dataclass
class TravelCheckConfig:
    """Runtime settings for the readiness check.

    Loads configuration from:
    1. Environment variables (highest priority)
    2. Config file (config.yaml in the config directory)
    3. Defaults (lowest priority)
    """
    config_dir: str = ""

    # Where the report goes when no path is given on the command line
    output: str = DEFAULT_OUTPUT

    # Proxmox ISO template storage scanned for OPNsense images
    iso_dir: str = ISO_DIR

    log_level: str = "info"

    # Install ethtool/bridge-utils before probing
    install_deps: bool = False

    @classmethod
    def load(cls, config_dir: Optional[str] = None) -> 'TravelCheckConfig':
        """Load configuration from environment and config file."""
        config = cls()
        config.config_dir = str(config_dir) if config_dir else str(get_config_dir())

        config_file = Path(config.config_dir) / CONFIG_FILENAME
        if config_file.exists():
            try:
                with open(config_file) as f:
                    file_config = yaml.safe_load(f) or {}
                if not isinstance(file_config, dict):
                    raise ValueError("top level must be a mapping")
                config._apply_dict(file_config)
                logger.debug(f"Loaded config from {config_file}")
            except (OSError, yaml.YAMLError, ValueError) as e:
                logger.warning(f"Failed to load config file {config_file}: {e}")

        # Override with environment variables (highest priority)
        config._apply_env()

        return config

    def _apply_dict(self, data: Dict[str, Any]):
        """Apply configuration from dictionary."""
        # An empty key ("output:") loads as None and keeps the default
        if data.get('output') is not None:
            self.output = str(data['output'])
        if data.get('iso_dir') is not None:
            self.iso_dir = str(data['iso_dir'])
        if data.get('log_level') is not None:
            self.log_level = str(data['log_level'])
        if data.get('install_deps') is not None:
            self.install_deps = _as_bool(data['install_deps'])

    def _apply_env(self):
        """Apply configuration from environment variables."""
        self.output = os.environ.get('TRAVEL_CHECK_OUTPUT', self.output)
        self.iso_dir = os.environ.get('TRAVEL_CHECK_ISO_DIR', self.iso_dir)
        self.log_level = os.environ.get('TRAVEL_CHECK_LOG_LEVEL', self.log_level)

        if os.environ.get('TRAVEL_CHECK_INSTALL_DEPS'):
            self.install_deps = _as_bool(os.environ['TRAVEL_CHECK_INSTALL_DEPS'])

    @property
    def log_level_value(self) -> int:
        """Numeric logging level, INFO for anything unrecognised."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'output': self.output,
            'iso_dir': self.iso_dir,
            'log_level': self.log_level,
            'install_deps': self.install_deps,
        }
