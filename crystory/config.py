"""Configuration management for crystory"""

import os
import logging
from typing import List, Optional
import yaml


DEFAULT_MARKER_FILE = ".crystory_uuid"
BACKENDS = ("auto", "system_profiler", "none")
TOPOLOGY_FORMATS = ("json", "xml")


class ConfigManager:
    """Manages loading and accessing configuration from YAML file"""

    def __init__(self, config_file: str = "./crystory.conf", logger: Optional[logging.Logger] = None):
        """Initialize configuration manager

        Args:
            config_file: Path to configuration file
            logger: Logger instance
        """
        self.config_file = os.path.expanduser(config_file)
        self.logger = logger or logging.getLogger(__name__)

        self.marker_file: str = DEFAULT_MARKER_FILE
        self.backend: str = "auto"
        self.data_type: str = "SPUSBDataType"
        self.topology_format: str = "json"
        self.all_mounts: bool = False
        self.exclude_mounts: List[str] = []

        self.load()

    def load(self) -> None:
        """Load configuration from YAML file

        Configuration file structure:
        ```yaml
        marker_file: ".crystory_uuid"   # Marker file name at each volume root

        topology:
          backend: auto                 # auto, system_profiler or none
          data_type: SPUSBDataType      # system_profiler data type
          format: json                  # json or xml

        mounts:
          all: false                    # Include pseudo and duplicate filesystems
          exclude:                      # Mount point patterns to skip
            - "/System/Volumes/*"
        ```
        """
        if not os.path.exists(self.config_file):
            self.logger.debug(f"Configuration file {self.config_file} not found. Using default settings.")
            return

        try:
            self.logger.info(f"Loading user configuration from {self.config_file}")

            with open(self.config_file, 'r') as f:
                config = yaml.safe_load(f)

            if not config or not isinstance(config, dict):
                self.logger.warning(f"Configuration file {self.config_file} is empty or invalid")
                return

            marker_file = config.get('marker_file')
            if marker_file:
                self._set_marker_file(str(marker_file))

            topology = self._section(config, 'topology')
            if topology:
                self._load_topology(topology)

            mounts = self._section(config, 'mounts')
            if mounts:
                self._load_mounts(mounts)

        except yaml.YAMLError as e:
            self.logger.error(f"Error parsing YAML in configuration file: {e}")
        except IOError as e:
            self.logger.error(f"Error reading configuration file: {e}")

    def _section(self, config: dict, name: str) -> dict:
        """Return a configuration section, or an empty dict if it is missing or not a mapping"""
        section = config.get(name)
        if section is None:
            return {}
        if not isinstance(section, dict):
            self.logger.warning(f"Ignoring '{name}' section in {self.config_file}, expected a mapping")
            return {}
        return section

    def _set_marker_file(self, marker_file: str) -> None:
        """Set the marker file name, rejecting anything that is not a plain file name"""
        if os.path.basename(marker_file) != marker_file or marker_file in (".", ".."):
            self.logger.warning(f"Ignoring invalid marker_file '{marker_file}', must be a plain file name")
            return
        self.marker_file = marker_file

    def _load_topology(self, topology: dict) -> None:
        """Load topology enumeration settings

        Args:
            topology: Topology section of the configuration
        """
        backend = topology.get('backend', self.backend)
        if backend in BACKENDS:
            self.backend = backend
        else:
            self.logger.warning(f"Unknown topology backend '{backend}', using '{self.backend}'")

        self.data_type = str(topology.get('data_type', self.data_type))

        topology_format = topology.get('format', self.topology_format)
        if topology_format in TOPOLOGY_FORMATS:
            self.topology_format = topology_format
        else:
            self.logger.warning(f"Unknown topology format '{topology_format}', using '{self.topology_format}'")

    def _load_mounts(self, mounts: dict) -> None:
        """Load mount enumeration settings

        Args:
            mounts: Mounts section of the configuration
        """
        self.all_mounts = bool(mounts.get('all', self.all_mounts))

        exclude = mounts.get('exclude') or []
        if isinstance(exclude, str):
            exclude = [exclude]
        self.exclude_mounts = [str(pattern) for pattern in exclude]
        self.logger.debug(f"Loaded {len(self.exclude_mounts)} mount exclusion patterns")
