"""Main Crystory application class"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from . import __version__
from .config import ConfigManager, BACKENDS
from .enumerators import BaseEnumerator, detect_enumerator
from .errors import EnumerationError
from .models import DeviceTreeNode, MountRecord
from .mounts import MountEnumerator
from .reconciler import IdentityReconciler
from .report import ReportRenderer
from .scanner import DirectoryScanner
from .uuid_store import UuidStore


class Crystory:
    """Main class for the crystory tool

    It orchestrates the work of specialized components:
    - Topology enumerators (system_profiler, none)
    - Mount enumeration
    - Identity reconciliation with persistent UUID markers
    - Report rendering
    """

    def __init__(self):
        """Initialize the Crystory instance"""
        # Options
        self.command = None
        self.config_file = "./crystory.conf"
        self.verbose = False
        self.quiet = False
        self.output_format = "text"
        self.show_tree = False
        self.backend = None
        self.scan_path = None

        # Components (initialized later)
        self.logger = self._setup_logger()
        self.config_manager: Optional[ConfigManager] = None
        self.enumerator: Optional[BaseEnumerator] = None
        self.renderer = ReportRenderer()

    def _setup_logger(self) -> logging.Logger:
        """Set up the logger for the application"""
        logger = logging.getLogger("crystory")
        logger.setLevel(logging.INFO)

        if not logger.handlers:
            ch = logging.StreamHandler()
            ch.setLevel(logging.INFO)

            formatter = logging.Formatter('[%(levelname)s] %(message)s')
            ch.setFormatter(formatter)

            logger.addHandler(ch)

        return logger

    def build_parser(self) -> argparse.ArgumentParser:
        """Build the command line parser"""
        parser = argparse.ArgumentParser(
            prog="crystory",
            description="Lists attached storage devices and assigns each volume a persistent UUID."
        )
        parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
        parser.add_argument("-c", "--config", default=self.config_file, metavar="PATH",
                            help="Path to configuration file")
        parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
        parser.add_argument("-q", "--quiet", action="store_true", help="Suppress INFO messages")

        subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
        subparsers.required = True

        list_parser = subparsers.add_parser("list-devices", help="List all connected USB storage devices")
        list_parser.add_argument("-j", "--json", action="store_true", help="Output results in JSON format")
        list_parser.add_argument("-t", "--table", action="store_true", help="Output results as a table")
        list_parser.add_argument("--tree", action="store_true",
                                 help="Show the raw device topology instead of mounted volumes")
        list_parser.add_argument("--backend", choices=BACKENDS,
                                 help="Topology backend (overrides the configuration file)")

        scan_parser = subparsers.add_parser("scan", help="Scan a directory tree")
        scan_parser.add_argument("path", help="Directory to scan")

        subparsers.add_parser("query", help="Query a previously indexed device (Not yet implemented)")
        subparsers.add_parser("service", help="Manage the background indexer service (Not yet implemented)")

        return parser

    def parse_arguments(self, argv: Optional[List[str]] = None) -> None:
        """Parse command line arguments"""
        args = self.build_parser().parse_args(argv)

        # Set instance variables
        self.command = args.command
        self.config_file = args.config
        self.verbose = args.verbose
        self.quiet = args.quiet

        if self.command == "list-devices":
            self.show_tree = args.tree
            self.backend = args.backend
            if args.json:
                self.output_format = "json"
            elif args.table:
                self.output_format = "table"
        elif self.command == "scan":
            self.scan_path = args.path

        # Configure logger
        if self.verbose:
            self._set_log_level(logging.DEBUG)
        elif self.quiet:
            self._set_log_level(logging.WARNING)

    def _set_log_level(self, level: int) -> None:
        self.logger.setLevel(level)
        for handler in self.logger.handlers:
            handler.setLevel(level)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point for the application

        Returns:
            Process exit code
        """
        self.parse_arguments(argv)

        if self.command == "scan":
            return self._handle_scan()

        if self.command in ("query", "service"):
            print(f"'{self.command}' is not yet implemented.")
            return 0

        # Load configuration
        self.config_manager = ConfigManager(self.config_file, logger=self.logger)
        self.enumerator = detect_enumerator(
            self.backend or self.config_manager.backend,
            logger=self.logger,
            data_type=self.config_manager.data_type,
            output_format=self.config_manager.topology_format
        )

        if self.show_tree:
            self.renderer.render_topology(self._get_topology())
            return 0

        self._handle_list_devices()
        return 0

    def _get_topology(self) -> Optional[DeviceTreeNode]:
        """Enumerate the topology, treating failure as unavailable"""
        try:
            return self.enumerator.get_topology()
        except EnumerationError as e:
            self.logger.error(f"Topology enumeration failed, bus-level UUIDs unavailable: {e}")
            return None

    def _get_mounts(self) -> List[MountRecord]:
        """Enumerate mounted filesystems, treating failure as empty"""
        mount_enumerator = MountEnumerator(
            all_mounts=self.config_manager.all_mounts,
            exclude=self.config_manager.exclude_mounts,
            logger=self.logger
        )
        try:
            return mount_enumerator.get_mounts()
        except EnumerationError as e:
            self.logger.error(f"Mount enumeration failed: {e}")
            return []

    def _handle_list_devices(self) -> None:
        """Reconcile topology and mounts and render the result"""
        tree = self._get_topology()
        mounts = self._get_mounts()

        store = UuidStore(self.config_manager.marker_file, logger=self.logger)
        reconciler = IdentityReconciler(store, logger=self.logger)
        volumes = reconciler.reconcile(tree, mounts)

        self.renderer.render_volumes(volumes, self.output_format)

    def _handle_scan(self) -> int:
        """Handle directory scan operation"""
        if not os.path.isdir(self.scan_path):
            self.logger.error(f"Not a directory: {self.scan_path}")
            return 1

        DirectoryScanner(logger=self.logger).scan(self.scan_path)
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    return Crystory().run(argv)


if __name__ == "__main__":
    sys.exit(main())
