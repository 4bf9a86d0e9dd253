"""Report rendering for reconciled volumes and device topology"""

import json
import sys
from typing import List, Optional, TextIO

from .models import DeviceTreeNode, ReconciledVolume


SEPARATOR = "-" * 50
FORMATS = ("text", "table", "json")


def format_bytes(bytes_value: int) -> str:
    """Converts bytes to a human-readable string (KB, MB, GB)."""
    value = float(bytes_value)
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if value < 1024.0:
            return f"{value:.2f} {unit}"
        value /= 1024
    return f"{value:.2f} PB"


class ReportRenderer:
    """Writes reconciled volumes and topology listings as text"""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream

    def _write(self, line: str = "") -> None:
        print(line, file=self.stream or sys.stdout)

    def render_volumes(self, volumes: List[ReconciledVolume], fmt: str = "text") -> None:
        """Render reconciled volumes sorted by mount point

        Args:
            volumes: Reconciled volumes
            fmt: 'text', 'table' or 'json'
        """
        volumes = sorted(volumes, key=lambda v: v.mount_point)

        if fmt == "json":
            self._write(json.dumps([volume.to_dict() for volume in volumes], indent=2))
        elif fmt == "table":
            self._render_table(volumes)
        else:
            self._render_text(volumes)

    def _render_text(self, volumes: List[ReconciledVolume]) -> None:
        self._write("Listing all storage devices and partitions:")
        for volume in volumes:
            self._write(SEPARATOR)
            self._write(f"  Device: {volume.device_label}")
            self._write(f"  Type: {volume.kind}")
            self._write(f"  File system: {volume.file_system}")
            self._write(f"  Mount point: {volume.mount_point}")
            self._write(f"  Total space: {volume.total_bytes} bytes")
            self._write(f"  Available space: {volume.available_bytes} bytes")
            self._write(f"  UUID: {volume.display_uuid or 'N/A'}")

    def _render_table(self, volumes: List[ReconciledVolume]) -> None:
        if not volumes:
            self._write("No storage devices found")
            return

        headers = ["Device", "Type", "FS", "Mount point", "Total", "Available", "UUID"]
        table_data = []
        for volume in volumes:
            row = [
                volume.device_label,
                volume.kind,
                volume.file_system,
                volume.mount_point,
                format_bytes(volume.total_bytes),
                format_bytes(volume.available_bytes),
                volume.display_uuid or "N/A"
            ]
            table_data.append(row)

        self._print_table(headers, table_data)

    def _print_table(self, headers: List[str], data: List[List[str]]) -> None:
        """Print a formatted table"""
        # Calculate column widths
        widths = [len(h) for h in headers]
        for row in data:
            for i, val in enumerate(row):
                if i < len(widths):
                    widths[i] = max(widths[i], len(str(val)))

        header_line = "  ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
        self._write("-" * len(header_line))
        self._write(header_line)
        self._write("-" * len(header_line))

        for row in data:
            self._write("  ".join(str(val).ljust(widths[i]) for i, val in enumerate(row)).rstrip())

        self._write("-" * len(header_line))

    def render_topology(self, tree: Optional[DeviceTreeNode]) -> None:
        """Render every storage device of the topology, depth-first"""
        if tree is None:
            self._write("Device topology is not available on this platform")
            return

        for node in tree.walk():
            if node.is_storage_device:
                self._render_device(node)

    def _render_device(self, node: DeviceTreeNode) -> None:
        self._write(f"Device: {node.name}")
        if node.serial_number:
            self._write(f"  Serial Number: {node.serial_number}")

        for media in node.media:
            self._write(f"  Size: {media.size_bytes} bytes")
            self._write(f"  Partitions: {len(media.volumes)}")

            if len(media.volumes) == 1:
                volume = media.volumes[0]
                self._write(f"  File System: {volume.file_system}")
                self._write(f"  Volume UUID: {volume.reported_uuid or 'N/A'}")
            else:
                for i, volume in enumerate(media.volumes, start=1):
                    self._write(f"  - Partition {i}:")
                    self._write(f"      Name: {volume.name}")
                    self._write(f"      File System: {volume.file_system}")
                    self._write(f"      Volume UUID: {volume.reported_uuid or 'N/A'}")
        self._write(SEPARATOR)
