"""Mounted filesystem enumeration"""

import fnmatch
import logging
import os
from typing import List, Optional

import psutil

from .errors import EnumerationError
from .models import MountRecord


class MountEnumerator:
    """Lists currently mounted filesystems with fresh usage statistics"""

    def __init__(self, all_mounts: bool = False, exclude: Optional[List[str]] = None,
                 logger: Optional[logging.Logger] = None):
        """Initialize mount enumerator

        Args:
            all_mounts: Include pseudo, memory and duplicate filesystems
            exclude: fnmatch patterns of mount points to skip
            logger: Logger instance
        """
        self.all_mounts = all_mounts
        self.exclude = list(exclude or [])
        self.logger = logger or logging.getLogger(__name__)

    def get_mounts(self) -> List[MountRecord]:
        """Query mounted filesystems

        Filesystems whose usage cannot be read are skipped.

        Returns:
            List of mount records in the order the OS reports them

        Raises:
            EnumerationError: If the partition list cannot be read at all
        """
        self.logger.info("Getting mounted filesystem information")

        try:
            partitions = psutil.disk_partitions(all=self.all_mounts)
        except (OSError, RuntimeError) as e:
            raise EnumerationError(f"Failed to list mounted filesystems: {e}") from e

        mounts = []
        for part in partitions:
            if self._is_excluded(part.mountpoint):
                self.logger.debug(f"Skipping excluded mount point {part.mountpoint}")
                continue

            try:
                usage = psutil.disk_usage(part.mountpoint)
            except (OSError, PermissionError) as e:
                self.logger.warning(f"Skipping {part.mountpoint}: {e}")
                continue

            mounts.append(MountRecord(
                device_label=part.device,
                kind=self._detect_kind(part.device),
                file_system=part.fstype,
                mount_point=part.mountpoint,
                total_bytes=usage.total,
                available_bytes=usage.free
            ))

        self.logger.debug(f"Found {len(mounts)} mounted filesystems")
        return mounts

    def _is_excluded(self, mount_point: str) -> bool:
        return any(fnmatch.fnmatch(mount_point, pattern) for pattern in self.exclude)

    def _detect_kind(self, device: str) -> str:
        """Detect whether a block device is rotational

        Args:
            device: Device path (e.g., /dev/sdb1)

        Returns:
            "HDD", "SSD" or "Unknown"
        """
        name = os.path.basename(device)
        if not name:
            return "Unknown"

        # Partitions expose the parent's queue through /sys/class/block/<part>/..
        candidates = [
            os.path.join("/sys/block", name, "queue", "rotational"),
            os.path.join("/sys/class/block", name, "..", "queue", "rotational"),
        ]
        for path in candidates:
            try:
                with open(path, 'r') as f:
                    value = f.read().strip()
            except OSError:
                continue
            if value == "1":
                return "HDD"
            if value == "0":
                return "SSD"

        return "Unknown"
