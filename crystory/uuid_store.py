"""Persistent per-volume UUID marker files"""

import logging
import os
import re
import subprocess
import sys
import uuid
from typing import Optional

from .config import DEFAULT_MARKER_FILE
from .errors import MarkerAttributeError, PersistenceError
from .models import NIL_UUID


UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def is_nil_uuid(value: str) -> bool:
    """Check for the all-zero UUID, case-insensitively"""
    return value.strip().lower() == NIL_UUID


def is_valid_uuid(value: str) -> bool:
    """Check for the canonical 8-4-4-4-12 hexadecimal form"""
    return bool(UUID_PATTERN.match(value))


class UuidStore:
    """Reads or mints the identifier stored in a hidden marker file at a volume root

    The store does no locking. Two resolvers racing on the same volume may
    each write a fresh UUID; the file ends up holding one of them.
    """

    def __init__(self, marker_name: str = DEFAULT_MARKER_FILE, logger: Optional[logging.Logger] = None):
        """Initialize UUID store

        Args:
            marker_name: File name of the marker at each volume root
            logger: Logger instance
        """
        self.marker_name = marker_name
        self.logger = logger or logging.getLogger(__name__)

    def marker_path(self, mount_path: str) -> str:
        return os.path.join(mount_path, self.marker_name)

    def resolve(self, mount_path: str) -> Optional[str]:
        """Return the persistent UUID for a volume, minting one if needed

        Args:
            mount_path: Mount point of the volume

        Returns:
            The stored UUID as written in the marker, a freshly written UUID,
            or None if no marker could be written
        """
        path = self.marker_path(mount_path)

        try:
            existing = self._read(path)
        except PersistenceError as e:
            self.logger.warning(str(e))
            existing = None

        if existing is not None:
            if is_valid_uuid(existing) and not is_nil_uuid(existing):
                self.logger.debug(f"Using stored UUID {existing} from {path}")
                return existing
            self.logger.info(f"Replacing invalid UUID marker content in {path}")

        new_uuid = str(uuid.uuid4())
        try:
            self._write(path, new_uuid)
        except PersistenceError as e:
            self.logger.error(str(e))
            return None

        self.logger.info(f"Wrote new UUID {new_uuid} to {path}")
        self._hide(path)
        return new_uuid

    def _read(self, path: str) -> Optional[str]:
        """Read the trimmed marker contents

        Returns:
            The contents, or None if the marker does not exist

        Raises:
            PersistenceError: If the marker exists but cannot be read
        """
        if not os.path.exists(path):
            return None

        try:
            with open(path, 'r', encoding='ascii') as f:
                return f.read().strip()
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Error reading UUID file {path}: {e}") from e

    def _write(self, path: str, value: str) -> None:
        """Write the marker, replacing any previous content

        Raises:
            PersistenceError: If the marker cannot be written
        """
        if sys.platform == "win32" and os.path.exists(path):
            # Windows refuses to truncate a hidden file opened for writing
            try:
                self._run_attrib("-h", path)
            except (OSError, subprocess.CalledProcessError) as e:
                self.logger.debug(f"Could not unhide {path}: {e}")

        try:
            with open(path, 'w', encoding='ascii') as f:
                f.write(value)
        except OSError as e:
            raise PersistenceError(f"Error writing UUID file {path}: {e}") from e

    def _hide(self, path: str) -> None:
        """Apply the hidden attribute where hiding is attribute-based; failures are ignored"""
        if sys.platform != "win32":
            return

        try:
            self._set_hidden(path)
        except MarkerAttributeError as e:
            self.logger.debug(f"Could not hide {path}: {e}")

    def _set_hidden(self, path: str) -> None:
        """Raises MarkerAttributeError if the attribute cannot be set"""
        try:
            self._run_attrib("+h", path)
        except (OSError, subprocess.CalledProcessError) as e:
            raise MarkerAttributeError(str(e)) from e

    def _run_attrib(self, flag: str, path: str) -> None:
        subprocess.run(["attrib", flag, path], check=True, capture_output=True)
