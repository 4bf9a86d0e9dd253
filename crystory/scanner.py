"""Directory tree scanner"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional, TextIO


def to_iso(timestamp: Optional[float]) -> str:
    return datetime.fromtimestamp(timestamp).isoformat() if timestamp else "N/A"


class DirectoryScanner:
    """Walks a directory tree and prints basic stats for every entry"""

    def __init__(self, stream: Optional[TextIO] = None, logger: Optional[logging.Logger] = None):
        self.stream = stream
        self.logger = logger or logging.getLogger(__name__)

    def _write(self, line: str) -> None:
        print(line, file=self.stream or sys.stdout)

    def scan(self, path: str) -> int:
        """Scan a directory tree

        Args:
            path: Root of the tree

        Returns:
            Number of entries printed
        """
        self._write(f"Scanning directory: {path}")
        count = self._print_entry(path)

        for current, dirs, files in os.walk(path, onerror=self._on_error):
            dirs.sort()
            for name in dirs + sorted(files):
                count += self._print_entry(os.path.join(current, name))

        return count

    def _on_error(self, error: OSError) -> None:
        self.logger.warning(f"Cannot read {error.filename}: {error.strerror}")

    def _print_entry(self, path: str) -> int:
        try:
            stat = os.stat(path)
        except OSError as e:
            self.logger.warning(f"Error accessing {path}: {e}")
            return 0

        self._write("-" * 50)
        self._write(f"Path: {path}")
        self._write(f"  Is file: {os.path.isfile(path)}")
        self._write(f"  Is directory: {os.path.isdir(path)}")
        self._write(f"  Size: {stat.st_size} bytes")
        self._write(f"  Created: {to_iso(getattr(stat, 'st_birthtime', None) or stat.st_ctime)}")
        self._write(f"  Modified: {to_iso(stat.st_mtime)}")
        return 1
