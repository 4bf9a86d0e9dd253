"""Base topology enumerator abstraction"""

from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
import logging
import shutil
import subprocess
import json

from ..errors import EnumerationError
from ..models import DeviceTreeNode


class BaseEnumerator(ABC):
    """Abstract base class for device topology enumerators"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        """Initialize the enumerator

        Args:
            logger: Logger instance for output
        """
        self.logger = logger or logging.getLogger(__name__)

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this enumerator can run on the system

        Returns:
            bool: True if the enumerator is usable
        """
        pass

    @abstractmethod
    def get_topology(self) -> Optional[DeviceTreeNode]:
        """Enumerate the device topology

        Returns:
            DeviceTreeNode: Synthetic root node whose children are the buses,
            or None if this platform has no bus-level topology

        Raises:
            EnumerationError: If the query fails or its output is malformed
        """
        pass

    @property
    @abstractmethod
    def enumerator_type(self) -> str:
        """Get the enumerator type identifier

        Returns:
            str: Enumerator type (e.g., 'system_profiler', 'none')
        """
        pass

    # Helper methods that can be used by all enumerators

    def _execute_command(self, cmd: List[str], decode_method: str = 'utf-8') -> str:
        """Execute a command once and return its output

        Args:
            cmd: Command to execute as list of strings
            decode_method: Method to decode command output

        Returns:
            str: Command output as string

        Raises:
            EnumerationError: If the command cannot be run or exits non-zero
        """
        output_bytes = self._execute_command_bytes(cmd)

        try:
            return output_bytes.decode(decode_method)
        except UnicodeDecodeError:
            self.logger.debug(f"{decode_method} decoding failed, falling back to latin-1")
            return output_bytes.decode('latin-1')

    def _execute_command_bytes(self, cmd: List[str]) -> bytes:
        """Execute a command once and return its raw output

        Raises:
            EnumerationError: If the command cannot be run or exits non-zero
        """
        self.logger.debug(f"Executing command: {' '.join(cmd)}")

        try:
            return subprocess.check_output(cmd, stderr=subprocess.PIPE)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode('utf-8', errors='replace').strip()
            raise EnumerationError(
                f"{' '.join(cmd)} exited with status {e.returncode}" + (f": {stderr}" if stderr else "")
            ) from e
        except OSError as e:
            raise EnumerationError(f"Failed to execute {cmd[0]}: {e}") from e

    def _parse_json_output(self, output: str, error_msg: str = "") -> Dict[str, Any]:
        """Parse JSON output

        Args:
            output: String output to parse as JSON
            error_msg: Prefix for the error message if parsing fails

        Returns:
            Dict[str, Any]: Parsed JSON data

        Raises:
            EnumerationError: If the output is not valid JSON
        """
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            self.logger.debug(f"Raw output: {output[:200]}...")
            raise EnumerationError(f"{error_msg or 'Invalid JSON output'}: {e}") from e

    def _check_command_exists(self, cmd: str) -> bool:
        """Check if a command exists in the system PATH

        Args:
            cmd: Command to check

        Returns:
            bool: True if command exists, False otherwise
        """
        return shutil.which(cmd) is not None
