"""macOS system_profiler topology enumerator"""

from typing import List, Dict, Any, Optional
import platform
import plistlib
from xml.parsers.expat import ExpatError

from .base import BaseEnumerator
from ..errors import EnumerationError
from ..models import DeviceTreeNode


class SystemProfilerEnumerator(BaseEnumerator):
    """Enumerates the USB storage topology using system_profiler"""

    def __init__(self, logger=None, data_type: str = "SPUSBDataType", output_format: str = "json"):
        """Initialize SystemProfilerEnumerator

        Args:
            logger: Logger instance
            data_type: system_profiler data type to query
            output_format: Requested output format ('json' or 'xml')
        """
        super().__init__(logger)
        self.cmd = "system_profiler"
        self.data_type = data_type
        self.output_format = output_format

    @property
    def enumerator_type(self) -> str:
        """Get enumerator type identifier"""
        return "system_profiler"

    def is_available(self) -> bool:
        """Check if system_profiler can be used on this system"""
        if platform.system() != "Darwin":
            self.logger.debug("system_profiler is only available on macOS")
            return False

        if not self._check_command_exists(self.cmd):
            self.logger.debug("No system_profiler command found")
            return False

        return True

    def get_topology(self) -> Optional[DeviceTreeNode]:
        """Run system_profiler and parse its report into a device tree"""
        self.logger.info(f"Getting {self.data_type} topology from {self.cmd}")

        if self.output_format == "xml":
            output = self._execute_command_bytes([self.cmd, self.data_type, "-xml"])
            buses = self.parse_xml(output)
        else:
            output = self._execute_command([self.cmd, self.data_type, "-json"])
            buses = self.parse_json(output)

        root = self.build_tree(buses)
        self.logger.debug(f"Found {len(root.children)} buses, "
                          f"{sum(1 for node in root.walk() if node.is_storage_device)} storage devices")
        return root

    def parse_json(self, output: str) -> List[Dict[str, Any]]:
        """Extract the bus entries from system_profiler -json output

        Raises:
            EnumerationError: If the output is malformed
        """
        json_data = self._parse_json_output(output, "Failed to parse system_profiler JSON output")

        if not isinstance(json_data, dict):
            raise EnumerationError("Unexpected system_profiler JSON output: top level is not an object")

        buses = json_data.get(self.data_type, [])
        if not isinstance(buses, list):
            raise EnumerationError(f"Unexpected system_profiler JSON output: {self.data_type} is not a list")

        return buses

    def parse_xml(self, output: bytes) -> List[Dict[str, Any]]:
        """Extract the bus entries from system_profiler -xml output

        The plist is a list of reports, each holding its buses under "_items".

        Raises:
            EnumerationError: If the output is malformed
        """
        try:
            reports = plistlib.loads(output)
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise EnumerationError(f"Failed to parse system_profiler plist output: {e}") from e

        if not isinstance(reports, list):
            raise EnumerationError("Unexpected system_profiler plist output: top level is not an array")

        buses = []
        for report in reports:
            if not isinstance(report, dict):
                raise EnumerationError("Unexpected system_profiler plist output: report is not a dictionary")
            buses.extend(report.get("_items") or [])

        return buses

    def build_tree(self, buses: List[Dict[str, Any]]) -> DeviceTreeNode:
        """Build the device tree from bus entries

        Raises:
            EnumerationError: If an entry does not have the expected shape
        """
        try:
            return DeviceTreeNode(name="", children=[DeviceTreeNode.from_dict(bus) for bus in buses])
        except (AttributeError, TypeError) as e:
            raise EnumerationError(f"Unexpected system_profiler entry structure: {e}") from e
