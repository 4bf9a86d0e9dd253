"""Enumerator for platforms without bus-level topology"""

from typing import Optional

from .base import BaseEnumerator
from ..models import DeviceTreeNode


class NullEnumerator(BaseEnumerator):
    """Reports that no topology is available, so every mount is reconciled directly"""

    @property
    def enumerator_type(self) -> str:
        return "none"

    def is_available(self) -> bool:
        return True

    def get_topology(self) -> Optional[DeviceTreeNode]:
        self.logger.debug("No bus-level topology on this platform")
        return None
