"""Volume identity reconciliation"""

import logging
import os
from typing import Dict, List, Optional

from .models import DeviceTreeNode, MountRecord, ReconciledVolume, VolumeDescriptor
from .uuid_store import UuidStore


def normalize_mount_point(mount_point: str) -> str:
    """Normalize a mount point for use as a join key"""
    return os.path.normpath(mount_point)


class IdentityReconciler:
    """Joins topology volumes with mounted filesystems and decides each volume's UUID"""

    def __init__(self, uuid_store: UuidStore, logger: Optional[logging.Logger] = None):
        """Initialize identity reconciler

        Args:
            uuid_store: Store consulted for volumes without a usable bus UUID
            logger: Logger instance
        """
        self.uuid_store = uuid_store
        self.logger = logger or logging.getLogger(__name__)

    def flatten(self, tree: Optional[DeviceTreeNode]) -> Dict[str, VolumeDescriptor]:
        """Collect every mounted volume in the tree keyed by mount point

        Media directly under a node and under any nested child are both
        visited. On duplicate mount points the last visited volume wins.

        Args:
            tree: Root of the device topology, or None

        Returns:
            Dictionary of volumes keyed by normalized mount point
        """
        volumes: Dict[str, VolumeDescriptor] = {}
        if tree is None:
            return volumes

        for node in tree.walk():
            for media in node.media:
                for volume in media.volumes:
                    if not volume.mount_point:
                        continue

                    key = normalize_mount_point(volume.mount_point)
                    if key in volumes:
                        self.logger.debug(f"Duplicate mount point {key} in topology, using {volume.name}")
                    volumes[key] = volume

        return volumes

    def reconcile(self, tree: Optional[DeviceTreeNode], mounts: List[MountRecord]) -> List[ReconciledVolume]:
        """Decide the displayed UUID for every eligible mounted volume

        When the topology is unavailable (tree is None) every mount is
        eligible and resolved through the UUID store. Otherwise only mounts
        that the topology reports are kept.

        Args:
            tree: Root of the device topology, or None if unavailable
            mounts: Mounted filesystems

        Returns:
            List of reconciled volumes in mount order
        """
        self.logger.info("Reconciling volume identities")

        topology_volumes = self.flatten(tree)
        self.logger.debug(f"Topology reports {len(topology_volumes)} mounted volumes")

        reconciled = []
        for mount in mounts:
            volume = topology_volumes.get(normalize_mount_point(mount.mount_point))

            if tree is not None and volume is None:
                self.logger.debug(f"Skipping {mount.mount_point}, not reported by topology")
                continue

            reconciled.append(self._reconcile_mount(mount, volume))

        return reconciled

    def _reconcile_mount(self, mount: MountRecord, volume: Optional[VolumeDescriptor]) -> ReconciledVolume:
        """Pick the bus UUID when genuine, else fall back to the marker store"""
        if volume is not None and volume.has_usable_uuid:
            return ReconciledVolume.from_mount(mount, volume.reported_uuid.upper(), "bus")

        if volume is not None and volume.reported_uuid:
            self.logger.debug(f"Ignoring nil UUID reported for {mount.mount_point}")

        stored_uuid = self.uuid_store.resolve(mount.mount_point)
        if stored_uuid is None:
            self.logger.warning(f"No UUID available for {mount.mount_point}")
            return ReconciledVolume.from_mount(mount)

        return ReconciledVolume.from_mount(mount, stored_uuid.upper(), "marker")
