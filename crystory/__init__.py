"""
crystory

Enumerates attached storage devices, reconciles each mounted volume with the
USB topology, and gives every volume a persistent UUID.
"""

__version__ = "0.1.0"

from .models import DeviceTreeNode, MediaUnit, VolumeDescriptor, MountRecord, ReconciledVolume
from .reconciler import IdentityReconciler
from .uuid_store import UuidStore

__all__ = [
    "DeviceTreeNode",
    "MediaUnit",
    "VolumeDescriptor",
    "MountRecord",
    "ReconciledVolume",
    "IdentityReconciler",
    "UuidStore",
]
