"""Data models for device topology and mounted volumes"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


NIL_UUID = "00000000-0000-0000-0000-000000000000"


def _clean_optional(value) -> Optional[str]:
    """Strip a string value; blank strings and non-strings become None"""
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


@dataclass
class VolumeDescriptor:
    """A mountable volume as reported by the topology source"""

    name: str                              # Volume name (e.g., "BACKUP")
    file_system: str = ""                  # File system kind (e.g., "ExFAT")
    reported_uuid: Optional[str] = None    # Bus-reported volume UUID, may be the nil UUID
    mount_point: Optional[str] = None      # Mount point, None when unmounted
    bsd_name: str = ""                     # BSD device name (e.g., disk4s1)

    def __post_init__(self):
        """Normalize blank or non-string values to None"""
        self.reported_uuid = _clean_optional(self.reported_uuid)
        self.mount_point = _clean_optional(self.mount_point)

    @property
    def has_usable_uuid(self) -> bool:
        """True when the reported UUID is present and not the nil UUID"""
        return self.reported_uuid is not None and self.reported_uuid.lower() != NIL_UUID

    def to_dict(self) -> dict:
        """Convert volume to dictionary representation"""
        return {
            "name": self.name,
            "file_system": self.file_system,
            "reported_uuid": self.reported_uuid,
            "mount_point": self.mount_point,
            "bsd_name": self.bsd_name
        }

    @classmethod
    def from_dict(cls, data: dict) -> "VolumeDescriptor":
        """Create VolumeDescriptor from a system_profiler volume entry"""
        return cls(
            name=data.get("_name", ""),
            file_system=data.get("file_system", ""),
            reported_uuid=data.get("volume_uuid"),
            mount_point=data.get("mount_point"),
            bsd_name=data.get("bsd_name", "")
        )


@dataclass
class MediaUnit:
    """A physical or logical storage unit of a device"""

    bsd_name: str
    size_bytes: int = 0
    volumes: List[VolumeDescriptor] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "bsd_name": self.bsd_name,
            "size_bytes": self.size_bytes,
            "volumes": [volume.to_dict() for volume in self.volumes]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "MediaUnit":
        """Create MediaUnit from a system_profiler "Media" entry"""
        try:
            size_bytes = int(data.get("size_in_bytes", 0) or 0)
        except (TypeError, ValueError):
            size_bytes = 0

        return cls(
            bsd_name=data.get("bsd_name", ""),
            size_bytes=max(size_bytes, 0),
            volumes=[VolumeDescriptor.from_dict(v) for v in data.get("volumes") or []]
        )


@dataclass
class DeviceTreeNode:
    """One node of the bus topology (bus, hub or device)

    A node may carry media, children, both or neither.
    """

    name: str
    serial_number: Optional[str] = None
    media: List[MediaUnit] = field(default_factory=list)
    children: List["DeviceTreeNode"] = field(default_factory=list)

    def __post_init__(self):
        if not self.serial_number:
            self.serial_number = None

    @property
    def is_storage_device(self) -> bool:
        """A node with media is a storage device"""
        return len(self.media) > 0

    def walk(self) -> Iterator["DeviceTreeNode"]:
        """Yield this node and all descendants, depth-first"""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "serial_number": self.serial_number,
            "media": [media.to_dict() for media in self.media],
            "children": [child.to_dict() for child in self.children]
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DeviceTreeNode":
        """Create a DeviceTreeNode (recursively) from a system_profiler item"""
        return cls(
            name=data.get("_name", ""),
            serial_number=data.get("serial_num"),
            media=[MediaUnit.from_dict(m) for m in data.get("Media") or []],
            children=[cls.from_dict(item) for item in data.get("_items") or []]
        )


@dataclass
class MountRecord:
    """A mounted filesystem as reported by the mount enumeration"""

    device_label: str                # Device name (e.g., /dev/disk4s1)
    kind: str                        # Disk kind (SSD, HDD, Unknown)
    file_system: str                 # File system type (e.g., exfat)
    mount_point: str                 # Mount point path
    total_bytes: int = 0             # Total space in bytes
    available_bytes: int = 0         # Available space in bytes

    def to_dict(self) -> dict:
        return {
            "device_label": self.device_label,
            "kind": self.kind,
            "file_system": self.file_system,
            "mount_point": self.mount_point,
            "total_bytes": self.total_bytes,
            "available_bytes": self.available_bytes
        }


@dataclass
class ReconciledVolume:
    """A mounted volume joined with its displayed identifier"""

    mount_point: str
    device_label: str
    kind: str
    file_system: str
    total_bytes: int = 0
    available_bytes: int = 0
    display_uuid: Optional[str] = None    # Never the nil UUID; None when persistence failed
    uuid_source: Optional[str] = None     # "bus", "marker" or None

    @classmethod
    def from_mount(cls, mount: MountRecord, display_uuid: Optional[str] = None,
                   uuid_source: Optional[str] = None) -> "ReconciledVolume":
        """Create a ReconciledVolume from a mount record"""
        return cls(
            mount_point=mount.mount_point,
            device_label=mount.device_label,
            kind=mount.kind,
            file_system=mount.file_system,
            total_bytes=mount.total_bytes,
            available_bytes=mount.available_bytes,
            display_uuid=display_uuid,
            uuid_source=uuid_source
        )

    def to_dict(self) -> dict:
        """Convert reconciled volume to dictionary representation"""
        return {
            "mount_point": self.mount_point,
            "device_label": self.device_label,
            "kind": self.kind,
            "file_system": self.file_system,
            "total_bytes": self.total_bytes,
            "available_bytes": self.available_bytes,
            "uuid": self.display_uuid,
            "uuid_source": self.uuid_source
        }
