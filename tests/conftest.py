import json

import pytest

from crystory.models import MountRecord
from crystory.uuid_store import UuidStore


NIL = "00000000-0000-0000-0000-000000000000"


def profiler_report(backup, data, nested, unmounted_uuid="5E2A7C1B-0F4D-4B7E-9C3A-1D2E3F4A5B6C"):
    """A system_profiler SPUSBDataType report with volumes at depth 0, 1 and 3"""
    return {
        "SPUSBDataType": [
            {
                "_name": "USB31Bus",
                "Media": [
                    {
                        "bsd_name": "disk2",
                        "size_in_bytes": 64000000000,
                        "volumes": [
                            {
                                "_name": "BACKUP",
                                "bsd_name": "disk2s1",
                                "file_system": "ExFAT",
                                "mount_point": backup,
                                "volume_uuid": NIL,
                            }
                        ],
                    }
                ],
                "_items": [
                    {
                        "_name": "Flash Drive",
                        "serial_num": "AA00000000011",
                        "Media": [
                            {
                                "bsd_name": "disk3",
                                "size_in_bytes": 32000000000,
                                "volumes": [
                                    {
                                        "_name": "DATA",
                                        "bsd_name": "disk3s1",
                                        "file_system": "APFS",
                                        "mount_point": data,
                                        "volume_uuid": "ab12cd34-5678-4abc-9def-0123456789ab",
                                    },
                                    {
                                        "_name": "SPARE",
                                        "bsd_name": "disk3s2",
                                        "file_system": "MS-DOS FAT32",
                                        "volume_uuid": unmounted_uuid,
                                    },
                                ],
                            },
                            {"bsd_name": "disk4", "size_in_bytes": 1000000},
                        ],
                    },
                    {
                        "_name": "USB3.0 Hub",
                        "_items": [
                            {
                                "_name": "Inner Hub",
                                "_items": [
                                    {
                                        "_name": "Card Reader",
                                        "Media": [
                                            {
                                                "bsd_name": "disk5",
                                                "volumes": [
                                                    {
                                                        "_name": "CARD",
                                                        "bsd_name": "disk5s1",
                                                        "file_system": "MS-DOS FAT32",
                                                        "mount_point": nested,
                                                    }
                                                ],
                                            }
                                        ],
                                    }
                                ],
                            }
                        ],
                    },
                ],
            },
            {"_name": "USB20Bus"},
        ]
    }


def make_mount(mount_point, device_label="/dev/disk9s1", file_system="exfat"):
    return MountRecord(
        device_label=device_label,
        kind="Unknown",
        file_system=file_system,
        mount_point=str(mount_point),
        total_bytes=1000,
        available_bytes=400,
    )


@pytest.fixture
def volume_dirs(tmp_path):
    dirs = {}
    for name in ("Backup", "Data", "Card", "External"):
        path = tmp_path / name
        path.mkdir()
        dirs[name] = path
    return dirs


@pytest.fixture
def profiler_json(volume_dirs):
    return json.dumps(profiler_report(
        str(volume_dirs["Backup"]), str(volume_dirs["Data"]), str(volume_dirs["Card"])
    ))


@pytest.fixture
def store():
    return UuidStore()
