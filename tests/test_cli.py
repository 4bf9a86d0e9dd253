import json
import subprocess

import pytest

from crystory.crystory import Crystory, main
from crystory.enumerators import base as base_module
from crystory.mounts import MountEnumerator

from conftest import make_mount


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "missing.conf")


@pytest.fixture
def fake_mounts(monkeypatch, volume_dirs):
    mounts = [make_mount(volume_dirs[name], device_label=f"/dev/disk{i}s1")
              for i, name in enumerate(["Backup", "Data", "External"], start=4)]
    monkeypatch.setattr(MountEnumerator, "get_mounts", lambda self: mounts)
    return mounts


def fake_profiler(monkeypatch, output=None, error=None):
    def fake_check_output(cmd, stderr=None):
        if error is not None:
            raise error
        return output.encode("utf-8")

    monkeypatch.setattr(base_module.subprocess, "check_output", fake_check_output)


@pytest.mark.parametrize("command", ["query", "service"])
def test_unimplemented_commands(command, capsys):
    assert main([command]) == 0
    assert capsys.readouterr().out == f"'{command}' is not yet implemented.\n"


def test_command_is_required():
    with pytest.raises(SystemExit) as ei:
        main([])
    assert ei.value.code == 2


def test_list_devices_with_topology(monkeypatch, capsys, config_path, fake_mounts, profiler_json, volume_dirs):
    fake_profiler(monkeypatch, output=profiler_json)

    assert main(["-c", config_path, "list-devices", "--json", "--backend", "system_profiler"]) == 0

    data = json.loads(capsys.readouterr().out)
    by_mount = {entry["mount_point"]: entry for entry in data}
    assert set(by_mount) == {str(volume_dirs["Backup"]), str(volume_dirs["Data"])}
    assert by_mount[str(volume_dirs["Data"])]["uuid"] == "AB12CD34-5678-4ABC-9DEF-0123456789AB"
    backup_uuid = (volume_dirs["Backup"] / ".crystory_uuid").read_text()
    assert by_mount[str(volume_dirs["Backup"])]["uuid"] == backup_uuid.upper()
    assert not (volume_dirs["Data"] / ".crystory_uuid").exists()


def test_list_devices_when_topology_fails(monkeypatch, capsys, config_path, fake_mounts, volume_dirs):
    fake_profiler(monkeypatch, error=subprocess.CalledProcessError(1, ["system_profiler"]))

    assert main(["-c", config_path, "list-devices", "--backend", "system_profiler"]) == 0

    out = capsys.readouterr().out
    external_uuid = (volume_dirs["External"] / ".crystory_uuid").read_text().upper()
    assert f"  Mount point: {volume_dirs['External']}" in out
    assert f"  UUID: {external_uuid}" in out
    assert out.count("  Mount point: ") == 3


def test_list_devices_without_topology_backend(capsys, config_path, fake_mounts, volume_dirs):
    assert main(["-c", config_path, "list-devices", "--table", "--backend", "none"]) == 0

    out = capsys.readouterr().out
    for name in ("Backup", "Data", "External"):
        assert (volume_dirs[name] / ".crystory_uuid").exists()
        assert str(volume_dirs[name]) in out


def test_list_devices_uses_configured_marker(tmp_path, capsys, fake_mounts, volume_dirs):
    config = tmp_path / "crystory.conf"
    config.write_text("marker_file: .volume_id\ntopology:\n  backend: none\n")

    assert main(["-c", str(config), "list-devices"]) == 0

    assert (volume_dirs["External"] / ".volume_id").exists()
    assert not (volume_dirs["External"] / ".crystory_uuid").exists()


def test_list_devices_tree(monkeypatch, capsys, config_path, profiler_json):
    fake_profiler(monkeypatch, output=profiler_json)

    assert main(["-c", config_path, "list-devices", "--tree", "--backend", "system_profiler"]) == 0

    out = capsys.readouterr().out
    assert "Device: Flash Drive" in out
    assert "  Serial Number: AA00000000011" in out
    assert "Device: Card Reader" in out


def test_scan_directory(tmp_path, capsys):
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "file.txt").write_text("hello")

    assert main(["scan", str(tmp_path)]) == 0

    out = capsys.readouterr().out
    assert f"Scanning directory: {tmp_path}" in out
    assert f"Path: {tmp_path / 'sub' / 'file.txt'}" in out
    assert "  Size: 5 bytes" in out


def test_scan_missing_directory(tmp_path):
    assert main(["scan", str(tmp_path / "missing")]) == 1


def test_verbosity_flags():
    app = Crystory()
    app.parse_arguments(["-v", "query"])
    assert app.logger.level == 10

    app = Crystory()
    app.parse_arguments(["-q", "query"])
    assert app.logger.level == 30
