# tests/hosts/test_hosts_file.py
from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from thumed.hosts.elevation import (
    ElevatedCopy,
    UnixElevatedCopy,
    WindowsElevatedCopy,
    elevated_copy_for,
)
from thumed.hosts.errors import DuplicateHostnameError, HostsPermissionError
from thumed.hosts.hosts_file import HostEntry, HostsFile, parse_line
from thumed.utils.process import SpawnError

SAMPLE = """\
# static table
127.0.0.1       localhost
::1             localhost ip6-localhost ip6-loopback

10.0.0.1    gw gw.lan  # router
166.111.153.65 other.apps.med.thu
# 10.9.9.9 disabled
bogus-line-without-hosts
"""


def _hosts(tmp_path: Path, text: str = SAMPLE, **kw) -> HostsFile:
    path = tmp_path / "hosts"
    path.write_text(text)
    return HostsFile.load(path, platform="linux", **kw)


class FakeElevator(ElevatedCopy):
    def __init__(self, ok=True, exc=None):
        self.ok = ok
        self.exc = exc
        self.calls = []

    def argv(self, src, dest):
        return ["fake", str(src), str(dest)]

    def copy(self, src: Path, dest: Path) -> bool:
        self.calls.append((src, dest, src.read_text()))
        if self.exc:
            raise self.exc
        if self.ok:
            shutil.copyfile(src, dest)
        return self.ok


def _deny_direct_write(monkeypatch, target: Path):
    real = Path.write_text

    def guarded(self, *a, **kw):
        if self == target:
            raise PermissionError(13, "Permission denied", str(target))
        return real(self, *a, **kw)

    monkeypatch.setattr(Path, "write_text", guarded)


# ---------------------------------------------------------------- parsing

def test_parse_line_splits_hosts_and_comment():
    assert parse_line("10.0.0.1    gw gw.lan  # router") == HostEntry("10.0.0.1", ["gw", "gw.lan"], "router")
    assert parse_line("10.0.0.2 a #") == HostEntry("10.0.0.2", ["a"], None)
    assert parse_line("   ") is None
    assert parse_line("# 10.0.0.3 off") is None
    assert parse_line("10.0.0.4") is None


def test_load_skips_comments_blanks_and_loopback(tmp_path):
    h = _hosts(tmp_path)
    assert h.entries == [
        HostEntry("10.0.0.1", ["gw", "gw.lan"], "router"),
        HostEntry("166.111.153.65", ["other.apps.med.thu"], None),
    ]


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        HostsFile.load(tmp_path / "absent", platform="linux")


# ---------------------------------------------------------------- rendering

def test_render_regenerates_loopback_lines(tmp_path):
    lines = _hosts(tmp_path).render().splitlines()
    assert lines[:3] == [
        "127.0.0.1       localhost",
        "::1             localhost ip6-localhost ip6-loopback",
        "",
    ]
    assert lines[3] == "10.0.0.1    gw gw.lan  # router"
    assert lines[4] == "166.111.153.65    other.apps.med.thu"


def test_windows_loopback_lines(tmp_path):
    h = HostsFile(path=tmp_path / "hosts", platform="win32")
    assert h.render().splitlines()[:2] == ["127.0.0.1       localhost", "::1             localhost"]


def test_save_and_reload_preserves_custom_entries(tmp_path):
    h = _hosts(tmp_path)
    h.save()
    again = HostsFile.load(h.path, platform="linux")
    assert again.entries == h.entries

    again.save()
    assert h.path.read_text() == h.render()


def test_non_utf8_bytes_survive_save(tmp_path):
    path = tmp_path / "hosts"
    path.write_bytes(b"10.0.0.7 caf\xe9.lan  # legacy \xff\n")

    h = HostsFile.load(path, platform="linux")
    h.add_entry("166.111.153.65", ["bio01.apps.med.thu"])

    raw = path.read_bytes()
    assert b"10.0.0.7    caf\xe9.lan  # legacy \xff\n" in raw
    assert "\ufffd".encode("utf-8") not in raw


# ---------------------------------------------------------------- add_entry

def test_add_entry_writes_file(tmp_path):
    h = _hosts(tmp_path)
    h.add_entry("166.111.153.65", ["bio01.apps.med.thu"], "Added by thumed_login")

    assert h.contains_hostname("bio01.apps.med.thu")
    text = h.path.read_text()
    assert "166.111.153.65    bio01.apps.med.thu  # Added by thumed_login" in text.splitlines()


def test_duplicate_hostname_rejected_and_table_unchanged(tmp_path):
    h = _hosts(tmp_path)
    before_entries = list(h.entries)
    before_text = h.path.read_text()

    with pytest.raises(DuplicateHostnameError) as ei:
        h.add_entry("1.2.3.4", ["new.host", "gw.lan"])

    assert ei.value.hostname == "gw.lan"
    assert h.entries == before_entries
    assert h.path.read_text() == before_text


def test_add_entry_requires_a_hostname(tmp_path):
    with pytest.raises(ValueError):
        _hosts(tmp_path).add_entry("1.2.3.4", [])


# ---------------------------------------------------------------- elevation

def test_permission_error_falls_back_to_elevation(monkeypatch, tmp_path):
    elevator = FakeElevator(ok=True)
    h = _hosts(tmp_path, elevator=elevator)
    _deny_direct_write(monkeypatch, h.path)

    h.add_entry("166.111.153.65", ["bio01.apps.med.thu"])

    src, dest, content = elevator.calls[0]
    assert dest == h.path
    assert "bio01.apps.med.thu" in content
    assert not src.exists()
    assert "bio01.apps.med.thu" in h.path.read_text()


def test_refused_elevation_cleans_up_and_raises(monkeypatch, tmp_path):
    elevator = FakeElevator(ok=False)
    h = _hosts(tmp_path, elevator=elevator)
    before = h.path.read_text()
    _deny_direct_write(monkeypatch, h.path)

    with pytest.raises(HostsPermissionError):
        h.add_entry("166.111.153.65", ["bio01.apps.med.thu"])

    src, _, _ = elevator.calls[0]
    assert not src.exists()
    assert h.path.read_text() == before
    assert not h.contains_hostname("bio01.apps.med.thu")


def test_missing_elevation_tool_is_permission_error(monkeypatch, tmp_path):
    elevator = FakeElevator(exc=SpawnError(["sudo"], "No such file or directory"))
    h = _hosts(tmp_path, elevator=elevator)
    _deny_direct_write(monkeypatch, h.path)

    with pytest.raises(HostsPermissionError):
        h.save()
    assert not elevator.calls[0][0].exists()


def test_unknown_platform_has_no_elevation(monkeypatch, tmp_path):
    path = tmp_path / "hosts"
    path.write_text("")
    h = HostsFile.load(path, platform="plan9")
    _deny_direct_write(monkeypatch, path)

    assert elevated_copy_for("plan9") is None
    with pytest.raises(HostsPermissionError):
        h.save()


class FakeRunner:
    def __init__(self, have=()):
        self.have = set(have)
        self.streamed = []

    def which(self, program):
        return f"/usr/bin/{program}" if program in self.have else None

    def run_streamed(self, argv):
        self.streamed.append(argv)
        return 0


def test_unix_elevation_prefers_pkexec():
    runner = FakeRunner(have={"pkexec", "sudo"})
    assert UnixElevatedCopy(runner).argv(Path("/tmp/h"), Path("/etc/hosts")) == [
        "pkexec", "cp", "/tmp/h", "/etc/hosts",
    ]


def test_unix_elevation_falls_back_to_sudo():
    runner = FakeRunner(have={"sudo"})
    assert UnixElevatedCopy(runner).copy(Path("/tmp/h"), Path("/etc/hosts")) is True
    assert runner.streamed[0][0] == "sudo"


def test_windows_elevation_uses_runas():
    runner = FakeRunner()
    argv = WindowsElevatedCopy(runner).argv(Path("C:/tmp/h.txt"), Path("C:/hosts"))
    script = argv[-1]
    assert argv[0] == "powershell"
    assert "-Verb RunAs" in script
    assert "Copy-Item" in script
    # the elevated copy's exit status is what the outer powershell returns
    assert "-Wait -PassThru" in script
    assert script.endswith("exit $p.ExitCode")


def test_windows_elevation_failure_is_reported():
    class FailingRunner(FakeRunner):
        def run_streamed(self, argv):
            self.streamed.append(argv)
            return 1

    runner = FailingRunner()
    assert WindowsElevatedCopy(runner).copy(Path("C:/tmp/h.txt"), Path("C:/hosts")) is False


def test_elevated_copy_for_platforms():
    assert isinstance(elevated_copy_for("win32"), WindowsElevatedCopy)
    assert isinstance(elevated_copy_for("linux"), UnixElevatedCopy)
    assert isinstance(elevated_copy_for("darwin"), UnixElevatedCopy)
