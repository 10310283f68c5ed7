# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/hosts/hosts_file.py
from __future__ import annotations

import logging
import re
import sys
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .elevation import ElevatedCopy, elevated_copy_for
from .errors import DuplicateHostnameError, HostsPermissionError
from ..utils.process import SpawnError

log = logging.getLogger("thumed")

WINDOWS_HOSTS = Path(r"C:\Windows\System32\drivers\etc\hosts")
UNIX_HOSTS = Path("/etc/hosts")

_COMMENT_START = re.compile(r"\s#")
_LOOPBACK_IPS = {"127.0.0.1", "::1"}
_LOOPBACK_NAMES = {"localhost", "ip6-localhost", "ip6-loopback"}


def _is_windows(platform: str) -> bool:
    return platform.startswith("win")


def hosts_path_for(platform: Optional[str] = None) -> Path:
    return WINDOWS_HOSTS if _is_windows(platform or sys.platform) else UNIX_HOSTS


def loopback_lines(platform: Optional[str] = None) -> List[str]:
    if _is_windows(platform or sys.platform):
        return ["127.0.0.1       localhost", "::1             localhost"]
    return ["127.0.0.1       localhost", "::1             localhost ip6-localhost ip6-loopback"]


@dataclass
class HostEntry:
    ip: str
    hostnames: List[str]
    comment: Optional[str] = None

    def render(self) -> str:
        line = f"{self.ip}    {' '.join(self.hostnames)}"
        if self.comment:
            line += f"  # {self.comment}"
        return line


def parse_line(raw: str) -> Optional[HostEntry]:
    """
    '10.0.0.1  a b  # note' -> HostEntry('10.0.0.1', ['a', 'b'], 'note').
    Blank lines, comment-only lines and lines without hostnames give None.
    """
    line = raw.strip()
    if not line or line.startswith("#"):
        return None

    comment = None
    m = _COMMENT_START.search(line)
    if m:
        comment = line[m.end():].strip() or None
        line = line[: m.start()]

    parts = line.split()
    if len(parts) < 2:
        return None
    return HostEntry(ip=parts[0], hostnames=parts[1:], comment=comment)


def is_loopback(entry: HostEntry) -> bool:
    return entry.ip in _LOOPBACK_IPS and set(entry.hostnames) <= _LOOPBACK_NAMES


@dataclass
class HostsFile:
    """
    In-memory copy of the OS hosts file. Loopback lines are regenerated on
    every save rather than carried over from the file that was read.
    """

    path: Path
    entries: List[HostEntry] = field(default_factory=list)
    platform: str = field(default_factory=lambda: sys.platform)
    elevator: Optional[ElevatedCopy] = None

    @classmethod
    def load(
        cls,
        path: Optional[Path] = None,
        *,
        platform: Optional[str] = None,
        elevator: Optional[ElevatedCopy] = None,
    ) -> "HostsFile":
        platform = platform or sys.platform
        path = Path(path) if path else hosts_path_for(platform)
        entries: List[HostEntry] = []
        # undecodable bytes survive the round trip back to disk
        with open(path, encoding="utf-8", errors="surrogateescape") as f:
            for raw in f:
                entry = parse_line(raw)
                # regenerated by render()
                if entry and not is_loopback(entry):
                    entries.append(entry)
        log.debug("Loaded %d host entries from %s", len(entries), path)
        return cls(path=path, entries=entries, platform=platform, elevator=elevator)

    def contains_hostname(self, hostname: str) -> bool:
        return any(hostname in e.hostnames for e in self.entries)

    def add_entry(self, ip: str, hostnames: Sequence[str], comment: Optional[str] = None) -> None:
        if not hostnames:
            raise ValueError("at least one hostname is required")
        for h in hostnames:
            if self.contains_hostname(h):
                raise DuplicateHostnameError(h)

        self.entries.append(HostEntry(ip=ip, hostnames=list(hostnames), comment=comment))
        try:
            self.save()
        except Exception:
            # keep memory in line with what is on disk
            self.entries.pop()
            raise

    def render(self) -> str:
        lines = loopback_lines(self.platform) + [""]
        lines += [e.render() for e in self.entries]
        return "\n".join(lines) + "\n"

    # ------------------------- persistence -------------------------

    def save(self) -> None:
        content = self.render()
        try:
            self.path.write_text(content, encoding="utf-8", errors="surrogateescape")
            log.debug("Wrote %s directly", self.path)
            return
        except PermissionError:
            log.info("Insufficient permissions to write %s. Attempting to elevate...", self.path)

        self._save_elevated(content)

    def _save_elevated(self, content: str) -> None:
        elevator = self.elevator or elevated_copy_for(self.platform)
        if elevator is None:
            raise HostsPermissionError(
                f"Insufficient permissions to write {self.path}. "
                "Try running with admin/sudo privileges."
            )

        with tempfile.NamedTemporaryFile(
            "w",
            prefix="thumed_hosts_",
            suffix=".txt",
            delete=False,
            encoding="utf-8",
            errors="surrogateescape",
        ) as tmp:
            tmp.write(content)
            tmp_path = Path(tmp.name)

        try:
            ok = elevator.copy(tmp_path, self.path)
        except SpawnError as exc:
            raise HostsPermissionError(f"No usable elevation command: {exc}") from exc
        finally:
            tmp_path.unlink(missing_ok=True)

        if not ok:
            raise HostsPermissionError(
                f"Failed to write {self.path} even with elevation attempt"
            )
        log.debug("Wrote %s via elevation", self.path)
