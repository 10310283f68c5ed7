# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/hosts/elevation.py
from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..utils.process import ProcessRunner

log = logging.getLogger("thumed")


class ElevatedCopy(ABC):
    """Copies a file over a privileged destination through an OS elevation prompt."""

    def __init__(self, runner: Optional[ProcessRunner] = None):
        self.runner = runner or ProcessRunner()

    @abstractmethod
    def argv(self, src: Path, dest: Path) -> list[str]:
        ...

    def copy(self, src: Path, dest: Path) -> bool:
        argv = self.argv(src, dest)
        log.debug("Elevated copy %s -> %s via %s", src, dest, argv[0])
        return self.runner.run_streamed(argv) == 0


class WindowsElevatedCopy(ElevatedCopy):
    """
    UAC prompt via Start-Process -Verb RunAs. -PassThru hands back the
    elevated process so its exit code becomes ours.
    """

    def argv(self, src: Path, dest: Path) -> list[str]:
        inner = (
            f'try {{ Copy-Item -Path "{src}" -Destination "{dest}" -Force -ErrorAction Stop }} '
            "catch { exit 1 }"
        )
        return [
            "powershell",
            "-NoProfile",
            "-Command",
            f"$p = Start-Process powershell -Verb RunAs -Wait -PassThru "
            f"-ArgumentList '-NoProfile -Command {inner}'; exit $p.ExitCode",
        ]


class UnixElevatedCopy(ElevatedCopy):
    """pkexec when available (graphical prompt), sudo otherwise."""

    def argv(self, src: Path, dest: Path) -> list[str]:
        tool = "pkexec" if self.runner.which("pkexec") else "sudo"
        return [tool, "cp", str(src), str(dest)]


def elevated_copy_for(platform: Optional[str] = None, runner: Optional[ProcessRunner] = None) -> Optional[ElevatedCopy]:
    platform = platform or sys.platform
    if platform.startswith("win"):
        return WindowsElevatedCopy(runner)
    if platform.startswith(("linux", "darwin", "freebsd", "openbsd", "netbsd")):
        return UnixElevatedCopy(runner)
    return None
