# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/helm/cli_runner.py
from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .errors import HelmError
from ..utils.process import CommandResult, ProcessRunner


class HelmCliRunner:
    """
    A pragmatic wrapper around the `helm` CLI.
    - Mirrors human CLI usage: 'repo add/list/update', 'install', 'uninstall'.
    - Testable by mocking subprocess.run.
    """

    def __init__(self, runner: Optional[ProcessRunner] = None, binary: str = "helm"):
        self.runner = runner or ProcessRunner()
        self.binary = binary

    # ------------------------- internal helpers -------------------------

    def _run(self, args: List[str], allow_rc: set[int] | None = None) -> CommandResult:
        allow_rc = allow_rc or {0}
        argv = [self.binary] + args
        cp = self.runner.run(argv)
        if cp.returncode not in allow_rc:
            raise HelmError(argv, cp.returncode, cp.stderr)
        return cp

    # ------------------------- repo -------------------------

    def repo_list(self) -> str:
        # helm exits 1 with "no repositories to show" on a fresh install
        cp = self._run(["repo", "list"], allow_rc={0, 1})
        if cp.returncode != 0 and "no repositories" not in cp.stderr.lower():
            raise HelmError(cp.argv, cp.returncode, cp.stderr)
        return cp.stdout

    def add_repo(self, name: str, url: str) -> None:
        self._run(["repo", "add", name, url])

    def update_repos(self) -> None:
        self._run(["repo", "update"])

    # ------------------------- releases -------------------------

    def install(self, release_name: str, chart: str, values_file: Path) -> str:
        cp = self._run(["install", release_name, chart, "-f", str(values_file)])
        return cp.stdout

    def uninstall(self, release_name: str) -> str:
        cp = self._run(["uninstall", release_name])
        return cp.stdout

    def version(self) -> str:
        return self._run(["version"]).stdout.strip()
