# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/kube/kubectl.py

from __future__ import annotations

import logging
from typing import List, Optional

from ..utils.process import CommandFailed, ProcessRunner

log = logging.getLogger("thumed")


class KubectlError(CommandFailed):
    pass


class KubectlRunner:
    """
    kubectl runner executed locally through the ProcessRunner.
    """

    def __init__(self, runner: Optional[ProcessRunner] = None, binary: str = "kubectl"):
        self.runner = runner or ProcessRunner()
        self.binary = binary

    def _argv(self, args: List[str]) -> List[str]:
        return [self.binary] + args

    def get_pods_table(self) -> str:
        """
        Plain `kubectl get pods` output; first line is the column header.
        """
        argv = self._argv(["get", "pods"])
        cp = self.runner.run(argv)
        if not cp.ok:
            raise KubectlError(argv, cp.returncode, cp.stderr)
        return cp.stdout

    def exec_interactive(self, pod: str, command: List[str]) -> int:
        argv = self._argv(["exec", "-it", pod, "--"] + command)
        rc = self.runner.run_streamed(argv)
        if rc != 0:
            log.debug("kubectl exec into %s exited with %s", pod, rc)
        return rc

    def version(self) -> str:
        argv = self._argv(["version", "--client"])
        cp = self.runner.run(argv)
        if not cp.ok:
            raise KubectlError(argv, cp.returncode, cp.stderr)
        return cp.stdout.strip()
