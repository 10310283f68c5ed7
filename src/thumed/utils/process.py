# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/utils/process.py
from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence

from .execution import ExecutionContext

log = logging.getLogger("thumed")


class SpawnError(RuntimeError):
    """The program could not be started (not found, not executable...)."""

    def __init__(self, argv: Sequence[str], reason: str):
        self.argv = list(argv)
        self.reason = reason
        super().__init__(f"cannot start {argv[0]!r}: {reason}")


class CommandFailed(RuntimeError):
    """The program started but exited non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = ""):
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"{argv[0]} failed (rc={returncode}) for {shlex.join(argv)}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


@dataclass(frozen=True)
class CommandResult:
    argv: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class ProcessRunner:
    """
    Thin wrapper around subprocess used by every helm/kubectl call.
    - run(): captures stdout/stderr as text
    - run_streamed(): child owns the terminal (kubectl exec -it, sudo prompts)
    Testable by mocking subprocess.run / subprocess.call.
    """

    def __init__(self, ctx: Optional[ExecutionContext] = None):
        self.ctx = ctx or ExecutionContext()

    def which(self, program: str) -> Optional[str]:
        return shutil.which(program, path=self.ctx.child_path())

    def _resolve(self, argv: Sequence[str]) -> list[str]:
        if not argv:
            raise ValueError("empty command")
        argv = [str(a) for a in argv]
        found = self.which(argv[0])
        if found:
            argv[0] = found
        return argv

    def _cwd(self) -> Optional[str]:
        return str(self.ctx.cwd) if self.ctx.cwd else None

    def run(self, argv: Sequence[str], *, check: bool = False) -> CommandResult:
        shown = [str(a) for a in argv]
        log.debug("$ %s", shlex.join(shown))
        if self.ctx.dry_run:
            log.info("[dry-run] %s", shlex.join(shown))
            return CommandResult(shown, 0)

        try:
            cp = subprocess.run(
                self._resolve(argv),
                check=False,
                text=True,
                capture_output=True,
                env=self.ctx.child_env(),
                cwd=self._cwd(),
            )
        except OSError as exc:
            raise SpawnError(shown, exc.strerror or str(exc)) from exc

        result = CommandResult(shown, cp.returncode, cp.stdout or "", cp.stderr or "")
        if not result.ok:
            log.debug("rc=%s stderr=%s", result.returncode, result.stderr.strip())
            if check:
                raise CommandFailed(shown, result.returncode, result.stderr)
        return result

    def run_streamed(self, argv: Sequence[str]) -> int:
        """
        Run with stdin/stdout/stderr inherited from this process and
        return the exit code.
        """
        shown = [str(a) for a in argv]
        log.debug("$ %s (interactive)", shlex.join(shown))
        if self.ctx.dry_run:
            log.info("[dry-run] %s", shlex.join(shown))
            return 0

        try:
            return subprocess.call(
                self._resolve(argv),
                env=self.ctx.child_env(),
                cwd=self._cwd(),
            )
        except OSError as exc:
            raise SpawnError(shown, exc.strerror or str(exc)) from exc
