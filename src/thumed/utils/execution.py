# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/utils/execution.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class ExecutionContext:
    """
    controls how commands are executed

    search_path entries are prepended to PATH for child processes only;
    the host process environment and working directory are never touched.
    """

    search_path: Tuple[Path, ...] = field(default_factory=tuple)
    cwd: Optional[Path] = None
    dry_run: bool = False

    def child_path(self) -> str:
        current = os.environ.get("PATH", "")
        parts = [str(p) for p in self.search_path]
        for p in current.split(os.pathsep):
            if p and p not in parts:
                parts.append(p)
        return os.pathsep.join(parts)

    def child_env(self) -> dict[str, str]:
        env = dict(os.environ)
        env["PATH"] = self.child_path()
        return env
