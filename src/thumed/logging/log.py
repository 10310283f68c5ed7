# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/logging/log.py

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def default_log_dir() -> Path:
    return Path.home() / ".thumed" / "logs"


def _file_handler(path: Path, formatter: logging.Formatter) -> logging.Handler:
    # every helm/kubectl argv ends up here, whatever the console level
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def _console_handler(verbose: bool, formatter: logging.Formatter) -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    handler.setFormatter(formatter)
    return handler


def _reset(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def init_logging(
    *,
    base_dir: Path | None = None,
    name: str = "thumed",
    verbose: bool = False,
) -> tuple[logging.Logger, str, Path]:
    """
    Point the helper logger at a fresh per-run file and the console.

    Each invocation of the CLI gets its own ``<name>-<utc ts>-<run_id>.log``
    so a user reporting a failed install can attach exactly that run.
    Calling it again replaces the previous handlers.
    """
    run_id = uuid.uuid4().hex
    log_dir = Path(base_dir) if base_dir is not None else default_log_dir()
    log_dir.mkdir(parents=True, exist_ok=True)

    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    log_path = log_dir / f"{name}-{stamp}-{run_id}.log"

    logger = logging.getLogger(name)
    _reset(logger)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    logger.addHandler(_file_handler(log_path, formatter))
    logger.addHandler(_console_handler(verbose, formatter))

    logger.debug("thumed run %s, log file %s", run_id, log_path)
    return logger, run_id, log_path
