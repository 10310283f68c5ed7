# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/config/loader.py

import logging
import os
import yaml
from pathlib import Path
from typing import Optional

from .models import Settings, default_workspace

log = logging.getLogger("thumed")


def _find_settings_file(explicit: Optional[Path] = None) -> Path | None:
    """
    Locate settings.yaml using this priority:

    1. explicit path (--config)
    2. THUMED_CONFIG environment variable
    3. config/settings.yaml under the workspace root
    """
    if explicit is not None:
        return Path(explicit)

    env = os.environ.get("THUMED_CONFIG")
    if env:
        p = Path(env)
        if p.is_file():
            return p
        log.warning("THUMED_CONFIG=%s does not exist, skipping", env)
        return None

    p = default_workspace() / "config" / "settings.yaml"
    if p.is_file():
        return p

    return None


def _load_yaml(path: Path) -> dict:
    """Load a YAML file, expanding ${ENV_VAR} references."""
    raw = path.read_text()
    expanded = os.path.expandvars(raw)
    return yaml.safe_load(expanded) or {}


def load_settings(path: str | Path | None = None) -> Settings:
    """
    Load and validate helper settings.

    Every key is optional; anything missing keeps the built-in default for
    the shared cluster. ``${ENV_VAR}`` placeholders are resolved at load time.
    """
    found = _find_settings_file(Path(path) if path else None)
    if found is None:
        log.debug("No settings.yaml found, using built-in defaults")
        return Settings()

    log.debug("Loading settings from %s", found)
    return Settings.model_validate(_load_yaml(found))
