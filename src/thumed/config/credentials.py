# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/config/credentials.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger("thumed")

USER_CONFIG_NAME = "user.config"


class CredentialsError(RuntimeError):
    pass


class CredentialsMissingError(CredentialsError):
    pass


class CredentialsFormatError(CredentialsError):
    pass


@dataclass(frozen=True)
class UserInfo:
    """
    Registry credentials, stored as two plain-text lines (user, password)
    in config/user.config. The password is not encrypted at rest.
    """

    user: str
    password: str

    @staticmethod
    def path(config_dir: Path) -> Path:
        return Path(config_dir) / USER_CONFIG_NAME

    @classmethod
    def exists(cls, config_dir: Path) -> bool:
        return cls.path(config_dir).is_file()

    @classmethod
    def load(cls, config_dir: Path) -> "UserInfo":
        path = cls.path(config_dir)
        if not path.is_file():
            raise CredentialsMissingError(f"No user configuration found at {path}")

        lines = path.read_text(encoding="utf-8").splitlines()
        if len(lines) < 2:
            raise CredentialsFormatError(f"{path} must contain a username line and a password line")

        return cls(user=lines[0].strip(), password=lines[1].strip())

    def save(self, config_dir: Path) -> Path:
        path = self.path(config_dir)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(f"{self.user}\n{self.password}\n", encoding="utf-8")
        log.debug("Saved user configuration to %s", path)
        return path
