# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/hosts/errors.py
class HostsError(RuntimeError):
    """Base class for hosts-file failures."""

class DuplicateHostnameError(HostsError):
    """Raised when a hostname is already mapped by an existing entry."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"Hostname {hostname} already exists in hosts file")

class HostsPermissionError(HostsError):
    """Raised when the hosts file cannot be written, even with elevation."""
