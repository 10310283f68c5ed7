# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/helm/errors.py
from ..utils.process import CommandFailed


class HelmError(CommandFailed):
    """Base class for Helm-related failures."""
