# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/__main__.py
from thumed.cli.app import run

run()
