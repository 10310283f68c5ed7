# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/__init__.py
