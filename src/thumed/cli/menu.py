# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/cli/menu.py
from __future__ import annotations

import logging
from typing import Callable, Dict, Tuple

import typer

from thumed.cli.helper import (
    HelperContext,
    do_check_env,
    do_install,
    do_list,
    do_login,
    do_uninstall,
    do_update_user,
)

log = logging.getLogger("thumed")

MENU: Dict[int, Tuple[str, Callable[[HelperContext], bool]]] = {
    1: ("Initialize / Check Environment and Tools", do_check_env),
    2: ("List Pods and Website Addresses", do_list),
    3: ("Install Pod", do_install),
    4: ("Login Pod in Terminal", do_login),
    5: ("Uninstall Pod", do_uninstall),
    6: ("Update User Information", do_update_user),
}


def print_menu() -> None:
    typer.echo("\nWhat would you like to do?")
    typer.echo("0. Exit")
    for key, (label, _) in MENU.items():
        typer.echo(f"{key}. {label}")


def run_menu(hctx: HelperContext) -> None:
    """
    Numbered menu loop. Errors are reported by the actions themselves and
    the loop always continues; only 0 or end of input leaves it.
    """
    while True:
        print_menu()
        try:
            raw = typer.prompt("Enter action", default="", show_default=False).strip()
        except typer.Abort:
            typer.echo("")
            break

        try:
            choice = int(raw)
        except ValueError:
            typer.secho("Invalid input, please enter a number", fg="red", err=True)
            continue

        if choice == 0:
            break
        entry = MENU.get(choice)
        if entry is None:
            typer.secho("Invalid action", fg="red", err=True)
            continue

        label, action = entry
        log.debug("menu action %s: %s", choice, label)
        try:
            action(hctx)
        except typer.Abort:
            typer.echo("")
            break
