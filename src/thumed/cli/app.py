# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/cli/app.py
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError

from thumed.cli.helper import (
    HelperContext,
    build_context,
    do_check_env,
    do_install,
    do_list,
    do_login,
    do_uninstall,
    do_update_user,
    report_error,
)
from thumed.cli.menu import run_menu
from thumed.config.loader import load_settings
from thumed.logging.log import init_logging


# ------------------------------------------------------------------------------
# CLI setup
# ------------------------------------------------------------------------------

APP_NAME = "THU-Med Login Helper"

app = typer.Typer(help=f"{APP_NAME}: install, list, log into and remove your pods")


def _finish(ok: bool) -> None:
    raise typer.Exit(0 if ok else 1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Start the numbered menu (default when no command is given)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="settings.yaml overriding the built-in cluster settings"
    ),
    debug: bool = typer.Option(False, "--debug", "-d", help="Show DEBUG logs (every helm/kubectl call)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print helm/kubectl commands instead of running them"),
):
    """
    Without a command (or with --interactive) the numbered menu is shown.
    """
    if interactive and ctx.invoked_subcommand is not None:
        raise typer.BadParameter(
            f"cannot be combined with the {ctx.invoked_subcommand} command",
            param_hint="'--interactive'",
        )

    try:
        settings = load_settings(config)
    except (ValidationError, OSError, yaml.YAMLError) as exc:
        report_error(exc)
        raise typer.Exit(1)

    _, _, log_path = init_logging(base_dir=settings.log_dir, verbose=debug)
    ctx.obj = build_context(settings, dry_run=dry_run)

    if interactive or ctx.invoked_subcommand is None:
        typer.secho(f"Welcome to {APP_NAME}", bold=True)
        typer.echo(f"  Logs     : {log_path}")
        run_menu(ctx.obj)
        raise typer.Exit(0)


def _hctx(ctx: typer.Context) -> HelperContext:
    return ctx.obj


@app.command("check-env")
def check_env_cmd(
    ctx: typer.Context,
    download: bool = typer.Option(
        False, "--download", help="Download missing kubectl/helm binaries into bin/"
    ),
):
    """Initialize or check environment and tools."""
    _finish(do_check_env(_hctx(ctx), download=download))


@app.command("list-pods")
def list_pods(ctx: typer.Context):
    """List pods and website addresses."""
    _finish(do_list(_hctx(ctx)))


@app.command("install-pod")
def install_pod(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Pod name (lowercase letters and numbers only)"),
    cpu: Optional[int] = typer.Option(None, "--cpu", "-c", min=1, help="CPU cores (default: 32)"),
    memory: Optional[int] = typer.Option(None, "--memory", "-m", min=1, help="Memory in GB (default: 50)"),
):
    """Install a new pod."""
    _finish(do_install(_hctx(ctx), name=name, cpu=cpu, memory=memory))


@app.command("login-pod")
def login_pod(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Pod ID to log into"),
):
    """Log into a pod in the terminal."""
    _finish(do_login(_hctx(ctx), name=name))


@app.command("uninstall-pod")
def uninstall_pod(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Pod ID to uninstall"),
):
    """Uninstall a pod."""
    _finish(do_uninstall(_hctx(ctx), name=name))


@app.command("update-user")
def update_user(ctx: typer.Context):
    """Update the stored registry username and password."""
    _finish(do_update_user(_hctx(ctx)))


def run() -> None:
    app()


if __name__ == "__main__":
    run()
