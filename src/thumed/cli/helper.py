# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/cli/helper.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import typer
from pydantic import ValidationError

from thumed.config.credentials import CredentialsError, CredentialsMissingError, UserInfo
from thumed.config.models import Settings, WorkloadConfig
from thumed.environment.check import check_env
from thumed.environment.tools import ToolDownloadError, UnsupportedPlatformError
from thumed.helm.cli_runner import HelmCliRunner
from thumed.hosts.errors import HostsError
from thumed.kube.kubectl import KubectlRunner
from thumed.pods.inventory import PodInventory, PodNotFoundError
from thumed.pods.lifecycle import PodLifecycle
from thumed.utils.execution import ExecutionContext
from thumed.utils.process import CommandFailed, ProcessRunner, SpawnError

log = logging.getLogger("thumed")

# Everything an action may raise that is reported instead of crashing the run.
OPERATIONAL_ERRORS = (
    ValidationError,
    CommandFailed,
    SpawnError,
    OSError,
    PodNotFoundError,
    HostsError,
    CredentialsError,
    ToolDownloadError,
    UnsupportedPlatformError,
)


@dataclass
class HelperContext:
    settings: Settings
    runner: ProcessRunner
    helm: HelmCliRunner
    kubectl: KubectlRunner
    lifecycle: PodLifecycle


def build_context(settings: Settings, *, dry_run: bool = False) -> HelperContext:
    """
    Wire runner -> helm/kubectl -> lifecycle. bin/ goes first on the child
    PATH so downloaded tools win over system ones.
    """
    runner = ProcessRunner(
        ExecutionContext(
            search_path=(settings.bin_dir,),
            cwd=settings.workspace,
            dry_run=dry_run,
        )
    )
    helm = HelmCliRunner(runner)
    kubectl = KubectlRunner(runner)
    lifecycle = PodLifecycle(
        settings=settings,
        helm=helm,
        kubectl=kubectl,
        dry_run=dry_run,
    )
    return HelperContext(settings=settings, runner=runner, helm=helm, kubectl=kubectl, lifecycle=lifecycle)


def report_error(exc: BaseException) -> None:
    if isinstance(exc, ValidationError):
        msg = "; ".join(e["msg"] for e in exc.errors())
        text = f"Invalid input: {msg}"
    else:
        text = f"Error: {exc}"
    log.debug("operation failed", exc_info=exc)
    typer.secho(text, fg="red", err=True)


def run_action(action: Callable[[], None]) -> bool:
    try:
        action()
        return True
    except OPERATIONAL_ERRORS as exc:
        report_error(exc)
        return False


# ------------------------------------------------------------------------------
# Prompts
# ------------------------------------------------------------------------------

def prompt_credentials(settings: Settings) -> UserInfo:
    user = typer.prompt("Username").strip()
    password = typer.prompt("Password", hide_input=True).strip()
    info = UserInfo(user=user, password=password)
    path = info.save(settings.config_dir)
    typer.echo(f"User information saved to {path}")
    return info


def load_or_prompt_credentials(settings: Settings) -> UserInfo:
    try:
        return UserInfo.load(settings.config_dir)
    except CredentialsMissingError:
        typer.echo("No user configuration found, please enter credentials:")
        return prompt_credentials(settings)


def _prompt_limit(label: str, default: int) -> Optional[int]:
    while True:
        raw = typer.prompt(f"{label} (default: {default})", default="", show_default=False).strip()
        if not raw:
            return None
        try:
            value = int(raw)
        except ValueError:
            typer.secho("Invalid input. Please enter a valid number.", fg="red", err=True)
            continue
        if value > 0:
            return value
        typer.secho("Invalid input. Please enter a positive number.", fg="red", err=True)


def prompt_workload(settings: Settings) -> WorkloadConfig:
    while True:
        name = typer.prompt(
            "Please input the pod's name (only lowercase letters and numbers allowed)"
        ).strip()
        try:
            WorkloadConfig(name=name)
            break
        except ValidationError:
            typer.secho(
                "Invalid input. Only lowercase letters and numbers are allowed.",
                fg="red",
                err=True,
            )

    cpu = _prompt_limit("Please input the CPU limit in cores", settings.default_cpu_cores)
    memory = _prompt_limit("Please input the memory limit in GB", settings.default_memory_gb)
    return WorkloadConfig(name=name, cpu=cpu, memory=memory)


# ------------------------------------------------------------------------------
# Actions
# ------------------------------------------------------------------------------

def show_pods(inventory: PodInventory) -> None:
    if not len(inventory):
        typer.echo("No pods found.")
        return
    typer.echo("Pods:")
    for pod, website in inventory.items():
        typer.echo(f'Pod ID: {pod}; Website: "{website}"')


def do_check_env(hctx: HelperContext, *, download: bool = False) -> bool:
    typer.echo("Checking environment...")
    report = check_env(hctx.settings, hctx.helm, hctx.kubectl, download=download)
    for name in report.tools.missing:
        typer.secho(f"  - {name} is missing. Please place {name} in {hctx.settings.bin_dir}.", fg="yellow")
    typer.echo("Environment check completed!")
    return not report.errors and not report.tools.missing


def do_list(hctx: HelperContext) -> bool:
    return run_action(lambda: show_pods(hctx.lifecycle.list_pods()))


def do_install(
    hctx: HelperContext,
    name: Optional[str] = None,
    cpu: Optional[int] = None,
    memory: Optional[int] = None,
) -> bool:
    def _install() -> None:
        if name is None:
            config = prompt_workload(hctx.settings)
        else:
            config = WorkloadConfig(name=name, cpu=cpu, memory=memory)
        credentials = load_or_prompt_credentials(hctx.settings)
        report = hctx.lifecycle.install(config, credentials)
        typer.secho(f"Pod {report.name} installed.", fg="green")
        if report.hosts_registered:
            typer.echo(f"Hostname {report.hostname} added to hosts file.")
        else:
            typer.secho(report.warning or "Hostname was not registered.", fg="yellow")
        typer.echo(f"Website: {report.website}")

    return run_action(_install)


def _pick_pod(hctx: HelperContext, name: Optional[str], verb: str) -> str:
    if name:
        return name
    show_pods(hctx.lifecycle.list_pods())
    return typer.prompt(f"Please input the pod name you want to {verb}").strip()


def do_login(hctx: HelperContext, name: Optional[str] = None) -> bool:
    def _login() -> None:
        hctx.lifecycle.login(_pick_pod(hctx, name, "login"))

    return run_action(_login)


def do_uninstall(hctx: HelperContext, name: Optional[str] = None) -> bool:
    def _uninstall() -> None:
        release = hctx.lifecycle.uninstall(_pick_pod(hctx, name, "uninstall"))
        typer.secho(f"Release {release} uninstalled successfully.", fg="green")

    return run_action(_uninstall)


def do_update_user(hctx: HelperContext) -> bool:
    def _update() -> None:
        prompt_credentials(hctx.settings)

    return run_action(_update)
