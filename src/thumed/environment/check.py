# Copyright 2026 Kezie Iwueke
# SPDX-License-Identifier: Apache-2.0

# src/thumed/environment/check.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .tools import (
    ToolDownloadError,
    UnsupportedPlatformError,
    download_helm,
    download_kubectl,
    tool_path,
)
from ..config.credentials import CredentialsError, UserInfo
from ..config.models import Settings
from ..helm.cli_runner import HelmCliRunner
from ..kube.kubectl import KubectlRunner
from ..utils.process import CommandFailed, SpawnError

log = logging.getLogger("thumed")

KUBECTL_DOCS = "https://kubernetes.io/docs/tasks/tools/"
HELM_RELEASES = "https://github.com/helm/helm/releases"


@dataclass
class ToolStatus:
    present: Dict[str, bool] = field(default_factory=dict)
    working: Dict[str, bool] = field(default_factory=dict)

    @property
    def missing(self) -> List[str]:
        return [name for name, ok in self.present.items() if not ok]


@dataclass
class EnvReport:
    user: Optional[str] = None
    tools: ToolStatus = field(default_factory=ToolStatus)
    helm_repo_ready: bool = False
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors and not self.tools.missing and self.helm_repo_ready


def ensure_tools(
    settings: Settings,
    helm: HelmCliRunner,
    kubectl: KubectlRunner,
    *,
    download: bool = False,
) -> ToolStatus:
    """
    Make sure bin/ exists, optionally fetch kubectl/helm into it, then
    probe each tool with `version`.
    """
    bin_dir = settings.bin_dir
    if not bin_dir.exists():
        log.info("Creating bin directory %s", bin_dir)
        bin_dir.mkdir(parents=True, exist_ok=True)

    if download:
        download_kubectl(bin_dir, settings.kubectl_version)
        download_helm(bin_dir, settings.helm_version)

    status = ToolStatus()
    probes = {"kubectl": (kubectl.runner, kubectl.version), "helm": (helm.runner, helm.version)}
    for name, (runner, probe) in probes.items():
        status.present[name] = tool_path(bin_dir, name).exists() or runner.which(name) is not None
        if not status.present[name]:
            status.working[name] = False
            continue
        try:
            probe()
            status.working[name] = True
            log.info("%s is working correctly", name)
        except (CommandFailed, SpawnError) as exc:
            status.working[name] = False
            log.warning("%s may not be working: %s", name, exc)

    if status.missing:
        log.warning("Some required tools are missing: %s", ", ".join(status.missing))
        log.warning("Place the binaries in %s or run `thumed check-env --download`", bin_dir)
        log.warning("  kubectl: %s", KUBECTL_DOCS)
        log.warning("  helm: %s", HELM_RELEASES)
    return status


def init_helm_repo(helm: HelmCliRunner, settings: Settings) -> None:
    repos = helm.repo_list()
    registered = any(
        line.split()[0] == settings.helm_repo_name
        for line in repos.splitlines()[1:]
        if line.split()
    )
    if registered:
        log.info("%s repository already exists", settings.helm_repo_name)
    else:
        helm.add_repo(settings.helm_repo_name, settings.helm_repo_url)
        log.info("Added %s repository", settings.helm_repo_name)
    helm.update_repos()


def check_env(
    settings: Settings,
    helm: HelmCliRunner,
    kubectl: KubectlRunner,
    *,
    download: bool = False,
) -> EnvReport:
    """
    Credentials, tools and helm repo, each checked independently so that one
    failure does not hide the others.
    """
    report = EnvReport()

    try:
        report.user = UserInfo.load(settings.config_dir).user
        log.info("User: %s", report.user)
    except (CredentialsError, OSError) as exc:
        report.errors.append(f"Error loading user info: {exc}")

    try:
        report.tools = ensure_tools(settings, helm, kubectl, download=download)
    except (ToolDownloadError, UnsupportedPlatformError, OSError) as exc:
        report.errors.append(f"Error setting up tool directory: {exc}")

    try:
        init_helm_repo(helm, settings)
        report.helm_repo_ready = True
        log.info("Helm initialized successfully")
    except (CommandFailed, SpawnError) as exc:
        report.errors.append(f"Error initializing helm: {exc}")

    for err in report.errors:
        log.error(err)
    return report
